import logging

from osiris_shell.backend import Backend
from osiris_shell.console.display import Painter, ScreenDisplay
from osiris_shell.console.rendering import render_notes
from osiris_shell.themes import Theme

logger = logging.getLogger(__name__)


class NotesView:
    """Read-only notes application shown over the terminal in the alternate screen."""

    def __init__(self, display: ScreenDisplay, backend: Backend, theme: Theme) -> None:
        self.display = display
        self.backend = backend
        self.theme = theme
        self.painter = Painter(theme)
        self.is_open = False

    async def open(self, width: int = 80) -> None:
        self.is_open = True
        self.display.enter_alternate_screen()
        self.display.clear()
        try:
            result = await self.backend.list_notes()
        except Exception as e:
            logger.exception("Failed to load notes")
            self.display.write_line(self.painter.error(f"Error: {e}"))
        else:
            if not result.success:
                self.display.write_line(self.painter.error(result.message))
            elif not result.notes:
                self.display.write_line("No notes yet.")
            else:
                self.display.write(render_notes(result.notes, self.theme, width))
        self.display.write_line()
        self.display.write_line(
            self.painter.paint(
                "Press any key to return to the terminal", "bright_black", bold=False
            )
        )

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.display.quit_alternate_screen()
