"""
Text-grid display surface used by the session engine, and the theme painter
that colours text for it.
"""

from typing import Dict, Protocol, Tuple

from prompt_toolkit.output import Output
from rich.color import ColorSystem
from rich.style import Style

from osiris_shell.themes import Theme

# Move left, blank the cell, move left again
VISUAL_BACKSPACE = "\b \b"


class Display(Protocol):
    """Line-oriented output primitives of the terminal surface."""

    def write(self, text: str) -> None: ...

    def write_line(self, text: str = "") -> None: ...

    def clear(self) -> None: ...


class ScreenDisplay(Display, Protocol):
    """Display that can also switch to the alternate screen for overlay apps."""

    def enter_alternate_screen(self) -> None: ...

    def quit_alternate_screen(self) -> None: ...


class TerminalDisplay:
    """Display backed by a prompt_toolkit Output in raw mode."""

    def __init__(self, output: Output) -> None:
        self.output = output

    def write(self, text: str) -> None:
        # Raw mode: a bare line feed does not return the carriage
        self.output.write_raw(text.replace("\r\n", "\n").replace("\n", "\r\n"))
        self.output.flush()

    def write_line(self, text: str = "") -> None:
        self.write(text + "\n")

    def clear(self) -> None:
        self.output.erase_screen()
        self.output.cursor_goto(0, 0)
        self.output.flush()

    def enter_alternate_screen(self) -> None:
        self.output.enter_alternate_screen()
        self.output.flush()

    def quit_alternate_screen(self) -> None:
        self.output.quit_alternate_screen()
        self.output.flush()


class Painter:
    """Paints text with the colour roles of a theme as ANSI escape sequences."""

    def __init__(self, theme: Theme) -> None:
        self.theme = theme
        self._styles: Dict[Tuple[str, bool], Style] = {}

    def paint(self, text: str, role: str, bold: bool = True) -> str:
        key = (role, bold)
        style = self._styles.get(key)
        if style is None:
            style = Style(color=self.theme.color(role), bold=bold)
            self._styles[key] = style
        return style.render(text, color_system=ColorSystem.TRUECOLOR)

    def success(self, text: str) -> str:
        return self.paint(text, "green")

    def error(self, text: str) -> str:
        return self.paint(text, "red")

    def heading(self, text: str) -> str:
        return self.paint(text, "yellow")

    def section(self, text: str) -> str:
        return self.paint(text, "magenta")

    def accent(self, text: str) -> str:
        return self.paint(text, "cyan")

    def link(self, text: str) -> str:
        return self.paint(text, "blue")
