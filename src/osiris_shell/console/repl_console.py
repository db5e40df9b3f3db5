import asyncio
import dataclasses
import logging
from typing import Any, Callable, Coroutine, List, Optional, Set

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.output import create_output

from osiris_shell.backend import Backend
from osiris_shell.console.display import Painter, ScreenDisplay, TerminalDisplay
from osiris_shell.console.engine import SessionEngine, ShellSignals
from osiris_shell.console.keys import KeyEvent, key_events_from_presses
from osiris_shell.console.notes_view import NotesView
from osiris_shell.console.rendering import clear_terminal, render_header
from osiris_shell.runtime_config import RuntimeConfig
from osiris_shell.themes import get_theme

logger = logging.getLogger(__name__)

HIDDEN_HINT = "Press Ctrl + ` to open terminal"
QUIT_KEYS = (KeyEvent.ctrl("c"), KeyEvent.ctrl("d"))


class ReplConsole:
    """Hosting shell: owns raw keyboard input, the terminal window and the notes app."""

    engine: Optional[SessionEngine]

    def __init__(
        self,
        backend: Backend,
        config: Optional[RuntimeConfig] = None,
        display: Optional[ScreenDisplay] = None,
        input_factory: Callable[[], Input] = create_input,
    ) -> None:
        self.backend = backend
        self.config = config or RuntimeConfig()
        self.display: ScreenDisplay = display or TerminalDisplay(create_output())
        self._input_factory = input_factory

        self.engine = None
        self.visible = False
        self.notes_view: Optional[NotesView] = None
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._done: Optional[asyncio.Event] = None

    # Engine lifecycle

    def _create_engine(self) -> SessionEngine:
        signals = ShellSignals(
            on_navigate=self.navigate,
            on_close=self.hide,
            on_reload=self.reload,
        )
        return SessionEngine(self.display, self.backend, self.config, signals)

    async def mount(self, clear: bool = True) -> None:
        """Show the terminal with a fresh engine and an empty history."""
        self._unmount()
        self.visible = True
        if clear:
            self.display.clear()
        engine = self._create_engine()
        await engine.start()
        # Keys typed while the session check runs are dropped
        if self.visible:
            self.engine = engine
        else:
            engine.dispose()

    def _unmount(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def hide(self) -> None:
        logger.info("Terminal closed")
        self._unmount()
        self.visible = False
        painter = Painter(get_theme(self.config.theme_name))
        self.display.clear()
        self.display.write_line(painter.paint(HIDDEN_HINT, "bright_black", bold=False))

    def toggle(self) -> None:
        if self.visible:
            self.hide()
        else:
            self._spawn(self.mount())

    def reload(self, theme_name: str) -> None:
        """Remount the terminal with a new theme; history and session are discarded."""
        logger.info("Reloading terminal with theme %s", theme_name)
        self.config = dataclasses.replace(self.config, theme_name=theme_name)
        self._unmount()
        self._spawn(self.mount())

    def navigate(self, target: str) -> None:
        logger.info("Navigating to %s", target)
        if target != "notes":
            return
        if self.notes_view is not None:
            self.notes_view.close()
        self.notes_view = NotesView(
            self.display, self.backend, get_theme(self.config.theme_name)
        )
        self._spawn(self.notes_view.open())

    def quit(self) -> None:
        self._unmount()
        if self._done is not None:
            self._done.set()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # Input

    def handle_key(self, event: KeyEvent) -> None:
        """Global shortcuts first, then the open app, then the terminal."""
        if event in QUIT_KEYS:
            self.quit()
        elif event.is_toggle:
            self.toggle()
        elif self.notes_view is not None and self.notes_view.is_open:
            self.notes_view.close()
            self.notes_view = None
        elif self.visible and self.engine is not None:
            self.engine.handle_key(event)

    def handle_keys(self, events: List[KeyEvent]) -> None:
        for event in events:
            self.handle_key(event)

    async def run(self) -> None:
        """Run the shell until Ctrl+C or Ctrl+D."""
        clear_terminal()
        render_header(self.config)
        self._done = asyncio.Event()

        terminal_input = self._input_factory()

        def on_input_ready() -> None:
            self.handle_keys(key_events_from_presses(terminal_input.read_keys()))

        with terminal_input.raw_mode(), terminal_input.attach(on_input_ready):
            await self.mount(clear=False)
            await self._done.wait()

        for task in list(self._tasks):
            task.cancel()
        if self.notes_view is not None:
            self.notes_view.close()
        self.display.write_line()
