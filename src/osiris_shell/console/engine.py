"""
Interactive session engine.

One engine instance owns the login session, command history, the line being
edited and any credential-capture flow. Key events are processed one at a
time to completion; backend calls run as asyncio tasks whose continuation
writes their output and redraws the prompt exactly once.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Set

from osiris_shell.backend import Backend, WhoamiResult
from osiris_shell.console import credentials, line_editor
from osiris_shell.console.commands import CommandRegistry, default_registry
from osiris_shell.console.display import Display, Painter
from osiris_shell.console.keys import KeyEvent
from osiris_shell.console.outcome import Deferred
from osiris_shell.console.prompt import render_prompt
from osiris_shell.console.rendering import BANNER_LINES
from osiris_shell.console.state import EngineState, InteractiveContext, Session
from osiris_shell.preferences import THEME_KEY, save_preference
from osiris_shell.runtime_config import RuntimeConfig
from osiris_shell.themes import get_theme

logger = logging.getLogger(__name__)

BackendWork = Callable[[], Awaitable[List[str]]]


def _ignore(*args: object) -> None:
    return None


def _save_theme(name: str) -> bool:
    return save_preference(THEME_KEY, name)


@dataclass
class ShellSignals:
    """Signals the engine sends outward to the hosting shell."""

    on_navigate: Callable[[str], None] = _ignore
    on_close: Callable[[], None] = _ignore
    on_reload: Callable[[str], None] = _ignore


class SessionEngine:
    """Routes key events to the line editor or the credential capture flow."""

    def __init__(
        self,
        display: Display,
        backend: Backend,
        config: Optional[RuntimeConfig] = None,
        signals: Optional[ShellSignals] = None,
        registry: Optional[CommandRegistry] = None,
        save_theme: Callable[[str], bool] = _save_theme,
    ) -> None:
        self.display = display
        self.backend = backend
        self.config = config or RuntimeConfig()
        self.signals = signals or ShellSignals()
        self.registry = registry or default_registry()
        self.save_theme = save_theme
        self.theme_name = self.config.theme_name
        self.painter = Painter(get_theme(self.theme_name))
        self.state = EngineState()

        self._pending: Set["asyncio.Task[None]"] = set()
        self._auth_pending = 0
        self._timers: List[asyncio.TimerHandle] = []
        self._disposed = False

    @property
    def session(self) -> Session:
        return self.state.session

    @property
    def auth_pending(self) -> bool:
        """True while a login, signup or logout call is in flight."""
        return self._auth_pending > 0

    @property
    def pending(self) -> Set["asyncio.Task[None]"]:
        return set(self._pending)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # Output

    def write(self, text: str) -> None:
        if not self._disposed:
            self.display.write(text)

    def write_line(self, text: str = "") -> None:
        if not self._disposed:
            self.display.write_line(text)

    def prompt(self) -> str:
        return render_prompt(self.session, self.painter, self.config.host_label)

    def redraw_prompt(self) -> None:
        self.write(self.prompt())

    def resume_input(self) -> None:
        """Redraw whatever input the user is in the middle of, after async output."""
        flow = self.state.interactive
        if flow is not None:
            label = credentials.field_label(flow)
            self.write(label + credentials.echo(flow, flow.value))
        else:
            self.write(self.prompt() + self.state.line.text)

    # Lifecycle

    async def start(self) -> None:
        """Restore the backend session, then write the banner and the first prompt."""
        result: Optional[WhoamiResult] = None
        try:
            result = await self.backend.whoami()
        except Exception:
            logger.exception("Session check failed")
        user = result.user if result is not None and result.success else None
        if user is not None and user.username:
            self.session.sign_in(user.username)
            logger.info("Restored session for %s", user.username)

        if self.config.show_banner:
            self.write_line()
            for line in BANNER_LINES:
                self.write_line(self.painter.heading(line))
            self.write_line()
            help_word = self.painter.accent("help")
            self.write_line(f"Type {help_word} to see available commands.")
            self.write_line()
        self.redraw_prompt()

    def dispose(self) -> None:
        """Detach from the display. In-flight backend calls finish but write nothing."""
        self._disposed = True
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
        self.state.interactive = None

    async def wait_idle(self) -> None:
        """Wait until every pending backend continuation has run."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # Key routing

    def handle_key(self, event: KeyEvent) -> None:
        if self._disposed or event.has_modifiers:
            return
        flow = self.state.interactive
        if flow is not None:
            credentials.handle_key(self, flow, event)
        elif event.is_enter:
            line_editor.submit(self)
        elif event.is_backspace:
            line_editor.backspace(self)
        elif event.is_arrow_up:
            line_editor.recall_previous(self)
        elif event.is_printable:
            line_editor.append_char(self, event.char)

    def feed(self, events: List[KeyEvent]) -> None:
        for event in events:
            self.handle_key(event)

    # Interactive mode

    def enter_interactive(self, flow: InteractiveContext) -> None:
        self.state.line.clear()
        self.state.interactive = flow

    def leave_interactive(self) -> None:
        self.state.interactive = None
        self.state.line.clear()

    def abort_interactive(self, message: str) -> None:
        self.write_line(message)
        self.leave_interactive()
        self.redraw_prompt()

    # Deferred work

    def run_deferred(self, work: BackendWork, auth: bool = False) -> Deferred:
        """Run a backend call in the background and own the prompt redraw.

        The continuation writes the returned lines, or the error if the call raised,
        and then redraws the input exactly once.
        """
        async def continuation() -> None:
            try:
                lines = await work()
            except Exception as e:
                logger.exception("Backend call failed")
                lines = [self.painter.error(f"Error: {e}")]
            finally:
                if auth:
                    self._auth_pending -= 1
            if self._disposed:
                return
            # Keys typed while the call was in flight are already echoed
            if len(self.state.line) or self.state.interactive is not None:
                self.write_line()
            for line in lines:
                self.write_line(line)
            self.resume_input()

        task = asyncio.get_running_loop().create_task(continuation())
        # Counted only once the task exists; its finally block releases it
        if auth:
            self._auth_pending += 1
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return Deferred(task)

    def later(self, delay: float, callback: Callable[[], None]) -> None:
        """Fire callback after delay seconds without blocking key handling."""
        loop = asyncio.get_running_loop()
        self._timers.append(loop.call_later(delay, callback))

    def request_reload(self, theme_name: str) -> None:
        logger.info("Reload requested with theme %s", theme_name)
        self.later(0, lambda: self.signals.on_reload(theme_name))
