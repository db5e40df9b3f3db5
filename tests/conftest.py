import asyncio
import re
from typing import Any, List, Optional, Tuple

import pytest

from osiris_shell.backend import AuthResult, Note, NotesResult, WhoamiResult
from osiris_shell.console.engine import SessionEngine, ShellSignals
from osiris_shell.console.keys import KeyEvent, typed
from osiris_shell.runtime_config import RuntimeConfig

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

GUEST_PROMPT = "[guest@osiris ~]$ "


class RecordingDisplay:
    """Display that records everything written to it."""

    def __init__(self) -> None:
        self.chunks: List[str] = []
        self.clears = 0
        self.alternate_screen = False
        self.alternate_depth = 0

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def write_line(self, text: str = "") -> None:
        self.chunks.append(text + "\n")

    def clear(self) -> None:
        self.clears += 1
        self.chunks.clear()

    def enter_alternate_screen(self) -> None:
        self.alternate_screen = True
        self.alternate_depth += 1

    def quit_alternate_screen(self) -> None:
        self.alternate_screen = False
        self.alternate_depth -= 1

    @property
    def raw(self) -> str:
        return "".join(self.chunks)

    @property
    def plain(self) -> str:
        return ANSI_ESCAPE.sub("", self.raw)

    @property
    def lines(self) -> List[str]:
        return self.plain.split("\n")

    def reset(self) -> None:
        self.chunks.clear()


class ScriptedBackend:
    """Backend returning preset results; an optional gate holds every call open."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.login_result = AuthResult(True, "Welcome back, alice!")
        self.signup_result = AuthResult(True, "Account created! Logged In!")
        self.logout_result = AuthResult(True, "Logged out successfully.")
        self.whoami_result = WhoamiResult(False, "Not logged in.")
        self.notes: List[Note] = []
        self.gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    async def _respond(self, result: Any, *call: Any) -> Any:
        self.calls.append(call)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return result

    async def login(self, username: str, password: str) -> AuthResult:
        return await self._respond(self.login_result, "login", username, password)

    async def signup(self, email: str, password: str, username: str) -> AuthResult:
        return await self._respond(
            self.signup_result, "signup", email, password, username
        )

    async def logout(self) -> AuthResult:
        return await self._respond(self.logout_result, "logout")

    async def whoami(self) -> WhoamiResult:
        return await self._respond(self.whoami_result, "whoami")

    async def add_note(self, title: str, content: str) -> NotesResult:
        return await self._respond(NotesResult(True), "add_note", title, content)

    async def update_note(self, note_id: str, title: str, content: str) -> NotesResult:
        return await self._respond(
            NotesResult(True), "update_note", note_id, title, content
        )

    async def delete_note(self, identifier: str) -> NotesResult:
        return await self._respond(NotesResult(True), "delete_note", identifier)

    async def view_note(self, identifier: str) -> NotesResult:
        return await self._respond(
            NotesResult(True, notes=self.notes[:1]), "view_note", identifier
        )

    async def list_notes(self) -> NotesResult:
        return await self._respond(NotesResult(True, notes=self.notes), "list_notes")


class SignalRecorder:
    def __init__(self) -> None:
        self.navigated: List[str] = []
        self.closed = 0
        self.reloads: List[str] = []
        self.saved_themes: List[str] = []
        self.save_ok = True

    def signals(self) -> ShellSignals:
        return ShellSignals(
            on_navigate=self.navigated.append,
            on_close=self._close,
            on_reload=self.reloads.append,
        )

    def _close(self) -> None:
        self.closed += 1

    def save_theme(self, name: str) -> bool:
        if self.save_ok:
            self.saved_themes.append(name)
        return self.save_ok


def type_line(engine: SessionEngine, text: str) -> None:
    """Type text and press Enter."""
    engine.feed(typed(text) + [KeyEvent.enter()])


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def recorder() -> SignalRecorder:
    return SignalRecorder()


@pytest.fixture
def engine(
    display: RecordingDisplay, backend: ScriptedBackend, recorder: SignalRecorder
) -> SessionEngine:
    return SessionEngine(
        display,
        backend,
        RuntimeConfig(exit_delay=0, navigation_delay=0),
        signals=recorder.signals(),
        save_theme=recorder.save_theme,
    )


@pytest.fixture(autouse=True)
def isolate_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep preferences and logs out of the real home directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


class MockConsole:
    """Console stand-in that records how the CLI built it."""

    def __init__(self, backend: Any, config: RuntimeConfig) -> None:
        self.backend = backend
        self.config = config
        self.run_called = False

    async def run(self) -> None:
        self.run_called = True
