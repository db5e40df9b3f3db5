import asyncio
from datetime import datetime

import pytest
from conftest import GUEST_PROMPT, RecordingDisplay, ScriptedBackend, type_line

from osiris_shell.backend import AuthResult, UserInfo, WhoamiResult
from osiris_shell.console.engine import SessionEngine, ShellSignals
from osiris_shell.console.keys import KeyEvent, typed
from osiris_shell.console.outcome import Deferred
from osiris_shell.runtime_config import RuntimeConfig

ALICE = UserInfo("alice@example.com", "u-1", datetime(2024, 1, 1), "alice")
ALICE_PROMPT = "[alice@osiris ~]$ "


@pytest.mark.asyncio
async def test_start_writes_banner_and_prompt(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    await engine.start()

    assert backend.calls == [("whoami",)]
    assert "╚██████╔╝███████║██║██║  ██║██║███████║" in display.plain
    assert "Type help to see available commands." in display.plain
    assert display.plain.endswith(GUEST_PROMPT)
    assert display.plain.count(GUEST_PROMPT) == 1


@pytest.mark.asyncio
async def test_start_without_banner(
    display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    engine = SessionEngine(display, backend, RuntimeConfig(show_banner=False))
    await engine.start()
    assert display.plain == GUEST_PROMPT


@pytest.mark.asyncio
async def test_start_restores_session(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.whoami_result = WhoamiResult(True, user=ALICE)
    await engine.start()

    assert engine.session.logged_in is True
    assert engine.session.username == "alice"
    assert display.plain.endswith(ALICE_PROMPT)


@pytest.mark.asyncio
async def test_start_ignores_user_without_username(
    engine: SessionEngine, backend: ScriptedBackend
) -> None:
    backend.whoami_result = WhoamiResult(
        True, user=UserInfo("x@example.com", "u-2", datetime(2024, 1, 1))
    )
    await engine.start()
    assert engine.session.logged_in is False


@pytest.mark.asyncio
async def test_start_survives_backend_error(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.error = RuntimeError("offline")
    await engine.start()

    assert engine.session.logged_in is False
    assert display.plain.endswith(GUEST_PROMPT)


@pytest.mark.asyncio
async def test_whoami_logged_in(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.whoami_result = WhoamiResult(True, user=ALICE)
    type_line(engine, "whoami")
    await engine.wait_idle()

    assert display.plain == "whoami\nalice@example.com\n" + GUEST_PROMPT


@pytest.mark.asyncio
async def test_whoami_output_lands_after_buffered_keystrokes(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.gate = asyncio.Event()
    type_line(engine, "whoami")
    engine.feed(typed("ab"))

    assert display.plain == "whoami\nab"
    backend.gate.set()
    await engine.wait_idle()

    assert display.plain == "whoami\nab\nNot logged in\n" + GUEST_PROMPT + "ab"
    assert engine.state.line.text == "ab"
    assert display.plain.count(GUEST_PROMPT) == 1


@pytest.mark.asyncio
async def test_deferred_command_draws_exactly_one_prompt(
    engine: SessionEngine, display: RecordingDisplay
) -> None:
    type_line(engine, "whoami")
    assert GUEST_PROMPT not in display.plain
    await engine.wait_idle()
    assert display.plain.count(GUEST_PROMPT) == 1


@pytest.mark.asyncio
async def test_logout_success_resets_session(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    engine.session.sign_in("alice")
    type_line(engine, "logout")
    await engine.wait_idle()

    assert backend.calls == [("logout",)]
    assert engine.session.logged_in is False
    assert "Logged out\n" in display.plain
    assert display.plain.endswith(GUEST_PROMPT)


@pytest.mark.asyncio
async def test_logout_failure_keeps_session(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    engine.session.sign_in("alice")
    backend.logout_result = AuthResult(False, "Not logged in.")
    type_line(engine, "logout")
    await engine.wait_idle()

    assert engine.session.username == "alice"
    assert "Not logged in." in display.plain
    assert display.plain.endswith(ALICE_PROMPT)


@pytest.mark.asyncio
async def test_backend_exception_is_reported(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.error = RuntimeError("boom")
    type_line(engine, "whoami")
    await engine.wait_idle()

    assert "Error: boom\n" in display.plain
    assert display.plain.endswith(GUEST_PROMPT)
    assert engine.pending == set()


@pytest.mark.asyncio
async def test_auth_commands_rejected_while_auth_in_flight(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.gate = asyncio.Event()
    type_line(engine, "logout")
    assert engine.auth_pending is True

    type_line(engine, "login")
    assert engine.state.interactive is None
    assert "login: another authentication request is in progress" in display.plain

    type_line(engine, "whoami")
    assert backend.calls == [("logout",), ("whoami",)]

    backend.gate.set()
    await engine.wait_idle()
    assert engine.auth_pending is False


@pytest.mark.asyncio
async def test_auth_counter_released_after_failure(
    engine: SessionEngine, backend: ScriptedBackend
) -> None:
    backend.error = RuntimeError("boom")
    type_line(engine, "logout")
    await engine.wait_idle()
    assert engine.auth_pending is False


@pytest.mark.asyncio
async def test_dispose_drops_pending_output(
    engine: SessionEngine, display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    backend.gate = asyncio.Event()
    type_line(engine, "whoami")
    engine.dispose()
    backend.gate.set()
    await engine.wait_idle()

    assert "Not logged in" not in display.plain
    assert engine.disposed is True


def test_disposed_engine_ignores_keys(
    engine: SessionEngine, display: RecordingDisplay
) -> None:
    engine.dispose()
    engine.feed(typed("ls") + [KeyEvent.enter()])

    assert display.plain == ""
    assert engine.state.history.entries == ()


def test_run_deferred_returns_deferred_outcome(engine: SessionEngine) -> None:
    async def scenario() -> None:
        async def work() -> list:
            return ["done"]

        outcome = engine.run_deferred(work)
        assert isinstance(outcome, Deferred)
        assert outcome.task is not None
        await engine.wait_idle()

    asyncio.run(scenario())


def test_default_signals_are_noops() -> None:
    signals = ShellSignals()
    signals.on_navigate("notes")
    signals.on_close()
    signals.on_reload("nord")


@pytest.mark.asyncio
async def test_theme_command_saves_preference_by_default(
    display: RecordingDisplay, backend: ScriptedBackend
) -> None:
    from osiris_shell.preferences import THEME_KEY, get_preference

    engine = SessionEngine(display, backend)
    type_line(engine, "theme monokai")
    assert get_preference(THEME_KEY) == "monokai"
    engine.dispose()


def test_failed_deferred_start_does_not_block_auth_commands(
    engine: SessionEngine, display: RecordingDisplay
) -> None:
    # No event loop is running, so the logout task cannot be created
    type_line(engine, "logout")
    assert "Error executing logout" in display.plain
    assert engine.auth_pending is False

    type_line(engine, "login")
    assert "another authentication request" not in display.plain
    assert engine.state.interactive is not None
