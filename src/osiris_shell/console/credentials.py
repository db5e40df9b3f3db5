"""
Credential capture: the login and signup flows that take over keystroke
routing until every field is captured or a field fails validation.

    login:  username -> password -> backend.login
    signup: email -> username -> password -> backend.signup

A failed validation aborts the whole flow; there is no retry in place.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from osiris_shell.console.display import VISUAL_BACKSPACE
from osiris_shell.console.keys import KeyEvent
from osiris_shell.console.outcome import Deferred
from osiris_shell.console.state import (
    InteractiveContext,
    LoginFlow,
    LoginStep,
    SignupFlow,
    SignupStep,
)

if TYPE_CHECKING:
    from osiris_shell.console.engine import SessionEngine

logger = logging.getLogger(__name__)

MASK = "*"
MIN_PASSWORD_LENGTH = 6

FIELD_LABELS: Dict[str, str] = {
    "email": "Email: ",
    "username": "Username: ",
    "password": "Password: ",
}

_NEXT_LOGIN_STEP = {LoginStep.username: LoginStep.password}
_NEXT_SIGNUP_STEP = {
    SignupStep.email: SignupStep.username,
    SignupStep.username: SignupStep.password,
}


def field_label(flow: InteractiveContext) -> str:
    return FIELD_LABELS[flow.step.value]


def echo(flow: InteractiveContext, text: str) -> str:
    """What the display shows for text typed into the current step."""
    return MASK * len(text) if flow.masked else text


def begin_login(engine: "SessionEngine") -> Deferred:
    engine.enter_interactive(LoginFlow())
    engine.write(FIELD_LABELS["username"])
    return Deferred()


def begin_signup(engine: "SessionEngine") -> Deferred:
    engine.enter_interactive(SignupFlow())
    engine.write_line("Create Account")
    engine.write(FIELD_LABELS["email"])
    return Deferred()


def validate(flow: InteractiveContext) -> Optional[str]:
    """Return the error for the current step's value, or None when it is valid."""
    value = flow.value
    if flow.step.value == "email":
        if not value.strip() or "@" not in value:
            return "Valid email required"
    elif flow.step.value == "username":
        if not value.strip():
            return "Username required"
    elif isinstance(flow, SignupFlow):
        if not value.strip() or len(value) < MIN_PASSWORD_LENGTH:
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    elif not value.strip():
        return "Password required"
    return None


def handle_key(
    engine: "SessionEngine", flow: InteractiveContext, event: KeyEvent
) -> None:
    """Apply one key event to the active flow."""
    if event.is_enter:
        _submit_step(engine, flow)
    elif event.is_backspace:
        if flow.value:
            flow.value = flow.value[:-1]
            engine.write(VISUAL_BACKSPACE)
    elif event.is_printable:
        flow.value += event.char
        engine.write(echo(flow, event.char))


def _submit_step(engine: "SessionEngine", flow: InteractiveContext) -> None:
    engine.write_line()
    error = validate(flow)
    if error:
        logger.info("Credential capture aborted at %s step", flow.step.value)
        engine.abort_interactive(engine.painter.error(error))
        return

    if isinstance(flow, LoginFlow):
        next_login = _NEXT_LOGIN_STEP.get(flow.step)
        if next_login is not None:
            flow.step = next_login
            engine.write(field_label(flow))
            return
        _complete_login(engine, flow)
    else:
        next_signup = _NEXT_SIGNUP_STEP.get(flow.step)
        if next_signup is not None:
            flow.step = next_signup
            engine.write(field_label(flow))
            return
        _complete_signup(engine, flow)


def _complete_login(engine: "SessionEngine", flow: LoginFlow) -> None:
    username, password = flow.username, flow.password
    engine.leave_interactive()

    async def login() -> List[str]:
        result = await engine.backend.login(username, password)
        if result.success:
            engine.session.sign_in(username)
            logger.info("Logged in as %s", username)
            return [engine.painter.success("Login successful")]
        logger.info("Login failed for %s", username)
        return [engine.painter.error(result.message or "Login failed")]

    engine.run_deferred(login, auth=True)


def _complete_signup(engine: "SessionEngine", flow: SignupFlow) -> None:
    email, username, password = flow.email, flow.username, flow.password
    engine.leave_interactive()

    async def signup() -> List[str]:
        result = await engine.backend.signup(email, password, username)
        if result.success:
            engine.session.sign_in(username)
            logger.info("Signed up and logged in as %s", username)
            return [engine.painter.success(result.message)]
        return [engine.painter.error(result.message)]

    engine.run_deferred(signup, auth=True)
