"""
Session engine state: login session, command history, the unsubmitted line
and the credential-capture flows.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

GUEST = "guest"


@dataclass
class Session:
    """Login state read by the prompt renderer."""

    logged_in: bool = False
    username: str = GUEST

    def sign_in(self, username: str) -> None:
        self.logged_in = True
        self.username = username

    def sign_out(self) -> None:
        self.logged_in = False
        self.username = GUEST


class LineBuffer:
    """The current unsubmitted input line. Never holds a newline."""

    def __init__(self) -> None:
        self._chars: List[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def append(self, char: str) -> None:
        if "\n" in char or "\r" in char:
            raise ValueError("line buffer cannot hold a newline")
        self._chars.extend(char)

    def pop(self) -> bool:
        """Remove the last character; returns False when the buffer was empty."""
        if not self._chars:
            return False
        self._chars.pop()
        return True

    def replace(self, text: str) -> None:
        self.clear()
        self.append(text)

    def clear(self) -> None:
        self._chars.clear()


class CommandHistory:
    """Append-only log of submitted commands with an up-arrow cursor.

    A cursor of -1 means the user is not browsing.
    """

    def __init__(self) -> None:
        self._entries: List[str] = []
        self.cursor: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    @property
    def browsing(self) -> bool:
        return self.cursor != -1

    def append(self, command: str) -> None:
        self._entries.append(command)
        self.reset_cursor()

    def reset_cursor(self) -> None:
        self.cursor = -1

    def previous(self) -> Optional[str]:
        """Step the cursor toward the oldest entry and return the entry under it."""
        if not self._entries:
            return None
        if self.cursor == -1:
            self.cursor = len(self._entries) - 1
        elif self.cursor > 0:
            self.cursor -= 1
        return self._entries[self.cursor]


class LoginStep(Enum):
    username = "username"
    password = "password"


class SignupStep(Enum):
    email = "email"
    username = "username"
    password = "password"


class _CaptureFields:
    """Accessors for the accumulator of the step being captured."""

    step: Union[LoginStep, SignupStep]

    @property
    def value(self) -> str:
        return str(getattr(self, self.step.value))

    @value.setter
    def value(self, text: str) -> None:
        setattr(self, self.step.value, text)

    @property
    def masked(self) -> bool:
        return self.step.value == "password"


@dataclass
class LoginFlow(_CaptureFields):
    step: LoginStep = LoginStep.username
    username: str = ""
    password: str = ""


@dataclass
class SignupFlow(_CaptureFields):
    step: SignupStep = SignupStep.email
    email: str = ""
    username: str = ""
    password: str = ""


InteractiveContext = Union[LoginFlow, SignupFlow]


@dataclass
class EngineState:
    """Everything one engine instance owns; nothing here is module-global."""

    session: Session = field(default_factory=Session)
    history: CommandHistory = field(default_factory=CommandHistory)
    line: LineBuffer = field(default_factory=LineBuffer)
    interactive: Optional[InteractiveContext] = None
