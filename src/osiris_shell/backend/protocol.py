"""
Backend collaborator interface.

The session engine treats the authentication/notes backend as opaque: it only
awaits these operations and reads the success flag, message and user fields
of the results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class UserInfo:
    """Identity of the authenticated user."""

    email: str
    id: str
    created_at: datetime
    username: Optional[str] = None


@dataclass(frozen=True)
class AuthResult:
    """Outcome of login, signup and logout."""

    success: bool
    message: str
    user: Optional[UserInfo] = None


@dataclass(frozen=True)
class WhoamiResult:
    """Outcome of a current-user lookup."""

    success: bool
    message: str = ""
    user: Optional[UserInfo] = None


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NotesResult:
    """Outcome of a note operation; `notes` holds the affected or listed notes."""

    success: bool
    message: str = ""
    notes: List[Note] = field(default_factory=list)


@runtime_checkable
class Backend(Protocol):
    """Async authentication and notes operations consumed by the shell."""

    async def login(self, username: str, password: str) -> AuthResult: ...

    async def signup(self, email: str, password: str, username: str) -> AuthResult: ...

    async def logout(self) -> AuthResult: ...

    async def whoami(self) -> WhoamiResult: ...

    async def add_note(self, title: str, content: str) -> NotesResult: ...

    async def update_note(
        self, note_id: str, title: str, content: str
    ) -> NotesResult: ...

    async def delete_note(self, identifier: str) -> NotesResult: ...

    async def view_note(self, identifier: str) -> NotesResult: ...

    async def list_notes(self) -> NotesResult: ...
