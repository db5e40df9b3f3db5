"""
Process-local backend: users, the signed-in session and notes live in memory.

Messages mirror the hosted auth/notes service so the terminal reads the same
whichever backend is plugged in.
"""

import asyncio
import hashlib
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .protocol import AuthResult, Note, NotesResult, UserInfo, WhoamiResult

logger = logging.getLogger(__name__)

AUTH_REQUIRED = "Authentication required. Please login first."


def _hash_password(password: str, salt: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode()).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Account:
    user: UserInfo
    password_hash: str
    notes: Dict[str, Note] = field(default_factory=dict)


class InMemoryBackend:
    """Backend implementation with no external service."""

    def __init__(self, latency: float = 0.0) -> None:
        self._accounts: Dict[str, _Account] = {}
        self._current: Optional[str] = None
        self._latency = latency

    async def _settle(self) -> None:
        # Always yield so callers observe a real suspension point
        await asyncio.sleep(self._latency)

    def _account(self) -> Optional[_Account]:
        if self._current is None:
            return None
        return self._accounts.get(self._current)

    async def signup(self, email: str, password: str, username: str) -> AuthResult:
        await self._settle()
        if username in self._accounts:
            return AuthResult(False, "Username already taken")
        if any(a.user.email == email for a in self._accounts.values()):
            return AuthResult(False, "User already registered")
        user_id = str(uuid.uuid4())
        user = UserInfo(email=email, id=user_id, created_at=_now(), username=username)
        self._accounts[username] = _Account(user, _hash_password(password, user_id))
        self._current = username
        logger.info("Created account %s", username)
        return AuthResult(True, "Account created! Logged In!", user)

    async def login(self, username: str, password: str) -> AuthResult:
        await self._settle()
        account = self._accounts.get(username)
        if account is None:
            return AuthResult(False, "Username not found.")
        if account.password_hash != _hash_password(password, account.user.id):
            return AuthResult(False, "Login failed: Invalid login credentials")
        self._current = username
        return AuthResult(True, f"Welcome back, {username}!", account.user)

    async def logout(self) -> AuthResult:
        await self._settle()
        self._current = None
        return AuthResult(True, "Logged out successfully.")

    async def whoami(self) -> WhoamiResult:
        await self._settle()
        account = self._account()
        if account is None:
            return WhoamiResult(False, "Not logged in.")
        return WhoamiResult(True, "User info retrieved.", account.user)

    async def add_note(self, title: str, content: str) -> NotesResult:
        await self._settle()
        account = self._account()
        if account is None:
            return NotesResult(False, AUTH_REQUIRED)
        now = _now()
        note = Note(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        account.notes[note.id] = note
        return NotesResult(True, f'Note "{title}" created successfully!', [note])

    async def update_note(self, note_id: str, title: str, content: str) -> NotesResult:
        await self._settle()
        account = self._account()
        if account is None:
            return NotesResult(False, "Not authenticated")
        note = account.notes.get(note_id)
        if note is None:
            return NotesResult(False, "Failed to update note")
        updated = replace(note, title=title, content=content, updated_at=_now())
        account.notes[note_id] = updated
        return NotesResult(True, "Note updated successfully", [updated])

    def _find_note(self, account: _Account, identifier: str) -> NotesResult:
        """Look a note up by id, then by case-insensitive title when that is unique."""
        note = account.notes.get(identifier)
        if note is not None:
            return NotesResult(True, notes=[note])
        matches = [
            n for n in account.notes.values() if n.title.lower() == identifier.lower()
        ]
        if not matches:
            message = f'Note not found with ID or title: "{identifier}"'
            return NotesResult(False, message)
        if len(matches) > 1:
            listing = ", ".join(f'{n.id} - "{n.title}"' for n in matches)
            return NotesResult(
                False,
                f'Multiple notes found with title "{identifier}". '
                f"Please use ID instead. Matching notes: {listing}",
            )
        return NotesResult(True, notes=matches)

    async def view_note(self, identifier: str) -> NotesResult:
        await self._settle()
        account = self._account()
        if account is None:
            return NotesResult(False, AUTH_REQUIRED)
        return self._find_note(account, identifier)

    async def delete_note(self, identifier: str) -> NotesResult:
        """Delete a note by id, or by title when the title is unique."""
        await self._settle()
        account = self._account()
        if account is None:
            return NotesResult(False, AUTH_REQUIRED)
        found = self._find_note(account, identifier)
        if not found.success:
            return found
        note = found.notes[0]
        del account.notes[note.id]
        return NotesResult(True, f'Note "{note.title}" deleted successfully!', [note])

    async def list_notes(self) -> NotesResult:
        await self._settle()
        account = self._account()
        if account is None:
            return NotesResult(False, AUTH_REQUIRED)
        notes: List[Note] = sorted(
            account.notes.values(), key=lambda n: n.created_at, reverse=True
        )
        return NotesResult(True, notes=notes)
