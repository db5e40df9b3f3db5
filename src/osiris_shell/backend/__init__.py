"""
Authentication and notes backend consumed by the session engine.
"""

__all__ = [
    "AuthResult",
    "Backend",
    "InMemoryBackend",
    "Note",
    "NotesResult",
    "UserInfo",
    "WhoamiResult",
]

from .memory import InMemoryBackend
from .protocol import (
    AuthResult,
    Backend,
    Note,
    NotesResult,
    UserInfo,
    WhoamiResult,
)
