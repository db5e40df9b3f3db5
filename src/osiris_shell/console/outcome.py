"""
Tagged outcomes of a dispatched command.

Immediate: the command is finished and the caller draws the prompt now.
Deferred: prompt drawing is owned by a pending backend call or by an
interactive flow, and happens exactly once when that work settles.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Immediate:
    """The command is finished; draw the prompt now."""


@dataclass(frozen=True)
class Deferred:
    """Prompt drawing is owned by a pending backend call or an interactive flow."""

    task: Optional["asyncio.Task[None]"] = None


CommandOutcome = Union[Immediate, Deferred]
IMMEDIATE = Immediate()
