"""
Key events delivered by the display surface, and their translation from
prompt_toolkit key presses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys


class Modifier(str, Enum):
    """Modifier keys held during a key event."""

    ctrl = "ctrl"
    alt = "alt"
    meta = "meta"


@dataclass(frozen=True)
class KeyEvent:
    """One raw key event: a character or one of the editing keys."""

    char: str = ""
    is_enter: bool = False
    is_backspace: bool = False
    is_arrow_up: bool = False
    modifiers: FrozenSet[Modifier] = frozenset()

    @property
    def is_toggle(self) -> bool:
        """Ctrl+` is reserved for the hosting shell (show/hide the terminal)."""
        return self.char == "`" and self.modifiers == frozenset({Modifier.ctrl})

    @property
    def has_modifiers(self) -> bool:
        return bool(self.modifiers)

    @property
    def is_printable(self) -> bool:
        return len(self.char) == 1 and self.char.isprintable()

    @classmethod
    def enter(cls) -> "KeyEvent":
        return cls(is_enter=True)

    @classmethod
    def backspace(cls) -> "KeyEvent":
        return cls(is_backspace=True)

    @classmethod
    def arrow_up(cls) -> "KeyEvent":
        return cls(is_arrow_up=True)

    @classmethod
    def ctrl(cls, char: str) -> "KeyEvent":
        return cls(char=char, modifiers=frozenset({Modifier.ctrl}))


def typed(text: str) -> List[KeyEvent]:
    """Key events for typing text character by character."""
    return [KeyEvent(char=c) for c in text]


TOGGLE = KeyEvent.ctrl("`")

_ENTER_KEYS = {Keys.ControlM, Keys.ControlJ}
_BACKSPACE_KEYS = {Keys.ControlH, Keys.Backspace}


def _translate(key_press: KeyPress, alt: bool) -> List[KeyEvent]:
    key = key_press.key
    modifiers: FrozenSet[Modifier] = frozenset({Modifier.alt}) if alt else frozenset()

    if key in _ENTER_KEYS:
        return [KeyEvent(is_enter=True, modifiers=modifiers)]
    if key in _BACKSPACE_KEYS:
        return [KeyEvent(is_backspace=True, modifiers=modifiers)]
    if key == Keys.Up:
        return [KeyEvent(is_arrow_up=True, modifiers=modifiers)]
    # Terminals deliver Ctrl+` as NUL
    if key == Keys.ControlAt:
        return [TOGGLE]
    if key == Keys.BracketedPaste:
        return [KeyEvent(char=c) for c in key_press.data if c.isprintable()]

    if isinstance(key, Keys):
        if key.value.startswith("c-") and len(key.value) == 3:
            return [KeyEvent(char=key.value[2], modifiers=modifiers | {Modifier.ctrl})]
        # Arrows other than up, function keys, ...
        return [KeyEvent(modifiers=modifiers)]

    return [KeyEvent(char=key, modifiers=modifiers)]


def key_events_from_presses(key_presses: Iterable[KeyPress]) -> List[KeyEvent]:
    """Translate a batch of prompt_toolkit key presses into key events.

    An Escape immediately followed by another key is read as Alt+key.
    """
    events: List[KeyEvent] = []
    pending_alt = False
    for key_press in key_presses:
        if key_press.key == Keys.Escape and not pending_alt:
            pending_alt = True
            continue
        events.extend(_translate(key_press, pending_alt))
        pending_alt = False
    return events
