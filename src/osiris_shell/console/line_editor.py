"""
Line editing and history recall for the normal (non-interactive) mode.
"""

from typing import TYPE_CHECKING

from osiris_shell.console.display import VISUAL_BACKSPACE
from osiris_shell.console.outcome import Immediate

if TYPE_CHECKING:
    from osiris_shell.console.engine import SessionEngine


def append_char(engine: "SessionEngine", char: str) -> None:
    engine.state.line.append(char)
    engine.write(char)


def backspace(engine: "SessionEngine") -> None:
    if engine.state.line.pop():
        engine.write(VISUAL_BACKSPACE)


def submit(engine: "SessionEngine") -> None:
    """Hand the trimmed line to the dispatcher; blank lines only redraw the prompt."""
    state = engine.state
    command = state.line.text.strip()
    engine.write_line()
    state.line.clear()
    state.history.reset_cursor()
    if not command:
        engine.redraw_prompt()
        return

    state.history.append(command)
    outcome = engine.registry.dispatch(engine, command)
    if isinstance(outcome, Immediate):
        engine.redraw_prompt()


def recall_previous(engine: "SessionEngine") -> None:
    """Replace the visible line with the previous history entry.

    There is no down-arrow counterpart: once browsing, the line can only move
    toward older entries until a submit resets the cursor.
    """
    state = engine.state
    entry = state.history.previous()
    if entry is None:
        return
    width = len(state.line)
    engine.write("\b" * width + " " * width + "\b" * width)
    state.line.replace(entry)
    engine.write(entry)
