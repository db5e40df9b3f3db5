"""
`note` command: list, view, add, edit and remove notes from the terminal.

Arguments are split shell-style, so titles and content with spaces can be
quoted: note add "Shopping list" milk, eggs
"""

import logging
import shlex
from typing import TYPE_CHECKING, List, Optional

from osiris_shell.backend import Note, NotesResult
from osiris_shell.console.outcome import CommandOutcome

if TYPE_CHECKING:
    from osiris_shell.console.commands import CommandRegistry
    from osiris_shell.console.engine import SessionEngine

logger = logging.getLogger(__name__)

USAGE = [
    "usage: note list",
    "       note view <id|title>",
    "       note add <title> [content]",
    "       note edit <id|title> <new title> [content]",
    "       note rm <id|title>",
]


def _usage(engine: "SessionEngine", problem: str) -> None:
    engine.write_line(engine.painter.error(f"note: {problem}"))
    for line in USAGE:
        engine.write_line(line)


def _message(engine: "SessionEngine", result: NotesResult, fallback: str) -> List[str]:
    if result.success:
        return [engine.painter.success(result.message or fallback)]
    return [engine.painter.error(result.message or fallback)]


def _format_note(engine: "SessionEngine", note: Note) -> List[str]:
    painter = engine.painter
    updated = note.updated_at.strftime("%Y-%m-%d %H:%M")
    lines = [painter.heading(note.title)]
    lines.extend(note.content.splitlines() or [""])
    footer = f"id {note.id}, updated {updated}"
    lines.append(painter.paint(footer, "bright_black", bold=False))
    return lines


def _list(engine: "SessionEngine") -> CommandOutcome:
    async def work() -> List[str]:
        result = await engine.backend.list_notes()
        if not result.success:
            return [engine.painter.error(result.message)]
        if not result.notes:
            return ["No notes yet."]
        return [
            f"{engine.painter.accent(note.id)}  {note.title}" for note in result.notes
        ]

    return engine.run_deferred(work)


def _view(engine: "SessionEngine", identifier: str) -> CommandOutcome:
    async def work() -> List[str]:
        result = await engine.backend.view_note(identifier)
        if not result.success or not result.notes:
            return [engine.painter.error(result.message or "Note not found.")]
        return _format_note(engine, result.notes[0])

    return engine.run_deferred(work)


def _add(engine: "SessionEngine", title: str, content: str) -> CommandOutcome:
    async def work() -> List[str]:
        result = await engine.backend.add_note(title, content)
        if result.success:
            logger.info("Note created")
        return _message(engine, result, f'Note "{title}" created')

    return engine.run_deferred(work)


def _edit(
    engine: "SessionEngine", identifier: str, title: str, content: str
) -> CommandOutcome:
    async def work() -> List[str]:
        found = await engine.backend.view_note(identifier)
        if not found.success or not found.notes:
            return [engine.painter.error(found.message or "Note not found.")]
        result = await engine.backend.update_note(found.notes[0].id, title, content)
        return _message(engine, result, "Note updated")

    return engine.run_deferred(work)


def _remove(engine: "SessionEngine", identifier: str) -> CommandOutcome:
    async def work() -> List[str]:
        result = await engine.backend.delete_note(identifier)
        return _message(engine, result, "Note deleted")

    return engine.run_deferred(work)


def register_note_commands(registry: "CommandRegistry") -> None:
    """Register the `note` command on registry."""

    @registry.register("note", "Manage notes (note help for usage)", "Notes")
    def cmd_note(engine: "SessionEngine", args: List[str]) -> Optional[CommandOutcome]:
        try:
            tokens = shlex.split(" ".join(args))
        except ValueError as e:
            _usage(engine, str(e).lower())
            return None
        if not tokens:
            _usage(engine, "missing subcommand")
            return None

        action, rest = tokens[0].lower(), tokens[1:]
        if action in ("list", "ls"):
            return _list(engine)
        if action == "view" and len(rest) == 1:
            return _view(engine, rest[0])
        if action == "add" and rest:
            return _add(engine, rest[0], " ".join(rest[1:]))
        if action == "edit" and len(rest) >= 2:
            return _edit(engine, rest[0], rest[1], " ".join(rest[2:]))
        if action in ("rm", "delete") and len(rest) == 1:
            return _remove(engine, rest[0])
        if action == "help":
            for line in USAGE:
                engine.write_line(line)
            return None
        _usage(engine, f"invalid arguments for '{action}'")
        return None
