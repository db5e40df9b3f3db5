"""
Command dispatcher and the built-in command table.

A handler returns Immediate (the dispatcher's caller draws the prompt now) or
Deferred (whoever owns the pending work draws it later). Returning None is
the same as Immediate.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from osiris_shell.console import credentials
from osiris_shell.console.note_commands import register_note_commands
from osiris_shell.console.outcome import IMMEDIATE, CommandOutcome, Deferred
from osiris_shell.console.rendering import BANNER_LINES
from osiris_shell.themes import THEME_NAMES, get_theme, is_theme

if TYPE_CHECKING:
    from osiris_shell.console.engine import SessionEngine

logger = logging.getLogger(__name__)


Handler = Callable[["SessionEngine", List[str]], Optional[CommandOutcome]]

NAVIGABLE_TARGETS = ("notes",)
LISTED_TARGETS = ("notes", "projects")


@dataclass(frozen=True)
class Command:
    """A named command with its help entry."""

    name: str
    handler: Handler
    description: str
    category: str


class CommandRegistry:
    """Maps case-insensitive command names to handlers."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._commands

    @property
    def commands(self) -> List[Command]:
        return list(self._commands.values())

    def register(
        self, name: str, description: str, category: str
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self._commands[name.lower()] = Command(
                name.lower(), handler, description, category
            )
            return handler

        return decorator

    def dispatch(self, engine: "SessionEngine", line: str) -> CommandOutcome:
        """Run the command named by the first token of line."""
        tokens = line.split()
        if not tokens:
            return IMMEDIATE
        name = tokens[0].lower()
        command = self._commands.get(name)
        if command is None:
            engine.write_line(engine.painter.error(f"bash: {line}: command not found"))
            return IMMEDIATE

        logger.info("Dispatching command %s", name)
        try:
            outcome = command.handler(engine, tokens[1:])
        except Exception as e:
            logger.exception("Command %s failed", name)
            engine.write_line(engine.painter.error(f"Error executing {name}: {e}"))
            return IMMEDIATE
        return outcome or IMMEDIATE


def _reject_if_auth_pending(engine: "SessionEngine", name: str) -> bool:
    if not engine.auth_pending:
        return False
    engine.write_line(
        engine.painter.error(f"{name}: another authentication request is in progress")
    )
    return True


def register_builtin_commands(registry: CommandRegistry) -> None:
    """Register the shell's built-in commands on registry."""

    @registry.register("ls", "List applications", "Navigation")
    def cmd_ls(engine: "SessionEngine", args: List[str]) -> None:
        painter = engine.painter
        engine.write_line("      ".join(painter.link(name) for name in LISTED_TARGETS))

    @registry.register("cd", "Open Application", "Navigation")
    def cmd_cd(engine: "SessionEngine", args: List[str]) -> None:
        if not args:
            return
        target = args[0]
        if target in NAVIGABLE_TARGETS:
            message = f"Opening {target.capitalize()}..."
            engine.write_line(engine.painter.success(message))
            engine.later(
                engine.config.navigation_delay,
                lambda: engine.signals.on_navigate(target),
            )
        else:
            engine.write_line(engine.painter.error(f"cd: {target}: No such directory"))

    @registry.register("signup", "Create new account", "Authentication")
    def cmd_signup(engine: "SessionEngine", args: List[str]) -> CommandOutcome:
        if _reject_if_auth_pending(engine, "signup"):
            return IMMEDIATE
        return credentials.begin_signup(engine)

    @registry.register("login", "Login", "Authentication")
    def cmd_login(engine: "SessionEngine", args: List[str]) -> CommandOutcome:
        if _reject_if_auth_pending(engine, "login"):
            return IMMEDIATE
        return credentials.begin_login(engine)

    @registry.register("logout", "Logout", "Authentication")
    def cmd_logout(engine: "SessionEngine", args: List[str]) -> CommandOutcome:
        if _reject_if_auth_pending(engine, "logout"):
            return IMMEDIATE

        async def logout() -> List[str]:
            result = await engine.backend.logout()
            if result.success:
                engine.session.sign_out()
                logger.info("Session reset to guest")
                return [engine.painter.success("Logged out")]
            return [engine.painter.error(result.message or "Logout failed")]

        return engine.run_deferred(logout, auth=True)

    @registry.register("whoami", "Show user info", "Authentication")
    def cmd_whoami(engine: "SessionEngine", args: List[str]) -> CommandOutcome:
        async def whoami() -> List[str]:
            result = await engine.backend.whoami()
            if result.success and result.user:
                return [engine.painter.success(result.user.email)]
            return [engine.painter.error("Not logged in")]

        return engine.run_deferred(whoami)

    @registry.register("clear", "Clear terminal", "System")
    def cmd_clear(engine: "SessionEngine", args: List[str]) -> None:
        engine.display.clear()

    @registry.register("theme", "List or switch colour themes", "System")
    def cmd_theme(engine: "SessionEngine", args: List[str]) -> Optional[CommandOutcome]:
        painter = engine.painter
        if not args:
            engine.write_line(painter.heading("Available themes:"))
            for name in THEME_NAMES:
                label = f"{name:<10} {get_theme(name).name}"
                if name == engine.theme_name:
                    engine.write_line(f"* {painter.accent(label)}")
                else:
                    engine.write_line(f"  {label}")
            return None

        name = args[0].lower()
        if not is_theme(name):
            available = ", ".join(THEME_NAMES)
            engine.write_line(
                painter.error(f"theme: {name}: unknown theme (available: {available})")
            )
            return None
        if not engine.save_theme(name):
            engine.write_line(painter.error("theme: could not save preference"))
            return None
        engine.write_line(painter.success(f"Theme set to {name}. Reloading..."))
        engine.request_reload(name)
        # The reloaded session draws its own prompt
        return Deferred()

    @registry.register("neofetch", "Show system info", "System")
    def cmd_neofetch(engine: "SessionEngine", args: List[str]) -> None:
        painter = engine.painter
        user = painter.accent(engine.session.username)
        host = painter.accent(engine.config.host_label)
        engine.write_line(f"{user}@{host}")
        engine.write_line("OS: Arch Linux")
        engine.write_line("Shell: bash")

    @registry.register("banner", "Show the welcome banner", "System")
    def cmd_banner(engine: "SessionEngine", args: List[str]) -> None:
        engine.write_line()
        for line in BANNER_LINES:
            engine.write_line(engine.painter.heading(line))
        engine.write_line()

    @registry.register("exit", "Close terminal", "System")
    def cmd_exit(engine: "SessionEngine", args: List[str]) -> None:
        engine.write_line(engine.painter.heading("Closing..."))
        engine.later(engine.config.exit_delay, engine.signals.on_close)

    @registry.register("help", "Show available commands", "System")
    def cmd_help(engine: "SessionEngine", args: List[str]) -> None:
        painter = engine.painter
        engine.write_line(painter.heading("Available commands:"))
        engine.write_line()
        categories: Dict[str, List[Command]] = {}
        for command in registry.commands:
            categories.setdefault(command.category, []).append(command)
        for category, commands in categories.items():
            engine.write_line(painter.section(f"{category}:"))
            for command in commands:
                engine.write_line(
                    f"  {painter.accent(f'{command.name:<10}')}- {command.description}"
                )
            engine.write_line()


def default_registry() -> CommandRegistry:
    registry = CommandRegistry()
    register_builtin_commands(registry)
    register_note_commands(registry)
    return registry
