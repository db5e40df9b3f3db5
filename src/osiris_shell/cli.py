import asyncio
import logging
import os
from typing import Callable, Optional

import typer
from typing_extensions import Annotated

from osiris_shell.backend import Backend, InMemoryBackend
from osiris_shell.console.console import Console, ReplConsole
from osiris_shell.logger import setup_logging
from osiris_shell.preferences import THEME_KEY, get_preference, save_preference
from osiris_shell.runtime_config import (
    DEFAULT_HOST_LABEL,
    DEFAULT_THEME,
    OSIRIS_HOST_LABEL_ENV,
    OSIRIS_THEME_ENV,
    RuntimeConfig,
    load_envs,
)
from osiris_shell.themes import THEME_NAMES, get_theme, is_theme

logger = logging.getLogger(__name__)

# Global factory functions - set by create_app()
_backend_factory: Optional[Callable[[], Backend]] = None
_console_factory: Optional[Callable[[Backend, RuntimeConfig], Console]] = None


def default_backend_factory() -> Backend:
    """Default factory for creating the backend."""
    return InMemoryBackend()


def default_console_factory(backend: Backend, config: RuntimeConfig) -> Console:
    """Default factory for creating Console instances."""
    return ReplConsole(backend, config)


def resolve_theme(cli_theme: Optional[str] = None) -> str:
    """
    Pick the theme for this run: --theme, then the saved preference, then
    OSIRIS_THEME, then the default. Unknown names fall back to the default.
    """
    for candidate in (
        cli_theme,
        get_preference(THEME_KEY),
        os.environ.get(OSIRIS_THEME_ENV),
    ):
        if candidate:
            return candidate if is_theme(candidate) else DEFAULT_THEME
    return DEFAULT_THEME


def theme_list() -> None:
    """List available terminal themes."""
    active = resolve_theme()
    for name in THEME_NAMES:
        marker = "*" if name == active else " "
        typer.echo(f"{marker} {name:<10} {get_theme(name).name}")


def theme_set(name: Annotated[str, typer.Argument(help="Theme name")]) -> None:
    """Save the terminal theme used by the next session."""
    name = name.lower()
    if not is_theme(name):
        typer.echo(
            f"Error: unknown theme '{name}'. Available: {', '.join(THEME_NAMES)}",
            err=True,
        )
        raise typer.Exit(code=1)
    if not save_preference(THEME_KEY, name):
        typer.echo("Error: could not save theme preference", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Theme set to {name}.")


def create_theme_app() -> typer.Typer:
    # Create theme subcommand group
    theme_app = typer.Typer(rich_markup_mode=None)
    theme_app.command("list")(theme_list)
    theme_app.command("set")(theme_set)
    return theme_app


def main(
    ctx: typer.Context,
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", "-t", help="Terminal theme for this session"),
    ] = None,
    host_label: Annotated[
        str,
        typer.Option(
            envvar=OSIRIS_HOST_LABEL_ENV, help="Host name shown in the prompt"
        ),
    ] = DEFAULT_HOST_LABEL,
    no_banner: Annotated[
        bool,
        typer.Option("--no-banner", help="Skip the welcome banner"),
    ] = False,
) -> None:
    """OSIRIS SHELL - starts an interactive terminal session"""
    if ctx.invoked_subcommand is not None:
        return

    if theme is not None and not is_theme(theme.lower()):
        typer.echo(
            f"Error: unknown theme '{theme}'. Available: {', '.join(THEME_NAMES)}",
            err=True,
        )
        raise typer.Exit(code=1)

    setup_logging()
    cfg = RuntimeConfig(
        theme_name=resolve_theme(theme.lower() if theme else None),
        host_label=host_label,
        show_banner=not no_banner,
    )
    logger.info(f"Starting shell with theme {cfg.theme_name} on host {cfg.host_label}")

    try:
        backend_fact = _backend_factory or default_backend_factory
        console_fact = _console_factory or default_console_factory
        console = console_fact(backend_fact(), cfg)
        asyncio.run(console.run())
    except KeyboardInterrupt:
        print("\nExiting...")


def create_app(
    backend_factory: Optional[Callable[[], Backend]] = None,
    console_factory: Optional[Callable[[Backend, RuntimeConfig], Console]] = None,
) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        backend_factory: Factory function to create the backend
        console_factory: Factory function to create Console instances

    Returns:
        Typer application
    """
    # Load settings from .env if not already set in the environment
    load_envs()

    # Set global factory functions
    global _backend_factory, _console_factory
    _backend_factory = backend_factory
    _console_factory = console_factory

    app = typer.Typer(rich_markup_mode=None)
    app.add_typer(create_theme_app(), name="theme")
    app.callback(invoke_without_command=True)(main)

    return app


# Create default app instance for the console script
app = create_app()


if __name__ == "__main__":
    app()
