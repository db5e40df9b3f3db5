import io
import os
from typing import List, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from osiris_shell.backend import Note
from osiris_shell.runtime_config import RuntimeConfig
from osiris_shell.themes import Theme, get_theme

BANNER_LINES: List[str] = [
    " ██████╗ ███████╗██╗██████╗ ██╗███████╗",
    "██╔═══██╗██╔════╝██║██╔══██╗██║██╔════╝",
    "██║   ██║███████╗██║██████╔╝██║███████╗",
    "██║   ██║╚════██║██║██╔══██╗██║╚════██║",
    "╚██████╔╝███████║██║██║  ██║██║███████║",
    " ╚═════╝ ╚══════╝╚═╝╚═╝  ╚═╝╚═╝╚══════╝",
]

console = Console()


def clear_terminal() -> None:
    """Clear the terminal screen."""
    os.system("cls" if os.name == "nt" else "clear")


def render_header(config: RuntimeConfig) -> None:
    """Print the startup panel before the terminal takes over stdin."""
    theme = get_theme(config.theme_name)
    console.print(
        Panel(
            f"[bold {theme.yellow}]╭─ OSIRIS SHELL ─╮[/bold {theme.yellow}]\n\n"
            f"[dim]Host:[/dim] [dim {theme.cyan}]{config.host_label}[/dim {theme.cyan}]\n"
            f"[dim]Theme:[/dim] [dim {theme.cyan}]{theme.name}[/dim {theme.cyan}]\n"
            f"[dim]Toggle terminal:[/dim] [dim {theme.cyan}]Ctrl+`[/dim {theme.cyan}]  "
            f"[dim]Quit:[/dim] [dim {theme.cyan}]Ctrl+C[/dim {theme.cyan}]",
            expand=False,
        )
    )


def render_notes(notes: Sequence[Note], theme: Theme, width: int = 80) -> str:
    """Render notes as a table and return the ANSI text."""
    buffer = io.StringIO()
    recorder = Console(
        file=buffer, force_terminal=True, color_system="truecolor", width=width
    )
    table = Table(
        title="Notes",
        title_style=f"bold {theme.yellow}",
        header_style=f"bold {theme.magenta}",
        border_style=theme.bright_black or theme.white,
        expand=True,
    )
    table.add_column("Title", style=f"bold {theme.cyan}", no_wrap=True)
    table.add_column("Content", style=theme.foreground)
    table.add_column("Updated", style=theme.bright_black or theme.white, no_wrap=True)
    for note in notes:
        table.add_row(
            note.title,
            note.content,
            note.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    recorder.print(table)
    return buffer.getvalue()
