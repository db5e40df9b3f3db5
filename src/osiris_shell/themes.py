"""
Terminal colour themes.

A theme is a passive mapping of colour roles (red, green, cyan, ...) to hex
values. The session engine never hard-codes colours; it paints through a
theme selected by name.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from osiris_shell.runtime_config import DEFAULT_THEME


@dataclass(frozen=True)
class Theme:
    """Colour palette for the terminal surface."""

    name: str
    background: str
    foreground: str
    cursor: str
    black: str
    red: str
    green: str
    yellow: str
    blue: str
    magenta: str
    cyan: str
    white: str
    bright_black: Optional[str] = None
    bright_red: Optional[str] = None
    bright_green: Optional[str] = None
    bright_yellow: Optional[str] = None
    bright_blue: Optional[str] = None
    bright_magenta: Optional[str] = None
    bright_cyan: Optional[str] = None
    bright_white: Optional[str] = None

    def color(self, role: str) -> str:
        """Return the hex value for a colour role such as 'green' or 'bright_cyan'."""
        value = getattr(self, role, None)
        if not isinstance(value, str) or not value.startswith("#"):
            # bright_* roles are optional; fall back to the base colour
            base = role.replace("bright_", "", 1)
            value = getattr(self, base, None)
        if not isinstance(value, str) or not value.startswith("#"):
            raise ValueError(f"Unknown colour role: {role}")
        return value


TERMINAL_THEMES: Dict[str, Theme] = {
    "github": Theme(
        name="GitHub Dark",
        background="#0d1117",
        foreground="#e6edf3",
        cursor="#58a6ff",
        black="#21262d",
        red="#ff6b6b",
        green="#3fb950",
        yellow="#ffd700",
        blue="#58a6ff",
        magenta="#bc8cff",
        cyan="#39c5cf",
        white="#b1bac4",
        bright_black="#8b949e",
        bright_red="#ff8585",
        bright_green="#7ee787",
        bright_yellow="#f0e68c",
        bright_blue="#79c0ff",
        bright_magenta="#d2a8ff",
        bright_cyan="#56d4dd",
        bright_white="#ffffff",
    ),
    "dracula": Theme(
        name="Dracula",
        background="#111115",
        foreground="#f8f8f2",
        cursor="#f8f8f0",
        black="#21222c",
        red="#ff6e67",
        green="#5af78e",
        yellow="#f4f99d",
        blue="#caa9fa",
        magenta="#ff92d0",
        cyan="#9aedfe",
        white="#f8f8f2",
        bright_black="#7984a4",
        bright_red="#ff8b8b",
        bright_green="#69ff94",
        bright_yellow="#ffff00",
        bright_blue="#d6acff",
        bright_magenta="#ffb3e6",
        bright_cyan="#c2f0ff",
        bright_white="#ffffff",
    ),
    "monokai": Theme(
        name="Monokai",
        background="#272822",
        foreground="#f8f8f2",
        cursor="#f8f8f0",
        black="#272822",
        red="#ff2c70",
        green="#a7e22e",
        yellow="#ffd866",
        blue="#78dce8",
        magenta="#c792ea",
        cyan="#a1efe4",
        white="#f8f8f2",
        bright_black="#908d84",
        bright_red="#ff6188",
        bright_green="#bae67e",
        bright_yellow="#ffe066",
        bright_blue="#85daed",
        bright_magenta="#d4b5f8",
        bright_cyan="#b8f4ed",
        bright_white="#ffffff",
    ),
    "nord": Theme(
        name="Nord",
        background="#2e3440",
        foreground="#eceff4",
        cursor="#d8dee9",
        black="#3b4252",
        red="#d06f79",
        green="#a3be8c",
        yellow="#f0d399",
        blue="#88c0d0",
        magenta="#c895bf",
        cyan="#8be9fd",
        white="#e5e9f0",
        bright_black="#616e88",
        bright_red="#dd828c",
        bright_green="#b4d4a1",
        bright_yellow="#f5dda7",
        bright_blue="#a5d6e0",
        bright_magenta="#d4a5d0",
        bright_cyan="#9ef0ff",
        bright_white="#ffffff",
    ),
    "gruvbox": Theme(
        name="Gruvbox Dark",
        background="#282828",
        foreground="#fbf1c7",
        cursor="#ebdbb2",
        black="#282828",
        red="#fb4934",
        green="#b8bb26",
        yellow="#fabd2f",
        blue="#83a598",
        magenta="#d3869b",
        cyan="#8ec07c",
        white="#a89984",
        bright_black="#a89984",
        bright_red="#fe8019",
        bright_green="#d5c4a1",
        bright_yellow="#fdd787",
        bright_blue="#a4c5db",
        bright_magenta="#e8b4bc",
        bright_cyan="#b8d4a8",
        bright_white="#ffffff",
    ),
}

THEME_NAMES: List[str] = list(TERMINAL_THEMES)


def is_theme(name: str) -> bool:
    return name in TERMINAL_THEMES


def get_theme(name: str) -> Theme:
    """Return the named theme, falling back to the default for unknown names."""
    return TERMINAL_THEMES.get(name, TERMINAL_THEMES[DEFAULT_THEME])
