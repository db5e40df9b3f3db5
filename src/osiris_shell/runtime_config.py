"""
Runtime configuration for the Osiris shell.

This module provides:
- load_envs(): load OSIRIS_THEME, OSIRIS_HOST_LABEL and OSIRIS_LOG_LEVEL from a .env file
  if they are not already present in the environment.
- RuntimeConfig: a dataclass holding runtime settings (theme, host label, delays).
- get_config_dir() / get_data_dir(): XDG locations for preferences and logs.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names
OSIRIS_THEME_ENV: str = "OSIRIS_THEME"
OSIRIS_HOST_LABEL_ENV: str = "OSIRIS_HOST_LABEL"
OSIRIS_LOG_LEVEL_ENV: str = "OSIRIS_LOG_LEVEL"

DEFAULT_THEME: str = "github"
DEFAULT_HOST_LABEL: str = "osiris"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load OSIRIS_THEME, OSIRIS_HOST_LABEL and OSIRIS_LOG_LEVEL from a .env file
    into the process environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (
        OSIRIS_THEME_ENV,
        OSIRIS_HOST_LABEL_ENV,
        OSIRIS_LOG_LEVEL_ENV,
    ):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Holds runtime configuration for the Osiris shell.

    Attributes:
        theme_name: Name of the terminal colour theme.
        host_label: Static host name shown in the prompt.
        exit_delay: Seconds between the `exit` message and the close signal.
        navigation_delay: Seconds between `cd <target>` and the navigation signal.
        show_banner: Whether the welcome banner is written when a session starts.
    """

    theme_name: str = DEFAULT_THEME
    host_label: str = DEFAULT_HOST_LABEL
    exit_delay: float = 0.3
    navigation_delay: float = 0.3
    show_banner: bool = True


def get_config_dir() -> Path:
    """
    Return the Osiris config directory under XDG_CONFIG_HOME or fallback to ~/.config.
    """
    config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_home / "osiris_shell"


def get_data_dir() -> Path:
    """
    Return the Osiris data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "osiris_shell"
