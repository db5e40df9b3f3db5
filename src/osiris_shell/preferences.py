import logging
from pathlib import Path
from typing import Dict, Optional

from osiris_shell.runtime_config import get_config_dir

logger = logging.getLogger(__name__)

THEME_KEY = "terminal-theme"


def get_preferences_file_path() -> Path:
    """Get the path to the preferences file in the Osiris config directory."""
    return get_config_dir() / "preferences"


def _read_entries() -> Dict[str, str]:
    """
    Read all key=value entries from the preferences file.

    Returns:
        Mapping of keys to values; empty if the file is missing or unreadable.
    """
    pref_file = get_preferences_file_path()
    if not pref_file.exists():
        return {}
    entries: Dict[str, str] = {}
    try:
        for line in pref_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            entries[key.strip()] = value.strip()
    except OSError:
        logger.exception("Failed to read preferences from %s", pref_file)
        return {}
    return entries


def _write_entries(entries: Dict[str, str]) -> bool:
    """
    Write key=value entries to the preferences file, replacing its content.

    Returns:
        True if saved successfully, False otherwise
    """
    pref_file = get_preferences_file_path()
    try:
        pref_file.parent.mkdir(parents=True, exist_ok=True)
        content = "".join(f"{key}={value}\n" for key, value in entries.items())
        pref_file.write_text(content)
        return True
    except OSError:
        logger.exception("Failed to write preferences to %s", pref_file)
        return False


def get_preference(key: str) -> Optional[str]:
    """Return the stored value for key, or None."""
    value = _read_entries().get(key)
    return value if value else None


def save_preference(key: str, value: str) -> bool:
    """Store value under key, keeping other entries intact."""
    entries = _read_entries()
    entries[key] = value
    return _write_entries(entries)


def delete_preference(key: str) -> bool:
    """Remove key from the preferences file. Missing keys are not an error."""
    entries = _read_entries()
    if key not in entries:
        return True
    del entries[key]
    return _write_entries(entries)
