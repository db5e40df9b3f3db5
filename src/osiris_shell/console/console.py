from typing import Protocol

from osiris_shell.backend import Backend
from osiris_shell.console.repl_console import ReplConsole
from osiris_shell.runtime_config import RuntimeConfig

__all__ = ["Console", "ReplConsole"]


class Console(Protocol):
    """Common interface for console front-ends."""

    backend: Backend
    config: RuntimeConfig

    async def run(self) -> None:
        pass
