"""
Console subpackage: holds the session engine, key routing, line editing,
credential capture, command dispatch and the hosting REPL console.
"""

from osiris_shell.console.engine import SessionEngine, ShellSignals
from osiris_shell.console.repl_console import ReplConsole

__all__ = ["ReplConsole", "SessionEngine", "ShellSignals"]
