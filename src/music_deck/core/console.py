"""Centralized Rich Console management.

A single Console instance is shared by the CLI and the command handlers so
output styling stays consistent.
"""

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance.

    Returns:
        Console: The global Rich Console instance
    """
    global _console
    if _console is None:
        _console = Console()
    return _console
