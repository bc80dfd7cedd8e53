"""User-facing feedback for CLI operations.

Design principles:
- Diagnostics and save outcomes are always printed, never silent
- Single line per message, no spam
- Graceful degradation in non-TTY (CI, pipes)
- Suppress structlog console output during spinners to avoid line collision

Usage::

    from unfurl.core.progress import status, spinner

    status("Unfurled 3 files")
    status("Saved changes to a.c", style="success")  # ✓ Saved changes to a.c
    status("Failed to write b.h", style="error")     # ✗ Failed to write b.h

    with spinner("Resolving includes"):
        session = unfurl(root)
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output; file handlers still receive logs."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from unfurl.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def set_console(console: Console) -> Console:
    """Swap the shared console (tests capture output this way). Returns the old one."""
    global _console
    old = _console
    _console = console
    return old


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False, markup=True)

    _get_logger().debug("status", message=message, style=style)


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Spinner with log suppression. Non-TTY prints the message once."""
    padding = " " * indent
    if _is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"{padding}[cyan]{message}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _console.print(f"{padding}{message}...", highlight=False)
        yield
