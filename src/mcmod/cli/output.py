"""
CLI Output Utilities

Command output goes to stdout through a rich console; errors and warnings
go to stderr so scripts can capture the two separately.
"""

from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from mcmod.exceptions import McmodError
from mcmod.logging_config import logger

_console = Console()
_error_console = Console(stderr=True)


def get_console() -> Console:
    """Get the stdout console."""
    return _console


def get_error_console() -> Console:
    """Get the stderr console."""
    return _error_console


def print_error(message: str) -> None:
    _error_console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    _error_console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


@contextmanager
def exit_on_error() -> Iterator[None]:
    """
    Turn McmodError and OSError into "Error: ..." on stderr and exit status 1.
    """
    try:
        yield
    except (McmodError, OSError) as e:
        logger.debug(f"Command failed: {type(e).__name__}: {e}")
        print_error(str(e))
        raise typer.Exit(code=1)
