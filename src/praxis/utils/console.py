"""Rich console utilities for consistent terminal output.

This module provides a shared Rich Console instance and helper functions
for displaying formatted terminal output with consistent styling.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

logger = logging.getLogger(__name__)

# Legacy Windows encodings that require special handling
LEGACY_WINDOWS_ENCODINGS = frozenset({"cp1252", "cp437", "ascii"})


def create_console() -> Console:
    """Create a Rich Console with appropriate settings for the current terminal.

    On Windows terminals with legacy encodings (cp1252, cp437, ascii), enables
    legacy_windows mode to avoid unicode encoding errors.

    Returns:
        Console: A configured Rich Console instance.
    """
    if sys.platform == "win32":
        encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
        encoding = encoding.lower().replace("-", "")

        if encoding in LEGACY_WINDOWS_ENCODINGS:
            logger.debug(
                "Detected legacy Windows encoding '%s', enabling legacy_windows mode",
                encoding,
            )
            return Console(legacy_windows=True)

    return Console()


console = create_console()


def print_success(message: str) -> None:
    """Print a success message with a green checkmark.

    Args:
        message: The success message to display.
    """
    console.print(f"[bold green]✓[/bold green] {message}")


def print_error(message: str) -> None:
    """Print an error message with a red X.

    Args:
        message: The error message to display.
    """
    console.print(f"[bold red]✗[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message with a yellow warning sign.

    Args:
        message: The warning message to display.
    """
    console.print(f"[bold yellow]⚠[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an informational message with a blue bullet.

    Args:
        message: The message to display.
    """
    console.print(f"[bold blue]●[/bold blue] {message}")


def print_header(title: str) -> None:
    """Print a command header line.

    Args:
        title: Command title shown after the product name.
    """
    console.print(f"\n[bold]Praxis: {title}[/bold]\n")


@contextmanager
def create_spinner(message: str) -> Iterator[None]:
    """Create a spinner context manager for long operations.

    Args:
        message: The status message to display while spinning.

    Yields:
        None: The spinner runs while the context is active.
    """
    with console.status(message, spinner="dots"):
        yield
