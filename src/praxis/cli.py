"""Praxis CLI entry point.

This module provides the main entry point for the Praxis CLI application,
a tool that installs and updates Praxis agent templates in a project.
"""

import logging
import os

import typer
from rich.logging import RichHandler

from praxis import __version__
from praxis.commands import components, init, status, update
from praxis.utils import console

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PRAXIS_LOG_LEVEL"

app = typer.Typer(
    name="praxis",
    help="Install, update, and manage Praxis agent skills in your project",
    no_args_is_help=True,
)


def configure_logging() -> None:
    """Route log records through Rich at the level named by PRAXIS_LOG_LEVEL.

    Defaults to WARNING; unknown level names fall back to WARNING as well.
    """
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def version_callback(value: bool) -> None:
    """Handle the version flag callback.

    Args:
        value: Whether the version flag was provided.

    Raises:
        typer.Exit: Always raised after printing version when value is True.
    """
    if value:
        typer.echo(f"praxis {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Install, update, and manage Praxis agent skills in your project."""
    configure_logging()


app.command(name="init", help="Initialize Praxis in the current project")(init)
app.command(name="update", help="Update Praxis files to the latest version")(update)
app.command(name="components", help="Change which optional components are installed")(
    components
)
app.command(name="status", help="Show the status of managed Praxis files")(status)


if __name__ == "__main__":
    app()
