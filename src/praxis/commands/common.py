"""Helpers shared by the Praxis commands."""

import logging
from pathlib import Path
from typing import NoReturn

import typer

from praxis.models import Manifest, load_manifest
from praxis.services import FileAction, TemplateFetchError, fetch_templates
from praxis.utils import console, create_spinner, print_error, print_success, print_warning

logger = logging.getLogger(__name__)

_ACTION_STYLES = {
    FileAction.ADDED: "green",
    FileAction.UPDATED: "yellow",
    FileAction.REMOVED: "red",
    FileAction.SKIPPED: "dim",
    FileAction.KEPT: "dim",
}


def load_templates() -> dict[str, str]:
    """Fetch the template bundle, exiting with status 1 on failure.

    Returns:
        Mapping of relative path to content.

    Raises:
        typer.Exit: If the bundle could not be fetched.
    """
    try:
        with create_spinner("Fetching templates from GitHub"):
            templates = fetch_templates()
    except TemplateFetchError as e:
        print_error("Failed to fetch templates")
        console.print(f"  [dim]{e}[/dim]")
        raise typer.Exit(1) from e

    print_success(f"Fetched {len(templates)} template files")
    return templates


def require_manifest(project_root: Path) -> Manifest:
    """Load the manifest, exiting with status 1 if Praxis is not initialized.

    Args:
        project_root: The project root directory.

    Returns:
        The loaded manifest.

    Raises:
        typer.Exit: If no valid manifest exists.
    """
    manifest = load_manifest(project_root)
    if manifest is None:
        print_error('Praxis is not initialized in this project. Run "praxis init" first.')
        raise typer.Exit(1)
    return manifest


def report_file(relative_path: str, action: FileAction) -> None:
    """Print one per-file progress line.

    Args:
        relative_path: Path that was processed.
        action: What happened to it.
    """
    style = _ACTION_STYLES.get(action)
    if style is None:
        return
    console.print(f"  [{style}]{action.value}[/{style}] {relative_path}")


def exit_cancelled() -> NoReturn:
    """Report a user cancellation and exit with status 0."""
    print_warning("Cancelled.")
    raise typer.Exit(0)


def exit_on_file_error(error: OSError) -> NoReturn:
    """Report a filesystem failure and exit with status 1.

    Args:
        error: The error that stopped the run.
    """
    logger.debug(f"Aborting after filesystem error: {error!r}")
    print_error(f"File operation failed: {error}")
    console.print("[dim]Progress made before the failure was saved to the manifest.[/dim]")
    raise typer.Exit(1) from error
