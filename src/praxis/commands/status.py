"""Praxis status command - show the state of managed files.

This module implements the 'praxis status' command. It works offline:
only the manifest and the files on disk are inspected.
"""

import logging
from pathlib import Path

from praxis.models import hash_file, load_manifest
from praxis.utils import console, print_header, print_info, print_warning, resolve_within_root

logger = logging.getLogger(__name__)


def status() -> None:
    """Show the status of managed Praxis files.

    Each file tracked in the manifest is reported as unchanged, modified
    (content differs from what Praxis installed) or missing.
    """
    project_root = Path.cwd()
    print_header("Status")

    manifest = load_manifest(project_root)
    if manifest is None:
        print_warning("Praxis is not installed in this project.")
        console.print('Run [bold]praxis init[/bold] to get started.')
        return

    console.print(f"Installed: [dim]{manifest.installed_at}[/dim]")
    console.print(f"Updated:   [dim]{manifest.updated_at}[/dim]")
    console.print()

    unchanged = 0
    modified = 0
    missing = 0

    for relative_path in sorted(manifest.files):
        destination = resolve_within_root(project_root, relative_path)

        if destination is None or not destination.exists():
            console.print(f"  [red]✗[/red] {relative_path} [red](missing)[/red]")
            missing += 1
            continue

        try:
            current_hash = hash_file(destination)
        except OSError as e:
            logger.debug(f"Cannot hash {relative_path}: {e}")
            current_hash = None

        if current_hash != manifest.files[relative_path].hash:
            console.print(f"  [yellow]✎[/yellow] {relative_path} [yellow](modified)[/yellow]")
            modified += 1
        else:
            console.print(f"  [green]✓[/green] {relative_path}")
            unchanged += 1

    console.print()

    if manifest.selected_components is not None:
        print_info(
            f"Components: {manifest.selected_components.count()} optional component(s) "
            "selected. Run [bold]praxis components[/bold] to change."
        )

    parts = []
    if unchanged:
        parts.append(f"[green]{unchanged}[/green] unchanged")
    if modified:
        parts.append(f"[yellow]{modified}[/yellow] modified")
    if missing:
        parts.append(f"[red]{missing}[/red] missing")

    console.print(f"{len(manifest.files)} managed files: {', '.join(parts) or 'none'}.")
