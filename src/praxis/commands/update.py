"""Praxis update command - bring installed templates up to date.

This module implements the 'praxis update' command which reconciles the
manifest, the files on disk and the latest template bundle.
"""

import logging
from pathlib import Path

from praxis.commands.common import (
    exit_cancelled,
    exit_on_file_error,
    load_templates,
    report_file,
    require_manifest,
)
from praxis.services import OperationCancelled, ReconcileService, UpdatePlan
from praxis.utils import console, print_header, print_info, print_success

logger = logging.getLogger(__name__)


def update() -> None:
    """Update Praxis files to the latest version.

    New files are added, files changed upstream are updated (asking first
    when you edited them locally) and files removed upstream are deleted
    after confirmation.
    """
    print_header("Update")
    run_update(Path.cwd())


def run_update(project_root: Path) -> None:
    """Run the update flow for a project.

    Args:
        project_root: The project root directory.
    """
    manifest = require_manifest(project_root)
    templates = load_templates()

    service = ReconcileService(project_root=project_root, templates=templates, on_file=report_file)
    plan = service.plan_update(manifest)

    if plan.is_up_to_date:
        if plan.backfill_selection:
            try:
                service.update(manifest, plan)
            except OSError as e:
                exit_on_file_error(e)
        _print_new_components(plan)
        print_success("Everything is up to date!")
        return

    if plan.new_files:
        print_info(f"[green]{len(plan.new_files)}[/green] new file(s) to add")
    if plan.changed_files:
        print_info(f"[yellow]{len(plan.changed_files)}[/yellow] file(s) changed in Praxis")
    if plan.removed_files:
        print_info(f"[red]{len(plan.removed_files)}[/red] file(s) removed from Praxis")
    console.print()

    try:
        result = service.update(manifest, plan)
    except OperationCancelled:
        exit_cancelled()
    except OSError as e:
        exit_on_file_error(e)

    _print_new_components(plan)

    parts = []
    if result.added:
        parts.append(f"[green]{result.added}[/green] added")
    if result.updated:
        parts.append(f"[yellow]{result.updated}[/yellow] updated")
    if result.removed:
        parts.append(f"[red]{result.removed}[/red] removed")
    if result.skipped:
        parts.append(f"[dim]{result.skipped}[/dim] skipped")

    console.print()
    summary = ", ".join(parts) if parts else "no files changed"
    print_success(f"Update complete! {summary}.")


def _print_new_components(plan: UpdatePlan) -> None:
    """Tell the user about optional components they have not installed yet.

    Args:
        plan: The update plan holding newly available components.
    """
    if not plan.new_components:
        return

    names = ", ".join(component.name for component in plan.new_components)
    print_info(
        f"{len(plan.new_components)} new optional component(s) available: {names}. "
        "Run [bold]praxis components[/bold] to install them."
    )
