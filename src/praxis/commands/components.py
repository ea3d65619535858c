"""Praxis components command - change the optional component selection.

This module implements the 'praxis components' command which lets the user
pick optional skills and reviewers, installs newly selected ones and
removes deselected ones.
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
from praxis.services import (
    OperationCancelled,
    ReconcileService,
    discover_optional_components,
    prompt_for_selection,
    resolve_selection,
)
from praxis.utils import console, is_cancel, print_header, print_info, print_success

logger = logging.getLogger(__name__)


def components() -> None:
    """Change which optional components are installed.

    Shows every optional skill and reviewer with the current selection
    pre-checked. Locally modified files are only removed after confirmation.
    """
    project_root = Path.cwd()
    print_header("Components")

    manifest = require_manifest(project_root)
    templates = load_templates()

    discovered = discover_optional_components(templates)
    if not discovered:
        print_info("No optional components available.")
        return

    current = resolve_selection(manifest, discovered)
    answer = prompt_for_selection(discovered, initial=current)
    if is_cancel(answer):
        exit_cancelled()

    service = ReconcileService(project_root=project_root, templates=templates, on_file=report_file)

    try:
        result = service.change_selection(manifest, answer)
    except OperationCancelled:
        exit_cancelled()
    except OSError as e:
        exit_on_file_error(e)

    if not result.changed:
        print_info("No changes to component selection.")
        return

    parts = []
    if result.files_added:
        parts.append(f"[green]{result.files_added}[/green] file(s) added")
    if result.files_removed:
        parts.append(f"[red]{result.files_removed}[/red] file(s) removed")
    if result.files_kept:
        parts.append(f"[dim]{result.files_kept}[/dim] file(s) kept")

    console.print()
    summary = ", ".join(parts) if parts else "selection updated"
    print_success(f"Done! {summary}.")
