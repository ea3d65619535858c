"""Praxis init command - install templates into a project.

This module implements the 'praxis init' command which installs the core
templates and the chosen optional components, creates the .ai-workflow
working directories and writes the first manifest.
"""

import logging
from pathlib import Path

from praxis.commands.common import (
    exit_cancelled,
    exit_on_file_error,
    load_templates,
    report_file,
)
from praxis.commands.update import run_update
from praxis.models import SelectedComponents, load_manifest
from praxis.services import (
    OperationCancelled,
    ReconcileService,
    discover_optional_components,
    prompt_for_selection,
)
from praxis.utils import console, is_cancel, print_header, print_success, print_warning

logger = logging.getLogger(__name__)


def init() -> None:
    """Initialize Praxis in the current project.

    Installs the core templates plus the optional skills and reviewers you
    select. Existing files that differ are never overwritten without asking.
    If Praxis is already initialized, runs an update instead.
    """
    project_root = Path.cwd()
    print_header("Initialize")

    if load_manifest(project_root) is not None:
        print_warning("Praxis is already initialized in this project. Running update instead.")
        run_update(project_root)
        return

    templates = load_templates()

    components = discover_optional_components(templates)
    selection = SelectedComponents()
    if components:
        answer = prompt_for_selection(components)
        if is_cancel(answer):
            exit_cancelled()
        selection = answer

    service = ReconcileService(project_root=project_root, templates=templates, on_file=report_file)

    try:
        result = service.initialize(selection)
    except OperationCancelled:
        exit_cancelled()
    except OSError as e:
        exit_on_file_error(e)

    summary = f"[green]{result.installed}[/green] files installed"
    if result.skipped:
        summary += f", [yellow]{result.skipped}[/yellow] files skipped"

    console.print()
    print_success(f"Praxis initialized! {summary}.")
