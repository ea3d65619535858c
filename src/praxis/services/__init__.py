"""Praxis services."""

from praxis.services.components import (
    BUNDLE_ROOT,
    CORE_SKILLS,
    discover_optional_components,
    get_component_description,
    get_component_files,
    get_component_for_file,
    get_core_files,
)
from praxis.services.installer import (
    ConflictAction,
    ConflictLabels,
    ConflictState,
    InstallResult,
    InstallStatus,
    install_file,
    render_diff,
    resolve_conflict,
)
from praxis.services.reconcile import (
    FileAction,
    InitResult,
    OperationCancelled,
    ReconcileService,
    SelectionChangeResult,
    UpdatePlan,
    UpdateResult,
)
from praxis.services.selection import (
    build_group_options,
    decode_component_value,
    diff_selection,
    encode_component_value,
    prompt_for_selection,
    resolve_selection,
    selection_from_values,
    selection_values,
)
from praxis.services.templates import (
    TemplateExtractError,
    TemplateFetchError,
    TemplateHTTPError,
    TemplateTooLargeError,
    fetch_templates,
)

__all__ = [
    "BUNDLE_ROOT",
    "CORE_SKILLS",
    "ConflictAction",
    "ConflictLabels",
    "ConflictState",
    "FileAction",
    "InitResult",
    "InstallResult",
    "InstallStatus",
    "OperationCancelled",
    "ReconcileService",
    "SelectionChangeResult",
    "TemplateExtractError",
    "TemplateFetchError",
    "TemplateHTTPError",
    "TemplateTooLargeError",
    "UpdatePlan",
    "UpdateResult",
    "build_group_options",
    "decode_component_value",
    "diff_selection",
    "discover_optional_components",
    "encode_component_value",
    "fetch_templates",
    "get_component_description",
    "get_component_files",
    "get_component_for_file",
    "get_core_files",
    "install_file",
    "prompt_for_selection",
    "render_diff",
    "resolve_conflict",
    "resolve_selection",
    "selection_from_values",
    "selection_values",
]
