"""Selection projection between components, prompts and the manifest.

Components travel through the multi-select prompt as 'type:name' strings.
This module builds the grouped prompt options, decodes answers back into
SelectedComponents and resolves the effective selection for a manifest.
"""

import logging
from collections.abc import Iterable

from praxis.models.component import Component, ComponentInfo, ComponentType
from praxis.models.manifest import Manifest, SelectedComponents
from praxis.utils import prompts
from praxis.utils.prompts import PromptOption

logger = logging.getLogger(__name__)

GROUP_LABELS = {
    ComponentType.SKILL: "Skills",
    ComponentType.REVIEWER: "Reviewers",
}


def encode_component_value(component_type: ComponentType, name: str) -> str:
    """Encode a component as a 'type:name' prompt value."""
    return f"{component_type.value}:{name}"


def decode_component_value(value: str) -> Component:
    """Decode a 'type:name' prompt value.

    Only the first colon separates type from name, so names may contain colons.

    Args:
        value: Encoded component value.

    Returns:
        The decoded Component.

    Raises:
        ValueError: If the value has no colon or an unknown type.
    """
    type_part, sep, name = value.partition(":")
    if not sep:
        raise ValueError(f"Invalid component value: {value!r}")
    return Component(name=name, type=ComponentType(type_part))


def build_group_options(
    components: Iterable[ComponentInfo],
) -> tuple[dict[str, list[PromptOption]], list[str]]:
    """Build grouped multi-select options for discovered components.

    Args:
        components: Discovered components, already sorted.

    Returns:
        Tuple of (group label -> options, every option value in order).
    """
    groups: dict[str, list[PromptOption]] = {}
    all_values: list[str] = []

    for component in components:
        value = encode_component_value(component.type, component.name)
        groups.setdefault(GROUP_LABELS[component.type], []).append(
            PromptOption(value=value, label=component.name, hint=component.description)
        )
        all_values.append(value)

    return groups, all_values


def selection_from_values(values: Iterable[str]) -> SelectedComponents:
    """Turn encoded prompt values into a SelectedComponents model."""
    selection = SelectedComponents()
    for value in values:
        component = decode_component_value(value)
        if component.type == ComponentType.SKILL:
            selection.skills.append(component.name)
        else:
            selection.reviewers.append(component.name)
    return selection


def selection_values(selection: SelectedComponents) -> set[str]:
    """Return the encoded values of every component in a selection."""
    return {encode_component_value(ComponentType.SKILL, name) for name in selection.skills} | {
        encode_component_value(ComponentType.REVIEWER, name) for name in selection.reviewers
    }


def select_all(components: Iterable[Component]) -> SelectedComponents:
    """Return a selection containing every given component."""
    return selection_from_values(c.value for c in components)


def resolve_selection(
    manifest: Manifest, discovered: Iterable[Component]
) -> SelectedComponents:
    """Compute the effective component selection for a run.

    Manifests written before component selection existed have no
    selectedComponents field; for those every discovered component is
    treated as selected.

    Args:
        manifest: The loaded manifest.
        discovered: Components discovered in the current bundle.

    Returns:
        The selection to use for the rest of the run.
    """
    if manifest.selected_components is not None:
        return manifest.selected_components.model_copy(deep=True)

    logger.info("Manifest has no component selection; treating all components as selected")
    return select_all(discovered)


def diff_selection(
    components: Iterable[Component],
    current: SelectedComponents,
    new: SelectedComponents,
) -> tuple[list[Component], list[Component]]:
    """Compute which components were added to or removed from a selection.

    Args:
        components: Components available in the bundle (defines ordering).
        current: Selection before the change.
        new: Selection after the change.

    Returns:
        Tuple of (additions, removals).
    """
    current_values = selection_values(current)
    new_values = selection_values(new)

    additions: list[Component] = []
    removals: list[Component] = []
    for component in components:
        plain = Component(name=component.name, type=component.type)
        if plain.value in new_values and plain.value not in current_values:
            additions.append(plain)
        elif plain.value in current_values and plain.value not in new_values:
            removals.append(plain)

    return additions, removals


def prompt_for_selection(
    components: list[ComponentInfo],
    initial: SelectedComponents | None = None,
    message: str = "Select optional components to install:",
) -> SelectedComponents | prompts.Cancel:
    """Ask the user which optional components to install.

    Args:
        components: Discovered components.
        initial: Pre-checked selection; None pre-checks everything.
        message: Prompt message.

    Returns:
        The chosen selection, or CANCEL.
    """
    groups, all_values = build_group_options(components)
    if initial is None:
        initial_values = all_values
    else:
        checked = selection_values(initial)
        initial_values = [value for value in all_values if value in checked]

    answer = prompts.multiselect_grouped(message, groups, initial_values)
    if prompts.is_cancel(answer):
        return prompts.CANCEL

    return selection_from_values(answer)
