"""Component classification for template bundle paths.

Optional components are identified purely from path shape:

- .agents/skills/<name>/**            -> optional skill <name> (unless core)
- .agents/agents/reviewers/<name>.md  -> optional reviewer <name>
- everything else                     -> core (always installed)
"""

import logging
import re
from collections.abc import Mapping

import yaml

from praxis.models.component import Component, ComponentInfo, ComponentType

logger = logging.getLogger(__name__)

BUNDLE_ROOT = ".agents"

# Skills shipped as part of the core workflow; never offered as optional.
CORE_SKILLS = frozenset(
    {
        "brainstorming",
        "planning",
        "implementing",
        "reviewing",
        "retrospective",
    }
)

_SKILL_PATTERN = re.compile(rf"^{re.escape(BUNDLE_ROOT)}/skills/([^/]+)(?:/|$)")
_REVIEWER_PATTERN = re.compile(rf"^{re.escape(BUNDLE_ROOT)}/agents/reviewers/([^/]+)\.md$")
_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---", re.DOTALL)
_DESCRIPTION_PATTERN = re.compile(r'^description:\s*"?(.+?)"?\s*$', re.MULTILINE)

_TYPE_ORDER = {ComponentType.SKILL: 0, ComponentType.REVIEWER: 1}


def get_component_for_file(relative_path: str) -> Component | None:
    """Classify a bundle path.

    Args:
        relative_path: Forward-slash path relative to the project root.

    Returns:
        The optional component the path belongs to, or None for core files.
    """
    skill_match = _SKILL_PATTERN.match(relative_path)
    if skill_match:
        name = skill_match.group(1)
        if name in CORE_SKILLS:
            return None
        return Component(name=name, type=ComponentType.SKILL)

    reviewer_match = _REVIEWER_PATTERN.match(relative_path)
    if reviewer_match:
        return Component(name=reviewer_match.group(1), type=ComponentType.REVIEWER)

    return None


def get_component_files(
    templates: Mapping[str, str], name: str, component_type: ComponentType
) -> dict[str, str]:
    """Return the bundle entries that belong to one optional component.

    Args:
        templates: Bundle mapping of path to content.
        name: Component name.
        component_type: Component type; a skill and a reviewer may share a name.

    Returns:
        Matching entries, in bundle order.
    """
    wanted = Component(name=name, type=component_type)
    return {
        path: content
        for path, content in templates.items()
        if get_component_for_file(path) == wanted
    }


def get_core_files(templates: Mapping[str, str]) -> dict[str, str]:
    """Return the bundle entries that are not part of any optional component."""
    return {
        path: content
        for path, content in templates.items()
        if get_component_for_file(path) is None
    }


def primary_file_path(name: str, component_type: ComponentType) -> str:
    """Return the path of the file that describes a component."""
    if component_type == ComponentType.REVIEWER:
        return f"{BUNDLE_ROOT}/agents/reviewers/{name}.md"
    return f"{BUNDLE_ROOT}/skills/{name}/SKILL.md"


def _parse_description(content: str) -> str | None:
    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        return None

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        data = None

    if isinstance(data, dict):
        description = data.get("description")
        if not isinstance(description, str):
            return None
        return description.strip() or None

    # Front matter that isn't valid YAML can still carry a plain description line
    line_match = _DESCRIPTION_PATTERN.search(match.group(1))
    return line_match.group(1) if line_match else None


def get_component_description(
    templates: Mapping[str, str], name: str, component_type: ComponentType
) -> str:
    """Extract a component's description from its primary file.

    Args:
        templates: Bundle mapping of path to content.
        name: Component name.
        component_type: Component type.

    Returns:
        The front-matter description, or the component name when the primary
        file is missing or has no parseable description.
    """
    content = templates.get(primary_file_path(name, component_type))
    if not content:
        return name

    return _parse_description(content) or name


def discover_optional_components(templates: Mapping[str, str]) -> list[ComponentInfo]:
    """Find every optional component present in the bundle.

    Args:
        templates: Bundle mapping of path to content.

    Returns:
        One ComponentInfo per (type, name), skills before reviewers and
        alphabetical by name within each type.
    """
    seen: dict[str, Component] = {}
    for path in templates:
        component = get_component_for_file(path)
        if component is not None and component.value not in seen:
            seen[component.value] = component

    components = [
        ComponentInfo(
            name=component.name,
            type=component.type,
            description=get_component_description(templates, component.name, component.type),
        )
        for component in seen.values()
    ]
    components.sort(key=lambda c: (_TYPE_ORDER[c.type], c.name))

    logger.debug(f"Discovered {len(components)} optional component(s)")
    return components
