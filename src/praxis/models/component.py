"""Pydantic models for optional template components.

A component is a named group of bundle files (a skill directory or a
reviewer definition) that the user can include or exclude as a unit.
Components are never stored explicitly; they are derived from paths.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ComponentType(Enum):
    """Kind of optional component.

    Attributes:
        SKILL: A directory under .agents/skills/.
        REVIEWER: A single file under .agents/agents/reviewers/.
    """

    SKILL = "skill"
    REVIEWER = "reviewer"


class Component(BaseModel):
    """An optional component identified by type and name.

    Attributes:
        name: Component name (directory name for skills, file stem for reviewers).
        type: The component type.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: ComponentType

    @property
    def value(self) -> str:
        """Encoded 'type:name' identifier used in selections and prompts."""
        return f"{self.type.value}:{self.name}"


class ComponentInfo(Component):
    """A discovered component together with its human-readable description.

    Attributes:
        description: Description from the component's front matter, or its name.
    """

    description: str
