"""
Schemas - Component Models

Pydantic models for the component tree.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ComponentType(str, Enum):
    """Closed set of component kinds."""
    # Text
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BUTTON = "button"
    # Media
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    WEBCAM = "webcam"
    # Form
    INPUT = "input"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    DATETIME = "datetime"
    # Layout
    ROW = "row"
    COLUMN = "column"
    CONTAINER = "container"
    CARD = "card"
    GRID = "grid"
    HERO = "hero"
    # Structural
    DIVIDER = "divider"
    SPACER = "spacer"
    # Link
    ANCHOR = "anchor"


CONTAINER_TYPES = frozenset({
    ComponentType.ROW,
    ComponentType.COLUMN,
    ComponentType.CONTAINER,
    ComponentType.CARD,
    ComponentType.GRID,
    ComponentType.HERO,
})


class ComponentNode(BaseModel):
    """
    A node in the page component tree.

    Leaf types carry ``children=None``; container types always carry a
    list, possibly empty. Instances are frozen: change happens by building
    new nodes through ``builder_server.core.tree``.
    """
    id: str
    type: ComponentType
    props: Dict[str, Any] = Field(default_factory=dict)
    styles: Dict[str, Any] = Field(default_factory=dict)
    children: Optional[List["ComponentNode"]] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_children(cls, data: Any) -> Any:
        """Containers always carry a list; leaves never carry children."""
        if not isinstance(data, dict):
            return data
        try:
            ctype = ComponentType(data.get("type"))
        except ValueError:
            return data

        children = data.get("children")
        if ctype in CONTAINER_TYPES:
            if children is None:
                return {**data, "children": []}
        elif children is not None:
            if children:
                raise ValueError(f"{ctype.value} components cannot have children")
            return {**data, "children": None}
        return data

    @property
    def is_leaf(self) -> bool:
        return self.children is None


# Allow recursive model
ComponentNode.model_rebuild()


class ComponentPatch(BaseModel):
    """
    Field-group patch for ``update_node``.

    Each given group replaces the node's mapping wholesale; callers merge
    beforehand when they only want to change some keys.
    """
    props: Optional[Dict[str, Any]] = None
    styles: Optional[Dict[str, Any]] = None

    def as_update(self) -> Dict[str, Any]:
        """Fields to hand to ``model_copy(update=...)``."""
        update = {}
        if self.props is not None:
            update["props"] = dict(self.props)
        if self.styles is not None:
            update["styles"] = dict(self.styles)
        return update
