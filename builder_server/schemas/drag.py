"""
Schemas - Drag Descriptors

Tagged unions describing what is being dragged and where it is dropped.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from builder_server.schemas.component import ComponentType


class PaletteSource(BaseModel):
    """A new component dragged out of the palette."""
    kind: Literal["palette"] = "palette"
    component_type: ComponentType


class NodeSource(BaseModel):
    """An existing node picked up from the canvas."""
    kind: Literal["node"] = "node"
    node_id: str
    parent_id: Optional[str] = None


DragSource = Annotated[
    Union[PaletteSource, NodeSource],
    Field(discriminator="kind"),
]


class CanvasTarget(BaseModel):
    """Hovering a sortable node inside a sibling list (root when parent_id is None)."""
    kind: Literal["canvas"] = "canvas"
    node_id: str
    parent_id: Optional[str] = None


class ContainerTarget(BaseModel):
    """Hovering a container's drop zone."""
    kind: Literal["container"] = "container"
    container_id: str


class RootSentinel(BaseModel):
    """Hovering the empty canvas itself."""
    kind: Literal["root"] = "root"


DropTarget = Annotated[
    Union[CanvasTarget, ContainerTarget, RootSentinel],
    Field(discriminator="kind"),
]
