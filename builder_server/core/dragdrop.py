"""
Core - Drag/Drop Intent Resolver

Turns a finished drag gesture (source + drop target) into a single tree
mutation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from builder_server.core import tree
from builder_server.core.registry import IdFactory, create_component, new_id
from builder_server.errors import DragInProgressError
from builder_server.schemas.component import ComponentNode
from builder_server.schemas.drag import (
    CanvasTarget,
    ContainerTarget,
    NodeSource,
    PaletteSource,
    RootSentinel,
)

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class InsertIntent:
    """Insert a new node into the root list."""
    node: ComponentNode
    index: int


@dataclass(frozen=True)
class AppendIntent:
    """Append a new node to a container."""
    node: ComponentNode
    container_id: str


@dataclass(frozen=True)
class RelocateIntent:
    """Move an existing node to another list in one step."""
    node_id: str
    parent_id: Optional[str]
    index: Optional[int] = None


@dataclass(frozen=True)
class MoveIntent:
    """Reorder inside one sibling list."""
    from_index: int
    to_index: int
    parent_id: Optional[str] = None


DropIntent = Union[InsertIntent, AppendIntent, RelocateIntent, MoveIntent]
Source = Union[PaletteSource, NodeSource]
Target = Union[CanvasTarget, ContainerTarget, RootSentinel]


def apply_intent(components: List[ComponentNode], intent: Optional[DropIntent]) -> List[ComponentNode]:
    """Run the tree operation an intent stands for."""
    if intent is None:
        return components
    if isinstance(intent, InsertIntent):
        return tree.insert_node(components, intent.node, intent.index)
    if isinstance(intent, AppendIntent):
        return tree.add_to_container(components, intent.container_id, intent.node)
    if isinstance(intent, RelocateIntent):
        return tree.relocate_node(components, intent.node_id, intent.parent_id, intent.index)
    if isinstance(intent, MoveIntent):
        return tree.move_node(components, intent.from_index, intent.to_index, intent.parent_id)
    raise TypeError(f"Unsupported drop intent: {intent!r}")


class DragDropResolver:
    """
    Idle/Dragging state machine for one canvas.

    ``start`` opens a drag, ``end`` closes it (drop or cancel alike) and
    returns the intent to apply, if any.
    """

    def __init__(self, cross_parent_moves: bool = False, id_factory: IdFactory = new_id):
        self.cross_parent_moves = cross_parent_moves
        self.id_factory = id_factory
        self.state = DragState.IDLE
        self.source: Optional[Source] = None

    @property
    def is_dragging(self) -> bool:
        return self.state == DragState.DRAGGING

    def start(self, source: Source) -> None:
        if self.is_dragging:
            raise DragInProgressError("A drag is already in progress")
        self.state = DragState.DRAGGING
        self.source = source

    def cancel(self) -> None:
        self.state = DragState.IDLE
        self.source = None

    def end(
        self,
        target: Optional[Target],
        components: List[ComponentNode],
    ) -> Optional[DropIntent]:
        """
        Close the drag and classify it.

        Args:
            target: Drop target under the pointer, None when dropped nowhere
            components: Current root component list

        Returns:
            The intent to apply, or None for a no-op drop
        """
        source = self.source
        self.cancel()

        if source is None or target is None:
            return None

        if isinstance(source, PaletteSource):
            return self._resolve_palette_drop(source, target, components)
        if isinstance(source, NodeSource):
            return self._resolve_node_drop(source, target, components)
        return None

    def drop(
        self,
        target: Optional[Target],
        components: List[ComponentNode],
    ) -> Tuple[List[ComponentNode], Optional[DropIntent]]:
        """``end`` followed by ``apply_intent``."""
        intent = self.end(target, components)
        result = apply_intent(components, intent)
        if intent is not None:
            logger.debug(f"Applied drop intent {type(intent).__name__}")
        return result, intent

    def _resolve_palette_drop(
        self,
        source: PaletteSource,
        target: Target,
        components: List[ComponentNode],
    ) -> DropIntent:
        node = create_component(source.component_type, self.id_factory)

        if isinstance(target, ContainerTarget):
            return AppendIntent(node=node, container_id=target.container_id)

        # Palette drops outside a container land in the root list.
        index = len(components)
        if isinstance(target, CanvasTarget):
            for i, existing in enumerate(components):
                if existing.id == target.node_id:
                    index = i
                    break
        return InsertIntent(node=node, index=index)

    def _resolve_node_drop(
        self,
        source: NodeSource,
        target: Target,
        components: List[ComponentNode],
    ) -> Optional[DropIntent]:
        if isinstance(target, ContainerTarget):
            if target.container_id == source.node_id:
                return None
            return RelocateIntent(node_id=source.node_id, parent_id=target.container_id)

        if not isinstance(target, CanvasTarget):
            return None

        if source.parent_id == target.parent_id:
            siblings = tree.find_siblings(components, source.parent_id) or []
            ids = [node.id for node in siblings]
            if source.node_id not in ids or target.node_id not in ids:
                return None
            from_index = ids.index(source.node_id)
            to_index = ids.index(target.node_id)
            if from_index == to_index:
                return None
            return MoveIntent(from_index=from_index, to_index=to_index, parent_id=source.parent_id)

        if not self.cross_parent_moves:
            logger.debug(
                f"Ignoring cross-parent drop of {source.node_id} "
                f"from {source.parent_id} to {target.parent_id}"
            )
            return None

        siblings = tree.find_siblings(components, target.parent_id)
        if siblings is None:
            return None
        ids = [node.id for node in siblings]
        if target.node_id not in ids:
            return None
        return RelocateIntent(
            node_id=source.node_id,
            parent_id=target.parent_id,
            index=ids.index(target.node_id),
        )
