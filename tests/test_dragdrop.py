"""
Unit Tests for the Drag/Drop Intent Resolver
"""

import pytest

from builder_server.core.dragdrop import (
    AppendIntent,
    DragDropResolver,
    InsertIntent,
    MoveIntent,
    RelocateIntent,
)
from builder_server.core.tree import find_node
from builder_server.errors import DragInProgressError
from builder_server.schemas.component import ComponentNode, ComponentType
from builder_server.schemas.drag import (
    CanvasTarget,
    ContainerTarget,
    NodeSource,
    PaletteSource,
    RootSentinel,
)


@pytest.fixture
def components():
    return [
        ComponentNode(id="a", type=ComponentType.HEADING),
        ComponentNode(id="box", type=ComponentType.CONTAINER, children=[
            ComponentNode(id="c1", type=ComponentType.PARAGRAPH),
            ComponentNode(id="c2", type=ComponentType.PARAGRAPH),
        ]),
        ComponentNode(id="b", type=ComponentType.BUTTON),
    ]


@pytest.fixture
def resolver(id_factory):
    return DragDropResolver(id_factory=id_factory)


class TestDragState:
    """Tests for the Idle/Dragging state machine."""

    def test_start_and_end(self, resolver, components):
        """Test that end returns to idle."""
        resolver.start(PaletteSource(component_type="heading"))
        assert resolver.is_dragging

        resolver.end(None, components)
        assert not resolver.is_dragging

    def test_double_start_raises(self, resolver):
        """Test starting while a drag is open."""
        resolver.start(PaletteSource(component_type="heading"))
        with pytest.raises(DragInProgressError):
            resolver.start(NodeSource(node_id="a"))

    def test_cancel(self, resolver, components):
        """Test that cancel drops the source."""
        resolver.start(NodeSource(node_id="a"))
        resolver.cancel()

        assert not resolver.is_dragging
        assert resolver.end(CanvasTarget(node_id="b"), components) is None

    def test_drop_nowhere(self, resolver, components):
        """Test a drop without a target."""
        resolver.start(PaletteSource(component_type="button"))
        result, intent = resolver.drop(None, components)

        assert intent is None
        assert result is components


class TestPaletteDrops:
    """Tests for drags that start in the palette."""

    def test_into_container(self, resolver, components):
        """Test palette -> container appends."""
        resolver.start(PaletteSource(component_type="paragraph"))
        result, intent = resolver.drop(ContainerTarget(container_id="box"), components)

        assert isinstance(intent, AppendIntent)
        assert intent.node.type == ComponentType.PARAGRAPH
        assert [c.id for c in find_node(result, "box").children] == ["c1", "c2", intent.node.id]

    def test_onto_root_node(self, resolver, components):
        """Test palette -> root item inserts at that index."""
        resolver.start(PaletteSource(component_type="divider"))
        result, intent = resolver.drop(CanvasTarget(node_id="b"), components)

        assert isinstance(intent, InsertIntent)
        assert intent.index == 2
        assert [c.id for c in result] == ["a", "box", intent.node.id, "b"]

    def test_onto_empty_canvas(self, resolver, components):
        """Test palette -> root sentinel appends."""
        resolver.start(PaletteSource(component_type="spacer"))
        result, intent = resolver.drop(RootSentinel(), components)

        assert intent == InsertIntent(node=intent.node, index=3)
        assert result[-1].type == ComponentType.SPACER

    def test_onto_nested_node_appends_to_root(self, resolver, components):
        """Test palette -> item that is not in the root list."""
        resolver.start(PaletteSource(component_type="button"))
        result, intent = resolver.drop(CanvasTarget(node_id="c1", parent_id="box"), components)

        assert intent.index == 3
        assert len(result) == 4

    def test_row_drop_creates_columns(self, resolver):
        """Test the factory runs for palette drops."""
        resolver.start(PaletteSource(component_type="row"))
        result, intent = resolver.drop(RootSentinel(), [])

        assert len(result[0].children) == 2


class TestNodeDrops:
    """Tests for drags of existing nodes."""

    def test_into_container(self, resolver, components):
        """Test node -> container relocates."""
        resolver.start(NodeSource(node_id="a"))
        result, intent = resolver.drop(ContainerTarget(container_id="box"), components)

        assert intent == RelocateIntent(node_id="a", parent_id="box")
        assert [c.id for c in result] == ["box", "b"]
        assert [c.id for c in find_node(result, "box").children] == ["c1", "c2", "a"]

    def test_into_itself(self, resolver, components):
        """Test dropping a container into its own drop zone."""
        resolver.start(NodeSource(node_id="box"))
        assert resolver.end(ContainerTarget(container_id="box"), components) is None

    def test_reorder_root(self, resolver, components):
        """Test node -> sibling reorders."""
        resolver.start(NodeSource(node_id="a"))
        result, intent = resolver.drop(CanvasTarget(node_id="b"), components)

        assert intent == MoveIntent(from_index=0, to_index=2)
        assert [c.id for c in result] == ["box", "b", "a"]

    def test_reorder_nested(self, resolver, components):
        """Test reordering inside a container."""
        resolver.start(NodeSource(node_id="c2", parent_id="box"))
        result, intent = resolver.drop(CanvasTarget(node_id="c1", parent_id="box"), components)

        assert intent == MoveIntent(from_index=1, to_index=0, parent_id="box")
        assert [c.id for c in find_node(result, "box").children] == ["c2", "c1"]

    def test_onto_itself(self, resolver, components):
        """Test dropping a node where it already is."""
        resolver.start(NodeSource(node_id="a"))
        assert resolver.end(CanvasTarget(node_id="a"), components) is None

    def test_cross_parent_ignored_by_default(self, resolver, components):
        """Test cross-list canvas drops are no-ops."""
        resolver.start(NodeSource(node_id="c1", parent_id="box"))
        result, intent = resolver.drop(CanvasTarget(node_id="b"), components)

        assert intent is None
        assert result is components

    def test_cross_parent_enabled(self, id_factory, components):
        """Test cross-list canvas drops with relocation on."""
        resolver = DragDropResolver(cross_parent_moves=True, id_factory=id_factory)
        resolver.start(NodeSource(node_id="c1", parent_id="box"))
        result, intent = resolver.drop(CanvasTarget(node_id="b"), components)

        assert intent == RelocateIntent(node_id="c1", parent_id=None, index=2)
        assert [c.id for c in result] == ["a", "box", "c1", "b"]
        assert [c.id for c in find_node(result, "box").children] == ["c2"]

    def test_node_onto_root_sentinel(self, resolver, components):
        """Test that the empty canvas is not a reorder target."""
        resolver.start(NodeSource(node_id="a"))
        assert resolver.end(RootSentinel(), components) is None
