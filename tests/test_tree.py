"""
Unit Tests for the Tree Mutation Engine
"""

import pytest

from builder_server.core import tree
from builder_server.core.registry import create_component
from builder_server.schemas.component import ComponentNode, ComponentPatch, ComponentType


def _node(node_id, ctype=ComponentType.PARAGRAPH, children=None, **props):
    return ComponentNode(id=node_id, type=ctype, props=props, children=children)


@pytest.fixture
def page():
    """
    root:
      h1 (heading)
      box (container)
        p1
        inner (container)
          p2
      btn (button)
    """
    return [
        _node("h1", ComponentType.HEADING, content="Title"),
        _node("box", ComponentType.CONTAINER, children=[
            _node("p1", content="one"),
            _node("inner", ComponentType.CONTAINER, children=[_node("p2", content="two")]),
        ]),
        _node("btn", ComponentType.BUTTON, content="Go"),
    ]


def _ids(components):
    return [n.id for n in components]


class TestQueries:
    """Tests for lookups over the tree."""

    def test_find_node_nested(self, page):
        """Test depth-first lookup."""
        assert tree.find_node(page, "p2").props["content"] == "two"
        assert tree.find_node(page, "missing") is None

    def test_collect_ids_preorder(self, page):
        """Test pre-order id listing."""
        assert tree.collect_ids(page) == ["h1", "box", "p1", "inner", "p2", "btn"]

    def test_find_location(self, page):
        """Test parent/index lookup."""
        assert tree.find_location(page, "btn") == (None, 2)
        assert tree.find_location(page, "p2") == ("inner", 0)
        assert tree.find_location(page, "missing") is None

    def test_find_parent_id(self, page):
        """Test parent lookup."""
        assert tree.find_parent_id(page, "p2") == "inner"
        assert tree.find_parent_id(page, "h1") is None
        assert tree.find_parent_id(page, "missing") is None

    def test_find_siblings(self, page):
        """Test sibling list lookup."""
        assert tree.find_siblings(page) is page
        assert _ids(tree.find_siblings(page, "box")) == ["p1", "inner"]
        assert tree.find_siblings(page, "h1") is None
        assert tree.find_siblings(page, "missing") is None


class TestInsert:
    """Tests for insert_node and add_to_container."""

    def test_insert_order(self):
        """Test appending then inserting at the front."""
        button = _node("b", ComponentType.BUTTON)
        heading = _node("h", ComponentType.HEADING)

        result = tree.insert_node([], button)
        result = tree.insert_node(result, heading, 0)

        assert [n.type for n in result] == [ComponentType.HEADING, ComponentType.BUTTON]

    def test_insert_does_not_mutate_input(self, page):
        """Test copy-on-write at the root."""
        before = list(page)
        result = tree.insert_node(page, _node("x"), 1)

        assert page == before
        assert _ids(result) == ["h1", "x", "box", "btn"]

    @pytest.mark.parametrize("index", [None, -1, 3, 99])
    def test_out_of_bounds_index_appends(self, page, index):
        """Test that missing or invalid indices append."""
        result = tree.insert_node(page, _node("x"), index)
        assert _ids(result)[-1] == "x"

    def test_insert_into_container(self, page):
        """Test inserting at a position in a nested list."""
        result = tree.insert_node(page, _node("x"), 0, "inner")

        assert _ids(tree.find_node(result, "inner").children) == ["x", "p2"]
        # Siblings off the path keep their identity.
        assert result[0] is page[0]
        assert result[2] is page[2]
        assert tree.find_node(result, "p1") is tree.find_node(page, "p1")

    def test_insert_into_leaf_is_noop(self, page):
        """Test that a leaf parent cannot receive children."""
        assert tree.insert_node(page, _node("x"), None, "btn") is page

    def test_insert_into_missing_parent_is_noop(self, page):
        """Test missing parent."""
        assert tree.insert_node(page, _node("x"), None, "missing") is page

    def test_add_to_container_appends(self, page):
        """Test container append."""
        result = tree.add_to_container(page, "box", _node("x"))
        assert _ids(tree.find_node(result, "box").children) == ["p1", "inner", "x"]


class TestUpdate:
    """Tests for update_node."""

    def test_update_props(self, page):
        """Test replacing the props group of a nested node."""
        result = tree.update_node(page, "p2", ComponentPatch(props={"content": "changed"}))

        assert tree.find_node(result, "p2").props == {"content": "changed"}
        assert tree.find_node(page, "p2").props == {"content": "two"}

    def test_update_keeps_other_group(self, page):
        """Test that an absent group is left alone."""
        result = tree.update_node(page, "h1", {"styles": {"color": "red"}})
        node = tree.find_node(result, "h1")

        assert node.styles == {"color": "red"}
        assert node.props == {"content": "Title"}

    def test_update_rebuilds_only_the_path(self, page):
        """Test identity locality."""
        result = tree.update_node(page, "p2", {"props": {"content": "x"}})

        assert result is not page
        assert result[0] is page[0]
        assert result[2] is page[2]
        assert result[1] is not page[1]
        assert tree.find_node(result, "p1") is tree.find_node(page, "p1")

    def test_update_missing_is_noop(self, page):
        """Test missing id."""
        assert tree.update_node(page, "missing", {"props": {"a": 1}}) is page

    def test_empty_patch_is_noop(self, page):
        """Test patch without groups."""
        assert tree.update_node(page, "h1", ComponentPatch()) is page


class TestDelete:
    """Tests for delete_node."""

    def test_delete_removes_subtree(self, page):
        """Test that descendants go with the node."""
        result = tree.delete_node(page, "box")

        assert _ids(result) == ["h1", "btn"]
        for node_id in ("box", "p1", "inner", "p2"):
            assert not tree.contains_node(result, node_id)

    def test_delete_nested(self, page):
        """Test deleting inside a container."""
        result = tree.delete_node(page, "p2")
        assert tree.find_node(result, "inner").children == []
        assert result[0] is page[0]

    def test_delete_missing_is_noop(self, page):
        """Test missing id."""
        assert tree.delete_node(page, "missing") is page


class TestMove:
    """Tests for move_node."""

    def test_move_root(self, page):
        """Test reordering the root list."""
        result = tree.move_node(page, 0, 2)
        assert _ids(result) == ["box", "btn", "h1"]

    def test_move_is_permutation(self, page):
        """Test that a move neither adds nor removes nodes."""
        result = tree.move_node(page, 2, 0)
        assert sorted(tree.collect_ids(result)) == sorted(tree.collect_ids(page))

    def test_move_nested(self, page):
        """Test reordering a container's children."""
        result = tree.move_node(page, 1, 0, "box")
        assert _ids(tree.find_node(result, "box").children) == ["inner", "p1"]

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 3), (5, 0), (1, 1)])
    def test_invalid_move_is_noop(self, page, from_index, to_index):
        """Test out-of-range and unchanged positions."""
        assert tree.move_node(page, from_index, to_index) is page

    def test_move_in_leaf_is_noop(self, page):
        """Test reorder under a leaf parent."""
        assert tree.move_node(page, 0, 1, "btn") is page


class TestDuplicate:
    """Tests for duplicate_node."""

    def test_duplicate_inserted_after_original(self, page, id_factory):
        """Test clone placement."""
        result = tree.duplicate_node(page, "h1", id_factory)
        assert _ids(result) == ["h1", "n1", "box", "btn"]

    def test_duplicate_subtree_fresh_ids(self, page, id_factory):
        """Test that every node in the clone gets a new id."""
        result = tree.duplicate_node(page, "box", id_factory)
        clone = result[2]

        assert tree.collect_ids([clone]) == ["n1", "n2", "n3", "n4"]
        ids = tree.collect_ids(result)
        assert len(ids) == len(set(ids))

    def test_duplicate_is_deep_equal_ignoring_ids(self, page):
        """Test clone content."""
        result = tree.duplicate_node(page, "box")
        original, clone = result[1], result[2]

        def strip(node):
            return (node.type, node.props, node.styles, [strip(c) for c in node.children or []])

        assert strip(original) == strip(clone)
        assert clone.props is not original.props

    def test_duplicate_nested(self, page, id_factory):
        """Test duplicating inside a container."""
        result = tree.duplicate_node(page, "p1", id_factory)
        assert _ids(tree.find_node(result, "box").children) == ["p1", "n1", "inner"]

    def test_duplicate_missing_is_noop(self, page):
        """Test missing id."""
        assert tree.duplicate_node(page, "missing") is page


class TestRelocate:
    """Tests for relocate_node."""

    def test_relocate_into_container(self, page):
        """Test moving a root node into a nested container."""
        result = tree.relocate_node(page, "btn", "inner")

        assert _ids(result) == ["h1", "box"]
        assert _ids(tree.find_node(result, "inner").children) == ["p2", "btn"]

    def test_relocate_to_root_index(self, page):
        """Test moving a nested node to the root list."""
        result = tree.relocate_node(page, "p2", None, 0)
        assert _ids(result) == ["p2", "h1", "box", "btn"]
        assert tree.find_node(result, "inner").children == []

    def test_relocate_into_own_descendant_is_noop(self, page):
        """Test that a node cannot be dropped inside itself."""
        assert tree.relocate_node(page, "box", "inner") is page
        assert tree.relocate_node(page, "box", "box") is page

    def test_relocate_into_leaf_is_noop(self, page):
        """Test leaf destination."""
        assert tree.relocate_node(page, "p1", "btn") is page

    def test_relocate_missing_is_noop(self, page):
        """Test missing node or destination."""
        assert tree.relocate_node(page, "missing", "box") is page
        assert tree.relocate_node(page, "p1", "missing") is page


class TestIdUniqueness:
    """Tests that ids stay unique across mixed operations."""

    def test_mixed_sequence(self):
        """Test inserts, rows and duplicates together."""
        components = []
        row = create_component(ComponentType.ROW)
        components = tree.insert_node(components, row)
        column_id = row.children[0].id
        components = tree.add_to_container(components, column_id, create_component("heading"))
        components = tree.duplicate_node(components, row.id)
        components = tree.duplicate_node(components, column_id)
        components = tree.insert_node(components, create_component("button"), 0)

        ids = tree.collect_ids(components)
        assert len(ids) == len(set(ids))
        assert len(ids) == 1 + (1 + 2 + 1) * 2 + 2


class TestChildrenShape:
    """Tests for the container/leaf children rule on loaded nodes."""

    def test_loaded_container_accepts_children(self):
        """Test a container that arrived without a children list."""
        components = [ComponentNode.model_validate({"id": "c", "type": "container"})]

        result = tree.add_to_container(components, "c", _node("x"))

        assert _ids(result[0].children) == ["x"]

    def test_loaded_leaf_refuses_children(self):
        """Test a leaf that arrived with an empty children list."""
        components = [ComponentNode.model_validate({"id": "h", "type": "heading", "children": []})]

        assert components[0].children is None
        assert tree.insert_node(components, _node("x"), None, "h") is components

    def test_leaf_with_children_is_invalid(self):
        """Test that leaves cannot be built holding nodes."""
        with pytest.raises(ValueError):
            ComponentNode(id="b", type=ComponentType.BUTTON, children=[_node("x")])
