"""
Core - Tree Mutation Engine

Copy-on-write operations over a root list of ComponentNode.

Every operation returns a new root list and never mutates a node or a list.
Only the nodes on the path from the root to the change are rebuilt, so
untouched subtrees keep their identity, and an operation that changes
nothing returns the very list it was given (``result is components``).
Missing ids, missing parents and leaf parents are silent no-ops.
"""

import copy
from typing import Callable, Iterator, List, Mapping, Optional, Tuple, Union

from builder_server.core.registry import IdFactory, new_id
from builder_server.schemas.component import ComponentNode, ComponentPatch

Components = List[ComponentNode]


def _with_children(node: ComponentNode, children: Components) -> ComponentNode:
    return node.model_copy(update={"children": children})


def _replace_at(components: Components, index: int, node: ComponentNode) -> Components:
    return components[:index] + [node] + components[index + 1:]


def _rewrite_node(
    components: Components,
    node_id: str,
    rewrite: Callable[[ComponentNode], ComponentNode],
) -> Components:
    """Find-or-recurse: swap the node with ``node_id`` for ``rewrite(node)``."""
    for i, node in enumerate(components):
        if node.id == node_id:
            replacement = rewrite(node)
            if replacement is node:
                return components
            return _replace_at(components, i, replacement)
        if node.children:
            children = _rewrite_node(node.children, node_id, rewrite)
            if children is not node.children:
                return _replace_at(components, i, _with_children(node, children))
    return components


def _rewrite_siblings(
    components: Components,
    parent_id: Optional[str],
    rewrite: Callable[[Components], Components],
) -> Components:
    """Apply ``rewrite`` to the sibling list owned by ``parent_id`` (root when None)."""
    if parent_id is None:
        return rewrite(components)

    def rewrite_parent(parent: ComponentNode) -> ComponentNode:
        if parent.children is None:
            return parent
        children = rewrite(parent.children)
        if children is parent.children:
            return parent
        return _with_children(parent, children)

    return _rewrite_node(components, parent_id, rewrite_parent)


def _rewrite_owner(
    components: Components,
    node_id: str,
    rewrite: Callable[[Components, int], Components],
) -> Components:
    """Apply ``rewrite(siblings, index)`` to whichever list directly holds ``node_id``."""
    for i, node in enumerate(components):
        if node.id == node_id:
            return rewrite(components, i)
    for i, node in enumerate(components):
        if node.children:
            children = _rewrite_owner(node.children, node_id, rewrite)
            if children is not node.children:
                return _replace_at(components, i, _with_children(node, children))
    return components


def _splice(siblings: Components, index: Optional[int], node: ComponentNode) -> Components:
    if index is None or index < 0 or index >= len(siblings):
        return siblings + [node]
    return siblings[:index] + [node] + siblings[index:]


def _clone_with_new_ids(node: ComponentNode, id_factory: IdFactory) -> ComponentNode:
    clone_id = id_factory()
    children = None
    if node.children is not None:
        children = [_clone_with_new_ids(child, id_factory) for child in node.children]
    return node.model_copy(update={
        "id": clone_id,
        "props": copy.deepcopy(node.props),
        "styles": copy.deepcopy(node.styles),
        "children": children,
    })


# --- Queries ---------------------------------------------------------------

def iter_nodes(components: Components) -> Iterator[ComponentNode]:
    """Depth-first, pre-order walk over every node."""
    for node in components:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_node(components: Components, node_id: str) -> Optional[ComponentNode]:
    for node in iter_nodes(components):
        if node.id == node_id:
            return node
    return None


def contains_node(components: Components, node_id: str) -> bool:
    return find_node(components, node_id) is not None


def collect_ids(components: Components) -> List[str]:
    return [node.id for node in iter_nodes(components)]


def find_siblings(components: Components, parent_id: Optional[str] = None) -> Optional[Components]:
    """
    Sibling list owned by ``parent_id``.

    Returns:
        The root list when parent_id is None, the parent's children, or
        None when the parent is missing or is a leaf
    """
    if parent_id is None:
        return components
    parent = find_node(components, parent_id)
    if parent is None:
        return None
    return parent.children


def find_location(
    components: Components,
    node_id: str,
    parent_id: Optional[str] = None,
) -> Optional[Tuple[Optional[str], int]]:
    """(parent_id, index) of ``node_id``; parent_id is None for root nodes."""
    for i, node in enumerate(components):
        if node.id == node_id:
            return parent_id, i
    for node in components:
        if node.children:
            found = find_location(node.children, node_id, node.id)
            if found is not None:
                return found
    return None


def find_parent_id(components: Components, node_id: str) -> Optional[str]:
    """Id of the node holding ``node_id``; None for root nodes and missing ids."""
    location = find_location(components, node_id)
    return location[0] if location else None


# --- Mutations -------------------------------------------------------------

def insert_node(
    components: Components,
    node: ComponentNode,
    index: Optional[int] = None,
    parent_id: Optional[str] = None,
) -> Components:
    """
    Insert ``node`` at ``index`` of the root list or of ``parent_id``'s children.

    Omitted or out-of-bounds indices append. A missing or leaf parent is a
    no-op.
    """
    return _rewrite_siblings(components, parent_id, lambda s: _splice(s, index, node))


def add_to_container(
    components: Components,
    container_id: str,
    node: ComponentNode,
) -> Components:
    """Append ``node`` to the end of a container's children."""
    return insert_node(components, node, None, container_id)


def update_node(
    components: Components,
    node_id: str,
    patch: Union[ComponentPatch, Mapping],
) -> Components:
    """
    Shallow-merge a patch into the node with ``node_id``.

    ``props`` and ``styles`` are replaced wholesale when present in the
    patch; pass the fully merged mapping.
    """
    if not isinstance(patch, ComponentPatch):
        patch = ComponentPatch.model_validate(dict(patch))
    update = patch.as_update()
    if not update:
        return components
    return _rewrite_node(components, node_id, lambda n: n.model_copy(update=update))


def delete_node(components: Components, node_id: str) -> Components:
    """Remove ``node_id`` (and with it its whole subtree) wherever it occurs."""
    changed = False
    result = []
    for node in components:
        if node.id == node_id:
            changed = True
            continue
        if node.children:
            children = delete_node(node.children, node_id)
            if children is not node.children:
                node = _with_children(node, children)
                changed = True
        result.append(node)
    return result if changed else components


def move_node(
    components: Components,
    from_index: int,
    to_index: int,
    parent_id: Optional[str] = None,
) -> Components:
    """
    Reorder one sibling list: take the item at ``from_index`` and reinsert it
    at ``to_index``.

    Indices outside ``[0, len)`` are rejected (no-op), as is an unchanged
    position.
    """
    def reorder(siblings: Components) -> Components:
        size = len(siblings)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return siblings
        if from_index == to_index:
            return siblings
        items = list(siblings)
        moved = items.pop(from_index)
        items.insert(to_index, moved)
        return items

    return _rewrite_siblings(components, parent_id, reorder)


def duplicate_node(
    components: Components,
    node_id: str,
    id_factory: IdFactory = new_id,
) -> Components:
    """Insert a deep clone, with fresh ids throughout, right after the original."""
    def insert_clone(siblings: Components, index: int) -> Components:
        clone = _clone_with_new_ids(siblings[index], id_factory)
        return siblings[:index + 1] + [clone] + siblings[index + 1:]

    return _rewrite_owner(components, node_id, insert_clone)


def relocate_node(
    components: Components,
    node_id: str,
    parent_id: Optional[str] = None,
    index: Optional[int] = None,
) -> Components:
    """
    Move a node to another sibling list in one step.

    ``index`` is a position in the destination list once the node has been
    taken out of its old place; omitted or out of bounds appends. No-op when
    the node or the destination is missing, when the destination is a leaf,
    or when the destination lies inside the node's own subtree.
    """
    node = find_node(components, node_id)
    if node is None:
        return components

    if parent_id is not None:
        if parent_id == node_id or contains_node(node.children or [], parent_id):
            return components
        parent = find_node(components, parent_id)
        if parent is None or parent.children is None:
            return components

    remaining = delete_node(components, node_id)
    return insert_node(remaining, node, index, parent_id)
