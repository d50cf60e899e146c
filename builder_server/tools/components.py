"""
MCP Tools - Components

Add, edit, move and drop components on the current page.
"""

from typing import Any, Dict, Optional

from fastmcp import FastMCP

from builder_server.core.registry import list_definitions
from builder_server.core.templates import BLOCK_TEMPLATES
from builder_server.errors import BuilderError
from builder_server.schemas.component import ComponentPatch
from builder_server.schemas.drag import DragSource, DropTarget
from builder_server.services import get_builder_service

router = FastMCP("components")


def _dump(node) -> dict:
    return node.model_dump(mode="json", exclude_none=True)


@router.tool()
async def list_palette(category: Optional[str] = None) -> dict:
    """
    List the component types and block templates that can be added.

    Args:
        category: Optional filter (text, media, form, layout, structural, link)

    Returns:
        Component definitions and block templates
    """
    return {
        "components": [
            {
                "type": d.type.value,
                "label": d.label,
                "category": d.category,
                "is_container": d.is_container,
            }
            for d in list_definitions(category)
        ],
        "templates": [
            {"id": t.id, "title": t.title, "description": t.description, "category": t.category}
            for t in BLOCK_TEMPLATES.values()
        ],
    }


@router.tool()
async def add_component(
    component_type: str,
    index: Optional[int] = None,
    parent_id: Optional[str] = None,
) -> dict:
    """
    Add a new component to the current page.

    Args:
        component_type: Component type, e.g. "heading" or "row"
        index: Position among siblings (appends when omitted)
        parent_id: Container to add into (page root when omitted)

    Returns:
        The created component
    """
    service = get_builder_service()
    try:
        node = service.add_component(component_type, index, parent_id)
    except BuilderError as e:
        return {"error": str(e)}

    if node is None:
        return {"error": f"Could not add {component_type}: no page selected or {parent_id} is not a container"}
    return _dump(node)


@router.tool()
async def insert_template(
    template_id: str,
    index: Optional[int] = None,
    parent_id: Optional[str] = None,
) -> dict:
    """
    Insert a ready-made block (hero-simple, contact-form, two-col-feature).

    Returns:
        The inserted subtree
    """
    service = get_builder_service()
    try:
        node = service.insert_template(template_id, index, parent_id)
    except BuilderError as e:
        return {"error": str(e)}

    if node is None:
        return {"error": f"Could not insert template {template_id}"}
    return _dump(node)


@router.tool()
async def update_component(
    component_id: str,
    props: Optional[Dict[str, Any]] = None,
    styles: Optional[Dict[str, Any]] = None,
    replace: bool = False,
) -> dict:
    """
    Change a component's props and/or styles.

    Args:
        component_id: Component ID
        props: Prop values to set
        styles: Style values to set
        replace: Replace the whole props/styles mapping instead of merging

    Returns:
        The updated component
    """
    service = get_builder_service()
    node = service.get_component(component_id)
    if node is None:
        return {"error": f"Component {component_id} not found"}

    if not replace:
        props = {**node.props, **props} if props is not None else None
        styles = {**node.styles, **styles} if styles is not None else None

    updated = service.update_component(component_id, ComponentPatch(props=props, styles=styles))
    return _dump(updated or node)


@router.tool()
async def delete_component(component_id: str) -> dict:
    """Delete a component and everything inside it."""
    service = get_builder_service()
    if not service.delete_component(component_id):
        return {"error": f"Component {component_id} not found"}
    return {"deleted": component_id}


@router.tool()
async def move_component(
    from_index: int,
    to_index: int,
    parent_id: Optional[str] = None,
) -> dict:
    """
    Reorder components within one list.

    Args:
        from_index: Current position in the list
        to_index: New position in the list
        parent_id: Container owning the list (page root when omitted)

    Returns:
        Whether anything moved
    """
    service = get_builder_service()
    return {"moved": service.move_component(from_index, to_index, parent_id)}


@router.tool()
async def duplicate_component(component_id: str) -> dict:
    """Duplicate a component (with fresh ids) right after the original."""
    service = get_builder_service()
    clone = service.duplicate_component(component_id)
    if clone is None:
        return {"error": f"Component {component_id} not found"}
    return _dump(clone)


@router.tool()
async def drop_component(source: DragSource, target: Optional[DropTarget] = None) -> dict:
    """
    Perform a complete drag-and-drop gesture.

    Args:
        source: {"kind": "palette", "component_type": ...} or
            {"kind": "node", "node_id": ..., "parent_id": ...}
        target: {"kind": "canvas", "node_id": ..., "parent_id": ...},
            {"kind": "container", "container_id": ...}, {"kind": "root"},
            or null when dropped outside the canvas

    Returns:
        The applied action, or applied=false for a no-op drop
    """
    service = get_builder_service()
    try:
        service.start_drag(source)
        intent = service.end_drag(target)
    except BuilderError as e:
        service.cancel_drag()
        return {"error": str(e)}

    if intent is None:
        return {"applied": False}

    selected = service.selected_component
    return {
        "applied": True,
        "action": type(intent).__name__.replace("Intent", "").lower(),
        "selected": _dump(selected) if selected else None,
    }
