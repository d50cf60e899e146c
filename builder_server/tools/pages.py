"""
MCP Tools - Pages

Page listing, selection, creation and the current page's component tree.
"""

from typing import Optional

from fastmcp import FastMCP

from builder_server.schemas.page import PageType
from builder_server.services import get_builder_service

router = FastMCP("pages")


def _summary(page) -> dict:
    return {
        "id": page.id,
        "name": page.name,
        "slug": page.slug,
        "type": page.type.value,
        "component_count": len(page.components),
        "updated_at": page.updated_at.isoformat(),
    }


@router.tool()
async def list_pages() -> dict:
    """List the project's pages and which one is being edited."""
    service = get_builder_service()
    current = service.current_page
    return {
        "project": service.project.name if service.project else None,
        "current_page_id": current.id if current else None,
        "pages": [_summary(p) for p in service.list_pages()],
    }


@router.tool()
async def select_page(page_id: str) -> dict:
    """Make a page the one being edited."""
    service = get_builder_service()
    page = service.select_page(page_id)
    if page is None:
        return {"error": f"Page {page_id} not found"}
    return _summary(page)


@router.tool()
async def create_page(name: str, page_type: str = "custom") -> dict:
    """
    Create a page and start editing it.

    Args:
        name: Page name (the slug is derived from it)
        page_type: landing, about, news, events, contact or custom

    Returns:
        The new page
    """
    try:
        page_type = PageType(page_type)
    except ValueError:
        return {"error": f"Unknown page type: {page_type}"}

    service = get_builder_service()
    page = service.create_page(name, page_type)
    if page is None:
        return {"error": "No project loaded"}
    return _summary(page)


@router.tool()
async def delete_page(page_id: str) -> dict:
    """Delete a page."""
    service = get_builder_service()
    if not service.delete_page(page_id):
        return {"error": f"Page {page_id} not found"}
    return {"deleted": page_id}


@router.tool()
async def get_component_tree(page_id: Optional[str] = None) -> dict:
    """
    Get the component tree of a page (the current page by default).

    Returns:
        Page summary plus nested components
    """
    service = get_builder_service()
    page = service.current_page
    if page_id is not None:
        page = service.project.get_page(page_id) if service.project else None
    if page is None:
        return {"error": "Page not found"}

    selected = service.selected_component
    return {
        **_summary(page),
        "selected_component_id": selected.id if selected else None,
        "components": [c.model_dump(mode="json", exclude_none=True) for c in page.components],
    }


@router.tool()
async def save_page() -> dict:
    """Persist the current page."""
    service = get_builder_service()
    return {"saved": service.save_page()}
