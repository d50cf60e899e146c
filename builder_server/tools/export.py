"""
MCP Tools - Export

HTML/JSON export of the current page and rendering of exported JSON.
"""

from fastmcp import FastMCP

from builder_server.core.renderer import render_components
from builder_server.errors import ExportParseError
from builder_server.services import get_builder_service, get_datasource_service, get_export_service

router = FastMCP("export")


@router.tool()
async def export_page_html(interpolate: bool = False) -> dict:
    """
    Export the current page as a standalone HTML document.

    Args:
        interpolate: Resolve {{source.path}} placeholders first

    Returns:
        File name and HTML content
    """
    builder = get_builder_service()
    page = builder.current_page
    if page is None:
        return {"error": "No page selected"}

    html = get_export_service().export_html(
        page,
        builder.project.name,
        get_datasource_service().data_sources,
        interpolate=interpolate,
    )
    return {"filename": f"{page.slug}.html", "html": html}


@router.tool()
async def export_page_json() -> dict:
    """Export the current page's components as portable JSON."""
    builder = get_builder_service()
    page = builder.current_page
    if page is None:
        return {"error": "No page selected"}

    content = get_export_service().export_json(page, get_datasource_service().data_sources)
    return {"filename": f"{page.slug}.json", "json": content}


@router.tool()
async def render_exported_json(json_text: str) -> dict:
    """
    Render exported page JSON with the current data sources.

    Accepts the export envelope, a bare component array, or any object
    with a "components" key.

    Returns:
        Interpolated components and their HTML
    """
    service = get_export_service()
    data_sources = get_datasource_service().data_sources
    try:
        components = service.load_components(json_text, data_sources)
    except ExportParseError as e:
        return {"error": str(e)}

    return {
        "components": [c.model_dump(mode="json", exclude_none=True) for c in components],
        "html": render_components(components),
    }
