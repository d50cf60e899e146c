"""
MCP Tools - Data Sources

Manage the data sources placeholders resolve against, and preview
interpolation.
"""

from typing import Any, Dict, Optional

from fastmcp import FastMCP
from pydantic import ValidationError

from builder_server.core.interpolation import extract_variables, find_unresolved, interpolate
from builder_server.core.tree import iter_nodes
from builder_server.services import get_builder_service, get_datasource_service

router = FastMCP("datasources")


def _dump(ds) -> dict:
    return ds.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.tool()
async def list_data_sources() -> dict:
    """List configured data sources."""
    service = get_datasource_service()
    return {"data_sources": [_dump(ds) for ds in service.list_data_sources()]}


@router.tool()
async def create_data_source(
    name: str,
    type: str,
    json_data: Optional[str] = None,
    key_value_data: Optional[Dict[str, str]] = None,
    http_config: Optional[Dict[str, Any]] = None,
) -> dict:
    """
    Create a data source usable as {{name.path}} in component text.

    Args:
        name: Name referenced by placeholders (case-insensitive)
        type: static-json, key-value or http-api
        json_data: Raw JSON text for static-json
        key_value_data: String map for key-value
        http_config: {"url", "method", "headers", "body", "queryParams"} for http-api

    Returns:
        The created data source
    """
    service = get_datasource_service()
    try:
        ds = service.add_data_source(name, type, json_data, key_value_data, http_config)
    except ValidationError as e:
        return {"error": f"Invalid data source: {e}"}
    return _dump(ds)


@router.tool()
async def update_data_source(
    data_source_id: str,
    name: Optional[str] = None,
    json_data: Optional[str] = None,
    key_value_data: Optional[Dict[str, str]] = None,
    http_config: Optional[Dict[str, Any]] = None,
) -> dict:
    """
    Edit a data source in place, keeping its id.

    Args:
        data_source_id: Data source ID
        name: New name referenced by placeholders
        json_data: New raw JSON text (static-json)
        key_value_data: New string map (key-value)
        http_config: New request descriptor (http-api)

    Returns:
        The updated data source
    """
    updates = {
        key: value
        for key, value in {
            "name": name,
            "json_data": json_data,
            "key_value_data": key_value_data,
            "http_config": http_config,
        }.items()
        if value is not None
    }

    service = get_datasource_service()
    try:
        ds = service.update_data_source(data_source_id, **updates)
    except ValidationError as e:
        return {"error": f"Invalid data source: {e}"}

    if ds is None:
        return {"error": f"Data source {data_source_id} not found"}
    return _dump(ds)


@router.tool()
async def delete_data_source(data_source_id: str) -> dict:
    """Delete a data source. Placeholders using it stay unresolved."""
    service = get_datasource_service()
    if not service.delete_data_source(data_source_id):
        return {"error": f"Data source {data_source_id} not found"}
    return {"deleted": data_source_id}


@router.tool()
async def refresh_data_source(data_source_id: str, force: bool = False) -> dict:
    """
    Fetch an http-api data source and cache its response.

    Args:
        data_source_id: Data source ID
        force: Refetch even if a fresh response is cached

    Returns:
        The fetched data
    """
    service = get_datasource_service()
    data = await service.fetch_http_data(data_source_id, force=force)
    if data is None:
        return {"error": f"Could not fetch data for {data_source_id}"}
    return {"data": data}


@router.tool()
async def preview_interpolation(template: str) -> dict:
    """
    Resolve {{source.path}} placeholders in a piece of text.

    Returns:
        The interpolated text and the placeholders that stayed unresolved
    """
    service = get_datasource_service()
    result = interpolate(template, service.data_sources)
    return {
        "result": result,
        "unresolved": find_unresolved(template, service.data_sources),
    }


@router.tool()
async def list_page_variables() -> dict:
    """List the placeholders used by each component of the current page."""
    builder = get_builder_service()
    datasources = get_datasource_service()

    usages = []
    for node in iter_nodes(builder.components):
        for key, value in node.props.items():
            if not isinstance(value, str):
                continue
            for variable in extract_variables(value):
                source_name = variable.partition(".")[0]
                usages.append({
                    "component_id": node.id,
                    "prop": key,
                    "variable": variable,
                    "source_found": datasources.find_by_name(source_name) is not None,
                })
    return {"variables": usages}
