"""
MCP Tools - Cache

Inspect and clear the response/export caches.
"""

from typing import Optional

from fastmcp import FastMCP

from builder_server.services import get_cache_service
from builder_server.services.cache_service import CacheService

router = FastMCP("cache")


@router.tool()
async def get_cache_stats() -> dict:
    """Size, capacity and TTL of each cache tier."""
    return get_cache_service().get_stats()


@router.tool()
async def clear_cache(tier: Optional[str] = None) -> dict:
    """
    Drop cached data-source responses and/or rendered exports.

    Args:
        tier: "datasource" or "export"; clears every tier when omitted

    Returns:
        The tiers that were cleared
    """
    cache = get_cache_service()
    if tier is None:
        cache.clear_all()
        return {"cleared": list(CacheService.TIERS)}

    try:
        cache.clear_tier(tier)
    except KeyError:
        return {"error": f"Unknown cache tier: {tier}"}
    return {"cleared": [tier]}
