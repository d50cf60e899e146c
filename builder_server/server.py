"""
Page Builder MCP Server - Main Entry Point

FastMCP server with STDIO and SSE transport support.
"""

import argparse
import logging
from fastmcp import FastMCP

from builder_server.config import get_settings
from builder_server.logging_config import configure_logging

# Import tools (registered with decorators on their routers)
from builder_server.tools import (
    components,
    pages,
    datasources,
    export,
    cache,
)

logger = logging.getLogger(__name__)


def create_app() -> FastMCP:
    """Create and configure the MCP application."""
    mcp = FastMCP(
        name="page-builder-mcp",
        instructions=(
            "Compose pages from typed components, bind text to data sources "
            "with {{source.path}} placeholders, and export HTML or JSON."
        ),
    )

    # Register all tools
    mcp.mount(components.router)
    mcp.mount(pages.router)
    mcp.mount(datasources.router)
    mcp.mount(export.router)
    mcp.mount(cache.router)

    return mcp


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Page Builder MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=None,
        help="Transport protocol (default: from env)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for SSE transport (default: from env)"
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    transport = args.transport or settings.mcp.transport
    port = args.port or settings.mcp.port

    mcp = create_app()
    logger.info(f"Starting page builder MCP server ({transport})")

    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport="sse", host=settings.mcp.host, port=port)


if __name__ == "__main__":
    main()
