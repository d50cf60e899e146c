"""
Tools Module - MCP Tool Implementations

Component, page, data source, export and cache tools for the page builder.
"""

from builder_server.tools import components
from builder_server.tools import pages
from builder_server.tools import datasources
from builder_server.tools import export
from builder_server.tools import cache

__all__ = [
    "components",
    "pages",
    "datasources",
    "export",
    "cache",
]
