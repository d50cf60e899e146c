"""
Schemas Module - Pydantic Models

Data models for components, pages, data sources, drag descriptors and exports.
"""

from builder_server.schemas.component import CONTAINER_TYPES, ComponentType, ComponentNode, ComponentPatch
from builder_server.schemas.page import PageType, Page, Project, slugify
from builder_server.schemas.datasource import (
    DataSourceType,
    HttpConfig,
    DataSource,
    DataSourceRef,
)
from builder_server.schemas.drag import (
    PaletteSource,
    NodeSource,
    DragSource,
    CanvasTarget,
    ContainerTarget,
    RootSentinel,
    DropTarget,
)
from builder_server.schemas.export import ExportEnvelope, ExportedPage

__all__ = [
    "CONTAINER_TYPES",
    "ComponentType",
    "ComponentNode",
    "ComponentPatch",
    "PageType",
    "Page",
    "Project",
    "slugify",
    "DataSourceType",
    "HttpConfig",
    "DataSource",
    "DataSourceRef",
    "PaletteSource",
    "NodeSource",
    "DragSource",
    "CanvasTarget",
    "ContainerTarget",
    "RootSentinel",
    "DropTarget",
    "ExportEnvelope",
    "ExportedPage",
]
