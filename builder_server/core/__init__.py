"""
Core Module - Component Tree and Template Engines

Pure, synchronous building blocks: registry/factory, copy-on-write tree
operations, drag/drop intent resolution, interpolation and rendering.
"""

from builder_server.core.registry import (
    COMPONENT_DEFINITIONS,
    ComponentDefinition,
    create_component,
    get_definition,
    is_container,
    list_definitions,
    new_id,
)
from builder_server.core.dragdrop import DragDropResolver, DragState, apply_intent
from builder_server.core.interpolation import (
    interpolate,
    interpolate_components,
    interpolate_tree,
    resolve_path,
)
from builder_server.core.templates import BLOCK_TEMPLATES, build_template

__all__ = [
    "COMPONENT_DEFINITIONS",
    "ComponentDefinition",
    "create_component",
    "get_definition",
    "is_container",
    "list_definitions",
    "new_id",
    "DragDropResolver",
    "DragState",
    "apply_intent",
    "interpolate",
    "interpolate_components",
    "interpolate_tree",
    "resolve_path",
    "BLOCK_TEMPLATES",
    "build_template",
]
