"""
Core - Component Registry

Static definitions for every component type and the factory that builds
new nodes from them.
"""

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from builder_server.errors import UnknownComponentTypeError
from builder_server.schemas.component import ComponentNode, ComponentType

IdFactory = Callable[[], str]


def new_id() -> str:
    """Globally unique node/page/data-source id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ComponentDefinition:
    """Palette entry for one component type."""
    type: ComponentType
    label: str
    category: str  # "text" | "media" | "form" | "layout" | "structural" | "link"
    default_props: Dict[str, Any] = field(default_factory=dict)
    default_styles: Dict[str, Any] = field(default_factory=dict)
    is_container: bool = False


_DEFINITIONS: List[ComponentDefinition] = [
    # Layout
    ComponentDefinition(
        type=ComponentType.ROW,
        label="Row",
        category="layout",
        default_styles={
            "padding": "16px",
            "gap": "16px",
            "flexDirection": "row",
            "justifyContent": "start",
            "alignItems": "stretch",
        },
        is_container=True,
    ),
    ComponentDefinition(
        type=ComponentType.COLUMN,
        label="Column",
        category="layout",
        default_styles={
            "padding": "16px",
            "width": "50%",
            "columnSpan": 1,
            "backgroundColor": "#252538",
            "borderRadius": "8px",
        },
        is_container=True,
    ),
    ComponentDefinition(
        type=ComponentType.CONTAINER,
        label="Container",
        category="layout",
        default_styles={
            "padding": "24px",
            "backgroundColor": "#1a1a2e",
            "borderRadius": "8px",
        },
        is_container=True,
    ),
    ComponentDefinition(
        type=ComponentType.CARD,
        label="Card",
        category="layout",
        default_styles={
            "padding": "24px",
            "backgroundColor": "#252538",
            "borderRadius": "12px",
        },
        is_container=True,
    ),
    ComponentDefinition(
        type=ComponentType.GRID,
        label="Grid",
        category="layout",
        default_styles={"gap": "16px", "columns": 2},
        is_container=True,
    ),
    ComponentDefinition(
        type=ComponentType.HERO,
        label="Hero Section",
        category="layout",
        default_props={"content": "Hero Section"},
        default_styles={
            "padding": "80px 24px",
            "backgroundColor": "#1a1a2e",
            "textAlign": "center",
        },
        is_container=True,
    ),
    # Text
    ComponentDefinition(
        type=ComponentType.HEADING,
        label="Heading",
        category="text",
        default_props={"content": "Heading Text", "level": 1},
        default_styles={
            "fontSize": "32px",
            "fontWeight": "700",
            "margin": "0 0 16px 0",
        },
    ),
    ComponentDefinition(
        type=ComponentType.PARAGRAPH,
        label="Paragraph",
        category="text",
        default_props={
            "content": (
                "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do "
                "eiusmod tempor incididunt ut labore et dolore magna aliqua."
            ),
        },
        default_styles={"fontSize": "16px", "margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.BUTTON,
        label="Button",
        category="text",
        default_props={"content": "Click Me", "variant": "primary"},
        default_styles={"padding": "12px 24px", "borderRadius": "8px"},
    ),
    # Media
    ComponentDefinition(
        type=ComponentType.IMAGE,
        label="Image",
        category="media",
        default_props={
            "src": "https://images.unsplash.com/photo-1618005182384-a83a8bd57fbe?w=800&h=400&fit=crop",
            "alt": "Placeholder image",
        },
        default_styles={"width": "100%", "borderRadius": "8px"},
    ),
    ComponentDefinition(
        type=ComponentType.VIDEO,
        label="Video",
        category="media",
        default_props={
            "src": "",
            "poster": "",
            "controls": True,
            "autoplay": False,
            "loop": False,
            "muted": False,
        },
        default_styles={"width": "100%", "borderRadius": "8px"},
    ),
    ComponentDefinition(
        type=ComponentType.AUDIO,
        label="Audio",
        category="media",
        default_props={"src": "", "controls": True, "autoplay": False, "loop": False},
        default_styles={"width": "100%"},
    ),
    ComponentDefinition(
        type=ComponentType.WEBCAM,
        label="Webcam",
        category="media",
        default_props={"autoplay": True, "muted": True},
        default_styles={"width": "100%", "height": "240px", "borderRadius": "8px"},
    ),
    # Form
    ComponentDefinition(
        type=ComponentType.INPUT,
        label="Input",
        category="form",
        default_props={
            "label": "Label",
            "name": "input",
            "placeholder": "Enter text...",
            "inputType": "text",
            "required": False,
            "disabled": False,
        },
        default_styles={"width": "100%", "margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.TEXTAREA,
        label="Textarea",
        category="form",
        default_props={
            "label": "Message",
            "name": "message",
            "placeholder": "Enter text...",
            "required": False,
            "disabled": False,
        },
        default_styles={"width": "100%", "height": "120px", "margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.SELECT,
        label="Select",
        category="form",
        default_props={
            "label": "Choose an option",
            "name": "select",
            "placeholder": "Select...",
            "options": [
                {"label": "Option 1", "value": "option-1"},
                {"label": "Option 2", "value": "option-2"},
            ],
            "multiSelect": False,
            "filterable": False,
            "required": False,
            "disabled": False,
        },
        default_styles={"width": "100%", "margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.CHECKBOX,
        label="Checkbox",
        category="form",
        default_props={
            "label": "Check me",
            "name": "checkbox",
            "required": False,
            "disabled": False,
        },
        default_styles={"margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.RADIO,
        label="Radio Group",
        category="form",
        default_props={
            "label": "Pick one",
            "name": "radio",
            "options": [
                {"label": "Option 1", "value": "option-1"},
                {"label": "Option 2", "value": "option-2"},
            ],
            "required": False,
            "disabled": False,
        },
        default_styles={"margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.DATE,
        label="Date",
        category="form",
        default_props={"label": "Date", "name": "date", "required": False, "disabled": False},
        default_styles={"width": "100%", "margin": "0 0 16px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.DATETIME,
        label="Date & Time",
        category="form",
        default_props={
            "label": "Date & Time",
            "name": "datetime",
            "required": False,
            "disabled": False,
        },
        default_styles={"width": "100%", "margin": "0 0 16px 0"},
    ),
    # Structural
    ComponentDefinition(
        type=ComponentType.DIVIDER,
        label="Divider",
        category="structural",
        default_styles={"margin": "24px 0"},
    ),
    ComponentDefinition(
        type=ComponentType.SPACER,
        label="Spacer",
        category="structural",
        default_styles={"height": "48px"},
    ),
    # Link
    ComponentDefinition(
        type=ComponentType.ANCHOR,
        label="Link",
        category="link",
        default_props={"content": "Link text", "href": "#", "target": "_self"},
        default_styles={"textColor": "#6366f1"},
    ),
]

COMPONENT_DEFINITIONS: Dict[ComponentType, ComponentDefinition] = {
    d.type: d for d in _DEFINITIONS
}


def _coerce_type(component_type: Union[ComponentType, str]) -> ComponentType:
    try:
        return ComponentType(component_type)
    except ValueError:
        raise UnknownComponentTypeError(component_type) from None


def get_definition(component_type: Union[ComponentType, str]) -> ComponentDefinition:
    """
    Look up a registered definition.

    Raises:
        UnknownComponentTypeError: type is not part of the registry
    """
    ctype = _coerce_type(component_type)
    definition = COMPONENT_DEFINITIONS.get(ctype)
    if definition is None:
        raise UnknownComponentTypeError(component_type)
    return definition


def list_definitions(category: Optional[str] = None) -> List[ComponentDefinition]:
    """Palette entries in registry order, optionally filtered by category."""
    return [d for d in _DEFINITIONS if category is None or d.category == category]


def is_container(component_type: Union[ComponentType, str]) -> bool:
    """Whether nodes of this type hold children. Unknown types are not containers."""
    try:
        return get_definition(component_type).is_container
    except UnknownComponentTypeError:
        return False


def create_component(
    component_type: Union[ComponentType, str],
    id_factory: IdFactory = new_id,
) -> ComponentNode:
    """
    Build a new node with registry defaults.

    Containers start with an empty child list, except ``row`` which is
    created with two fresh ``column`` children.

    Args:
        component_type: Registered component type
        id_factory: Unique id generator

    Returns:
        New ComponentNode

    Raises:
        UnknownComponentTypeError: type is not registered
    """
    definition = get_definition(component_type)

    children = None
    if definition.type == ComponentType.ROW:
        children = [
            create_component(ComponentType.COLUMN, id_factory),
            create_component(ComponentType.COLUMN, id_factory),
        ]
    elif definition.is_container:
        children = []

    return ComponentNode(
        id=id_factory(),
        type=definition.type,
        props=copy.deepcopy(definition.default_props),
        styles=copy.deepcopy(definition.default_styles),
        children=children,
    )
