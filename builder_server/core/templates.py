"""
Core - Block Templates

Ready-made subtrees that can be dropped onto a page in one step.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from builder_server.core.registry import IdFactory, create_component, new_id
from builder_server.errors import UnknownTemplateError
from builder_server.schemas.component import ComponentNode, ComponentType


@dataclass(frozen=True)
class BlockTemplate:
    id: str
    title: str
    description: str
    category: str  # "blocks" | "forms" | "sections"
    build: Callable[[IdFactory], ComponentNode]


def _with_props(node: ComponentNode, **props) -> ComponentNode:
    return node.model_copy(update={"props": {**node.props, **props}})


def _with_children(node: ComponentNode, children: List[ComponentNode]) -> ComponentNode:
    return node.model_copy(update={"children": children})


def _build_hero(id_factory: IdFactory) -> ComponentNode:
    hero = create_component(ComponentType.HERO, id_factory)
    heading = _with_props(
        create_component(ComponentType.HEADING, id_factory),
        content="Build pages with variables",
        level=1,
    )
    paragraph = _with_props(
        create_component(ComponentType.PARAGRAPH, id_factory),
        content="Type {{ to insert data source variables. Switch to Preview to see interpolation.",
    )
    button = _with_props(create_component(ComponentType.BUTTON, id_factory), content="Get Started")
    return _with_children(hero, [heading, paragraph, button])


def _build_contact_form(id_factory: IdFactory) -> ComponentNode:
    card = create_component(ComponentType.CARD, id_factory)
    heading = _with_props(
        create_component(ComponentType.HEADING, id_factory),
        content="Contact us",
        level=2,
    )
    name = _with_props(
        create_component(ComponentType.INPUT, id_factory),
        label="Name", name="name", placeholder="Your name",
    )
    email = _with_props(
        create_component(ComponentType.INPUT, id_factory),
        label="Email", name="email", inputType="email", placeholder="you@company.com",
    )
    message = _with_props(
        create_component(ComponentType.TEXTAREA, id_factory),
        label="Message", name="message", placeholder="How can we help?",
    )
    submit = _with_props(create_component(ComponentType.BUTTON, id_factory), content="Send message")
    return _with_children(card, [heading, name, email, message, submit])


def _build_two_columns(id_factory: IdFactory) -> ComponentNode:
    row = create_component(ComponentType.ROW, id_factory)
    columns = []
    for side in ("Left", "Right"):
        column = row.children[len(columns)]
        columns.append(_with_children(column, [
            _with_props(create_component(ComponentType.HEADING, id_factory), content=f"{side} title"),
            _with_props(create_component(ComponentType.PARAGRAPH, id_factory), content=f"{side} content"),
        ]))
    return _with_children(row, columns)


BLOCK_TEMPLATES: Dict[str, BlockTemplate] = {
    t.id: t for t in [
        BlockTemplate(
            id="hero-simple",
            title="Hero + CTA",
            description="Hero section with heading, copy and button",
            category="sections",
            build=_build_hero,
        ),
        BlockTemplate(
            id="contact-form",
            title="Contact Form",
            description="Heading + inputs + message + submit",
            category="forms",
            build=_build_contact_form,
        ),
        BlockTemplate(
            id="two-col-feature",
            title="2-Column Block",
            description="Row with 2 columns and text",
            category="blocks",
            build=_build_two_columns,
        ),
    ]
}


def build_template(template_id: str, id_factory: IdFactory = new_id) -> ComponentNode:
    """
    Fresh subtree for a block template.

    Raises:
        UnknownTemplateError: no template with that id
    """
    template = BLOCK_TEMPLATES.get(template_id)
    if template is None:
        raise UnknownTemplateError(template_id)
    return template.build(id_factory)
