"""
Unit Tests for HTML Rendering and JSON Export
"""

import json

import pytest

from builder_server.core.interpolation import interpolate_components
from builder_server.core.renderer import (
    css_property,
    export_page_json,
    parse_exported_json,
    render_component,
    render_components,
    render_page_html,
    style_attribute,
)
from builder_server.errors import ExportParseError
from builder_server.schemas.component import ComponentNode, ComponentType
from builder_server.schemas.datasource import DataSource, DataSourceType
from builder_server.schemas.page import Page


class TestStyles:
    """Tests for inline style projection."""

    def test_css_property(self):
        """Test camelCase to kebab-case."""
        assert css_property("backgroundColor") == "background-color"
        assert css_property("padding") == "padding"
        assert css_property("borderTopLeftRadius") == "border-top-left-radius"

    def test_style_attribute(self):
        """Test declaration joining."""
        styles = {"backgroundColor": "#fff", "fontSize": "16px", "color": None}
        assert style_attribute(styles) == "background-color: #fff; font-size: 16px"


class TestRenderComponent:
    """Tests for render_component."""

    def test_heading_level(self):
        """Test heading tag from the level prop."""
        node = ComponentNode(
            id="h",
            type=ComponentType.HEADING,
            props={"content": "Hello", "level": 3},
            styles={"fontSize": "24px"},
        )
        assert render_component(node) == '<h3 style="font-size: 24px">Hello</h3>'

    def test_heading_level_clamped(self):
        """Test out-of-range levels."""
        node = ComponentNode(id="h", type=ComponentType.HEADING, props={"content": "x", "level": 9})
        assert render_component(node) == "<h6>x</h6>"

    def test_text_is_escaped(self):
        """Test that content cannot inject markup."""
        node = ComponentNode(id="p", type=ComponentType.PARAGRAPH, props={"content": "<b>hi</b> & bye"})
        assert render_component(node) == "<p>&lt;b&gt;hi&lt;/b&gt; &amp; bye</p>"

    def test_button_default_text(self):
        """Test the fallback label."""
        node = ComponentNode(id="b", type=ComponentType.BUTTON)
        assert render_component(node) == "<button>Button</button>"

    def test_image(self):
        """Test image attributes."""
        node = ComponentNode(id="i", type=ComponentType.IMAGE, props={"src": "/a.png", "alt": 'A "pic"'})
        assert render_component(node) == '<img src="/a.png" alt="A &quot;pic&quot;" />'

    def test_container_children(self):
        """Test nested rendering inside a div."""
        node = ComponentNode(
            id="c",
            type=ComponentType.CONTAINER,
            styles={"padding": "8px"},
            children=[
                ComponentNode(id="p", type=ComponentType.PARAGRAPH, props={"content": "a"}),
                ComponentNode(id="d", type=ComponentType.DIVIDER),
            ],
        )
        assert render_component(node) == '<div style="padding: 8px">\n  <p>a</p>\n  <hr />\n</div>'

    def test_select_options(self):
        """Test option rendering."""
        node = ComponentNode(
            id="s",
            type=ComponentType.SELECT,
            props={"name": "pick", "options": [{"label": "One", "value": "1"}]},
        )
        assert render_component(node) == '<select name="pick"><option value="1">One</option></select>'

    def test_checkbox_input_type(self):
        """Test form types mapped onto input elements."""
        node = ComponentNode(id="c", type=ComponentType.CHECKBOX, props={"name": "ok", "required": True})
        assert render_component(node) == '<input type="checkbox" name="ok" required />'

    def test_render_components_separator(self):
        """Test root list joining."""
        nodes = [
            ComponentNode(id="a", type=ComponentType.PARAGRAPH, props={"content": "a"}),
            ComponentNode(id="b", type=ComponentType.PARAGRAPH, props={"content": "b"}),
        ]
        assert render_components(nodes) == "<p>a</p>\n\n<p>b</p>"


class TestRenderPage:
    """Tests for render_page_html."""

    def test_document(self):
        """Test the document shell."""
        page = Page(
            id="p",
            name="Home",
            slug="home",
            components=[ComponentNode(id="h", type=ComponentType.HEADING, props={"content": "Hi"})],
        )
        document = render_page_html(page, "Acme")

        assert document.startswith("<!DOCTYPE html>")
        assert "<title>Home - Acme</title>" in document
        assert "<h1>Hi</h1>" in document


class TestJsonExport:
    """Tests for export_page_json / parse_exported_json."""

    @pytest.fixture
    def components(self):
        return [
            ComponentNode(id="c", type=ComponentType.CARD, children=[
                ComponentNode(id="p", type=ComponentType.PARAGRAPH, props={"content": "{{x.y}}"}),
            ]),
        ]

    def test_envelope_shape(self, components):
        """Test envelope keys and data-source references."""
        ds = DataSource(id="d1", name="x", type=DataSourceType.KEY_VALUE, key_value_data={"y": "1"})
        payload = json.loads(export_page_json(components, [ds]))

        assert payload["version"] == "1.0"
        assert "exportedAt" in payload
        assert payload["dataSources"] == [{"id": "d1", "name": "x", "type": "key-value"}]
        assert payload["components"][0]["children"][0]["props"] == {"content": "{{x.y}}"}
        assert "children" not in payload["components"][0]["children"][0]

    def test_parse_envelope(self, components):
        """Test loading an exported envelope."""
        exported = parse_exported_json(export_page_json(components, []))
        assert exported.components == components

    def test_parse_bare_list(self):
        """Test loading a plain component array."""
        exported = parse_exported_json('[{"id": "a", "type": "divider"}]')
        assert exported.components[0].type == ComponentType.DIVIDER

    def test_parse_normalizes_children(self):
        """Test that loaded containers get a list and leaves lose an empty one."""
        exported = parse_exported_json(
            '[{"id": "c", "type": "container"}, {"id": "h", "type": "heading", "children": []}]'
        )
        container, heading = exported.components

        assert container.children == []
        assert heading.children is None

    def test_parse_rejects_leaf_with_children(self):
        """Test a leaf that carries child nodes."""
        text = '[{"id": "h", "type": "heading", "children": [{"id": "p", "type": "paragraph"}]}]'
        with pytest.raises(ExportParseError):
            parse_exported_json(text)

    def test_parse_object_with_components(self):
        """Test loading any object holding components."""
        exported = parse_exported_json('{"components": [], "other": 1}')
        assert exported.components == []

    @pytest.mark.parametrize("text", [
        "not json",
        '{"foo": []}',
        '"string"',
        '{"components": {}}',
        '[{"id": "a", "type": "carousel"}]',
    ])
    def test_parse_rejects(self, text):
        """Test payloads that are not exports."""
        with pytest.raises(ExportParseError):
            parse_exported_json(text)

    def test_export_then_render_with_sources(self, components):
        """Test the full export, load, interpolate, render path."""
        text = export_page_json(components, [])
        loaded = parse_exported_json(text).components

        ds = DataSource(id="d1", name="x", type=DataSourceType.KEY_VALUE, key_value_data={"y": "filled"})
        assert "<p>filled</p>" in render_components(interpolate_components(loaded, [ds]))
        assert "<p>{{x.y}}</p>" in render_components(loaded)
