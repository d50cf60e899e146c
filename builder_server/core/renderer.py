"""
Core - Renderer

Projects a component tree to HTML and to/from the portable JSON export.
"""

import html
import json
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from builder_server.errors import ExportParseError
from builder_server.schemas.component import ComponentNode, ComponentType
from builder_server.schemas.datasource import DataSource, DataSourceRef
from builder_server.schemas.export import ExportEnvelope, ExportedPage
from builder_server.schemas.page import Page

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")

_INPUT_TYPES = {
    ComponentType.CHECKBOX: "checkbox",
    ComponentType.RADIO: "radio",
    ComponentType.DATE: "date",
    ComponentType.DATETIME: "datetime-local",
}

_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{ font-family: system-ui, -apple-system, sans-serif; }}
    img {{ max-width: 100%; height: auto; }}
    button {{ cursor: pointer; border: none; }}
  </style>
</head>
<body>
{body}
</body>
</html>"""


def css_property(key: str) -> str:
    """``backgroundColor`` -> ``background-color``."""
    return _CAMEL_BOUNDARY.sub(r"-\1", key).lower()


def _css_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def style_attribute(styles: Dict[str, Any]) -> str:
    """Inline CSS declarations joined by ``; ``."""
    return "; ".join(
        f"{css_property(key)}: {_css_value(value)}"
        for key, value in styles.items()
        if value is not None
    )


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        value = default
    return html.escape(str(value), quote=False)


def _attrs(**attributes: Any) -> str:
    parts = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        name = name.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def _wrap(tag: str, attrs: str, children: List[ComponentNode]) -> str:
    inner = "\n  ".join(render_component(child) for child in children)
    return f"<{tag}{attrs}>\n  {inner}\n</{tag}>"


def render_component(node: ComponentNode) -> str:
    """HTML for one node and its subtree."""
    props = node.props
    styles = style_attribute(node.styles)
    style = _attrs(style=styles or None)
    ctype = node.type

    if ctype == ComponentType.HEADING:
        level = props.get("level") or 1
        try:
            level = min(max(int(level), 1), 6)
        except (TypeError, ValueError):
            level = 1
        return f"<h{level}{style}>{_text(props.get('content'))}</h{level}>"

    if ctype == ComponentType.PARAGRAPH:
        return f"<p{style}>{_text(props.get('content'))}</p>"

    if ctype == ComponentType.BUTTON:
        return f"<button{style}>{_text(props.get('content'), 'Button')}</button>"

    if ctype == ComponentType.IMAGE:
        attrs = _attrs(src=props.get("src", ""), alt=props.get("alt", ""))
        return f"<img{attrs}{style} />"

    if ctype == ComponentType.DIVIDER:
        return f"<hr{style} />"

    if ctype == ComponentType.ANCHOR:
        attrs = _attrs(href=props.get("href") or "#", target=props.get("target") or "_self")
        return f"<a{attrs}{style}>{_text(props.get('content'))}</a>"

    if ctype in (ComponentType.VIDEO, ComponentType.AUDIO):
        tag = ctype.value
        attrs = _attrs(
            src=props.get("src") or None,
            poster=(props.get("poster") or None) if ctype == ComponentType.VIDEO else None,
            controls=bool(props.get("controls")),
            autoplay=bool(props.get("autoplay")),
            loop=bool(props.get("loop")),
            muted=bool(props.get("muted")),
        )
        return f"<{tag}{attrs}{style}></{tag}>"

    if ctype == ComponentType.INPUT or ctype in _INPUT_TYPES:
        input_type = _INPUT_TYPES.get(ctype) or props.get("inputType") or "text"
        attrs = _attrs(
            type=input_type,
            name=props.get("name"),
            placeholder=props.get("placeholder"),
            required=bool(props.get("required")),
            disabled=bool(props.get("disabled")),
        )
        return f"<input{attrs}{style} />"

    if ctype == ComponentType.TEXTAREA:
        attrs = _attrs(
            name=props.get("name"),
            placeholder=props.get("placeholder"),
            required=bool(props.get("required")),
            disabled=bool(props.get("disabled")),
        )
        return f"<textarea{attrs}{style}></textarea>"

    if ctype == ComponentType.SELECT:
        attrs = _attrs(
            name=props.get("name"),
            multiple=bool(props.get("multiSelect")),
            required=bool(props.get("required")),
            disabled=bool(props.get("disabled")),
        )
        options = "".join(
            f"<option{_attrs(value=opt.get('value', ''))}>{_text(opt.get('label'))}</option>"
            for opt in props.get("options") or []
            if isinstance(opt, dict)
        )
        return f"<select{attrs}{style}>{options}</select>"

    if node.children is not None:
        return _wrap("div", style, node.children)

    # Spacer, webcam placeholder and anything without a dedicated element.
    return f"<div{style}>{_text(props.get('content'))}</div>"


def render_components(components: Sequence[ComponentNode]) -> str:
    return "\n\n".join(render_component(node) for node in components)


def render_page_html(page: Page, project_name: str, components: Optional[Sequence[ComponentNode]] = None) -> str:
    """
    Standalone HTML document for a page.

    Args:
        page: Page to render
        project_name: Used in the document title
        components: Override for the page's components (e.g. interpolated ones)

    Returns:
        Complete HTML document
    """
    body = render_components(page.components if components is None else components)
    title = html.escape(f"{page.name} - {project_name}", quote=False)
    return _DOCUMENT.format(title=title, body=body)


def export_page_json(
    components: Sequence[ComponentNode],
    data_sources: Sequence[DataSource],
) -> str:
    """Serialize components with data-source references into the export envelope."""
    envelope = ExportEnvelope(
        data_sources=[
            DataSourceRef(id=ds.id, name=ds.name, type=ds.type.value)
            for ds in data_sources
        ],
        components=list(components),
    )
    payload = envelope.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def parse_exported_json(text: str) -> ExportedPage:
    """
    Load components from exported JSON.

    Accepts the export envelope, a bare list of components, or any object
    holding a ``components`` key.

    Raises:
        ExportParseError: invalid JSON, an unexpected shape, or components
            that do not validate
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ExportParseError(f"Failed to parse JSON: {e}") from e

    if isinstance(parsed, list):
        raw_components, raw_sources = parsed, []
    elif isinstance(parsed, dict) and "components" in parsed:
        raw_components = parsed["components"]
        raw_sources = parsed.get("dataSources") or []
    else:
        raise ExportParseError(
            "Invalid JSON format. Expected an array of components or exported page JSON."
        )

    if not isinstance(raw_components, list):
        raise ExportParseError("Invalid JSON format. 'components' must be an array.")

    try:
        return ExportedPage.model_validate({
            "components": raw_components,
            "data_sources": raw_sources if isinstance(raw_sources, list) else [],
        })
    except ValidationError as e:
        raise ExportParseError(f"Invalid component data: {e.error_count()} error(s): {e}") from e
