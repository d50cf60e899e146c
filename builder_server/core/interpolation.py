"""
Core - Interpolation

``{{source.path.to.value}}`` substitution over named data sources.

Absence is never an error here: a missing source, path or value leaves the
placeholder text in place so it stays visible in previews.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from builder_server.schemas.component import ComponentNode
from builder_server.schemas.datasource import DataSource, DataSourceType

logger = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
_INDEX_PATTERN = re.compile(r"^\d+$")


def resolve_path(data: Any, path: str) -> Any:
    """
    Walk ``data`` along a dotted path.

    Segments made of digits index into lists; anything else is a dict key.
    Returns None as soon as a segment misses.

    Example:
        >>> resolve_path({"items": [{"label": "A"}]}, "items.0.label")
        'A'
    """
    if not isinstance(data, (dict, list)):
        return None

    current = data
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, list):
            if not _INDEX_PATTERN.match(part):
                return None
            index = int(part)
            if index >= len(current):
                return None
            current = current[index]
        elif isinstance(current, dict):
            current = current.get(part)
        else:
            return None
    return current


def resolve_data_source_data(data_source: DataSource) -> Any:
    """Backing payload of a data source according to its type."""
    if data_source.type == DataSourceType.STATIC_JSON:
        if not data_source.json_data:
            return None
        try:
            return json.loads(data_source.json_data)
        except ValueError:
            logger.debug(f"Data source {data_source.name} holds invalid JSON")
            return None
    if data_source.type == DataSourceType.KEY_VALUE:
        return data_source.key_value_data or {}
    if data_source.type == DataSourceType.HTTP_API:
        return data_source.cached_data
    return None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _find_source(name: str, data_sources: Sequence[DataSource]) -> Optional[DataSource]:
    lowered = name.lower()
    for source in data_sources:
        if source.name.lower() == lowered:
            return source
    return None


def interpolate(template: Optional[str], data_sources: Sequence[DataSource]) -> str:
    """
    Replace every ``{{name.path}}`` in ``template``.

    Args:
        template: Text possibly holding placeholders
        data_sources: Available sources, matched by name case-insensitively

    Returns:
        The interpolated text; unresolved placeholders are kept verbatim
    """
    if not template or not isinstance(template, str):
        return template or ""

    def substitute(match: "re.Match[str]") -> str:
        source_name, _, value_path = match.group(1).strip().partition(".")

        source = _find_source(source_name, data_sources)
        if source is None:
            return match.group(0)

        data = resolve_data_source_data(source)
        if data is None:
            return match.group(0)

        if not value_path:
            return _stringify(data)

        value = resolve_path(data, value_path)
        if value is None:
            return match.group(0)
        return _stringify(value)

    return VARIABLE_PATTERN.sub(substitute, template)


def _interpolate_props(props: Dict[str, Any], data_sources: Sequence[DataSource]) -> Dict[str, Any]:
    result = {}
    for key, value in props.items():
        if isinstance(value, str):
            result[key] = interpolate(value, data_sources)
        elif key == "options" and isinstance(value, list):
            result[key] = [
                {
                    **option,
                    "label": interpolate(option.get("label"), data_sources),
                    "value": interpolate(option.get("value"), data_sources),
                }
                if isinstance(option, dict) else option
                for option in value
            ]
        else:
            result[key] = value
    return result


def interpolate_tree(node: ComponentNode, data_sources: Sequence[DataSource]) -> ComponentNode:
    """
    Interpolated copy of a node and its subtree.

    String props and option labels/values are interpolated; styles are
    carried over untouched. The input node is not modified.
    """
    children = None
    if node.children is not None:
        children = [interpolate_tree(child, data_sources) for child in node.children]
    return node.model_copy(update={
        "props": _interpolate_props(node.props, data_sources),
        "children": children,
    })


def interpolate_components(
    components: Sequence[ComponentNode],
    data_sources: Sequence[DataSource],
) -> List[ComponentNode]:
    return [interpolate_tree(node, data_sources) for node in components]


def has_variables(text: Optional[str]) -> bool:
    if not text:
        return False
    return VARIABLE_PATTERN.search(text) is not None


def extract_variables(text: Optional[str]) -> List[str]:
    """Trimmed placeholder bodies, e.g. ``["user.name"]`` for ``"Hi {{ user.name }}"``."""
    if not text:
        return []
    return [match.strip() for match in VARIABLE_PATTERN.findall(text)]


def find_unresolved(template: Optional[str], data_sources: Sequence[DataSource]) -> List[str]:
    """Placeholders of ``template`` that ``interpolate`` would leave in place."""
    if not template:
        return []
    return [
        match.group(1).strip()
        for match in VARIABLE_PATTERN.finditer(template)
        if interpolate(match.group(0), data_sources) == match.group(0)
    ]
