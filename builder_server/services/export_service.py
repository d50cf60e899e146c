"""
Services - Export Service

HTML and JSON export of pages, and rendering of previously exported JSON.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Sequence

from builder_server.config import get_settings
from builder_server.core.interpolation import interpolate_components
from builder_server.core.renderer import (
    export_page_json,
    parse_exported_json,
    render_components,
    render_page_html,
)
from builder_server.schemas.component import ComponentNode
from builder_server.schemas.datasource import DataSource
from builder_server.schemas.page import Page
from builder_server.services.cache_service import CacheService, get_cache_service

logger = logging.getLogger(__name__)


def _revision(page: Page, project_name: str, data_sources: Sequence[DataSource]) -> str:
    """Changes whenever the page, the project title or any data source it may read changes."""
    parts = [project_name, page.updated_at.isoformat()]
    parts.extend(f"{ds.id}@{ds.updated_at.isoformat()}" for ds in data_sources)
    return "|".join(parts)


class ExportService:
    """Renders pages to downloadable HTML/JSON, with revision-aware caching."""

    def __init__(self, settings=None, cache: Optional[CacheService] = None):
        self.settings = settings or get_settings()
        self.cache = cache or CacheService(self.settings)

    def export_html(
        self,
        page: Page,
        project_name: str,
        data_sources: Sequence[DataSource] = (),
        interpolate: bool = False,
    ) -> str:
        """
        Full HTML document for a page.

        Args:
            page: Page to export
            project_name: Used in the document title
            data_sources: Sources for placeholder resolution
            interpolate: Resolve ``{{...}}`` placeholders before rendering

        Returns:
            HTML document
        """
        sources = list(data_sources) if interpolate else []
        cache_key = f"export:html:{page.id}:{interpolate}"
        revision = _revision(page, project_name, sources)

        cached = self.cache.get_versioned(cache_key, revision)
        if cached:
            return cached

        components = page.components
        if interpolate:
            components = interpolate_components(components, sources)

        document = render_page_html(page, project_name, components)
        self.cache.set_versioned(cache_key, document, revision)
        logger.info(f"Exported page {page.slug} as HTML ({len(document)} chars)")
        return document

    def export_json(self, page: Page, data_sources: Sequence[DataSource] = ()) -> str:
        """Export envelope for a page's components."""
        return export_page_json(page.components, data_sources)

    def load_components(
        self,
        text: str,
        data_sources: Sequence[DataSource] = (),
        interpolate: bool = True,
    ) -> List[ComponentNode]:
        """
        Parse exported JSON and (optionally) resolve placeholders.

        Raises:
            ExportParseError: the payload is not a recognised export
        """
        exported = parse_exported_json(text)
        if not interpolate:
            return exported.components
        return interpolate_components(exported.components, data_sources)

    def render_exported_html(self, text: str, data_sources: Sequence[DataSource] = ()) -> str:
        """HTML fragment for exported JSON, with placeholders resolved."""
        return render_components(self.load_components(text, data_sources))


@lru_cache(maxsize=1)
def get_export_service() -> ExportService:
    """Shared exporter, so cached renders survive between tool calls."""
    return ExportService(cache=get_cache_service())
