"""
Schemas - Page Models

Pydantic models for projects and their pages.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from builder_server.schemas.component import ComponentNode


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def slugify(name: str) -> str:
    """URL-safe slug: lowercase, runs of other characters become '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "page"


class PageType(str, Enum):
    """Page category."""
    LANDING = "landing"
    ABOUT = "about"
    NEWS = "news"
    EVENTS = "events"
    CONTACT = "contact"
    CUSTOM = "custom"


class Page(BaseModel):
    """A page and its root-level component list."""
    id: str
    name: str
    slug: str
    type: PageType = PageType.CUSTOM
    components: List[ComponentNode] = []
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Project(BaseModel):
    """A site: an ordered list of pages."""
    id: str
    name: str
    pages: List[Page] = []
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def get_page(self, page_id: str):
        for page in self.pages:
            if page.id == page_id:
                return page
        return None
