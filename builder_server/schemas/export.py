"""
Schemas - Export Models

Envelope written by the JSON export and the result of loading one back.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from builder_server.schemas.component import ComponentNode
from builder_server.schemas.datasource import DataSourceRef
from builder_server.schemas.page import utc_now

EXPORT_VERSION = "1.0"


class ExportEnvelope(BaseModel):
    """Portable page export."""
    version: str = EXPORT_VERSION
    exported_at: datetime = Field(default_factory=utc_now)
    data_sources: List[DataSourceRef] = []
    components: List[ComponentNode] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportedPage(BaseModel):
    """Components (and data-source references, when present) read from an export."""
    components: List[ComponentNode]
    data_sources: List[DataSourceRef] = []
