"""
Schemas - Data Source Models

Pydantic models for named template data providers.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from builder_server.schemas.page import utc_now


class DataSourceType(str, Enum):
    STATIC_JSON = "static-json"
    KEY_VALUE = "key-value"
    HTTP_API = "http-api"


class HttpConfig(BaseModel):
    """Request descriptor for http-api sources."""
    url: str
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"] = "GET"
    headers: Dict[str, str] = {}
    body: Optional[str] = None
    query_params: Optional[Dict[str, str]] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataSource(BaseModel):
    """
    A named data provider referenced by ``{{name.path}}`` placeholders.

    Only the payload field matching ``type`` is consulted: ``json_data`` for
    static-json, ``key_value_data`` for key-value, ``cached_data`` for
    http-api (filled by a refresh).
    """
    id: str
    name: str
    type: DataSourceType
    json_data: Optional[str] = None
    key_value_data: Optional[Dict[str, str]] = None
    http_config: Optional[HttpConfig] = None
    cached_data: Optional[Any] = None
    last_fetched: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataSourceRef(BaseModel):
    """Lightweight reference written into export envelopes."""
    id: str
    name: str
    type: str
