"""
Services - Data Source Service

Registry of named data sources with persistence and HTTP refresh.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

import httpx

from builder_server.config import get_settings
from builder_server.core.registry import new_id
from builder_server.schemas.datasource import DataSource, DataSourceType, HttpConfig
from builder_server.schemas.page import utc_now
from builder_server.services.cache_service import CacheService, get_cache_service
from builder_server.services.storage_service import StorageService

logger = logging.getLogger(__name__)

_FETCH_RESULT_FIELDS = {"cached_data", "last_fetched"}


class DataSourceService:
    """
    Holds the list of data sources templates resolve against.

    Every change swaps in a new list of new DataSource objects, so a reader
    holding the previous list keeps a consistent snapshot.
    """

    STORAGE_KEY = "builder-datasources"

    def __init__(
        self,
        settings=None,
        storage: Optional[StorageService] = None,
        cache: Optional[CacheService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage or StorageService(self.settings)
        self.cache = cache or CacheService(self.settings)
        self._transport = transport
        self._data_sources: List[DataSource] = []

    @property
    def data_sources(self) -> List[DataSource]:
        return self._data_sources

    def list_data_sources(self) -> List[DataSource]:
        return list(self._data_sources)

    def get_data_source(self, ds_id: str) -> Optional[DataSource]:
        for ds in self._data_sources:
            if ds.id == ds_id:
                return ds
        return None

    def find_by_name(self, name: str) -> Optional[DataSource]:
        """Case-insensitive lookup, the way templates match names."""
        lowered = name.lower()
        for ds in self._data_sources:
            if ds.name.lower() == lowered:
                return ds
        return None

    def add_data_source(
        self,
        name: str,
        type: Union[DataSourceType, str],
        json_data: Optional[str] = None,
        key_value_data: Optional[Dict[str, str]] = None,
        http_config: Optional[Union[HttpConfig, Dict[str, Any]]] = None,
    ) -> DataSource:
        """
        Register a new data source.

        Args:
            name: Name used as the first placeholder segment
            type: static-json, key-value or http-api
            json_data: Raw JSON text (static-json)
            key_value_data: String map (key-value)
            http_config: Request descriptor (http-api)

        Returns:
            The stored DataSource
        """
        now = utc_now()
        ds = DataSource.model_validate({
            "id": new_id(),
            "name": name,
            "type": type,
            "json_data": json_data,
            "key_value_data": key_value_data,
            "http_config": http_config,
            "created_at": now,
            "updated_at": now,
        })
        self._data_sources = self._data_sources + [ds]
        self.save_to_storage()
        logger.info(f"Added data source {ds.name} ({ds.type.value})")
        return ds

    def update_data_source(self, ds_id: str, **updates: Any) -> Optional[DataSource]:
        """Replace a data source with a merged copy; None when the id is unknown."""
        current = self.get_data_source(ds_id)
        if current is None:
            return None

        merged = current.model_dump()
        merged.update(updates)
        merged["id"] = current.id
        merged["updated_at"] = utc_now()
        updated = DataSource.model_validate(merged)

        self._data_sources = [
            updated if ds.id == ds_id else ds for ds in self._data_sources
        ]
        if set(updates) - _FETCH_RESULT_FIELDS:
            # The stored response no longer matches the source definition.
            self.cache.delete(f"datasource:{ds_id}")
        self.save_to_storage()
        return updated

    def delete_data_source(self, ds_id: str) -> bool:
        remaining = [ds for ds in self._data_sources if ds.id != ds_id]
        if len(remaining) == len(self._data_sources):
            return False
        self._data_sources = remaining
        self.cache.delete(f"datasource:{ds_id}")
        self.save_to_storage()
        return True

    def load_from_storage(self) -> None:
        stored = self.storage.load(self.STORAGE_KEY, default=[])
        loaded = []
        for item in stored or []:
            try:
                loaded.append(DataSource.model_validate(item))
            except ValueError as e:
                logger.error(f"Skipping unreadable stored data source: {e}")
        self._data_sources = loaded

    def save_to_storage(self) -> None:
        self.storage.save(
            self.STORAGE_KEY,
            [ds.model_dump(mode="json", by_alias=True) for ds in self._data_sources],
        )

    async def fetch_http_data(self, ds_id: str, force: bool = False) -> Optional[Any]:
        """
        Refresh an http-api data source and cache its JSON response.

        Args:
            ds_id: Data source ID
            force: Ignore a still-fresh cached response

        Returns:
            Decoded response, or None if the source is not an http-api
            source or the request failed
        """
        ds = self.get_data_source(ds_id)
        if ds is None or ds.type != DataSourceType.HTTP_API or ds.http_config is None:
            return None

        cache_key = f"datasource:{ds_id}"
        if not force:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        config = ds.http_config
        content = config.body if config.method != "GET" and config.body else None

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.http.timeout_ms / 1000,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    config.method,
                    config.url,
                    params=config.query_params or None,
                    headers=config.headers or None,
                    content=content,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch HTTP data for {ds.name}: {e}")
            return None

        self.update_data_source(ds_id, cached_data=data, last_fetched=utc_now())
        self.cache.set(cache_key, data)
        logger.info(f"Refreshed data source {ds.name} from {config.url}")
        return data


@lru_cache(maxsize=1)
def get_datasource_service() -> DataSourceService:
    """Process-wide data source registry used by the MCP tools."""
    service = DataSourceService(cache=get_cache_service())
    service.load_from_storage()
    return service
