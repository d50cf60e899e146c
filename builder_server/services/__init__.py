"""
Services Module - Business Logic Layer

Provides the builder session, data source registry, export, caching and
storage services.
"""

from builder_server.services.builder_service import BuilderService, get_builder_service
from builder_server.services.datasource_service import DataSourceService, get_datasource_service
from builder_server.services.export_service import ExportService, get_export_service
from builder_server.services.cache_service import CacheService, get_cache_service
from builder_server.services.storage_service import StorageService

__all__ = [
    "BuilderService",
    "get_builder_service",
    "DataSourceService",
    "get_datasource_service",
    "ExportService",
    "get_export_service",
    "CacheService",
    "get_cache_service",
    "StorageService",
]
