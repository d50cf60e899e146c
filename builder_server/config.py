"""
Page Builder MCP Server - Configuration

Pydantic Settings for all configuration via environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Literal
from pathlib import Path


class StorageSettings(BaseSettings):
    """Local key-value persistence configuration."""
    data_dir: Path = Field(Path("./builder_data"), alias="PAGE_BUILDER_DATA_DIR")

    model_config = {"env_prefix": "", "extra": "ignore"}


class HTTPSettings(BaseSettings):
    """Outbound HTTP configuration for http-api data sources."""
    timeout_ms: int = Field(30000, alias="DATASOURCE_HTTP_TIMEOUT_MS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class CacheSettings(BaseSettings):
    """Caching configuration."""
    enabled: bool = Field(True, alias="CACHE_ENABLED")
    ttl_datasource: int = Field(300, alias="CACHE_TTL_DATASOURCE_SECONDS")
    ttl_export: int = Field(900, alias="CACHE_TTL_EXPORT_SECONDS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class BuilderSettings(BaseSettings):
    """Builder session behaviour."""
    cross_parent_moves: bool = Field(False, alias="BUILDER_CROSS_PARENT_MOVES")
    seed_demo_project: bool = Field(True, alias="BUILDER_SEED_DEMO_PROJECT")
    project_name: str = Field("My Website", alias="BUILDER_PROJECT_NAME")

    model_config = {"env_prefix": "", "extra": "ignore"}


class MCPSettings(BaseSettings):
    """MCP server configuration."""
    transport: Literal["sse", "stdio"] = Field("stdio", alias="MCP_TRANSPORT")
    port: int = Field(8080, alias="MCP_PORT")
    host: str = Field("0.0.0.0", alias="MCP_HOST")

    model_config = {"env_prefix": "", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", alias="LOG_LEVEL"
    )
    format: Literal["json", "text"] = Field("json", alias="LOG_FORMAT")

    model_config = {"env_prefix": "", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""
    storage: StorageSettings = Field(default_factory=StorageSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {"env_prefix": "", "extra": "ignore"}


def get_settings() -> Settings:
    """Load settings from environment variables."""
    from dotenv import load_dotenv
    load_dotenv()
    return Settings()
