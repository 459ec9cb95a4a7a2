"""
Configuration management for the entity data layer.

Process-wide defaults for entity managers. Every value can be overridden
per entity manager; these only apply when the entity does not say otherwise.
"""
from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class DataLayerSettings(BaseSettings):
    """Data layer defaults, read from ``NEO_DATALAYER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_DATALAYER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # List cache
    default_threshold: int = Field(default=100)
    default_entity_cache_ttl_ms: Optional[int] = Field(default=None, ge=-1)  # None = no process default

    # Detail cache (asymmetric entities)
    default_detail_cache_ttl_ms: int = Field(default=300_000, ge=-1)  # 5 minutes
    default_detail_cache_max_size: int = Field(default=100)

    # Local query execution
    default_page_size: int = Field(default=20, ge=1)

    # Diagnostics
    log_cache_operations: bool = Field(default=False)


@lru_cache()
def get_settings() -> DataLayerSettings:
    """Get cached data layer settings."""
    return DataLayerSettings()
