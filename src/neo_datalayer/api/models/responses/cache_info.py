"""Cache info response models.

ONLY cache introspection - structures the list and detail cache state of
one entity manager for debug panels.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Optional
from pydantic import BaseModel, Field


class DetailCacheInfo(BaseModel):
    """Detail cache state (asymmetric entities only)."""

    enabled: bool = Field(
        default=True,
        description="Detail cache is active"
    )

    ttl_ms: int = Field(
        ...,
        description="Entry TTL in milliseconds (-1 never expires)"
    )

    size: int = Field(
        default=0,
        ge=0,
        description="Number of cached records"
    )

    max_size: int = Field(
        ...,
        description="Capacity (0 or negative means unlimited)"
    )


class CacheInfo(BaseModel):
    """List cache state of an entity manager."""

    enabled: bool = Field(
        ...,
        description="Caching is applicable for this entity"
    )

    storage_supports_total: bool = Field(
        ...,
        description="Storage reports accurate totals"
    )

    threshold: int = Field(
        ...,
        description="Maximum item count that may be cached"
    )

    valid: bool = Field(
        ...,
        description="Cache holds the complete result set"
    )

    overflow: bool = Field(
        default=False,
        description="Cache holds fewer items than the reported total"
    )

    item_count: int = Field(
        default=0,
        ge=0,
        description="Number of cached records"
    )

    total: int = Field(
        default=0,
        ge=0,
        description="Total reported by the last load"
    )

    loaded_at: Optional[float] = Field(
        default=None,
        description="Load time in milliseconds"
    )

    ttl_ms: int = Field(
        ...,
        description="Effective TTL in milliseconds (-1 never expires, 0 disabled)"
    )

    expires_at: Optional[float] = Field(
        default=None,
        description="Expiry time in milliseconds, None if it never expires"
    )

    expired: bool = Field(
        default=False,
        description="TTL has elapsed since the last load"
    )

    asymmetric: bool = Field(
        default=False,
        description="Entity uses the detail cache for point lookups"
    )

    detail_cache: Optional[DetailCacheInfo] = Field(
        default=None,
        description="Detail cache state, None when not in use"
    )
