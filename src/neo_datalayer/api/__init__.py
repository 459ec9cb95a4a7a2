"""Data layer API surface (pydantic models)."""

from .models import CacheInfo, DetailCacheInfo, ListParams, ListResult

__all__ = [
    "ListParams",
    "ListResult",
    "CacheInfo",
    "DetailCacheInfo",
]
