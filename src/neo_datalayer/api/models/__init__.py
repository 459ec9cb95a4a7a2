"""Data layer API models."""

from .requests import ListParams
from .responses import CacheInfo, DetailCacheInfo, ListResult

__all__ = [
    "ListParams",
    "ListResult",
    "CacheInfo",
    "DetailCacheInfo",
]
