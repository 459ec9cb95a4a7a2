"""Response models."""

from .list_result import ListResult
from .cache_info import CacheInfo, DetailCacheInfo

__all__ = [
    "ListResult",
    "CacheInfo",
    "DetailCacheInfo",
]
