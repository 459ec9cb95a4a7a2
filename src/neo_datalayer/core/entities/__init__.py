"""Data layer domain entities."""

from .cache_state import CacheState
from .detail_cache_entry import DetailCacheEntry
from .operation_stats import OperationStats

__all__ = [
    "CacheState",
    "DetailCacheEntry",
    "OperationStats",
]
