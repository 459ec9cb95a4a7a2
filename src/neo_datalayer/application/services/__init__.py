"""Data layer application services."""

from .detail_cache import DetailCache
from .entity_cache import EntityCache
from .search_resolver import SearchFieldResolver
from .entity_manager import EntityManager

__all__ = [
    "DetailCache",
    "EntityCache",
    "SearchFieldResolver",
    "EntityManager",
]
