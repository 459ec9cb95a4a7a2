"""Data layer application layer: local queries and cache services."""

from .queries import LocalFilter, QueryExecutor, QueryResult
from .services import DetailCache, EntityCache, EntityManager, SearchFieldResolver

__all__ = [
    "LocalFilter",
    "QueryExecutor",
    "QueryResult",
    "DetailCache",
    "EntityCache",
    "EntityManager",
    "SearchFieldResolver",
]
