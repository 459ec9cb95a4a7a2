"""Data layer value objects."""

from .cache_ttl import CacheTTL
from .parent_config import ParentConfig
from .search_field_spec import SearchFieldSpec

__all__ = [
    "CacheTTL",
    "ParentConfig",
    "SearchFieldSpec",
]
