"""Data layer core: entities, value objects, exceptions and protocols."""

from .entities import CacheState, DetailCacheEntry, OperationStats
from .exceptions import (
    DataLayerError,
    EntityNotFoundError,
    InvalidQueryError,
    OperationNotSupportedError,
    StorageResponseError,
)
from .protocols import (
    DeferredRegistry,
    HookRegistry,
    Orchestrator,
    SignalBus,
    StorageAdapter,
    StorageCapabilities,
    StorageResolution,
)
from .value_objects import CacheTTL, ParentConfig, SearchFieldSpec

__all__ = [
    "CacheState",
    "DetailCacheEntry",
    "OperationStats",
    "DataLayerError",
    "EntityNotFoundError",
    "InvalidQueryError",
    "OperationNotSupportedError",
    "StorageResponseError",
    "DeferredRegistry",
    "HookRegistry",
    "Orchestrator",
    "SignalBus",
    "StorageAdapter",
    "StorageCapabilities",
    "StorageResolution",
    "CacheTTL",
    "ParentConfig",
    "SearchFieldSpec",
]
