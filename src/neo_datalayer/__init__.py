"""Neo-DataLayer - adaptive entity cache and local query execution.

Entity managers decide per call whether list/get/query are answered from
an in-memory snapshot or from the storage adapter, keep that snapshot
consistent across mutations and invalidation signals, and run a
MongoDB-like filter/sort/paginate engine over cached data.

Logging is not configured on import; call ``setup_logging()`` at startup
or configure the ``neo_datalayer`` logger yourself.
"""

from .__version__ import __version__

# Configuration
from .config import DataLayerSettings, get_settings, setup_logging

# Core
from .core.exceptions import (
    DataLayerError,
    EntityNotFoundError,
    InvalidQueryError,
    OperationNotSupportedError,
    StorageResponseError,
)
from .core.entities import OperationStats
from .core.protocols import (
    DeferredRegistry,
    HookRegistry,
    Orchestrator,
    SignalBus,
    StorageAdapter,
    StorageCapabilities,
    StorageResolution,
)
from .core.value_objects import CacheTTL, ParentConfig

# Models
from .api.models import CacheInfo, DetailCacheInfo, ListParams, ListResult

# Services
from .application.queries import LocalFilter, QueryExecutor
from .application.services import EntityManager

__all__ = [
    # Configuration
    "DataLayerSettings",
    "get_settings",
    "setup_logging",

    # Exceptions
    "DataLayerError",
    "EntityNotFoundError",
    "InvalidQueryError",
    "OperationNotSupportedError",
    "StorageResponseError",

    # Core
    "OperationStats",
    "DeferredRegistry",
    "HookRegistry",
    "Orchestrator",
    "SignalBus",
    "StorageAdapter",
    "StorageCapabilities",
    "StorageResolution",
    "CacheTTL",
    "ParentConfig",

    # Models
    "ListParams",
    "ListResult",
    "CacheInfo",
    "DetailCacheInfo",

    # Services
    "EntityManager",
    "QueryExecutor",
    "LocalFilter",

    # Version
    "__version__",
]
