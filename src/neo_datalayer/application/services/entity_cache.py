"""Entity list cache service.

ONLY list cache state management - effective threshold/TTL resolution,
validity, overflow and expiry bookkeeping, invalidation, and single-flight
cache loading for one entity manager.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from ...config import DataLayerSettings
from ...core.entities import CacheState
from ...core.protocols import StorageCapabilities
from ...core.value_objects import CacheTTL
from ...infrastructure.tasks import BackgroundLoader
from .detail_cache import DetailCache

logger = logging.getLogger(__name__)

EntityId = Union[str, int]
SearchIndex = Dict[str, Dict[str, str]]


class EntityCache:
    """List cache for one entity.

    Holds the snapshot (``CacheState``) and the search index, a side map
    ``{str(record id): {"parent.field": value}}`` that never lives on the
    records themselves.

    ``loader`` performs a full load and commits it through ``commit``; it
    is only ever run once at a time (``ensure`` and ``load_in_background``
    share the in-flight load). Every ``invalidate`` bumps a generation so
    a load that started earlier cannot commit stale data afterwards.
    """

    def __init__(
        self,
        name: str,
        id_field: str,
        loader: Callable[[], Awaitable[bool]],
        capabilities: Callable[[], StorageCapabilities],
        settings: DataLayerSettings,
        clock: Callable[[], float],
        threshold: Optional[int] = None,
        cache_ttl_ms: Optional[int] = None,
        detail_cache: Optional[DetailCache] = None,
        background: Optional[BackgroundLoader] = None,
    ):
        self.name = name
        self.id_field = id_field
        self.state = CacheState()
        self.search_index: SearchIndex = {}
        self._loader = loader
        self._capabilities = capabilities
        self._settings = settings
        self._clock = clock
        self._threshold = threshold
        self._cache_ttl_ms = cache_ttl_ms
        self._detail_cache = detail_cache
        self._background = background or BackgroundLoader(name)
        self._loading: Optional[asyncio.Task] = None
        self._generation = 0

    # ============ EFFECTIVE CONFIGURATION ============

    @property
    def effective_threshold(self) -> int:
        if self._threshold is not None:
            return self._threshold
        return self._settings.default_threshold

    @property
    def ttl(self) -> CacheTTL:
        """TTL by precedence: storage, entity, process default, never-expire."""
        return CacheTTL.resolve(
            self._capabilities().cache_ttl_ms,
            self._cache_ttl_ms,
            self._settings.default_entity_cache_ttl_ms,
        )

    @property
    def effective_cache_ttl_ms(self) -> int:
        return self.ttl.milliseconds

    @property
    def storage_supports_total(self) -> bool:
        return self._capabilities().supports_total

    @property
    def is_enabled(self) -> bool:
        """Check if list caching applies to this entity at all."""
        if self.effective_threshold <= 0:
            return False
        if self.ttl.is_disabled():
            return False
        capabilities = self._capabilities()
        if capabilities.supports_caching is False:
            return False
        return capabilities.supports_total

    # ============ STATE ============

    @property
    def valid(self) -> bool:
        return self.state.valid

    @property
    def overflow(self) -> bool:
        return self.state.overflow

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loading(self) -> bool:
        return self._loading is not None and not self._loading.done()

    @property
    def expires_at(self) -> Optional[float]:
        return self.ttl.expires_at(self.state.loaded_at)

    def is_expired(self) -> bool:
        """Check if a valid snapshot has outlived a positive TTL."""
        if not self.state.valid:
            return False
        return self.ttl.has_elapsed(self.state.loaded_at, self._clock())

    def expire_if_needed(self) -> bool:
        """Invalidate an expired snapshot; return True if it was expired."""
        if self.is_expired():
            logger.debug(f"[EntityManager:{self.name}] Cache expired")
            self.invalidate()
            return True
        return False

    def invalidate(self) -> None:
        """Drop the snapshot, the search index and the detail cache."""
        if self.state.valid:
            logger.debug(f"[EntityManager:{self.name}] Cache invalidated")
        self.state.reset()
        self.search_index = {}
        self._loading = None
        self._generation += 1
        if self._detail_cache is not None:
            self._detail_cache.clear()

    def commit(self, items: List[Dict[str, Any]], total: int, generation: int) -> bool:
        """Store a complete result set loaded under ``generation``.

        Refused (returns False) when the cache was invalidated since.
        Records are copied so the snapshot is private to this cache.
        """
        if generation != self._generation:
            logger.debug(f"[EntityManager:{self.name}] Discarding load from an invalidated generation")
            return False
        self.state.fill(copy.deepcopy(list(items)), total, self._clock())
        self.search_index = {}
        logger.debug(f"[EntityManager:{self.name}] Cache loaded: {len(items)} of {total} items")
        return True

    def set_search_index(self, index: SearchIndex, generation: int) -> bool:
        if generation != self._generation or not self.state.valid:
            return False
        self.search_index = index
        return True

    def clear_search_index(self) -> None:
        self.search_index = {}

    def find(self, entity_id: EntityId) -> Optional[Dict[str, Any]]:
        """Return a copy of the cached record with ``entity_id``, or None."""
        key = str(entity_id)
        for item in self.state.items:
            if str(item.get(self.id_field)) == key:
                return copy.deepcopy(item)
        return None

    def find_many(self, ids: Sequence[EntityId]) -> List[Optional[Dict[str, Any]]]:
        """Copies of the cached records in ``ids`` order, None where missing."""
        by_id = {str(item.get(self.id_field)): item for item in self.state.items}
        found = []
        for entity_id in ids:
            item = by_id.get(str(entity_id))
            found.append(copy.deepcopy(item) if item is not None else None)
        return found

    # ============ LOADING ============

    async def ensure(self) -> bool:
        """Make the cache valid if it can be; return validity.

        Concurrent callers share one in-flight load and all of them see
        its outcome, including its exception.
        """
        if not self.is_enabled:
            return False
        self.expire_if_needed()
        if self.state.valid:
            return True

        task = self._loading
        if task is None or task.done():
            task = asyncio.ensure_future(self._loader())
            self._loading = task
            task.add_done_callback(self._load_settled)

        await asyncio.shield(task)
        return self.state.valid

    def load_in_background(self) -> None:
        """Start a full load unless one is already running.

        Failures are logged by the background loader and never reach
        the caller that triggered the load.
        """
        if self.is_loading:
            return
        self._loading = self._background.spawn(
            self._loader(),
            description="cache load",
            on_done=self._load_settled,
        )

    def _load_settled(self, task: asyncio.Task) -> None:
        if self._loading is task:
            self._loading = None
