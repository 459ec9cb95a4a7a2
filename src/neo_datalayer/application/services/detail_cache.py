"""Detail cache service.

ONLY per-record caching - bounded identifier -> record cache used by
asymmetric entities, with TTL expiry, oldest-first eviction and per-id
fetch deduplication.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ...api.models import DetailCacheInfo
from ...core.entities import DetailCacheEntry
from ...core.value_objects import CacheTTL

logger = logging.getLogger(__name__)

EntityId = Union[str, int]
Clock = Callable[[], float]


class DetailCache:
    """Bounded record cache keyed by ``str(id)``.

    Entries expire per ``ttl`` (``-1`` never, ``0`` always). When the map
    grows past ``max_size`` the entries with the oldest ``loaded_at`` are
    removed first; reads never refresh ``loaded_at``. A ``max_size`` of
    zero or less means unlimited.

    Concurrent ``load`` calls for one identifier share a single fetch.
    """

    def __init__(self, ttl_ms: int, max_size: int, clock: Clock, name: str = ""):
        self.ttl = CacheTTL(ttl_ms)
        self.max_size = max_size
        self.name = name
        self._clock = clock
        self._entries: Dict[str, DetailCacheEntry] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self._generation = 0

    @property
    def enabled(self) -> bool:
        return not self.ttl.is_disabled()

    @property
    def size(self) -> int:
        return len(self._entries)

    def keys(self):
        return self._entries.keys()

    def lookup(self, entity_id: EntityId) -> Optional[Dict[str, Any]]:
        """Return a copy of a live entry, or None."""
        if not self.enabled:
            return None
        entry = self._entries.get(str(entity_id))
        if entry is None:
            return None
        if self.ttl.is_entry_expired(entry.loaded_at, self._clock()):
            return None
        return copy.deepcopy(entry.item)

    def put(self, entity_id: EntityId, item: Dict[str, Any]) -> None:
        """Insert or refresh an entry, then evict down to capacity."""
        if not self.enabled:
            return
        self._entries[str(entity_id)] = DetailCacheEntry(
            item=copy.deepcopy(item),
            loaded_at=self._clock(),
        )
        self._evict()

    def is_loading(self, entity_id: EntityId) -> bool:
        return str(entity_id) in self._inflight

    async def load(
        self,
        entity_id: EntityId,
        fetcher: Callable[[], Awaitable[Dict[str, Any]]],
    ) -> Dict[str, Any]:
        """Fetch a record once per identifier, however many callers ask.

        Every caller awaiting the same fetch gets its own copy of the
        result, or the same exception.
        """
        key = str(entity_id)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, fetcher, self._generation))
            self._inflight[key] = task
            task.add_done_callback(lambda finished: self._settle(key, finished))
        result = await asyncio.shield(task)
        return copy.deepcopy(result)

    async def _fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[Dict[str, Any]]],
        generation: int,
    ) -> Dict[str, Any]:
        result = await fetcher()
        # A clear() during the fetch means the result may already be stale
        if generation == self._generation:
            self.put(key, result)
        return result

    def _settle(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def _evict(self) -> None:
        if self.max_size <= 0 or len(self._entries) <= self.max_size:
            return
        oldest_first = sorted(self._entries.items(), key=lambda pair: pair[1].loaded_at)
        for key, _ in oldest_first[:len(self._entries) - self.max_size]:
            del self._entries[key]
            logger.debug(f"[EntityManager:{self.name}] Evicted detail cache entry {key}")

    def clear(self) -> None:
        """Drop every entry and forget in-flight fetches."""
        self._entries.clear()
        self._inflight.clear()
        self._generation += 1

    def info(self) -> DetailCacheInfo:
        return DetailCacheInfo(
            enabled=self.enabled,
            ttl_ms=self.ttl.milliseconds,
            size=self.size,
            max_size=self.max_size,
        )
