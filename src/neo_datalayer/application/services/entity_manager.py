"""Entity manager service.

ONLY entity data orchestration - decides per call whether list/get/query
are answered from the local caches or from storage, fills the caches
opportunistically, and runs mutations with hooks, invalidation and signals.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import copy
import inspect
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ...api.models import CacheInfo, ListParams, ListResult
from ...config import DataLayerSettings, get_settings
from ...core.entities import OperationStats
from ...core.exceptions import EntityNotFoundError, OperationNotSupportedError
from ...core.protocols import (
    AUTH_READY,
    DATA_INVALIDATE,
    POSTSAVE,
    PREDELETE,
    PRESAVE,
    HookRegistry,
    Orchestrator,
    ResolvedStorage,
    SignalBus,
    StorageCapabilities,
    StorageResolution,
)
from ...core.value_objects import ParentConfig, SearchFieldSpec
from ...infrastructure.adapters import normalize_list_response, unwrap_record
from ...infrastructure.invalidators import SignalInvalidator
from ...infrastructure.tasks import BackgroundLoader
from ..queries import LocalFilter
from .detail_cache import DetailCache
from .entity_cache import EntityCache
from .search_resolver import SearchFieldResolver

logger = logging.getLogger(__name__)

EntityId = Union[str, int]
Record = Dict[str, Any]
RoutingContext = Dict[str, Any]
ParamsLike = Union[ListParams, Mapping[str, Any], None]

_NO_CAPABILITIES = StorageCapabilities()


def _now_ms() -> float:
    return time.time() * 1000


def _parent_config(value: Union[ParentConfig, Mapping[str, str]]) -> ParentConfig:
    if isinstance(value, ParentConfig):
        return value
    return ParentConfig(entity=value["entity"], foreign_key=value["foreign_key"])


async def _settle(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class EntityManager:
    """Data access for one entity, backed by a storage adapter.

    Caching strategy:
    - Symmetric (default): when the storage reports a total at or under
      the threshold, the complete list is kept in memory and list/get/query
      are answered locally (search, filter, sort, paginate).
    - Asymmetric: get/get_many skip the list cache and use a bounded
      detail cache instead.

    Mutations always invalidate both caches and emit
    ``<entity>:created|updated|deleted`` plus ``entity:data-invalidate``.

    Subclasses may override ``resolve_storage`` to route operations to
    another storage or endpoint, and ``on_query_result`` to post-process
    ``query`` results.
    """

    def __init__(
        self,
        name: str,
        storage: Optional[Any] = None,
        id_field: str = "id",
        local_filter_threshold: Optional[int] = None,
        cache_ttl_ms: Optional[int] = None,
        warmup: bool = True,
        auth_sensitive: Optional[bool] = None,
        parents: Optional[Mapping[str, Union[ParentConfig, Mapping[str, str]]]] = None,
        asymmetric: bool = False,
        detail_cache_ttl_ms: Optional[int] = None,
        detail_cache_max_size: Optional[int] = None,
        settings: Optional[DataLayerSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize entity manager.

        Args:
            name: Entity name, also used in signal names
            storage: Storage adapter (see ``StorageAdapter``)
            id_field: Identifier field of the records
            local_filter_threshold: Maximum total for list caching (<= 0 disables)
            cache_ttl_ms: Entity TTL for the list cache (-1 never expires, 0 disables)
            warmup: Load the cache eagerly on ``warmup()``
            auth_sensitive: React to auth-triggered invalidations
                (defaults to the storage's ``requires_auth``)
            parents: Parent relations, e.g. ``{"book": ParentConfig("books", "book_id")}``
            asymmetric: Cache single records instead of the list
            detail_cache_ttl_ms: Detail cache TTL (-1 never expires, 0 disables)
            detail_cache_max_size: Detail cache capacity (<= 0 unlimited)
            settings: Settings override (defaults to ``get_settings()``)
            clock: Millisecond clock (defaults to wall time)
        """
        self.name = name
        self.storage = storage
        self.id_field = id_field
        self.local_filter_threshold = local_filter_threshold
        self.parents: Dict[str, ParentConfig] = {
            key: _parent_config(value) for key, value in (parents or {}).items()
        }

        self._settings = settings or get_settings()
        self._clock = clock or _now_ms
        self._warmup = warmup
        self._auth_sensitive = auth_sensitive
        self._asymmetric = asymmetric

        self._signals: Optional[SignalBus] = None
        self._hooks: Optional[HookRegistry] = None
        self._orchestrator: Optional[Orchestrator] = None
        self._stats = OperationStats()
        self._search_specs: Dict[tuple, SearchFieldSpec] = {}

        self._background = BackgroundLoader(name)
        self._detail_cache = DetailCache(
            ttl_ms=(
                detail_cache_ttl_ms
                if detail_cache_ttl_ms is not None
                else self._settings.default_detail_cache_ttl_ms
            ),
            max_size=(
                detail_cache_max_size
                if detail_cache_max_size is not None
                else self._settings.default_detail_cache_max_size
            ),
            clock=self._clock,
            name=name,
        )
        self._cache = EntityCache(
            name=name,
            id_field=id_field,
            loader=self._load_cache,
            capabilities=lambda: self.capabilities,
            settings=self._settings,
            clock=self._clock,
            threshold=local_filter_threshold,
            cache_ttl_ms=cache_ttl_ms,
            detail_cache=self._detail_cache,
            background=self._background,
        )
        self._local_filter = LocalFilter(self._settings.default_page_size, id_field)
        self._search_resolver = SearchFieldResolver(name, id_field, self.parents, lambda: self._orchestrator)
        self._invalidator = SignalInvalidator(self)

    # ============ CONFIGURATION ============

    @property
    def capabilities(self) -> StorageCapabilities:
        """Capabilities declared by the storage (read on every access)."""
        capabilities = getattr(self.storage, "capabilities", None)
        if capabilities is None:
            return _NO_CAPABILITIES
        if isinstance(capabilities, StorageCapabilities):
            return capabilities
        if isinstance(capabilities, Mapping):
            return StorageCapabilities.model_validate(capabilities)
        return StorageCapabilities.model_validate(capabilities, from_attributes=True)

    @property
    def effective_threshold(self) -> int:
        return self._cache.effective_threshold

    @property
    def effective_cache_ttl_ms(self) -> int:
        return self._cache.effective_cache_ttl_ms

    @property
    def storage_supports_total(self) -> bool:
        return self._cache.storage_supports_total

    @property
    def storage_search_fields(self) -> Optional[List[str]]:
        return self.capabilities.search_fields

    @property
    def is_cache_enabled(self) -> bool:
        return self._cache.is_enabled

    @property
    def overflow(self) -> bool:
        return self._cache.overflow

    @property
    def is_asymmetric(self) -> bool:
        return self._asymmetric or self.capabilities.asymmetric

    @property
    def is_detail_cache_enabled(self) -> bool:
        return self.is_asymmetric and self._detail_cache.enabled

    @property
    def auth_sensitive(self) -> bool:
        if self._auth_sensitive is not None:
            return self._auth_sensitive
        return self.capabilities.requires_auth

    @property
    def warmup_enabled(self) -> bool:
        return self._warmup and self.is_cache_enabled

    @property
    def signals(self) -> Optional[SignalBus]:
        return self._signals

    @property
    def hooks(self) -> Optional[HookRegistry]:
        return self._hooks

    @property
    def orchestrator(self) -> Optional[Orchestrator]:
        return self._orchestrator

    # ============ WIRING ============

    def set_signals(self, signals: Optional[SignalBus]) -> None:
        """Set the signal bus and (re)register cache listeners."""
        self._signals = signals
        self._invalidator.attach(signals)

    def set_hooks(self, hooks: Optional[HookRegistry]) -> None:
        self._hooks = hooks

    def on_register(self, orchestrator: Orchestrator) -> None:
        """Called when the manager is registered with an orchestrator."""
        self._orchestrator = orchestrator

    def dispose(self) -> None:
        """Remove signal listeners and cancel background loads."""
        self._invalidator.detach()
        self._background.cancel_all()

    # ============ STORAGE RESOLUTION ============

    def resolve_storage(self, method: str, context: Optional[RoutingContext] = None) -> Any:
        """Pick the storage (and optionally endpoint) for an operation.

        May return ``None`` (primary storage), an endpoint string, an
        endpoint builder called with the routing context, or a
        ``StorageResolution``. Endpoint builders make the resolution
        dynamic.
        """
        return None

    def _resolve(self, method: str, context: Optional[RoutingContext]) -> ResolvedStorage:
        resolution = self.resolve_storage(method, context)

        if resolution is None:
            return ResolvedStorage(storage=self.storage)
        if isinstance(resolution, str):
            return ResolvedStorage(storage=self.storage, endpoint=resolution)
        if callable(resolution):
            return ResolvedStorage(storage=self.storage, endpoint=resolution(context), is_dynamic=True)
        if isinstance(resolution, StorageResolution):
            storage = resolution.storage or self.storage
            if callable(resolution.endpoint):
                return ResolvedStorage(
                    storage=storage,
                    endpoint=resolution.endpoint(context),
                    params=resolution.params,
                    is_dynamic=True,
                )
            return ResolvedStorage(storage=storage, endpoint=resolution.endpoint, params=resolution.params)
        if isinstance(resolution, ResolvedStorage):
            return resolution

        raise TypeError(f"[EntityManager:{self.name}] Unsupported storage resolution: {resolution!r}")

    def _require_storage(self, resolved: ResolvedStorage, operation: str) -> Any:
        if resolved.storage is None:
            raise OperationNotSupportedError(self.name, operation)
        return resolved.storage

    def _require(self, storage: Any, primitive: str) -> Callable[..., Any]:
        method = getattr(storage, primitive, None)
        if not callable(method):
            raise OperationNotSupportedError(self.name, primitive, "not supported by storage")
        return method

    @staticmethod
    def _strip_parent_filters(params: Dict[str, Any], context: Optional[RoutingContext]) -> Dict[str, Any]:
        # Parent ids are already part of the endpoint path
        chain = (context or {}).get("parent_chain")
        filters = params.get("filters")
        if not chain or not filters:
            return params

        parent_ids = {str(parent["id"]) for parent in chain}
        cleaned = {key: value for key, value in filters.items() if str(value) not in parent_ids}
        params = dict(params)
        if cleaned:
            params["filters"] = cleaned
        else:
            params.pop("filters")
        return params

    # ============ READ ============

    @staticmethod
    def _coerce_params(params: ParamsLike) -> ListParams:
        if params is None:
            return ListParams()
        if isinstance(params, ListParams):
            return params
        return ListParams.model_validate(dict(params))

    async def list(self, params: ParamsLike = None, context: Optional[RoutingContext] = None) -> ListResult:
        """List entities, from the cache when it is valid and usable.

        Unfiltered requests (or ``cache_safe`` ones) are answered from a
        valid cache. Otherwise storage is queried, and when the reported
        total fits under the threshold the response seeds the cache: a
        complete response is stored directly, a partial page triggers a
        background full load.
        """
        params = self._coerce_params(params)
        resolved = self._resolve("list", context)
        self._require_storage(resolved, "list")

        if resolved.params:
            params = ListParams.model_validate({**resolved.params, **params.model_dump(exclude_unset=True)})

        self._stats.list += 1

        cacheable = (
            (not params.has_query_terms or params.cache_safe)
            and not resolved.endpoint
            and resolved.storage is self.storage
        )

        self._cache.expire_if_needed()

        if self._cache.valid and not self._cache.overflow and cacheable:
            self._stats.cache_hits += 1
            self._log_cache_operation("hit", "list")
            result = self._filter_locally(params)
            self._stats.observe(len(result.items), result.total)
            return result

        self._stats.cache_misses += 1
        self._log_cache_operation("miss", "list")

        generation = self._cache.generation
        result = await self._fetch_list(resolved, params, context)
        self._stats.observe(len(result.items), result.total)

        if cacheable and self._cache.is_enabled and result.total <= self._cache.effective_threshold:
            if len(result.items) >= result.total:
                if self._cache.commit(result.items, result.total, generation):
                    await self._resolve_search_fields(generation)
            elif not self._cache.valid:
                self._cache.load_in_background()

        return result

    async def get(self, entity_id: EntityId, context: Optional[RoutingContext] = None) -> Record:
        """Get a single entity by identifier.

        Raises:
            EntityNotFoundError: If storage has no such record
        """
        resolved = self._resolve("get", context)
        self._stats.get += 1

        self._cache.expire_if_needed()

        if self.is_asymmetric:
            return await self._get_detail(resolved, entity_id, context)

        if self._cache.valid and not self._cache.overflow:
            cached = self._cache.find(entity_id)
            if cached is not None:
                self._stats.cache_hits += 1
                self._log_cache_operation("hit", f"get({entity_id})")
                return cached

        self._stats.cache_misses += 1
        self._log_cache_operation("miss", f"get({entity_id})")
        return await self._fetch_one(resolved, entity_id, context)

    async def _get_detail(
        self,
        resolved: ResolvedStorage,
        entity_id: EntityId,
        context: Optional[RoutingContext],
    ) -> Record:
        if self.is_detail_cache_enabled:
            cached = self._detail_cache.lookup(entity_id)
            if cached is not None:
                self._stats.detail_cache_hits += 1
                return cached

        # Joining a pending fetch counts as a hit: no extra storage call
        if self._detail_cache.is_loading(entity_id):
            self._stats.detail_cache_hits += 1
        else:
            self._stats.detail_cache_misses += 1
            self._require_storage(resolved, "get")

        return await self._detail_cache.load(
            entity_id,
            lambda: self._fetch_one(resolved, entity_id, context),
        )

    async def get_many(self, ids: Sequence[EntityId], context: Optional[RoutingContext] = None) -> List[Record]:
        """Get several entities; identifiers that do not exist are left out."""
        if not ids:
            return []

        self._cache.expire_if_needed()

        if self.is_asymmetric:
            return await self._get_many_detail(ids, context)

        if self._cache.valid and not self._cache.overflow:
            cached = self._cache.find_many(ids)
            if all(record is not None for record in cached):
                self._stats.cache_hits += len(ids)
                return cached
            # Partial hit: answer everything from storage

        resolved = self._resolve("get_many", context)
        get_many = getattr(resolved.storage, "get_many", None)
        if callable(get_many) and not resolved.endpoint:
            self._stats.cache_misses += len(ids)
            return list(await get_many(list(ids), context))

        # get() keeps its own stats
        fetched = await asyncio.gather(*(self._get_or_none(entity_id, context) for entity_id in ids))
        return [record for record in fetched if record is not None]

    async def _get_many_detail(self, ids: Sequence[EntityId], context: Optional[RoutingContext]) -> List[Record]:
        found: List[Optional[Record]] = [None] * len(ids)
        missing: List[int] = []

        for position, entity_id in enumerate(ids):
            cached = self._detail_cache.lookup(entity_id) if self.is_detail_cache_enabled else None
            if cached is not None:
                self._stats.detail_cache_hits += 1
                found[position] = cached
            else:
                missing.append(position)

        if missing:
            fetched = await asyncio.gather(*(self._get_or_none(ids[position], context) for position in missing))
            for position, record in zip(missing, fetched):
                found[position] = record

        return [record for record in found if record is not None]

    async def _get_or_none(self, entity_id: EntityId, context: Optional[RoutingContext]) -> Optional[Record]:
        try:
            return await self.get(entity_id, context)
        except EntityNotFoundError:
            return None

    async def query(
        self,
        params: ParamsLike = None,
        context: Optional[Dict[str, Any]] = None,
        routing_context: Optional[RoutingContext] = None,
    ) -> ListResult:
        """Query entities, filling the cache first when it can be used.

        Falls back to ``list`` for routed calls (an endpoint or another
        storage), overflowing caches and entities that cannot be cached.

        Args:
            params: List parameters
            context: Free-form context passed to ``on_query_result``
            routing_context: Routing context passed to ``resolve_storage``
        """
        params = self._coerce_params(params)
        resolved = self._resolve("list", routing_context)
        is_routed = bool(resolved.endpoint) or resolved.storage is not self.storage

        self._cache.expire_if_needed()

        if not is_routed and not self._cache.valid and self._cache.is_enabled:
            await self._cache.ensure()

        if (
            is_routed
            or not self._cache.is_enabled
            or not self._cache.valid
            or self._cache.overflow
        ):
            result = await self.list(params, routing_context)
        else:
            self._log_cache_operation("hit", "query")
            result = self._filter_locally(params)

        replaced = self.on_query_result(result, context or {})
        return replaced if replaced is not None else result

    def on_query_result(self, result: ListResult, context: Dict[str, Any]) -> Optional[ListResult]:
        """Hook to post-process ``query`` results; return None to keep them."""
        return None

    def _filter_locally(self, params: ListParams) -> ListResult:
        found = self._local_filter.apply(
            self._cache.state.items,
            params,
            search_spec=self._search_spec(params.search_fields),
            search_index=self._cache.search_index,
        )
        return ListResult(items=copy.deepcopy(found.items), total=found.total, from_cache=True)

    async def _fetch_list(
        self,
        resolved: ResolvedStorage,
        params: ListParams,
        context: Optional[RoutingContext],
    ) -> ListResult:
        storage = self._require_storage(resolved, "list")
        storage_params = params.to_storage_params()

        if resolved.endpoint:
            request = self._require(storage, "request")
            payload = await request(
                "GET",
                resolved.endpoint,
                params=self._strip_parent_filters(storage_params, context),
                context=context,
            )
        else:
            payload = await storage.list(storage_params, context)

        return normalize_list_response(payload, self.name)

    async def _fetch_one(
        self,
        resolved: ResolvedStorage,
        entity_id: EntityId,
        context: Optional[RoutingContext],
    ) -> Record:
        storage = self._require_storage(resolved, "get")

        if resolved.endpoint:
            request = self._require(storage, "request")
            record = unwrap_record(await request("GET", f"{resolved.endpoint}/{entity_id}", context=context))
        else:
            record = await storage.get(entity_id, context)

        if record is None:
            raise EntityNotFoundError(self.name, entity_id)
        return record

    # ============ WRITE ============

    async def create(self, data: Record, context: Optional[RoutingContext] = None) -> Record:
        """Create an entity."""
        self._stats.create += 1
        return await self._save("create", "POST", None, data, context)

    async def update(self, entity_id: EntityId, data: Record, context: Optional[RoutingContext] = None) -> Record:
        """Replace an entity (PUT)."""
        self._stats.update += 1
        return await self._save("update", "PUT", entity_id, data, context)

    async def patch(self, entity_id: EntityId, data: Record, context: Optional[RoutingContext] = None) -> Record:
        """Partially update an entity (PATCH); counted as an update."""
        self._stats.update += 1
        return await self._save("patch", "PATCH", entity_id, data, context)

    async def _save(
        self,
        operation: str,
        http_method: str,
        entity_id: Optional[EntityId],
        data: Record,
        context: Optional[RoutingContext],
    ) -> Record:
        resolved = self._resolve(operation, context)
        storage = self._require_storage(resolved, operation)
        is_new = entity_id is None

        presave = self._hook_context(record=data, is_new=is_new, entity_id=entity_id)
        await self._invoke_hook(PRESAVE, presave)
        record = presave["record"]

        if resolved.endpoint:
            request = self._require(storage, "request")
            path = resolved.endpoint if is_new else f"{resolved.endpoint}/{entity_id}"
            result = unwrap_record(await request(http_method, path, data=record, context=context))
        elif is_new:
            result = await storage.create(record)
        else:
            result = await self._require(storage, operation)(entity_id, record)

        self.invalidate_cache()

        if is_new and isinstance(result, Mapping):
            entity_id = result.get(self.id_field)

        postsave = self._hook_context(record=record, is_new=is_new, entity_id=entity_id)
        postsave["result"] = result
        await self._invoke_hook(POSTSAVE, postsave)

        await self._emit_mutation("created" if is_new else "updated", entity_id, result)
        return result

    async def delete(self, entity_id: EntityId, context: Optional[RoutingContext] = None) -> None:
        """Delete an entity."""
        resolved = self._resolve("delete", context)
        self._stats.delete += 1
        storage = self._require_storage(resolved, "delete")

        await self._invoke_hook(PREDELETE, {"entity": self.name, "id": entity_id, "manager": self})

        if resolved.endpoint:
            request = self._require(storage, "request")
            await request("DELETE", f"{resolved.endpoint}/{entity_id}", context=context)
        else:
            await storage.delete(entity_id)

        self.invalidate_cache()
        await self._emit_mutation("deleted", entity_id)

    async def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        invalidate_cache: Optional[bool] = None,
    ) -> Any:
        """Send a custom request through the storage.

        The cache is invalidated after any non-GET request unless
        ``invalidate_cache`` says otherwise.
        """
        if self.storage is None:
            raise OperationNotSupportedError(self.name, "request")
        request = self._require(self.storage, "request")

        options = {
            key: value
            for key, value in (("data", data), ("params", params), ("headers", headers))
            if value is not None
        }
        result = await request(method, path, **options)

        should_invalidate = invalidate_cache if invalidate_cache is not None else method.upper() != "GET"
        if should_invalidate:
            self.invalidate_cache()
        return result

    def _hook_context(self, record: Record, is_new: bool, entity_id: Optional[EntityId]) -> Dict[str, Any]:
        context = {"entity": self.name, "record": record, "is_new": is_new, "manager": self}
        if entity_id is not None:
            context["id"] = entity_id
        return context

    async def _invoke_hook(self, hook_name: str, context: Dict[str, Any]) -> None:
        if self._hooks is None:
            return
        await _settle(self._hooks.invoke(hook_name, context))

    async def _emit_mutation(self, action: str, entity_id: Optional[EntityId], record: Any = None) -> None:
        if self._signals is None:
            return

        payload = {"entity": self.name, "manager": self.name, "id": entity_id}
        if record is not None:
            payload["record"] = record
        await _settle(self._signals.emit(f"{self.name}:{action}", payload))
        await _settle(self._signals.emit(DATA_INVALIDATE, {"entity": self.name, "action": action, "id": entity_id}))

    # ============ CACHE ============

    def invalidate_cache(self) -> None:
        """Invalidate the list cache (and with it the detail cache)."""
        self._cache.invalidate()

    def invalidate_detail_cache(self) -> None:
        self._detail_cache.clear()

    def invalidate_data_layer(self) -> None:
        """Invalidate the caches and reset the storage when it supports it.

        An async ``reset`` runs in the background.
        """
        self.invalidate_cache()

        reset = getattr(self.storage, "reset", None)
        if callable(reset):
            result = reset()
            if inspect.isawaitable(result):
                self._background.spawn(result, description="storage reset")

    def clear_search_index(self) -> None:
        """Drop resolved parent fields and invalidate a valid cache."""
        if not self._cache.valid:
            return
        self._cache.clear_search_index()
        self.invalidate_cache()

    async def ensure_cache(self) -> bool:
        """Fill the list cache if possible; True when it is valid."""
        return await self._cache.ensure()

    async def warmup(self) -> Optional[bool]:
        """Load the cache at startup (None when warmup does not apply).

        Waits for the ``auth:ready`` deferred first when one exists, and
        registers the load as ``entity:<name>:cache`` so other startup
        code can await it.
        """
        if not self.warmup_enabled:
            return None

        deferred = getattr(self._orchestrator, "deferred", None)
        if deferred is None:
            return await self.ensure_cache()

        if deferred.has(AUTH_READY):
            await deferred.wait(AUTH_READY)

        return await deferred.queue(f"entity:{self.name}:cache", self.ensure_cache)

    async def _load_cache(self) -> bool:
        generation = self._cache.generation
        resolved = self._resolve("list", None)
        if resolved.endpoint or resolved.storage is not self.storage:
            return False

        threshold = self._cache.effective_threshold
        full = await self._fetch_list(resolved, ListParams(page_size=threshold), None)
        if full.total > threshold:
            logger.debug(f"[EntityManager:{self.name}] Total {full.total} over threshold {threshold}, not caching")
            return False

        # Storage capped the page below its own total: ask for exactly the total
        if len(full.items) < full.total:
            full = await self._fetch_list(resolved, ListParams(page_size=full.total), None)

        if not self._cache.commit(full.items, full.total, generation):
            return False

        await self._resolve_search_fields(generation)
        return self._cache.valid

    async def _resolve_search_fields(self, generation: int) -> None:
        spec = self._search_spec(None)
        if spec is None or not spec.has_parent_fields:
            return

        try:
            index = await self._search_resolver.resolve(self._cache.state.items, spec)
        except Exception as e:
            logger.error(f"[EntityManager:{self.name}] Failed to resolve parent search fields: {e}", exc_info=True)
            return
        self._cache.set_search_index(index, generation)

    def _search_spec(self, override: Optional[List[str]]) -> Optional[SearchFieldSpec]:
        fields = override if override is not None else self.storage_search_fields
        if fields is None:
            return None

        key = tuple(fields)
        spec = self._search_specs.get(key)
        if spec is None:
            spec = SearchFieldSpec.parse(fields, self.parents, self.name)
            self._search_specs[key] = spec
        return spec

    def _log_cache_operation(self, outcome: str, operation: str) -> None:
        if self._settings.log_cache_operations:
            logger.debug(f"[EntityManager:{self.name}] Cache {outcome}: {operation}")

    # ============ INTROSPECTION ============

    def get_cache_info(self) -> CacheInfo:
        cache = self._cache
        asymmetric = self.is_asymmetric
        return CacheInfo(
            enabled=cache.is_enabled,
            storage_supports_total=cache.storage_supports_total,
            threshold=cache.effective_threshold,
            valid=cache.valid,
            overflow=cache.overflow,
            item_count=cache.state.item_count,
            total=cache.state.total,
            loaded_at=cache.state.loaded_at,
            ttl_ms=cache.effective_cache_ttl_ms,
            expires_at=cache.expires_at,
            expired=cache.is_expired(),
            asymmetric=asymmetric,
            detail_cache=self._detail_cache.info() if asymmetric and self.is_detail_cache_enabled else None,
        )

    def get_stats(self) -> OperationStats:
        """Get a copy of the operation counters."""
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = OperationStats()

    async def drain(self) -> None:
        """Wait for background work (cache fills, storage resets) to settle."""
        await self._background.drain()

    def __repr__(self) -> str:
        return f"EntityManager(name={self.name!r}, asymmetric={self.is_asymmetric})"
