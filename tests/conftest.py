"""Pytest configuration and fixtures for neo-datalayer tests."""

import asyncio
import copy
import inspect
from collections import Counter, defaultdict
from typing import Any, Dict, List, Optional

import pytest

from neo_datalayer.application.services import EntityManager
from neo_datalayer.config import DataLayerSettings
from neo_datalayer.core.protocols import StorageCapabilities


class InMemoryStorage:
    """In-memory storage adapter that counts calls.

    ``list`` applies equality filters and pagination and reports the
    filtered total. ``page_cap`` limits the page size it will honour, the
    way many REST APIs do. Every call yields to the event loop once.
    """

    def __init__(
        self,
        records: Optional[List[Dict[str, Any]]] = None,
        capabilities: Optional[StorageCapabilities] = None,
        page_cap: Optional[int] = None,
    ):
        self.records = [dict(record) for record in (records or [])]
        self.capabilities = capabilities or StorageCapabilities(supports_total=True)
        self.page_cap = page_cap
        self.calls = Counter()
        self.list_params: List[Dict[str, Any]] = []
        self.list_errors: List[Exception] = []
        self.list_gate: Optional[asyncio.Event] = None
        self.requests: List[tuple] = []
        self.request_response: Any = None
        self.reset_calls = 0

    async def list(self, params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.calls["list"] += 1
        self.list_params.append(dict(params))
        if self.list_gate is not None:
            await self.list_gate.wait()
        await asyncio.sleep(0)
        if self.list_errors:
            raise self.list_errors.pop(0)

        items = self.records
        for field_name, value in (params.get("filters") or {}).items():
            items = [record for record in items if record.get(field_name) == value]

        page = params.get("page", 1)
        page_size = params.get("page_size", 20)
        if self.page_cap is not None:
            page_size = min(page_size, self.page_cap)
        start = (page - 1) * page_size
        return {"items": copy.deepcopy(items[start:start + page_size]), "total": len(items)}

    async def get(self, entity_id, context: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        self.calls["get"] += 1
        await asyncio.sleep(0)
        for record in self.records:
            if str(record["id"]) == str(entity_id):
                return copy.deepcopy(record)
        return None

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls["create"] += 1
        record = dict(data)
        record.setdefault("id", max((r["id"] for r in self.records), default=0) + 1)
        self.records.append(record)
        return copy.deepcopy(record)

    async def update(self, entity_id, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls["update"] += 1
        for position, record in enumerate(self.records):
            if str(record["id"]) == str(entity_id):
                self.records[position] = {**data, "id": record["id"]}
                return copy.deepcopy(self.records[position])
        raise KeyError(entity_id)

    async def patch(self, entity_id, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls["patch"] += 1
        for record in self.records:
            if str(record["id"]) == str(entity_id):
                record.update(data)
                return copy.deepcopy(record)
        raise KeyError(entity_id)

    async def delete(self, entity_id) -> None:
        self.calls["delete"] += 1
        self.records = [record for record in self.records if str(record["id"]) != str(entity_id)]

    async def request(self, method: str, path: str, **options) -> Any:
        self.calls["request"] += 1
        self.requests.append((method, path, options))
        return self.request_response

    def reset(self) -> None:
        self.reset_calls += 1


class BatchStorage(InMemoryStorage):
    """Storage with a native batch fetch."""

    async def get_many(self, ids, context: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.calls["get_many"] += 1
        wanted = {str(entity_id) for entity_id in ids}
        return [copy.deepcopy(record) for record in self.records if str(record["id"]) in wanted]


class FakeSignalBus:
    """Synchronous signal bus recording every emission."""

    def __init__(self):
        self.handlers = defaultdict(list)
        self.emitted: List[tuple] = []

    def on(self, signal: str, handler):
        self.handlers[signal].append(handler)

        def unsubscribe():
            if handler in self.handlers[signal]:
                self.handlers[signal].remove(handler)

        return unsubscribe

    def emit(self, signal: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self.emitted.append((signal, payload))
        for handler in list(self.handlers[signal]):
            handler(payload)

    def names(self) -> List[str]:
        return [signal for signal, _ in self.emitted]


class FakeHookRegistry:
    """Hook registry recording invocations; handlers may be sync or async."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.handlers: Dict[str, Any] = {}

    async def invoke(self, name: str, context: Dict[str, Any]) -> None:
        self.calls.append((name, dict(context)))
        handler = self.handlers.get(name)
        if handler is not None:
            result = handler(context)
            if inspect.isawaitable(result):
                await result

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeDeferredRegistry:
    """Named deferred tasks backed by asyncio futures."""

    def __init__(self):
        self.tasks: Dict[str, asyncio.Future] = {}
        self.queued: List[str] = []

    def has(self, name: str) -> bool:
        return name in self.tasks

    def register(self, name: str) -> asyncio.Future:
        future = asyncio.get_running_loop().create_future()
        self.tasks[name] = future
        return future

    def resolve(self, name: str, value: Any = True) -> None:
        self.tasks[name].set_result(value)

    def wait(self, name: str) -> asyncio.Future:
        if name not in self.tasks:
            self.register(name)
        return self.tasks[name]

    def queue(self, name: str, factory) -> asyncio.Future:
        if name not in self.tasks:
            self.queued.append(name)
            self.tasks[name] = asyncio.ensure_future(factory())
        return self.tasks[name]


class FakeOrchestrator:
    """Manager registry."""

    def __init__(self, deferred: Optional[FakeDeferredRegistry] = None):
        self.managers: Dict[str, Any] = {}
        self.deferred = deferred

    def register(self, manager) -> None:
        self.managers[manager.name] = manager
        manager.on_register(self)

    def get(self, name: str):
        return self.managers.get(name)


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now += milliseconds


BOOKS = [
    {"id": 1, "title": "Dune", "author": "Herbert", "year": 1965, "status": "published", "genre_id": 1},
    {"id": 2, "title": "Neuromancer", "author": "Gibson", "year": 1984, "status": "published", "genre_id": 1},
    {"id": 3, "title": "Emma", "author": "Austen", "year": 1815, "status": "published", "genre_id": 2},
    {"id": 4, "title": "Beloved", "author": "Morrison", "year": 1987, "status": "draft", "genre_id": 2},
    {"id": 5, "title": "Ulysses", "author": "Joyce", "year": 1922, "status": "published", "genre_id": 2},
    {"id": 6, "title": "Solaris", "author": "Lem", "year": 1961, "status": "draft", "genre_id": 1},
    {"id": 7, "title": "Kindred", "author": "Butler", "year": 1979, "status": "published", "genre_id": 1},
    {"id": 8, "title": "Middlemarch", "author": "Eliot", "year": 1871, "status": "draft", "genre_id": 2},
    {"id": 9, "title": "Hyperion", "author": "Simmons", "year": 1989, "status": "published", "genre_id": 1},
    {"id": 10, "title": "Rebecca", "author": "du Maurier", "year": 1938, "status": "draft", "genre_id": 2},
]


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return DataLayerSettings(_env_file=None)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def books():
    return copy.deepcopy(BOOKS)


@pytest.fixture
def storage(books):
    return InMemoryStorage(books)


@pytest.fixture
def signals():
    return FakeSignalBus()


@pytest.fixture
def hooks():
    return FakeHookRegistry()


@pytest.fixture
def deferred():
    return FakeDeferredRegistry()


@pytest.fixture
def orchestrator():
    return FakeOrchestrator()


@pytest.fixture
def make_manager(settings, clock):
    """Factory for entity managers sharing the test settings and clock."""

    def _make(name: str = "books", storage=None, **kwargs) -> EntityManager:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("clock", clock)
        return EntityManager(name, storage=storage, **kwargs)

    return _make
