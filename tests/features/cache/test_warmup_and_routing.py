"""Tests for cache warmup and storage routing."""

import asyncio

import pytest

from neo_datalayer.api.models import ListParams
from neo_datalayer.application.services import EntityManager
from neo_datalayer.core.protocols import AUTH_READY, StorageResolution

from conftest import FakeOrchestrator, InMemoryStorage


class TestWarmup:
    """Test startup cache warmup."""

    @pytest.mark.asyncio
    async def test_warmup_without_orchestrator_loads_directly(self, make_manager, storage):
        manager = make_manager(storage=storage)

        assert await manager.warmup() is True
        assert manager.get_cache_info().valid is True

    @pytest.mark.asyncio
    async def test_warmup_waits_for_auth(self, make_manager, storage, deferred):
        manager = make_manager(storage=storage)
        FakeOrchestrator(deferred).register(manager)
        deferred.register(AUTH_READY)

        warming = asyncio.ensure_future(manager.warmup())
        for _ in range(5):
            await asyncio.sleep(0)
        assert storage.calls["list"] == 0

        deferred.resolve(AUTH_READY)

        assert await warming is True
        assert deferred.queued == ["entity:books:cache"]
        assert storage.calls["list"] == 1

    @pytest.mark.asyncio
    async def test_warmup_is_registered_once(self, make_manager, storage, deferred):
        manager = make_manager(storage=storage)
        FakeOrchestrator(deferred).register(manager)

        results = await asyncio.gather(manager.warmup(), manager.warmup())

        assert results == [True, True]
        assert storage.calls["list"] == 1

    @pytest.mark.asyncio
    async def test_warmup_disabled(self, make_manager, storage):
        manager = make_manager(storage=storage, warmup=False)

        assert await manager.warmup() is None
        assert storage.calls["list"] == 0

    @pytest.mark.asyncio
    async def test_warmup_skipped_when_cache_disabled(self, make_manager, storage):
        manager = make_manager(storage=storage, local_filter_threshold=0)

        assert manager.warmup_enabled is False
        assert await manager.warmup() is None


class AuthorBooks(EntityManager):
    """Books routed under their author when a parent chain is given."""

    def resolve_storage(self, method, context=None):
        if context and context.get("parent_chain"):
            return lambda ctx: f"/authors/{ctx['parent_chain'][0]['id']}/books"
        return None


class TestRouting:
    """Test resolve_storage overrides."""

    @pytest.fixture
    def routed(self, settings, clock, storage):
        storage.request_response = {"data": [{"id": 2, "author_id": 7}], "pagination": {"total": 1}}
        return AuthorBooks("books", storage=storage, settings=settings, clock=clock)

    @pytest.mark.asyncio
    async def test_dynamic_endpoint_strips_parent_filters(self, routed, storage):
        context = {"parent_chain": [{"entity": "authors", "id": 7}]}

        result = await routed.list({"filters": {"author_id": 7, "status": "published"}}, context)

        assert result.total == 1
        method, path, options = storage.requests[0]
        assert (method, path) == ("GET", "/authors/7/books")
        assert options["params"] == {"filters": {"status": "published"}}
        assert options["context"] == context

    @pytest.mark.asyncio
    async def test_endpoint_results_are_never_cached(self, routed, storage):
        context = {"parent_chain": [{"entity": "authors", "id": 7}]}

        await routed.list(None, context)
        await routed.query(ListParams(), routing_context=context)

        assert storage.calls["request"] == 2
        assert storage.calls["list"] == 0
        assert routed.get_cache_info().valid is False

    @pytest.mark.asyncio
    async def test_endpoint_get_unwraps_record(self, routed, storage):
        storage.request_response = {"data": {"id": 2, "title": "Neuromancer"}}
        context = {"parent_chain": [{"entity": "authors", "id": 7}]}

        record = await routed.get(2, context)

        assert record == {"id": 2, "title": "Neuromancer"}
        assert storage.requests[0][:2] == ("GET", "/authors/7/books/2")

    @pytest.mark.asyncio
    async def test_without_context_uses_primary_storage(self, routed, storage):
        result = await routed.list()

        assert result.total == 10
        assert storage.calls["request"] == 0

    @pytest.mark.asyncio
    async def test_resolution_to_other_storage_with_default_params(self, settings, clock, books, storage):
        archive = InMemoryStorage(books[:2])

        class ArchivedBooks(EntityManager):
            def resolve_storage(self, method, context=None):
                if context and context.get("archived"):
                    return StorageResolution(storage=archive, params={"page_size": 1})
                return None

        manager = ArchivedBooks("books", storage=storage, settings=settings, clock=clock)

        result = await manager.list(None, {"archived": True})
        explicit = await manager.list({"page_size": 2}, {"archived": True})

        assert archive.list_params == [{"page_size": 1}, {"page_size": 2}]
        assert len(result.items) == 1
        assert len(explicit.items) == 2
        assert storage.calls["list"] == 0
