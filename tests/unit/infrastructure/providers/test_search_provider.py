"""Singleton behaviour of the search providers."""

import pytest

from directory_search.core.config import get_settings
from directory_search.core.service_factory import get_service_factory
from directory_search.infrastructure.adapters.memory_cache_adapter import MemoryCacheService
from directory_search.infrastructure.adapters.null_cache_adapter import NullCacheService
from directory_search.infrastructure.providers import (
    get_cache_service,
    get_search_service,
    reset_cache_service,
)


@pytest.fixture
async def memory_backed(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("SEARCH_CACHE_ENABLED", "true")
    monkeypatch.setenv("DIRECTORY_BACKEND", "memory")
    monkeypatch.delenv("DIRECTORY_SEED_FILE", raising=False)
    get_settings.cache_clear()
    yield
    await get_service_factory().close_all()


class TestCacheProvider:

    async def test_cache_is_resolved_once(self, memory_backed):
        first = await get_cache_service()
        second = await get_cache_service()

        assert first is second
        assert isinstance(first, MemoryCacheService)

    async def test_disabled_cache_resolves_to_null_store(self, memory_backed, monkeypatch):
        monkeypatch.setenv("SEARCH_CACHE_ENABLED", "false")
        get_settings.cache_clear()

        assert isinstance(await get_cache_service(), NullCacheService)

    async def test_reset_resolves_again_through_factory(self, memory_backed):
        first = await get_cache_service()

        await reset_cache_service()

        assert await get_cache_service() is first

    async def test_search_service_uses_resolved_cache(self, memory_backed):
        cache = await get_cache_service()
        service = await get_search_service()

        assert service._deps.cache_service is cache
