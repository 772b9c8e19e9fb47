"""Service factory and settings tests."""

import json

import pytest
from pydantic import ValidationError as SettingsValidationError
from unittest.mock import AsyncMock, patch

from directory_search.core.config import Settings
from directory_search.core.service_factory import ServiceFactory
from directory_search.domain.exceptions import CacheUnavailableError
from directory_search.domain.value_objects import TenantId
from directory_search.infrastructure.adapters.memory_cache_adapter import MemoryCacheService
from directory_search.infrastructure.adapters.memory_employee_directory import MemoryEmployeeDirectory
from directory_search.infrastructure.adapters.null_cache_adapter import NullCacheService
from directory_search.infrastructure.analytics.search_event_dispatcher import QueuedSearchEventDispatcher


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


# ==================== Settings ====================

class TestSettings:

    def test_defaults(self):
        settings = _settings()

        assert settings.SEARCH_CACHE_TTL == 300
        assert settings.SEARCH_LATENCY_BUDGET_MS == 500
        assert settings.DIRECTORY_BACKEND == "memory"
        assert settings.TRUST_GATEWAY_HEADERS is False

    def test_unknown_environment_falls_back_to_local(self):
        assert _settings(ENVIRONMENT="qa").ENVIRONMENT == "local"

    def test_log_level_normalized(self):
        assert _settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"LOG_LEVEL": "chatty"},
            {"LOG_FORMAT": "xml"},
            {"DIRECTORY_BACKEND": "ldap"},
            {"SEARCH_CACHE_TTL": 0},
            {"SEARCH_MAX_PAGE_SIZE": -1},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(SettingsValidationError):
            _settings(**overrides)

    def test_cors_origins(self):
        assert _settings(CORS_ORIGINS="https://a.example, https://b.example").get_cors_origins() == [
            "https://a.example",
            "https://b.example",
        ]

    def test_postgres_url_from_parts(self):
        settings = _settings(POSTGRES_USER="u", POSTGRES_PASSWORD="p", POSTGRES_HOST="db", POSTGRES_DB="d")
        assert settings.get_postgres_url() == "postgresql://u:p@db:5432/d"


# ==================== Cache selection ====================

class TestCacheSelection:

    async def test_memory_cache_by_default(self):
        factory = ServiceFactory(_settings(CACHE_MAX_ENTRIES=50))

        cache = await factory.create_cache_service()

        assert isinstance(cache, MemoryCacheService)
        assert cache.max_size == 50
        assert await factory.create_cache_service() is cache

    async def test_disabled_cache(self):
        factory = ServiceFactory(_settings(SEARCH_CACHE_ENABLED=False))

        cache = await factory.create_cache_service()

        assert isinstance(cache, NullCacheService)
        assert cache.reason == "disabled"

    async def test_unreachable_redis_degrades_to_null_cache(self):
        factory = ServiceFactory(_settings(REDIS_URL="redis://cache.invalid:6379/0"))

        with patch(
            "directory_search.infrastructure.adapters.redis_cache_adapter.RedisCacheService.create",
            new=AsyncMock(side_effect=CacheUnavailableError("refused")),
        ):
            cache = await factory.create_cache_service()

        assert isinstance(cache, NullCacheService)
        health = await cache.check_health()
        assert health["status"] == "degraded"

    async def test_reachable_redis_is_used(self):
        factory = ServiceFactory(_settings(REDIS_URL="redis://localhost:6379/0", CACHE_CONNECT_TIMEOUT=1.5))
        redis_cache = object()

        with patch(
            "directory_search.infrastructure.adapters.redis_cache_adapter.RedisCacheService.create",
            new=AsyncMock(return_value=redis_cache),
        ) as create:
            cache = await factory.create_cache_service()

        assert cache is redis_cache
        create.assert_awaited_once_with("redis://localhost:6379/0", connect_timeout=1.5)


# ==================== Directory and analytics ====================

class TestDirectoryAndAnalytics:

    async def test_memory_directory_from_seed_file(self, tmp_path):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps([{"id": "1", "tenantId": "acme", "firstName": "John", "lastName": "Doe"}]))
        factory = ServiceFactory(_settings(DIRECTORY_SEED_FILE=str(seed)))

        directory = await factory.create_employee_directory()

        assert isinstance(directory, MemoryEmployeeDirectory)
        assert len(await directory.list_active_employees(TenantId("acme"))) == 1

    async def test_dispatcher_shares_recorder(self):
        factory = ServiceFactory(_settings(ANALYTICS_QUEUE_SIZE=5))

        dispatcher = await factory.create_event_dispatcher()
        analytics = await factory.create_analytics_service()

        assert isinstance(dispatcher, QueuedSearchEventDispatcher)
        assert dispatcher._analytics is analytics

    async def test_close_all_releases_services(self):
        factory = ServiceFactory(_settings())
        cache = await factory.create_cache_service()
        await cache.set("k", 1)
        await factory.create_event_dispatcher()

        await factory.close_all()

        assert await cache.get("k") is None
        assert factory._service_cache == {}
