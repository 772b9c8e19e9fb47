"""Unit tests for RedisCacheService against a mocked client."""

import json

import pytest
from unittest.mock import AsyncMock, Mock, patch
from redis.exceptions import ConnectionError as RedisConnectionError

from directory_search.domain.exceptions import CacheUnavailableError
from directory_search.infrastructure.adapters.redis_cache_adapter import RedisCacheService


def _scan(keys):
    async def scan_iter(match=None, count=None):
        for key in keys:
            yield key
    return scan_iter


@pytest.fixture
def redis_client():
    client = Mock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.info = AsyncMock(return_value={"redis_version": "7.2.0"})
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def cache(redis_client):
    return RedisCacheService(redis_client)


class TestRedisCacheReadWrite:

    async def test_set_serializes_json_with_ttl(self, cache, redis_client):
        assert await cache.set("k", {"total": 1}, ttl=300) is True

        redis_client.setex.assert_awaited_once_with("k", 300, json.dumps({"total": 1}))

    async def test_get_deserializes_json(self, cache, redis_client):
        redis_client.get.return_value = '{"total": 1}'

        assert await cache.get("k") == {"total": 1}

    async def test_get_miss(self, cache):
        assert await cache.get("k") is None

    async def test_undecodable_entry_is_a_miss(self, cache, redis_client):
        redis_client.get.return_value = "not-json"

        assert await cache.get("k") is None


class TestRedisCacheFailures:

    async def test_get_error_is_a_miss(self, cache, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        assert await cache.get("k") is None
        assert cache.get_stats()["errors"] == 1

    async def test_set_error_returns_false(self, cache, redis_client):
        redis_client.setex.side_effect = RedisConnectionError("down")

        assert await cache.set("k", {"a": 1}) is False

    async def test_unhealthy_when_ping_fails(self, cache, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("down")

        health = await cache.check_health()

        assert health["status"] == "unhealthy"

    async def test_create_raises_cache_unavailable(self, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("refused")

        with patch(
            "directory_search.infrastructure.adapters.redis_cache_adapter.aioredis.from_url",
            return_value=redis_client,
        ):
            with pytest.raises(CacheUnavailableError):
                await RedisCacheService.create("redis://localhost:6390/0", connect_timeout=0.1)

        redis_client.aclose.assert_awaited_once()


class TestRedisCacheClear:

    async def test_clear_deletes_scanned_keys(self, cache, redis_client):
        redis_client.scan_iter = _scan(["search:acme:a", "search:acme:b"])
        redis_client.delete.return_value = 2

        assert await cache.clear("search:acme:*") == 2
        redis_client.delete.assert_awaited_once_with("search:acme:a", "search:acme:b")

    async def test_clear_batches_large_scans(self, cache, redis_client):
        keys = [f"search:acme:{index}" for index in range(150)]
        redis_client.scan_iter = _scan(keys)
        redis_client.delete.side_effect = lambda *batch: len(batch)

        assert await cache.clear("search:acme:*") == 150
        assert redis_client.delete.await_count == 2

    async def test_clear_nothing_matched(self, cache, redis_client):
        redis_client.scan_iter = _scan([])

        assert await cache.clear("search:acme:*") == 0
        redis_client.delete.assert_not_awaited()
