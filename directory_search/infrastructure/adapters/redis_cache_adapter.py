"""
Redis-backed search result cache shared by every API instance.
"""

import json
from typing import Any, Dict, List, Optional

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from directory_search.domain.exceptions import CacheUnavailableError
from directory_search.domain.interfaces import ICacheService

logger = structlog.get_logger(__name__)

SCAN_BATCH_SIZE = 100
STORE_ERRORS = (RedisError, OSError)


class RedisCacheService(ICacheService):
    """
    Search result cache on Redis.

    Values are JSON documents written with ``SETEX`` so Redis owns expiry.
    Store failures never escape: they are counted and logged, reads become
    misses and writes report ``False``.
    """

    def __init__(self, redis_client: Any):
        self.redis = redis_client
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "deletes": 0, "errors": 0}

    @classmethod
    async def create(
        cls,
        redis_url: str = "redis://localhost:6379/0",
        connect_timeout: float = 5.0,
    ) -> "RedisCacheService":
        """Connect and ping once; an unreachable server raises ``CacheUnavailableError``."""
        client = aioredis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=connect_timeout,
            socket_timeout=connect_timeout,
            retry_on_timeout=True,
            health_check_interval=30,
        )

        try:
            await client.ping()
        except STORE_ERRORS as e:
            logger.error("Redis search cache unreachable", error=str(e))
            await client.aclose()
            raise CacheUnavailableError(f"Redis unreachable: {e}") from e

        logger.info("Redis search cache connected")
        return cls(client)

    def _failed(self, operation: str, error: Exception, **fields: Any) -> None:
        self._stats["errors"] += 1
        logger.error("Redis search cache operation failed", operation=operation, error=str(error), **fields)

    async def check_health(self) -> Dict[str, Any]:
        try:
            await self.redis.ping()
            info = await self.redis.info()
        except STORE_ERRORS as e:
            self._failed("health_check", e)
            return {
                "status": "unhealthy",
                "service": "RedisCacheService",
                "error": str(e),
                "stats": dict(self._stats),
            }

        return {
            "status": "healthy",
            "service": "RedisCacheService",
            "redis_version": info.get("redis_version"),
            "used_memory": info.get("used_memory"),
            "stats": dict(self._stats),
        }

    async def get(self, key: str) -> Optional[Any]:
        try:
            payload = await self.redis.get(key)
        except STORE_ERRORS as e:
            self._failed("get", e, key=key)
            return None

        if payload is None:
            self._stats["misses"] += 1
            return None

        try:
            document = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            self._stats["errors"] += 1
            logger.warning("Discarding undecodable search cache entry", key=key, error=str(e))
            return None

        self._stats["hits"] += 1
        return document

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            self._failed("encode", e, key=key)
            return False

        try:
            stored = await self.redis.setex(key, ttl, payload)
        except STORE_ERRORS as e:
            self._failed("set", e, key=key)
            return False

        if stored:
            self._stats["sets"] += 1
        return bool(stored)

    async def delete(self, key: str) -> bool:
        try:
            removed = await self.redis.delete(key)
        except STORE_ERRORS as e:
            self._failed("delete", e, key=key)
            return False

        self._stats["deletes"] += removed
        return removed > 0

    async def exists(self, key: str) -> bool:
        try:
            return await self.redis.exists(key) > 0
        except STORE_ERRORS as e:
            self._failed("exists", e, key=key)
            return False

    async def clear(self, pattern: str) -> int:
        """Delete keys matching ``pattern`` in batches walked with SCAN (never KEYS)."""
        removed = 0
        pending: List[str] = []
        try:
            async for key in self.redis.scan_iter(match=pattern, count=SCAN_BATCH_SIZE):
                pending.append(key)
                if len(pending) == SCAN_BATCH_SIZE:
                    removed += await self.redis.delete(*pending)
                    pending = []
            if pending:
                removed += await self.redis.delete(*pending)
        except STORE_ERRORS as e:
            self._failed("clear", e, pattern=pattern, removed=removed)
            return removed

        self._stats["deletes"] += removed
        logger.info("Search cache cleared", pattern=pattern, removed=removed)
        return removed

    def get_stats(self) -> Dict[str, Any]:
        lookups = self._stats["hits"] + self._stats["misses"]
        return {**self._stats, "hit_rate": self._stats["hits"] / lookups if lookups else 0.0}

    async def close(self) -> None:
        try:
            await self.redis.aclose()
        except STORE_ERRORS as e:
            logger.error("Error closing Redis search cache", error=str(e))
            return
        logger.info("Redis search cache closed")
