"""
In-process search result cache for single-instance deployments and tests.
"""

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import structlog

from directory_search.domain.interfaces import ICacheService

logger = structlog.get_logger(__name__)


@dataclass
class CachedEntry:
    """Stored value and the instant after which it is no longer served."""
    value: Any
    stored_at: float
    expires_at: float


class MemoryCacheService(ICacheService):
    """
    Bounded TTL cache kept in an insertion-ordered dict.

    Entries are live strictly before ``expires_at``; a read at or after that
    instant is a miss. When full, the entry stored first is evicted. The
    clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        max_size: int = 10000,
        clock: Callable[[], float] = time.time,
        cleanup_interval: float = 60.0,
    ):
        self.max_size = max_size
        self._clock = clock
        self._cleanup_interval = cleanup_interval
        self._entries: "OrderedDict[str, CachedEntry]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._sweeper: Optional[asyncio.Task] = None
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "deletes": 0,
            "evictions": 0,
            "expired": 0,
        }

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "MemoryCacheService",
            "entries": len(self._entries),
            "max_size": self.max_size,
            "stats": dict(self._stats),
        }

    def _live_entry(self, key: str) -> Optional[CachedEntry]:
        """Entry for ``key`` if present and unexpired; expired entries are dropped. Caller holds the lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            self._stats["expired"] += 1
            return None
        return entry

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._stats["misses"] += 1
                logger.debug("Search cache miss", key=key)
                return None
            self._stats["hits"] += 1

        logger.debug("Search cache hit", key=key)
        return entry.value

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self._start_sweeper()
        now = self._clock()
        async with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug("Search cache eviction", key=evicted_key)

            self._entries[key] = CachedEntry(value=value, stored_at=now, expires_at=now + ttl)
            self._stats["sets"] += 1

        logger.debug("Search cache store", key=key, ttl=ttl)
        return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._stats["deletes"] += 1
        return removed

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return self._live_entry(key) is not None

    async def clear(self, pattern: str) -> int:
        """Remove keys matching ``prefix*`` (or exactly ``pattern`` without a trailing ``*``)."""
        async with self._lock:
            if pattern.endswith("*"):
                prefix = pattern[:-1]
                doomed: List[str] = [key for key in self._entries if key.startswith(prefix)]
            else:
                doomed = [pattern] if pattern in self._entries else []

            for key in doomed:
                del self._entries[key]
            self._stats["deletes"] += len(doomed)

        logger.info("Search cache cleared", pattern=pattern, removed=len(doomed))
        return len(doomed)

    async def purge_expired(self) -> int:
        """Drop every expired entry, returning how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
            self._stats["expired"] += len(expired)

        if expired:
            logger.debug("Search cache sweep", expired=len(expired))
        return len(expired)

    def _start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_periodically())

    async def _sweep_periodically(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            try:
                await self.purge_expired()
            except Exception as e:
                logger.error("Search cache sweep failed", error=str(e))

    def get_stats(self) -> Dict[str, Any]:
        lookups = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "entries": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": self._stats["hits"] / lookups if lookups else 0.0,
        }

    async def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None

        async with self._lock:
            self._entries.clear()

        logger.info("Memory search cache closed")
