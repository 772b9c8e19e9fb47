"""
Null Cache Service - used when caching is disabled or the cache store is unreachable
"""

from typing import Any, Dict, Optional

from directory_search.domain.interfaces import ICacheService


class NullCacheService(ICacheService):
    """Cache that never stores anything; every read is a miss."""

    def __init__(self, reason: str = "disabled"):
        self.reason = reason

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "degraded" if self.reason != "disabled" else "healthy",
            "service": "NullCacheService",
            "reason": self.reason,
        }

    async def get(self, key: str) -> Optional[Any]:
        return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        return False

    async def delete(self, key: str) -> bool:
        return False

    async def exists(self, key: str) -> bool:
        return False

    async def clear(self, pattern: str) -> int:
        return 0
