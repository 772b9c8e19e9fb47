"""Infrastructure adapters for cache stores and employee directories."""

from directory_search.infrastructure.adapters.memory_cache_adapter import MemoryCacheService
from directory_search.infrastructure.adapters.memory_employee_directory import MemoryEmployeeDirectory
from directory_search.infrastructure.adapters.null_cache_adapter import NullCacheService
from directory_search.infrastructure.adapters.redis_cache_adapter import RedisCacheService

__all__ = [
    "MemoryCacheService",
    "MemoryEmployeeDirectory",
    "NullCacheService",
    "RedisCacheService",
]
