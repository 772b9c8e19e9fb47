"""
Service Factory - Creates the search engine's collaborators from settings
"""

from typing import Dict, Any, Type, Optional
import structlog

from directory_search.core.config import Settings, get_settings
from directory_search.domain.exceptions import CacheUnavailableError
from directory_search.domain.interfaces import (
    ICacheService,
    IEmployeeDirectory,
    ISearchAnalyticsService,
    ISearchEventDispatcher,
)

logger = structlog.get_logger(__name__)


class ServiceFactory:
    """Factory for creating environment-appropriate services"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._service_cache: Dict[Type, Any] = {}
        self._db_manager = None

    async def create_cache_service(self) -> ICacheService:
        """
        Create the result cache, deciding once which store backs it.

        Redis is used when configured and reachable; an unreachable Redis
        degrades to the null cache. Without Redis the in-memory cache is used
        unless caching is disabled.
        """
        if ICacheService in self._service_cache:
            return self._service_cache[ICacheService]

        if self.settings.REDIS_URL:
            service = await self._create_redis_cache()
        elif self.settings.SEARCH_CACHE_ENABLED:
            service = self._create_memory_cache()
        else:
            service = self._create_null_cache("disabled")

        self._service_cache[ICacheService] = service
        return service

    async def create_employee_directory(self) -> IEmployeeDirectory:
        """Create the employee store configured by DIRECTORY_BACKEND"""
        if IEmployeeDirectory in self._service_cache:
            return self._service_cache[IEmployeeDirectory]

        if self.settings.DIRECTORY_BACKEND == "postgres":
            service = await self._create_postgres_directory()
        else:
            service = self._create_memory_directory()

        self._service_cache[IEmployeeDirectory] = service
        return service

    async def create_analytics_service(self) -> ISearchAnalyticsService:
        """Create analytics recorder"""
        if ISearchAnalyticsService in self._service_cache:
            return self._service_cache[ISearchAnalyticsService]

        from directory_search.infrastructure.analytics.search_analytics import (
            InMemorySearchAnalyticsService,
        )

        service = InMemorySearchAnalyticsService(
            max_events_per_tenant=self.settings.ANALYTICS_RETENTION_EVENTS
        )

        self._service_cache[ISearchAnalyticsService] = service
        return service

    async def create_event_dispatcher(self) -> ISearchEventDispatcher:
        """Create the fire-and-forget analytics dispatcher"""
        if ISearchEventDispatcher in self._service_cache:
            return self._service_cache[ISearchEventDispatcher]

        from directory_search.infrastructure.analytics.search_event_dispatcher import (
            QueuedSearchEventDispatcher,
        )

        analytics_service = await self.create_analytics_service()
        service = QueuedSearchEventDispatcher(
            analytics_service,
            max_queue_size=self.settings.ANALYTICS_QUEUE_SIZE,
        )

        self._service_cache[ISearchEventDispatcher] = service
        return service

    # Cache store creation
    async def _create_redis_cache(self) -> ICacheService:
        """Create Redis cache service, degrading to the null cache when unreachable"""
        from directory_search.infrastructure.adapters.redis_cache_adapter import RedisCacheService

        try:
            return await RedisCacheService.create(
                self.settings.REDIS_URL,
                connect_timeout=self.settings.CACHE_CONNECT_TIMEOUT,
            )
        except CacheUnavailableError as e:
            logger.warning("Redis unavailable, search results will not be cached", error=str(e))
            return self._create_null_cache("redis_unavailable")

    def _create_memory_cache(self) -> ICacheService:
        """Create in-memory cache service"""
        from directory_search.infrastructure.adapters.memory_cache_adapter import MemoryCacheService
        return MemoryCacheService(max_size=self.settings.CACHE_MAX_ENTRIES)

    def _create_null_cache(self, reason: str) -> ICacheService:
        from directory_search.infrastructure.adapters.null_cache_adapter import NullCacheService
        return NullCacheService(reason=reason)

    # Employee store creation
    def _create_memory_directory(self) -> IEmployeeDirectory:
        from directory_search.infrastructure.adapters.memory_employee_directory import (
            MemoryEmployeeDirectory,
        )

        if self.settings.DIRECTORY_SEED_FILE:
            return MemoryEmployeeDirectory.from_json_file(self.settings.DIRECTORY_SEED_FILE)
        return MemoryEmployeeDirectory()

    async def _create_postgres_directory(self) -> IEmployeeDirectory:
        from directory_search.infrastructure.persistence.database import SQLModelDatabaseManager
        from directory_search.infrastructure.persistence.repositories.employee_repository import (
            PostgresEmployeeDirectory,
        )

        self._db_manager = SQLModelDatabaseManager(self.settings)
        await self._db_manager.initialize()
        if self.settings.is_local():
            await self._db_manager.create_tables()
        return PostgresEmployeeDirectory(self._db_manager)

    async def close_all(self) -> None:
        """Release resources held by created services"""
        dispatcher = self._service_cache.get(ISearchEventDispatcher)
        if dispatcher is not None:
            await dispatcher.close()

        cache = self._service_cache.get(ICacheService)
        if cache is not None:
            await cache.close()

        if self._db_manager is not None:
            await self._db_manager.close()
            self._db_manager = None

        self.clear_cache()

    def clear_cache(self):
        """Clear service cache"""
        self._service_cache.clear()


# Singleton factory instance
_factory: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """Get singleton service factory"""
    global _factory
    if _factory is None:
        _factory = ServiceFactory()
    return _factory


def reset_service_factory() -> None:
    """Drop the singleton factory (useful for tests)."""
    global _factory
    _factory = None
