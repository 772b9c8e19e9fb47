"""Singleton providers resolving services through the service factory."""

from directory_search.infrastructure.providers.analytics_provider import (
    get_analytics_service,
    get_event_dispatcher,
    reset_analytics_services,
)
from directory_search.infrastructure.providers.search_provider import (
    get_cache_service,
    get_employee_directory,
    get_search_service,
    reset_cache_service,
    reset_search_services,
)


async def reset_all_providers() -> None:
    """Drop every provider singleton (useful for tests and shutdown)."""
    await reset_search_services()
    await reset_analytics_services()
    await reset_cache_service()


__all__ = [
    "get_analytics_service",
    "get_cache_service",
    "get_employee_directory",
    "get_event_dispatcher",
    "get_search_service",
    "reset_all_providers",
    "reset_analytics_services",
    "reset_cache_service",
    "reset_search_services",
]
