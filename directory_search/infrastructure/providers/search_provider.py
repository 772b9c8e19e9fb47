"""Providers for the search service and the collaborators it is built from."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from directory_search.application.dependencies.search_dependencies import SearchDependencies
from directory_search.application.search.request_normalizer import SearchRequestNormalizer
from directory_search.application.search.search_application_service import SearchApplicationService
from directory_search.core.config import get_settings
from directory_search.core.service_factory import get_service_factory
from directory_search.domain.interfaces import ICacheService, IEmployeeDirectory
from directory_search.infrastructure.providers.analytics_provider import (
    get_analytics_service,
    get_event_dispatcher,
)

logger = structlog.get_logger(__name__)

_cache_service: Optional[ICacheService] = None
_employee_directory: Optional[IEmployeeDirectory] = None
_search_service: Optional[SearchApplicationService] = None

_cache_lock = asyncio.Lock()
_directory_lock = asyncio.Lock()
_search_lock = asyncio.Lock()


async def get_cache_service() -> ICacheService:
    """
    Return the search result cache chosen for this process.

    The factory decides once between Redis, memory and the null cache.
    """
    global _cache_service

    if _cache_service is not None:
        return _cache_service

    async with _cache_lock:
        if _cache_service is not None:
            return _cache_service

        cache_service = await get_service_factory().create_cache_service()
        logger.info("Search result cache resolved", backend=type(cache_service).__name__)
        _cache_service = cache_service
        return _cache_service


async def reset_cache_service() -> None:
    """Forget the resolved cache; the factory still owns closing it."""
    global _cache_service
    async with _cache_lock:
        _cache_service = None


async def get_employee_directory() -> IEmployeeDirectory:
    """Return singleton employee directory."""
    global _employee_directory

    if _employee_directory is not None:
        return _employee_directory

    async with _directory_lock:
        if _employee_directory is not None:
            return _employee_directory

        _employee_directory = await get_service_factory().create_employee_directory()
        return _employee_directory


async def get_search_service() -> SearchApplicationService:
    """Return singleton search application service."""
    global _search_service

    if _search_service is not None:
        return _search_service

    async with _search_lock:
        if _search_service is not None:
            return _search_service

        settings = get_settings()
        dependencies = SearchDependencies(
            employee_directory=await get_employee_directory(),
            cache_service=await get_cache_service(),
            event_dispatcher=await get_event_dispatcher(),
            analytics_service=await get_analytics_service(),
            normalizer=SearchRequestNormalizer(
                default_page_size=settings.SEARCH_DEFAULT_PAGE_SIZE,
                max_page_size=settings.SEARCH_MAX_PAGE_SIZE,
                max_query_length=settings.SEARCH_MAX_QUERY_LENGTH,
            ),
            cache_ttl_seconds=settings.SEARCH_CACHE_TTL,
            latency_budget_ms=settings.SEARCH_LATENCY_BUDGET_MS,
        )
        _search_service = SearchApplicationService(dependencies)
        return _search_service


async def reset_search_services() -> None:
    """Reset cached instances (useful for tests)."""
    global _employee_directory, _search_service
    async with _directory_lock:
        _employee_directory = None
    async with _search_lock:
        _search_service = None
