"""Providers for search analytics recording and dispatch."""

from __future__ import annotations

import asyncio
from typing import Optional

from directory_search.core.service_factory import get_service_factory
from directory_search.domain.interfaces import ISearchAnalyticsService, ISearchEventDispatcher

_analytics_service: Optional[ISearchAnalyticsService] = None
_event_dispatcher: Optional[ISearchEventDispatcher] = None
_analytics_lock = asyncio.Lock()
_dispatcher_lock = asyncio.Lock()


async def get_analytics_service() -> ISearchAnalyticsService:
    """Return singleton search analytics recorder."""
    global _analytics_service

    if _analytics_service is not None:
        return _analytics_service

    async with _analytics_lock:
        if _analytics_service is not None:
            return _analytics_service

        _analytics_service = await get_service_factory().create_analytics_service()
        return _analytics_service


async def get_event_dispatcher() -> ISearchEventDispatcher:
    """Return singleton analytics event dispatcher."""
    global _event_dispatcher

    if _event_dispatcher is not None:
        return _event_dispatcher

    async with _dispatcher_lock:
        if _event_dispatcher is not None:
            return _event_dispatcher

        _event_dispatcher = await get_service_factory().create_event_dispatcher()
        return _event_dispatcher


async def reset_analytics_services() -> None:
    """Reset cached instances (useful for tests)."""
    global _analytics_service, _event_dispatcher
    async with _analytics_lock:
        _analytics_service = None
    async with _dispatcher_lock:
        _event_dispatcher = None
