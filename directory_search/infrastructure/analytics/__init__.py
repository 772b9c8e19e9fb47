"""Search analytics recording and dispatch."""

from directory_search.infrastructure.analytics.search_analytics import InMemorySearchAnalyticsService
from directory_search.infrastructure.analytics.search_event_dispatcher import QueuedSearchEventDispatcher

__all__ = ["InMemorySearchAnalyticsService", "QueuedSearchEventDispatcher"]
