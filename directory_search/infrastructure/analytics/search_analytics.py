"""
Search analytics recorder.

Keeps a bounded, per-tenant log of search events in process memory and
aggregates it into the statistics served by the admin stats endpoint:
- total searches and distinct queries
- average result count and execution time
- the most frequent queries
- searches per day
"""

import asyncio
from collections import Counter, defaultdict, deque
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Deque, Dict, List

import structlog

from directory_search.domain.interfaces import ISearchAnalyticsService, SearchEvent

logger = structlog.get_logger(__name__)

SEARCH_QUERY_EVENT = "search_query"
TOP_QUERIES_LIMIT = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _average(values: List[float]) -> int:
    if not values:
        return 0
    return int(round(sum(values) / len(values)))


class InMemorySearchAnalyticsService(ISearchAnalyticsService):
    """Search analytics backed by bounded in-memory event logs."""

    def __init__(
        self,
        max_events_per_tenant: int = 10000,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.max_events_per_tenant = max_events_per_tenant
        self._clock = clock
        self._events: Dict[str, Deque[SearchEvent]] = defaultdict(
            lambda: deque(maxlen=self.max_events_per_tenant)
        )
        self._lock = asyncio.Lock()
        self._stats = {
            "events_recorded": 0,
            "reports_generated": 0,
        }

    async def record_search_event(self, event: SearchEvent) -> bool:
        async with self._lock:
            self._events[event.tenant_id].append(event)
            self._stats["events_recorded"] += 1

        logger.debug(
            "Search event recorded",
            event_type=event.event_type,
            tenant_id=event.tenant_id,
            result_count=event.result_count,
        )
        return True

    async def get_search_statistics(self, tenant_id: str, days: int = 30) -> Dict[str, Any]:
        """
        Aggregate search query events of one tenant over the last ``days``.

        Click-tracking events are kept in the log but excluded from the
        aggregates, which describe executed searches only.
        """
        since = self._clock() - timedelta(days=days)

        async with self._lock:
            events = [
                event for event in self._events.get(tenant_id, ())
                if event.event_type == SEARCH_QUERY_EVENT and event.occurred_at >= since
            ]

        query_counts: Counter = Counter()
        per_query: Dict[str, Dict[str, List[float]]] = defaultdict(
            lambda: {"results": [], "times": []}
        )
        per_day: Counter = Counter()

        for event in events:
            if event.query:
                query_counts[event.query] += 1
                per_query[event.query]["results"].append(event.result_count)
                per_query[event.query]["times"].append(event.execution_time_ms)
            per_day[event.occurred_at.date().isoformat()] += 1

        top_queries = sorted(query_counts.items(), key=lambda item: (-item[1], item[0]))
        self._stats["reports_generated"] += 1

        return {
            "period": f"{days} days",
            "statistics": {
                "totalSearches": len(events),
                "uniqueQueries": len(query_counts),
                "averageResults": _average([event.result_count for event in events]),
                "averageExecutionTime": _average([event.execution_time_ms for event in events]),
            },
            "topQueries": [
                {
                    "query": query,
                    "count": count,
                    "averageResults": _average(per_query[query]["results"]),
                    "averageExecutionTime": _average(per_query[query]["times"]),
                }
                for query, count in top_queries[:TOP_QUERIES_LIMIT]
            ],
            "trends": [
                {"date": day, "searchCount": per_day[day]}
                for day in sorted(per_day)
            ],
        }

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "InMemorySearchAnalyticsService",
            "tenants": len(self._events),
            "stats": self._stats.copy(),
        }
