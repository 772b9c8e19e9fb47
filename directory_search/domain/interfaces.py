"""Domain-layer service interfaces.

These abstractions define the stable contracts that the application layer relies on,
while infrastructure adapters provide concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.value_objects import SearchFilters, TenantId


class IHealthCheck:
    """Health check interface mixin."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """Return health check details."""
        pass


class ICacheService(IHealthCheck, ABC):
    """Cache service interface.

    Implementations never raise on store failures: a failed read is a miss
    and a failed write returns False.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Set value in cache with TTL."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        pass

    @abstractmethod
    async def clear(self, pattern: str) -> int:
        """Delete keys matching a ``prefix*`` pattern, returning the count removed."""
        pass

    async def close(self) -> None:
        """Release connections and background tasks."""
        return None


class IEmployeeDirectory(IHealthCheck, ABC):
    """Read-only access to a tenant's employee set."""

    @abstractmethod
    async def list_active_employees(
        self,
        tenant_id: TenantId,
        filters: Optional[SearchFilters] = None,
    ) -> Sequence[EmployeeProjection]:
        """Return employees of one tenant that pass ``filters``.

        Inactive and soft-deleted records are excluded unless
        ``filters.include_inactive`` is set.

        Raises:
            SearchUnavailableError: if the store cannot be queried
        """
        pass


@dataclass
class SearchEvent:
    """Analytics record emitted after a search or a result click."""

    tenant_id: str
    query: str
    result_count: int
    execution_time_ms: float
    user_id: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    clicked_result: Optional[str] = None
    event_type: str = "search_query"
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenantId": self.tenant_id,
            "userId": self.user_id,
            "eventType": self.event_type,
            "query": self.query,
            "resultCount": self.result_count,
            "executionTimeMs": self.execution_time_ms,
            "filters": self.filters,
            "clickedResult": self.clicked_result,
            "occurredAt": self.occurred_at.isoformat(),
        }


class ISearchAnalyticsService(IHealthCheck, ABC):
    """Search analytics collaborator."""

    @abstractmethod
    async def record_search_event(self, event: SearchEvent) -> bool:
        """Persist a search event."""
        pass

    @abstractmethod
    async def get_search_statistics(self, tenant_id: str, days: int = 30) -> Dict[str, Any]:
        """Aggregate search events of one tenant over the last ``days``."""
        pass


class ISearchEventDispatcher(ABC):
    """Fire-and-forget hand-off of analytics events."""

    @abstractmethod
    def dispatch(self, event: SearchEvent) -> bool:
        """Queue an event without waiting for it to be recorded."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Drain pending events and stop background work."""
        pass


__all__ = [
    "IHealthCheck",
    "ICacheService",
    "IEmployeeDirectory",
    "SearchEvent",
    "ISearchAnalyticsService",
    "ISearchEventDispatcher",
]
