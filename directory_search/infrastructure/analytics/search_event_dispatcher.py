"""Fire-and-forget delivery of search events to the analytics recorder."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import structlog

from directory_search.domain.interfaces import (
    ISearchAnalyticsService,
    ISearchEventDispatcher,
    SearchEvent,
)

logger = structlog.get_logger(__name__)


class QueuedSearchEventDispatcher(ISearchEventDispatcher):
    """
    Hands events to a bounded queue drained by one background worker.

    ``dispatch`` never waits: when the queue is full the event is dropped and
    logged. Recorder failures are logged by the worker and never reach the
    request that produced the event.
    """

    def __init__(
        self,
        analytics_service: ISearchAnalyticsService,
        max_queue_size: int = 1000,
        drain_timeout: float = 5.0,
    ):
        self._analytics = analytics_service
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._drain_timeout = drain_timeout
        self._worker: Optional[asyncio.Task] = None
        self._closed = False
        self._stats = {
            "dispatched": 0,
            "recorded": 0,
            "dropped": 0,
            "failed": 0,
        }

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run())

    def dispatch(self, event: SearchEvent) -> bool:
        if self._closed:
            self._stats["dropped"] += 1
            logger.warning("Analytics dispatcher closed, dropping event", tenant_id=event.tenant_id)
            return False

        self._ensure_worker()
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._stats["dropped"] += 1
            logger.warning(
                "Analytics queue full, dropping event",
                tenant_id=event.tenant_id,
                queue_size=self._queue.qsize(),
            )
            return False

        self._stats["dispatched"] += 1
        return True

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._analytics.record_search_event(event)
                self._stats["recorded"] += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._stats["failed"] += 1
                logger.error(
                    "Failed to record search event",
                    tenant_id=event.tenant_id,
                    event_type=event.event_type,
                    error=str(e),
                )
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Wait until every queued event has been handled."""
        if self._worker is None:
            return
        await self._queue.join()

    async def close(self) -> None:
        self._closed = True
        if self._worker is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=self._drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Analytics queue not drained before shutdown",
                pending=self._queue.qsize(),
            )

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Analytics dispatcher closed", **self._stats)

    def get_stats(self) -> Dict[str, Any]:
        return {**self._stats, "pending": self._queue.qsize()}
