"""
Async SQLModel engine for the PostgreSQL employee store.

The search service only reads employee rows, so sessions handed out here are
never committed; each one is rolled back and closed when the block exits.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from directory_search.core.config import Settings

logger = structlog.get_logger(__name__)

ASYNC_DRIVER_PREFIXES = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}


def to_async_url(url: str) -> str:
    """Rewrite a plain PostgreSQL URL to the asyncpg dialect."""
    for prefix, replacement in ASYNC_DRIVER_PREFIXES.items():
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


class SQLModelDatabaseManager:
    """Owns the async engine and session factory for the employee store."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker] = None

    async def initialize(self) -> None:
        """Create the pooled engine and prove connectivity with ``SELECT 1``."""
        if self.engine is not None:
            return

        database_url = to_async_url(self.settings.get_postgres_url())
        engine = create_async_engine(
            database_url,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_pre_ping=True,
            connect_args={"server_settings": {"application_name": "directory-search"}},
        )

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Employee store connection failed", error=str(e))
            await engine.dispose()
            raise

        self.engine = engine
        self._sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("Employee store connected", host=database_url.rsplit("@", 1)[-1])

    async def create_tables(self) -> None:
        """Create the ``employees`` table for local development databases."""
        if self.engine is None:
            raise RuntimeError("Database manager not initialized")

        from directory_search.infrastructure.persistence.models import EmployeeTable  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Employee store tables ensured")

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Read-only session scope.

        Usage:
            async with db_manager.get_session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        """
        if self._sessions is None:
            raise RuntimeError("Database manager not initialized")

        session = self._sessions()
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()

    async def health_check(self) -> Dict[str, Any]:
        if self.engine is None:
            return {"status": "unhealthy", "error": "Database manager not initialized"}

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Employee store health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy",
            "pool_size": self.engine.pool.size(),
            "checked_out": self.engine.pool.checkedout(),
        }

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Employee store engine disposed")
        self.engine = None
        self._sessions = None
