"""PostgreSQL implementation of IEmployeeDirectory."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.exceptions import SearchUnavailableError
from directory_search.domain.interfaces import IEmployeeDirectory
from directory_search.domain.value_objects import SearchFilters, TenantId
from directory_search.infrastructure.persistence.database import SQLModelDatabaseManager
from directory_search.infrastructure.persistence.models.employee_table import EmployeeTable

logger = structlog.get_logger(__name__)


class PostgresEmployeeDirectory(IEmployeeDirectory):
    """
    Reads employee projections for one tenant from the ``employees`` table.

    Tenant, activity, soft delete and department predicates run in SQL. The
    remaining filters are applied to the projections so that title and skill
    matching behave exactly like the in-memory directory.
    """

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db_manager = db_manager

    async def list_active_employees(
        self,
        tenant_id: TenantId,
        filters: Optional[SearchFilters] = None,
    ) -> Sequence[EmployeeProjection]:
        filters = filters or SearchFilters()

        stmt = select(EmployeeTable).where(
            EmployeeTable.tenant_id == str(tenant_id),
            EmployeeTable.is_deleted.is_(False),
        )
        if not filters.include_inactive:
            stmt = stmt.where(EmployeeTable.is_active.is_(True))
        if filters.department:
            stmt = stmt.where(func.lower(EmployeeTable.department) == filters.department.lower())

        try:
            async with self._db_manager.get_session() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            logger.error("Employee store query failed", tenant_id=str(tenant_id), error=str(e))
            raise SearchUnavailableError("Employee directory unavailable") from e

        projections = [row.to_projection() for row in rows]
        return [employee for employee in projections if filters.matches(employee)]

    async def check_health(self) -> Dict[str, Any]:
        health = await self._db_manager.health_check()
        return {"service": "PostgresEmployeeDirectory", **health}
