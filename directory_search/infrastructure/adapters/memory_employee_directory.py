"""
In-memory employee directory for local development, demos and tests.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import structlog

from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.exceptions import ConfigurationError
from directory_search.domain.interfaces import IEmployeeDirectory
from directory_search.domain.value_objects import SearchFilters, TenantId

logger = structlog.get_logger(__name__)


class MemoryEmployeeDirectory(IEmployeeDirectory):
    """Employee projections held per tenant in process memory."""

    def __init__(self, employees: Optional[Iterable[EmployeeProjection]] = None):
        self._employees: Dict[str, Dict[str, EmployeeProjection]] = {}
        self._lock = asyncio.Lock()
        for employee in employees or ():
            self._store(employee)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "MemoryEmployeeDirectory":
        """Load a directory from a JSON list of camelCase employee records."""
        seed_path = Path(path)
        try:
            payload = json.loads(seed_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot load employee seed file {seed_path}: {e}") from e

        if isinstance(payload, dict):
            payload = payload.get("employees", [])
        if not isinstance(payload, list):
            raise ConfigurationError(f"Employee seed file {seed_path} must contain a list")

        try:
            employees = [EmployeeProjection.from_dict(record) for record in payload]
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Invalid employee record in {seed_path}: {e}") from e

        logger.info("Employee directory seeded", path=str(seed_path), employees=len(employees))
        return cls(employees)

    def _store(self, employee: EmployeeProjection) -> None:
        TenantId(employee.tenant_id)
        self._employees.setdefault(employee.tenant_id, {})[employee.id] = employee

    async def upsert(self, employee: EmployeeProjection) -> None:
        async with self._lock:
            self._store(employee)

    async def remove(self, tenant_id: TenantId, employee_id: str) -> bool:
        async with self._lock:
            return self._employees.get(str(tenant_id), {}).pop(employee_id, None) is not None

    async def list_active_employees(
        self,
        tenant_id: TenantId,
        filters: Optional[SearchFilters] = None,
    ) -> Sequence[EmployeeProjection]:
        filters = filters or SearchFilters()
        async with self._lock:
            tenant_employees: List[EmployeeProjection] = list(
                self._employees.get(str(tenant_id), {}).values()
            )
        return [employee for employee in tenant_employees if filters.matches(employee)]

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "MemoryEmployeeDirectory",
            "tenants": len(self._employees),
            "employees": sum(len(records) for records in self._employees.values()),
        }
