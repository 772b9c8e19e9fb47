"""Unit tests for MemoryEmployeeDirectory and NullCacheService."""

import json

import pytest

from directory_search.domain.exceptions import ConfigurationError
from directory_search.domain.value_objects import SearchFilters, TenantId
from directory_search.infrastructure.adapters.memory_employee_directory import MemoryEmployeeDirectory
from directory_search.infrastructure.adapters.null_cache_adapter import NullCacheService
from tests.conftest import make_employee


# ==================== MemoryEmployeeDirectory ====================

class TestMemoryEmployeeDirectory:

    @pytest.fixture
    def directory(self, scenario_employees, other_tenant_employees):
        retired = make_employee("emp-old", "Olga", "Retired", is_active=False)
        return MemoryEmployeeDirectory(scenario_employees + other_tenant_employees + [retired])

    async def test_scoped_to_tenant_and_active(self, directory, tenant_id):
        employees = await directory.list_active_employees(tenant_id)

        assert {employee.id for employee in employees} == {"emp-john", "emp-jane"}

    async def test_include_inactive(self, directory, tenant_id):
        employees = await directory.list_active_employees(tenant_id, SearchFilters(include_inactive=True))

        assert "emp-old" in {employee.id for employee in employees}

    async def test_filters_applied(self, directory, tenant_id):
        employees = await directory.list_active_employees(tenant_id, SearchFilters(department="product"))

        assert [employee.id for employee in employees] == ["emp-jane"]

    async def test_unknown_tenant_is_empty(self, directory):
        assert await directory.list_active_employees(TenantId("initech")) == []

    async def test_upsert_and_remove(self, directory, tenant_id):
        await directory.upsert(make_employee("emp-new", "Nia", "Long"))
        assert len(await directory.list_active_employees(tenant_id)) == 3

        assert await directory.remove(tenant_id, "emp-new") is True
        assert await directory.remove(tenant_id, "emp-new") is False

    def test_invalid_tenant_rejected(self):
        with pytest.raises(ValueError):
            MemoryEmployeeDirectory([make_employee("e1", "A", "B", tenant_id="bad:tenant")])

    async def test_health(self, directory):
        health = await directory.check_health()

        assert health["status"] == "healthy"
        assert health["tenants"] == 2
        assert health["employees"] == 4


class TestSeedFile:

    async def test_load_from_list(self, tmp_path, tenant_id):
        seed = tmp_path / "employees.json"
        seed.write_text(json.dumps([
            {"id": "1", "tenantId": "acme", "firstName": "John", "lastName": "Doe", "skills": ["Go"]},
            {"id": "2", "tenantId": "acme", "firstName": "Jane", "lastName": "Smith", "isActive": False},
        ]))

        directory = MemoryEmployeeDirectory.from_json_file(seed)
        employees = await directory.list_active_employees(tenant_id)

        assert [employee.first_name for employee in employees] == ["John"]
        assert employees[0].skills == ("Go",)

    def test_load_from_wrapped_object(self, tmp_path):
        seed = tmp_path / "employees.json"
        seed.write_text(json.dumps({"employees": [{"id": "1", "tenantId": "acme", "firstName": "A", "lastName": "B"}]}))

        assert isinstance(MemoryEmployeeDirectory.from_json_file(str(seed)), MemoryEmployeeDirectory)

    @pytest.mark.parametrize("content", ["not json", '"a string"', '[{"firstName": "no id"}]'])
    def test_invalid_seed_file(self, tmp_path, content):
        seed = tmp_path / "employees.json"
        seed.write_text(content)

        with pytest.raises(ConfigurationError):
            MemoryEmployeeDirectory.from_json_file(seed)

    def test_missing_seed_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            MemoryEmployeeDirectory.from_json_file(tmp_path / "absent.json")


# ==================== NullCacheService ====================

class TestNullCacheService:

    async def test_never_stores(self):
        cache = NullCacheService()

        assert await cache.set("k", 1) is False
        assert await cache.get("k") is None
        assert await cache.exists("k") is False
        assert await cache.delete("k") is False
        assert await cache.clear("search:acme:*") == 0

    async def test_disabled_cache_is_healthy(self):
        health = await NullCacheService().check_health()
        assert health["status"] == "healthy"

    async def test_unreachable_store_is_degraded(self):
        health = await NullCacheService("redis_unavailable").check_health()
        assert health["status"] == "degraded"
        assert health["reason"] == "redis_unavailable"
