"""Pytest fixtures for provider-based architecture."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import List

import pytest

from directory_search.application.dependencies.search_dependencies import SearchDependencies
from directory_search.application.search.search_application_service import SearchApplicationService
from directory_search.core.config import get_settings
from directory_search.core.service_factory import reset_service_factory
from directory_search.domain.entities.employee import EmployeeProjection
from directory_search.domain.value_objects import TenantId
from directory_search.infrastructure.analytics.search_analytics import InMemorySearchAnalyticsService
from directory_search.infrastructure.providers import reset_all_providers
from tests.mocks.mock_services import (
    MockCacheService,
    MockEmployeeDirectory,
    MockEventDispatcher,
)

TENANT = "acme"
OTHER_TENANT = "globex"


@pytest.fixture(autouse=True)
async def reset_provider_state() -> AsyncIterator[None]:
    """Ensure each test starts with clean provider singletons and settings."""
    get_settings.cache_clear()
    await reset_all_providers()
    reset_service_factory()
    yield
    await reset_all_providers()
    reset_service_factory()
    get_settings.cache_clear()


def make_employee(
    employee_id: str,
    first_name: str,
    last_name: str,
    tenant_id: str = TENANT,
    title: str = None,
    department: str = None,
    skills=(),
    is_active: bool = True,
) -> EmployeeProjection:
    return EmployeeProjection(
        id=employee_id,
        tenant_id=tenant_id,
        first_name=first_name,
        last_name=last_name,
        email=f"{first_name}.{last_name}@{tenant_id}.example".lower(),
        title=title,
        department=department,
        skills=tuple(skills),
        is_active=is_active,
    )


@pytest.fixture
def tenant_id() -> TenantId:
    return TenantId(TENANT)


@pytest.fixture
def other_tenant_id() -> TenantId:
    return TenantId(OTHER_TENANT)


@pytest.fixture
def john_doe() -> EmployeeProjection:
    return make_employee(
        "emp-john",
        "John",
        "Doe",
        title="Software Engineer",
        department="Engineering",
        skills=("Python", "FastAPI"),
    )


@pytest.fixture
def jane_smith() -> EmployeeProjection:
    return make_employee(
        "emp-jane",
        "Jane",
        "Smith",
        title="Product Manager",
        department="Product",
        skills=("Roadmapping",),
    )


@pytest.fixture
def scenario_employees(john_doe, jane_smith) -> List[EmployeeProjection]:
    """John Doe in Engineering and Jane Smith in Product, both in tenant ``acme``."""
    return [john_doe, jane_smith]


@pytest.fixture
def other_tenant_employees() -> List[EmployeeProjection]:
    return [
        make_employee(
            "emp-johan",
            "Johan",
            "Berg",
            tenant_id=OTHER_TENANT,
            title="Software Engineer",
            department="Engineering",
        ),
    ]


@pytest.fixture
def mock_directory(scenario_employees, other_tenant_employees) -> MockEmployeeDirectory:
    return MockEmployeeDirectory(scenario_employees + other_tenant_employees)


@pytest.fixture
def mock_cache() -> MockCacheService:
    return MockCacheService()


@pytest.fixture
def mock_dispatcher() -> MockEventDispatcher:
    return MockEventDispatcher()


@pytest.fixture
def analytics_service() -> InMemorySearchAnalyticsService:
    return InMemorySearchAnalyticsService()


@pytest.fixture
def search_dependencies(mock_directory, mock_cache, mock_dispatcher, analytics_service) -> SearchDependencies:
    return SearchDependencies(
        employee_directory=mock_directory,
        cache_service=mock_cache,
        event_dispatcher=mock_dispatcher,
        analytics_service=analytics_service,
    )


@pytest.fixture
def search_service(search_dependencies) -> SearchApplicationService:
    return SearchApplicationService(search_dependencies)
