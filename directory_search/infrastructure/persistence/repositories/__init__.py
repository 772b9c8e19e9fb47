"""Repository implementations backed by PostgreSQL."""

from directory_search.infrastructure.persistence.repositories.employee_repository import (
    PostgresEmployeeDirectory,
)

__all__ = ["PostgresEmployeeDirectory"]
