"""SQLModel table definitions."""

from directory_search.infrastructure.persistence.models.employee_table import EmployeeTable

__all__ = ["EmployeeTable"]
