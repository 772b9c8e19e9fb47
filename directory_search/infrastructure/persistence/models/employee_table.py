"""
SQLModel table for the employee records read by directory search.

The search engine never writes to this table; records are owned by the
HR system that populates it.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from directory_search.domain.entities.employee import EmployeeProjection


class EmployeeTable(SQLModel, table=True):
    """Employee record with soft delete support."""

    __tablename__ = "employees"

    __table_args__ = (
        Index("idx_employees_tenant_active", "tenant_id", "is_active", "is_deleted"),
        Index("idx_employees_tenant_department", "tenant_id", "department"),
    )

    id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Employee identifier"
    )
    tenant_id: str = Field(
        sa_column=Column(String(128), nullable=False, index=True),
        description="Tenant identifier for multi-tenant isolation"
    )
    first_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="First name"
    )
    last_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Last name"
    )
    email: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Work email"
    )
    title: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Job title"
    )
    department: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Department name"
    )
    skills: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, default=list),
        description="Skill names"
    )
    photo_url: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Profile photo URL"
    )
    is_active: bool = Field(default=True, description="Employment is active")
    is_deleted: bool = Field(default=False, description="Soft delete flag")
    deleted_at: Optional[datetime] = Field(default=None, description="Soft delete timestamp")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Record creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.utcnow, description="Record last update timestamp")

    def to_projection(self) -> EmployeeProjection:
        return EmployeeProjection(
            id=self.id,
            tenant_id=self.tenant_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email or "",
            title=self.title,
            department=self.department,
            skills=tuple(self.skills or ()),
            is_active=self.is_active,
            photo_url=self.photo_url,
        )
