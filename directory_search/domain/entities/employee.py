"""Read-only employee projection consumed by the search engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class EmployeeProjection:
    """
    Snapshot of the searchable attributes of one employee.

    The employee store owns the underlying record; the search engine only
    ever reads these projections for the duration of a single request.
    """

    id: str
    tenant_id: str
    first_name: str
    last_name: str
    email: str = ""
    title: Optional[str] = None
    department: Optional[str] = None
    skills: Tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True
    photo_url: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.skills, tuple):
            object.__setattr__(self, "skills", tuple(self.skills or ()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tenantId": self.tenant_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "title": self.title,
            "department": self.department,
            "skills": list(self.skills),
            "isActive": self.is_active,
            "photoUrl": self.photo_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmployeeProjection":
        return cls(
            id=str(data["id"]),
            tenant_id=str(data["tenantId"]),
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            email=data.get("email") or "",
            title=data.get("title"),
            department=data.get("department"),
            skills=tuple(data.get("skills") or ()),
            is_active=bool(data.get("isActive", True)),
            photo_url=data.get("photoUrl"),
        )
