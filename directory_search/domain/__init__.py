"""Domain layer package exposing pure search abstractions."""

from . import entities
from . import interfaces
from .value_objects import SearchRequest, TenantId

__all__ = [
    "entities",
    "interfaces",
    "SearchRequest",
    "TenantId",
]
