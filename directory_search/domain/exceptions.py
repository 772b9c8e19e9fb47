"""
Domain-level exceptions for the directory search service.

These exceptions represent business rule violations and collaborator
failures. They are mapped to HTTP responses in the API layer.
"""

from typing import Optional


class DomainException(Exception):
    """Base exception for all domain-level errors."""
    pass


class ValidationError(DomainException):
    """Raised when request validation rules are violated."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class AuthorizationError(DomainException):
    """Base exception for authorization errors."""
    pass


class InsufficientPermissionsError(AuthorizationError):
    """Raised when the caller lacks the required role."""
    pass


class ProcessingError(DomainException):
    """Base exception for processing errors."""
    pass


class SearchUnavailableError(ProcessingError):
    """Raised when the employee store cannot serve the tenant snapshot."""
    pass


class CacheUnavailableError(ProcessingError):
    """Raised by cache adapters when the backing store cannot be reached."""
    pass


class AnalyticsUnavailableError(ProcessingError):
    """Raised when an analytics event cannot be accepted for recording."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid or missing."""
    pass


__all__ = [
    "DomainException",
    "ValidationError",
    "AuthorizationError",
    "InsufficientPermissionsError",
    "ProcessingError",
    "SearchUnavailableError",
    "CacheUnavailableError",
    "AnalyticsUnavailableError",
    "ConfigurationError",
]
