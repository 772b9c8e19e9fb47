"""
API dependency providers and HTTP error mapping.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional

import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from directory_search.application.search.search_application_service import SearchApplicationService
from directory_search.domain.exceptions import (
    AnalyticsUnavailableError,
    AuthorizationError,
    ConfigurationError,
    DomainException,
    InsufficientPermissionsError,
    SearchUnavailableError,
    ValidationError,
)
from directory_search.domain.value_objects import TenantId
from directory_search.infrastructure.providers.search_provider import (
    get_search_service as resolve_search_service,
)

logger = structlog.get_logger(__name__)

ADMIN_ROLES = frozenset({"admin", "super_admin"})


class ApiError(HTTPException):
    """HTTP error rendered as ``{"error": {"code", "message", "requestId"}}``."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller as resolved by upstream middleware."""

    tenant_id: TenantId
    user_id: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def get_request_context(request: Request) -> RequestContext:
    """Read the authenticated tenant, user and role from ``request.state``."""
    raw_tenant = getattr(request.state, "tenant_id", None)
    if raw_tenant is None or raw_tenant == "":
        raise ApiError(401, "UNAUTHORIZED", "Authentication required")

    try:
        tenant_id = TenantId(raw_tenant)
    except ValueError:
        logger.warning("Rejected malformed tenant context", path=request.url.path)
        raise ApiError(401, "UNAUTHORIZED", "Invalid tenant context")

    user_id = getattr(request.state, "user_id", None)
    role = getattr(request.state, "role", None) or "user"
    return RequestContext(
        tenant_id=tenant_id,
        user_id=str(user_id) if user_id is not None else None,
        role=str(role).lower(),
    )


def require_admin(context: RequestContext, action: str) -> None:
    if not context.is_admin:
        raise InsufficientPermissionsError(f"Admin access required to {action}")


async def get_search_service() -> SearchApplicationService:
    """Resolve the search application service from infrastructure providers."""
    return await resolve_search_service()


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
SearchServiceDep = Annotated[SearchApplicationService, Depends(get_search_service)]


def map_domain_exception_to_http(exception: Exception) -> ApiError:
    """Map domain exceptions to appropriate HTTP responses."""

    # ValidationError - 400 Bad Request
    if isinstance(exception, ValidationError):
        return ApiError(400, "VALIDATION_ERROR", str(exception))

    # AuthorizationError hierarchy - 403 Forbidden
    elif isinstance(exception, (InsufficientPermissionsError, AuthorizationError)):
        return ApiError(403, "FORBIDDEN", str(exception))

    # Employee store failures - 500, never an empty result
    elif isinstance(exception, SearchUnavailableError):
        logger.error("Search unavailable", error=str(exception))
        return ApiError(500, "SEARCH_ERROR", "Search temporarily unavailable")

    elif isinstance(exception, AnalyticsUnavailableError):
        logger.error("Analytics unavailable", error=str(exception))
        return ApiError(500, "ANALYTICS_ERROR", "Failed to track search analytics")

    # ConfigurationError - 500 Internal Server Error (configuration issues)
    elif isinstance(exception, ConfigurationError):
        logger.error("Configuration error", error=str(exception))
        return ApiError(500, "CONFIGURATION_ERROR", "Service configuration error")

    # Generic DomainException - 500 Internal Server Error
    elif isinstance(exception, DomainException):
        logger.error("Unhandled domain exception", exception_type=type(exception).__name__, error=str(exception))
        return ApiError(500, "INTERNAL_ERROR", "Domain operation failed")

    else:
        # Non-domain exception - log and return generic error
        logger.error("Non-domain exception in mapping", exception_type=type(exception).__name__, error=str(exception))
        return ApiError(500, "INTERNAL_ERROR", "Internal server error")


def error_body(request: Request, code: str, message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "requestId": request.headers.get("x-request-id"),
        }
    }


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.code, exc.message))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    return await api_error_handler(request, map_domain_exception_to_http(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled request error", path=request.url.path, error=str(exc), exc_info=exc)
    return await api_error_handler(request, map_domain_exception_to_http(exc))


__all__ = [
    "ApiError",
    "RequestContext",
    "RequestContextDep",
    "SearchServiceDep",
    "api_error_handler",
    "domain_exception_handler",
    "get_request_context",
    "get_search_service",
    "map_domain_exception_to_http",
    "require_admin",
    "unhandled_exception_handler",
]
