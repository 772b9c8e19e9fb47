"""
Request Context Middleware

Populates the authenticated request context (tenant, user, role) on
``request.state`` from headers injected by a trusted API gateway. Only
enable it when the gateway strips these headers from client traffic.
"""

from typing import Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

TENANT_HEADER = "X-Tenant-ID"
USER_HEADER = "X-User-ID"
ROLE_HEADER = "X-User-Role"
REQUEST_ID_HEADER = "X-Request-ID"


class GatewayContextMiddleware(BaseHTTPMiddleware):
    """Copies gateway identity headers onto ``request.state``."""

    async def dispatch(self, request: Request, call_next):
        tenant_id = self._header(request, TENANT_HEADER)
        if tenant_id is not None:
            request.state.tenant_id = tenant_id
            request.state.user_id = self._header(request, USER_HEADER)
            request.state.role = self._header(request, ROLE_HEADER) or "user"

        request_id = self._header(request, REQUEST_ID_HEADER)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            tenant_id=tenant_id,
        )
        try:
            return await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

    @staticmethod
    def _header(request: Request, name: str) -> Optional[str]:
        value = request.headers.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()
