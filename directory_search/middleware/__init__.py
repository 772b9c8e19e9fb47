"""HTTP middleware."""

from directory_search.middleware.request_context import GatewayContextMiddleware

__all__ = ["GatewayContextMiddleware"]
