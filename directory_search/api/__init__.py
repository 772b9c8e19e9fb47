"""
API Package

Provides versioned API routes. Routers are imported lazily so that importing
``directory_search.api`` does not resolve application services.
"""

from fastapi import APIRouter


def create_api_router() -> APIRouter:
    """Create the main API router with all v1 routes."""
    from directory_search.api.v1.search import router as search_router

    api_router = APIRouter()
    api_router.include_router(search_router, prefix="/api/v1")
    return api_router


__all__ = ["create_api_router"]
