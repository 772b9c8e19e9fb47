"""
Employee Directory Search - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from directory_search.api import create_api_router
from directory_search.api.dependencies import (
    ApiError,
    api_error_handler,
    domain_exception_handler,
    unhandled_exception_handler,
)
from directory_search.core.config import Settings, get_settings
from directory_search.core.service_factory import get_service_factory, reset_service_factory
from directory_search.domain.exceptions import DomainException
from directory_search.infrastructure.providers import (
    get_cache_service,
    get_search_service,
    reset_all_providers,
)
from directory_search.middleware import GatewayContextMiddleware


def configure_logging(settings: Settings) -> None:
    """Configure structured logging once per process."""
    use_console = settings.LOG_FORMAT == "console" and sys.stdout.isatty()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if use_console else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.LOG_LEVEL.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build collaborators at startup and release them on shutdown."""
    settings = get_settings()
    logger.info(
        "Starting Employee Directory Search API",
        version=app.version,
        environment=settings.ENVIRONMENT,
    )

    # Collaborators are chosen once here; an unreachable Redis degrades to
    # the null cache for the lifetime of the process.
    await get_search_service()
    cache_health = await (await get_cache_service()).check_health()
    logger.info("Search services ready", cache=cache_health.get("service"), cache_status=cache_health.get("status"))

    try:
        yield
    finally:
        logger.info("Shutting down Employee Directory Search API")
        await get_service_factory().close_all()
        await reset_all_providers()
        reset_service_factory()


def create_app() -> FastAPI:
    """Application factory used by uvicorn and the test client."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant employee directory search with fuzzy matching and ranking",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        openapi_url="/openapi.json" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(create_api_router())

    @app.get("/health")
    async def liveness():
        """Liveness probe."""
        return {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health/detailed")
    async def readiness():
        """Readiness probe; unhealthy when the employee directory cannot be read."""
        health_status: Dict[str, Any] = {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {},
        }

        factory = get_service_factory()

        cache_service = await factory.create_cache_service()
        health_status["services"]["cache"] = await cache_service.check_health()

        directory = await factory.create_employee_directory()
        directory_health = await directory.check_health()
        health_status["services"]["employee_directory"] = directory_health
        if directory_health.get("status") != "healthy":
            health_status["status"] = "unhealthy"

        analytics = await factory.create_analytics_service()
        health_status["services"]["analytics"] = await analytics.check_health()

        return health_status

    @app.get("/")
    async def root():
        """Service banner."""
        return {
            "message": settings.APP_NAME,
            "version": app.version,
            "docs_url": "/docs" if not settings.is_production() else None,
        }

    return app


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register gateway context (when trusted) and CORS middleware."""
    if settings.TRUST_GATEWAY_HEADERS:
        app.add_middleware(GatewayContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "directory_search.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None,
    )
