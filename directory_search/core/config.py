"""
Configuration management for the employee directory search service.

Settings are read once per process from:
- process environment variables and an optional .env file
- Optional Redis result cache with in-memory fallback
- Search engine tuning (TTL, latency budget, pagination limits)
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """
    Main application settings with defaults suitable for local development.
    """

    # Deployment
    ENVIRONMENT: str = Field(
        default="local",
        description="Environment (local/development/staging/production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable FastAPI debug tracebacks"
    )

    # Service identity
    APP_NAME: str = Field(
        default="Employee Directory Search",
        description="Service name reported by health endpoints"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Service version reported by health endpoints"
    )

    # Uvicorn
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )
    PORT: int = Field(
        default=8000,
        description="Port uvicorn listens on"
    )

    # Browser access
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins, comma separated, or *"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum structlog level"
    )
    LOG_FORMAT: str = Field(
        default="console",
        description="Renderer for log lines (json or console)"
    )

    # Request Context
    TRUST_GATEWAY_HEADERS: bool = Field(
        default=False,
        description="Read tenant, user and role from X-Tenant-ID/X-User-ID/X-User-Role headers set by a trusted gateway"
    )

    # Cache Configuration (Redis, memory, or disabled)
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Shared Redis result cache; when unset the memory cache is used"
    )
    SEARCH_CACHE_ENABLED: bool = Field(
        default=True,
        description="Use an in-memory result cache when Redis is not configured"
    )
    SEARCH_CACHE_TTL: int = Field(
        default=300,
        description="Search result cache TTL in seconds"
    )
    CACHE_CONNECT_TIMEOUT: float = Field(
        default=5.0,
        description="Cache store connect/socket timeout in seconds"
    )
    CACHE_MAX_ENTRIES: int = Field(
        default=10000,
        description="Maximum entries held by the in-memory cache"
    )

    # Search Engine Configuration
    SEARCH_LATENCY_BUDGET_MS: int = Field(
        default=500,
        description="Searches slower than this are logged as warnings"
    )
    SEARCH_DEFAULT_PAGE_SIZE: int = Field(
        default=20,
        description="Page size used when none is requested"
    )
    SEARCH_MAX_PAGE_SIZE: int = Field(
        default=100,
        description="Upper bound for the requested page size"
    )
    SEARCH_MAX_QUERY_LENGTH: int = Field(
        default=100,
        description="Query text is truncated to this many characters"
    )

    # Analytics
    ANALYTICS_QUEUE_SIZE: int = Field(
        default=1000,
        description="Pending analytics events before new ones are dropped"
    )
    ANALYTICS_RETENTION_EVENTS: int = Field(
        default=10000,
        description="Search events kept per tenant by the in-memory recorder"
    )

    # Employee Directory
    DIRECTORY_BACKEND: str = Field(
        default="memory",
        description="Employee store backend (memory/postgres)"
    )
    DIRECTORY_SEED_FILE: Optional[str] = Field(
        default=None,
        description="JSON file of employees loaded into the memory directory"
    )

    # Employee store connection (DIRECTORY_BACKEND=postgres)
    POSTGRES_URL: Optional[str] = Field(
        default=None,
        description="Full DSN; overrides the discrete POSTGRES_* fields"
    )
    POSTGRES_HOST: str = Field(
        default="localhost",
        description="Database host"
    )
    POSTGRES_PORT: int = Field(
        default=5432,
        description="Database port"
    )
    POSTGRES_USER: str = Field(
        default="directory",
        description="Database role"
    )
    POSTGRES_PASSWORD: str = Field(
        default="directory",
        description="Database password"
    )
    POSTGRES_DB: str = Field(
        default="directory",
        description="Database holding the employees table"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Lower-case the name; anything unrecognised runs as local."""
        v = v.lower()
        if v not in ('local', 'development', 'staging', 'production'):
            logger.warning("Unrecognised ENVIRONMENT, running as local", environment=v)
            return 'local'
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return v

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ('json', 'console'):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @field_validator('DIRECTORY_BACKEND')
    @classmethod
    def validate_directory_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ('memory', 'postgres'):
            raise ValueError("DIRECTORY_BACKEND must be 'memory' or 'postgres'")
        return v

    @field_validator(
        'SEARCH_CACHE_TTL',
        'CACHE_MAX_ENTRIES',
        'SEARCH_DEFAULT_PAGE_SIZE',
        'SEARCH_MAX_PAGE_SIZE',
        'SEARCH_MAX_QUERY_LENGTH',
        'ANALYTICS_QUEUE_SIZE',
        'ANALYTICS_RETENTION_EVENTS',
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    def is_production(self) -> bool:
        """True for production deployments."""
        return self.ENVIRONMENT == 'production'

    def is_local(self) -> bool:
        """True on developer machines; enables table creation."""
        return self.ENVIRONMENT == 'local'

    def get_cors_origins(self) -> List[str]:
        """CORS_ORIGINS split into the list CORSMiddleware expects."""
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",")]
        return [origin for origin in origins if origin] or ["*"]

    def get_postgres_url(self) -> str:
        """DSN for the employee store, assembled from parts unless POSTGRES_URL is set."""
        return self.POSTGRES_URL or (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings; tests call ``get_settings.cache_clear()`` to reload."""
    settings = Settings()
    logger.info(
        "Search service settings loaded",
        environment=settings.ENVIRONMENT,
        cache_backend="redis" if settings.REDIS_URL else ("memory" if settings.SEARCH_CACHE_ENABLED else "none"),
        directory_backend=settings.DIRECTORY_BACKEND,
    )
    return settings
