"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./buyers.db",
        description="Async SQLAlchemy connection string (sqlite+aiosqlite or postgresql+asyncpg)",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v.strip():
            msg = "database_url must not be empty"
            raise ValueError(msg)
        return v.strip()

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (development exposes internal error detail)",
    )

    @property
    def is_development(self) -> bool:
        """Whether internal error detail may be returned to clients."""
        return self.environment.strip().lower() in ("development", "dev")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit log records as JSON lines instead of formatted text",
    )

    # Ownership (authentication is mocked)
    default_owner_id: str = Field(
        default="user-id-123",
        min_length=1,
        description="Owner and changed-by identifier used when the caller is not identified",
    )

    # Import
    import_max_file_size_mb: int = Field(
        default=5,
        description="Maximum CSV upload size in megabytes",
        gt=0,
    )
    import_max_rows: int = Field(
        default=200,
        description="Maximum data rows per CSV import (header excluded)",
        gt=0,
    )

    @property
    def import_max_file_size_bytes(self) -> int:
        """Upload size cap in bytes."""
        return self.import_max_file_size_mb * 1024 * 1024

    # Rate limiting
    rate_limit_create_max: int = Field(
        default=10,
        description="Buyer creations allowed per window per caller",
        gt=0,
    )
    rate_limit_create_window_seconds: int = Field(
        default=3600,
        description="Window length for buyer creation limits",
        gt=0,
    )
    rate_limit_update_max: int = Field(
        default=50,
        description="Buyer updates (including status changes) allowed per window per caller",
        gt=0,
    )
    rate_limit_update_window_seconds: int = Field(
        default=3600,
        description="Window length for buyer update limits",
        gt=0,
    )
    rate_limit_sweep_interval_seconds: int = Field(
        default=300,
        description="Seconds between purges of expired rate-limit buckets",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="X-Forwarded-For",
        description="Comma-separated list of HTTP headers to check for real client IP, in priority order",
    )

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        """Parse trusted proxy headers string into a list."""
        if not self.trusted_proxy_headers.strip():
            return []
        return [h.strip() for h in self.trusted_proxy_headers.split(",") if h.strip()]

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )
    list_page_size_max: int = Field(
        default=100,
        description="Largest page size accepted by the buyer list endpoint",
        gt=0,
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
