"""Registry configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import ClassVar, Literal, Optional

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistryApiSettings(BaseSettings):
    """Process/runtime settings for the registry API server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for the registry API.")
    port: PositiveInt = Field(default=8320, description="Port for the registry API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for registry API / uvicorn.",
    )


class RegistrySettings(BaseSettings):
    """Validated settings for the registry service and its storage backends."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL of the metadata store. Defaults to a local SQLite file.",
    )

    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint of the S3-compatible object store (MinIO etc). None targets AWS.",
    )
    s3_access_key: Optional[str] = Field(default=None, description="Object store access key.")
    s3_secret_key: Optional[str] = Field(default=None, description="Object store secret key.")
    s3_region: str = Field(default="us-east-1", description="Object store region.")
    s3_bucket: str = Field(default="packages", description="Bucket holding package artifacts.")
    s3_use_ssl: bool = Field(default=True, description="Use TLS when talking to the object store.")

    presigned_url_ttl_seconds: PositiveInt = Field(
        default=3600,
        description="Lifetime of presigned download URLs (seconds).",
    )
    stats_top_n: PositiveInt = Field(
        default=10,
        description="Length of the top-N lists returned by the stats endpoint.",
    )
    recent_downloads_days: PositiveInt = Field(
        default=30,
        description="Window (days) used for the recent downloads counter.",
    )
    default_page_size: PositiveInt = Field(default=20, description="Page size used when none is given.")
    max_page_size: PositiveInt = Field(default=100, description="Largest accepted page size.")

    jwt_secret: str = Field(
        default="dev-secret",
        description="Secret used to verify bearer tokens.",
    )
    jwt_algorithm: str = Field(default="HS256", description="Bearer token signature algorithm.")

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed by the CORS middleware.",
    )


@lru_cache()
def get_settings() -> RegistrySettings:
    """Return memoized registry settings."""

    return RegistrySettings()


@lru_cache()
def get_api_settings() -> RegistryApiSettings:
    """Return memoized API process settings."""

    return RegistryApiSettings()
