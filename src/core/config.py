"""Centralized configuration management with environment-aware defaults.

This module implements the configuration system using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support for every service built on the bootstrap layer.

Configuration sources (in order of precedence):
1. Environment variables (nested values use the ``__`` delimiter)
2. .env file in project root
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

type LogLevelName = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: LogLevelName = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )


class ErrorReportingConfig(BaseModel):
    """Error reporting sink configuration.

    When a destination is set, every record at or above ``level`` is also
    written, serialized, to that destination for alerting pipelines.
    """

    level: LogLevelName = Field(
        default="WARNING",
        description="Minimum level forwarded to the error reporting sink",
    )
    destination: str | None = Field(
        default=None,
        description="File path receiving serialized error records",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lowercase and short level names (``warn``)."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "WARN":
                return "WARNING"
        return v

    @field_validator("destination", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


class DatabaseConfig(BaseModel):
    """Database configuration settings.

    The database is optional: without a URL the service owns no database
    handle and registers no connection initializer.
    """

    database_url: str | None = Field(
        default=None,
        description="Database connection URL (postgresql+asyncpg://...)",
    )
    pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of connections to maintain in the pool",
    )
    max_overflow: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Maximum overflow connections above pool_size",
    )
    pool_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout in seconds for acquiring a connection from the pool",
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Whether to test connections before using them",
    )
    echo: bool = Field(
        default=False,
        description="Whether to log SQL statements (use only for debugging)",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def empty_url_to_none(cls, v: str | None) -> str | None:
        """Treat an empty URL as no database."""
        if v == "":
            return None
        return v

    @field_validator("database_url", mode="after")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        """Validate database URL uses the correct driver for async PostgreSQL."""
        if v is not None and not v.startswith("postgresql+asyncpg://"):
            msg = "Database URL must use postgresql+asyncpg:// driver for async support"
            raise ValueError(msg)
        return v


class PipelineConfig(BaseModel):
    """Inbound request pipeline configuration."""

    acceptable: list[str] = Field(
        default_factory=lambda: [
            "application/json",
            "text/plain",
            "application/octet-stream",
        ],
        min_length=1,
        description="Media types the content negotiation step can serve",
    )
    group_header: str = Field(
        default="X-Groups",
        description="Header carrying the comma-separated caller groups",
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        description="Page size used when the client sends no limit",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Largest page size a client may request",
    )


class Settings(BaseSettings):
    """Main settings class for services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Service identity
    app_name: str = Field(default="microservice", description="Service name")
    app_version: str = Field(default="0.1.0", description="Service version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the service is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    # Listener
    api_host: str = Field(default="0.0.0.0", description="Listening host")  # noqa: S104
    api_port: int = Field(default=3000, ge=0, le=65535, description="Listening port")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    error_reporting: ErrorReportingConfig = Field(
        default_factory=ErrorReportingConfig,
        description="Error reporting sink configuration",
    )
    database_config: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    pipeline_config: PipelineConfig = Field(
        default_factory=PipelineConfig, description="Request pipeline configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Container platforms collect stdout as structured records
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"
        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
