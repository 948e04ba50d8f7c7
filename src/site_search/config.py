"""Centralized configuration for site-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``SITE_SEARCH_*`` environment variables.

    Command-line flags override these values (see ``site_search.app.main``).
    """

    model_config = SettingsConfigDict(
        env_prefix="SITE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Indexing
    root: Path = Field(default_factory=Path.cwd, description="Directory to index and serve")

    # Server settings
    host: str = Field(default="127.0.0.1", description="Listen address")
    port: int = Field(default=3030, ge=1, le=65535, description="Listen port")

    # Search settings
    result_limit: int = Field(default=10, ge=1, description="Maximum results returned per query")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    # Tracing
    otlp_endpoint: str = Field(default="", description="OTLP/HTTP trace collector endpoint; empty disables export")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unsupported log level: {value}")
        return normalized

    def resolved_root(self) -> Path:
        """Absolute form of the configured root."""
        return self.root.expanduser().resolve()
