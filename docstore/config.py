"""
Configuration settings for the Document Store Service.
Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Document Store Service"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="production", description="development/staging/production")

    # Server
    host: str = "0.0.0.0"
    port: int = 4196
    workers: int = 4

    # Storage
    data_dir: Path = Field(
        default=Path("db-files"),
        description="Directory holding one <id>.json file per document"
    )
    log_path: Path = Field(
        default=Path("db-files/log.txt"),
        description="Append-only plain-text audit log"
    )
    snapshot_path: Path = Field(
        default=Path("mergedData.json"),
        description="Composite snapshot written by every merge"
    )

    # Status endpoint
    status_owner: str = "Sam"

    # Demo / test helpers
    enable_reset: bool = Field(
        default=False,
        description="Expose POST /admin/reset (re-seeds sample documents, truncates log)"
    )

    # Monitoring
    enable_metrics: bool = True
    metrics_path: str = "/metrics"

    # Logging
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
