# tvprovider/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate environment variables at startup.
Everything has a usable default so a fresh installation works without a .env.
"""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./tvprovider.db",
        description="SQLAlchemy URL of the channel/program store",
    )
    SQL_ECHO: bool = Field(
        default=False,
        description="Echo emitted SQL (debugging only)",
    )

    # Retention
    WATERMARK_PREF_KEY: str = Field(
        default="pref_key_last_transient_rows_deleted_time",
        description="Preference key holding the last transient purge time (ms since epoch)",
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
    )
    LOG_FORMAT: str = Field(
        default="json",
        description="Log output format: json or text",
    )

    LOG_FORMATS: ClassVar[set[str]] = {"json", "text"}

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but SQLAlchemy needs postgresql+psycopg2://"""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in cls.LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {sorted(cls.LOG_FORMATS)}, got '{v}'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
