"""Configuration management for the timeline database provisioner.

All configuration is loaded from environment variables and/or a .env file in
the project root. Only the four database credentials are read from the
environment; port and SSL mode are fixed.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import MissingConfigurationError

# Project root detection
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = PROJECT_ROOT / ".env"

DEFAULT_PORT = 5432
DEFAULT_SSLMODE = "require"  # TLS on, server certificate not verified
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5
DEFAULT_IDLE_TIMEOUT_SECONDS = 30

# Environment variable name -> Settings attribute, in reporting order
REQUIRED_DATABASE_VARS: Dict[str, str] = {
    "VITE_AZURE_DB_HOST": "db_host",
    "VITE_AZURE_DB_NAME": "db_name",
    "VITE_AZURE_DB_USER": "db_user",
    "VITE_AZURE_DB_PASSWORD": "db_password",
}


class Settings(BaseSettings):
    """
    Runtime configuration powered by environment variables and .env overrides.

    All settings can be configured via:
    1. Environment variables (highest priority)
    2. .env file in project root (loaded automatically)
    3. Default values (lowest priority)

    Database credentials have no defaults; use `missing_database_settings()`
    to find out which ones are absent.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    db_host: Optional[str] = Field(default=None, alias="VITE_AZURE_DB_HOST")
    db_name: Optional[str] = Field(default=None, alias="VITE_AZURE_DB_NAME")
    db_user: Optional[str] = Field(default=None, alias="VITE_AZURE_DB_USER")
    db_password: Optional[str] = Field(default=None, alias="VITE_AZURE_DB_PASSWORD")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is valid."""
        lower_v = v.lower()
        if lower_v not in {"text", "json"}:
            raise ValueError("log_format must be 'text' or 'json'")
        return lower_v

    def missing_database_settings(self) -> List[str]:
        """Return every required environment variable that is unset or empty."""
        missing = []
        for env_name, attr in REQUIRED_DATABASE_VARS.items():
            value = getattr(self, attr)
            if value is None or not value.strip():
                missing.append(env_name)
        return missing

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"


@dataclass(frozen=True)
class DatabaseConfig:
    """Explicit connection parameters handed to `provision()`."""

    host: str
    database: str
    user: str
    password: str
    port: int = DEFAULT_PORT
    sslmode: str = DEFAULT_SSLMODE
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT_SECONDS
    idle_timeout: int = DEFAULT_IDLE_TIMEOUT_SECONDS
    pool_size: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseConfig":
        """
        Build a config from settings, failing fast on missing credentials.

        Raises:
            MissingConfigurationError: naming every missing variable.
        """
        missing = settings.missing_database_settings()
        if missing:
            raise MissingConfigurationError(missing)
        return cls(
            host=settings.db_host,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_password,
        )

    def describe(self) -> Dict[str, Any]:
        """Configuration summary that is safe to log."""
        return {
            "host": self.host,
            "database": self.database,
            "user": self.user,
            "port": self.port,
            "has_password": bool(self.password),
            "ssl": self.sslmode,
        }

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(host={self.host!r}, database={self.database!r}, "
            f"user={self.user!r}, port={self.port}, sslmode={self.sslmode!r})"
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. To reload settings,
    call `get_settings.cache_clear()` first.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Clear settings cache and reload from environment.

    Useful for testing or after modifying .env file.
    """
    get_settings.cache_clear()
    return get_settings()


def load_database_config(settings: Optional[Settings] = None) -> DatabaseConfig:
    """Validate the environment and return the database config."""
    return DatabaseConfig.from_settings(settings or get_settings())
