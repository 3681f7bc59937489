"""Application configuration module.

This module contains settings for the URL shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Service settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in a .env file if present, and finally to the defaults
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App information
    APP_NAME: str = "url-shortener"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Shortens long URLs and redirects short codes back to them"
    DEBUG: bool = False

    # Listener
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Used for building the short_url returned to clients
    BASE_URL: str = "http://localhost:8080"

    # Short code generation
    URL_CODE_LENGTH: int = 6
    URL_CODE_MAX_ATTEMPTS: int = 5

    # PostgreSQL connection
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "password"
    DATABASE_NAME: str = "url_shortener"
    DATABASE_SSLMODE: str = "disable"
    DATABASE_URL: Optional[str] = None  # Overrides the composed URI when set

    # Pool settings
    DB_POOL_SIZE: int = 20
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 300
    DB_CONNECT_TIMEOUT: float = 10.0
    DB_COMMAND_TIMEOUT: float = 5.0
    DB_ECHO: bool = False

    # Startup connection check
    DB_CONNECT_RETRY_ATTEMPTS: int = 5
    DB_CONNECT_RETRY_INITIAL_DELAY: float = 1.0
    DB_CONNECT_RETRY_MAX_DELAY: float = 30.0
    DB_CONNECT_RETRY_JITTER: float = 0.1  # Fraction of the delay, 0.0-1.0
    DB_AUTO_MIGRATE: bool = False

    # Seconds to wait for pending click updates on shutdown
    CLICK_DRAIN_TIMEOUT: float = 5.0

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = True
    LOG_FILE_ENABLED: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    @field_validator("BASE_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("DATABASE_URL", mode="before")
    def empty_url_is_none(cls, v: Any) -> Optional[str]:
        """Treat an empty DATABASE_URL as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("DATABASE_SSLMODE")
    def validate_sslmode(cls, v: str) -> str:
        allowed = {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}
        mode = v.strip().lower()
        if mode not in allowed:
            raise ValueError(f"DATABASE_SSLMODE must be one of {sorted(allowed)}")
        return mode

    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the async database URI from settings or use the override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return URL.create(
            "postgresql+asyncpg",
            username=self.DATABASE_USER,
            password=self.DATABASE_PASSWORD,
            host=self.DATABASE_HOST,
            port=self.DATABASE_PORT,
            database=self.DATABASE_NAME,
        ).render_as_string(hide_password=False)

    def database_connect_args(self, uri: Optional[str] = None) -> Dict[str, Any]:
        """Driver-level connection arguments for uri, defaulting to the configured one."""
        if not (uri or self.SQLALCHEMY_DATABASE_URI).startswith("postgresql+asyncpg"):
            return {}
        return {
            "ssl": self.DATABASE_SSLMODE,
            "timeout": self.DB_CONNECT_TIMEOUT,
            "command_timeout": self.DB_COMMAND_TIMEOUT,
        }


# Create a singleton instance of the settings
settings = Settings()
