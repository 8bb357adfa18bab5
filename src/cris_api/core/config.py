"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from cris_api.core.exceptions import ConfigurationError


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
        description="SQLAlchemy async connection string (e.g. postgresql+asyncpg://...)",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "database_url must not be empty"
            raise ValueError(msg)
        try:
            make_url(v)
        except ArgumentError as e:
            msg = f"Invalid database_url: {e}"
            raise ValueError(msg) from e
        return v

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt work factor used when hashing passwords",
        ge=4,
        le=31,
    )

    # Health
    health_check_timeout: float = Field(
        default=2.0,
        description="Seconds to wait for the database connectivity check before reporting disconnected",
        gt=0,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Deployment environment name (e.g. production, development, staging)",
    )


def get_settings() -> Settings:
    """Create and return application settings.

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "settings" for err in e.errors())
        msg = f"Invalid configuration ({fields}): check DATABASE_URL and related environment variables"
        raise ConfigurationError(msg) from e
