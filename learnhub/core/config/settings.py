# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for LearnHub.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from learnhub.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-this-in-production"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str) -> timedelta:
    """Parse a compact duration string such as ``7d``, ``12h`` or ``30m``.

    A bare number is interpreted as seconds.

    Args:
        value: Duration string.

    Returns:
        Parsed duration.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    match = _DURATION_PATTERN.match(value.lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        database_url: Full connection URL, overrides the components when set.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
        populate_by_name=True,
    )

    user: str = "learnhub"
    password: SecretStr = SecretStr("learnhub_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "learnhub"
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL.

        A ``DATABASE_URL`` in plain ``postgresql://`` form is rewritten to
        use the asyncpg driver.
        """
        if self.database_url:
            for prefix in ("postgresql://", "postgres://"):
                if self.database_url.startswith(prefix):
                    return "postgresql+asyncpg://" + self.database_url[len(prefix):]
            return self.database_url
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class JWTSettings(BaseSettings):
    """JWT authentication configuration.

    Attributes:
        secret_key: Secret key for signing tokens.
        algorithm: JWT signing algorithm.
        expires_in: Token lifetime as a duration string (``7d``, ``12h``).
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
        populate_by_name=True,
    )

    secret_key: SecretStr = Field(
        default=SecretStr(DEFAULT_JWT_SECRET),
        validation_alias=AliasChoices("JWT_SECRET", "JWT_SECRET_KEY"),
    )
    algorithm: str = "HS256"
    expires_in: str = "7d"

    @field_validator("expires_in")
    @classmethod
    def validate_expires_in(cls, value: str) -> str:
        """Reject durations that cannot be parsed."""
        parse_duration(value)
        return value

    @property
    def expires_delta(self) -> timedelta:
        """Token lifetime as a timedelta."""
        return parse_duration(self.expires_in)


class CookieSettings(BaseSettings):
    """Auth cookie configuration.

    Attributes:
        secure: Send cookies over HTTPS only.
        samesite: SameSite policy.
        max_age_days: Cookie lifetime in days.
    """

    model_config = SettingsConfigDict(
        env_prefix="COOKIE_",
        extra="ignore",
    )

    secure: bool = False
    samesite: Literal["lax", "strict", "none"] = "lax"
    max_age_days: int = 7

    @property
    def max_age_seconds(self) -> int:
        """Cookie lifetime in seconds."""
        return self.max_age_days * 24 * 60 * 60


class UploadSettings(BaseSettings):
    """File upload configuration.

    Attributes:
        directory: Directory uploaded files are written to.
        max_file_size: Maximum size of a single file in bytes.
        max_files: Maximum number of files per multi-file request.
        url_prefix: Public URL prefix the directory is served under.
    """

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        extra="ignore",
        populate_by_name=True,
    )

    directory: Path = Field(
        default=Path("./uploads"),
        validation_alias=AliasChoices("UPLOAD_DIR", "UPLOAD_DIRECTORY"),
    )
    max_file_size: int = 50 * 1024 * 1024
    max_files: int = 5
    url_prefix: str = "/uploads"


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration.

    Attributes:
        enabled: Whether rate limiting is applied.
        requests_per_minute: Maximum requests per minute per client.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    enabled: bool = True
    requests_per_minute: int = 300


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        client_url: Frontend URL, appended to the allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
        populate_by_name=True,
    )

    origins: str = "http://localhost:3000,http://localhost:3001,http://localhost:3002"
    client_url: str | None = Field(default=None, validation_alias="CLIENT_URL")
    allow_credentials: bool = True
    allow_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    allow_headers: list[str] = ["Content-Type", "Authorization"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        origins = [origin.strip() for origin in self.origins.split(",") if origin.strip()]
        if self.client_url and self.client_url not in origins:
            origins.append(self.client_url)
        return origins


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
        backend_url: Public base URL of this server.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = "0.0.0.0"
    port: int = Field(default=5000, validation_alias=AliasChoices("PORT", "API_PORT"))
    workers: int = 1
    reload: bool = False
    backend_url: str = Field(default="http://localhost:5000", validation_alias="BACKEND_URL")


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        jwt: JWT authentication settings.
        cookie: Auth cookie settings.
        upload: File upload settings.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cookie: CookieSettings = Field(default_factory=CookieSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.jwt.secret_key.get_secret_value() == DEFAULT_JWT_SECRET:
                raise ValueError(
                    "JWT secret must be changed from default in production. "
                    "Set JWT_SECRET environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
