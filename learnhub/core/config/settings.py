# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for LearnHub.
Settings are loaded from environment variables with sensible defaults.

The database connection string and the token signing secret have no
defaults: a process started without them fails settings validation,
which aborts startup.

Example:
    >>> from learnhub.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration.

    Attributes:
        url: SQLAlchemy async connection URL (required).
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        echo: Log every SQL statement.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    url: str
    pool_size: int = 10
    max_overflow: int = 20
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        """Check whether the URL points at an SQLite database."""
        return self.url.startswith("sqlite")


class JWTSettings(BaseSettings):
    """JWT authentication configuration.

    Attributes:
        secret_key: Secret key for signing tokens (required).
        algorithm: JWT signing algorithm.
        access_token_expire_minutes: Access token expiration time.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_key: SecretStr
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(
        default=60,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )


class AuthSettings(BaseSettings):
    """Account and password policy.

    Attributes:
        bcrypt_rounds: bcrypt cost factor for new password hashes.
        inactive_after_days: Days without login after which a user is Inactive.
        admin_email: Email of the admin account seeded at startup.
        admin_password: Password of the seeded admin account.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        extra="ignore",
    )

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    inactive_after_days: int = 30
    admin_email: str | None = None
    admin_password: SecretStr | None = None


class GradingSettings(BaseSettings):
    """Grading configuration.

    Attributes:
        pass_mark: Minimum score that counts as a pass.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRADING_",
        extra="ignore",
    )

    pass_mark: float = Field(default=50.0, ge=0, le=100)


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration.

    Attributes:
        enabled: Whether rate limits are enforced.
        auth_limit: Limit applied to login and signup.
        storage_uri: slowapi storage backend.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    enabled: bool = True
    auth_limit: str = "100/minute"
    storage_uri: str = "memory://"


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        jwt: JWT authentication settings.
        auth: Account policy settings.
        grading: Grading settings.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    grading: GradingSettings = Field(default_factory=GradingSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with an unsafe configuration.
        """
        if self.is_production:
            if len(self.jwt.secret_key.get_secret_value()) < 32:
                raise ValueError(
                    "JWT secret key must be at least 32 characters in production. "
                    "Set JWT_SECRET_KEY environment variable."
                )
            if self.database.is_sqlite:
                raise ValueError("SQLite is not supported in production.")
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
