# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for SheetLMS.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from sheetlms.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SheetsSettings(BaseSettings):
    """Google Sheets backend configuration.

    Credentials come either from a service account JSON file
    (credentials_path) or from the email/private key pair. The private key
    may contain literal "\\n" sequences, as is common when it is passed
    through an environment variable.

    Attributes:
        spreadsheet_id: ID of the spreadsheet holding every table.
        service_account_email: Service account client email.
        private_key: Service account private key (PEM).
        credentials_path: Optional path to a service account JSON file.
        api_base_url: Sheets REST API base URL.
        token_uri: OAuth2 token endpoint for the service account.
        timeout: Per-request timeout in seconds.
        value_input_option: How written values are interpreted by Sheets.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETS_",
        extra="ignore",
    )

    spreadsheet_id: str = ""
    service_account_email: str = ""
    private_key: SecretStr = SecretStr("")
    credentials_path: str | None = None
    api_base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    token_uri: str = "https://oauth2.googleapis.com/token"
    timeout: float = 15.0
    value_input_option: Literal["RAW", "USER_ENTERED"] = "RAW"

    @property
    def private_key_pem(self) -> str:
        """Return the private key with escaped newlines expanded."""
        return self.private_key.get_secret_value().replace("\\n", "\n")

    @property
    def is_configured(self) -> bool:
        """Check whether enough is set to reach the spreadsheet."""
        if not self.spreadsheet_id:
            return False
        if self.credentials_path:
            return True
        return bool(self.service_account_email and self.private_key.get_secret_value())


class CacheSettings(BaseSettings):
    """Read-through cache configuration.

    Attributes:
        ttl_seconds: Maximum age of a cached table snapshot.
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        extra="ignore",
    )

    ttl_seconds: float = 300.0


class JWTSettings(BaseSettings):
    """JWT verification configuration.

    Attributes:
        secret_key: Secret key used to verify token signatures.
        algorithm: JWT signing algorithm.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr("change-this-in-production")
    algorithm: str = "HS256"


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
    requests_per_minute: int = 120


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
    port: int = 5000
    workers: int = 1
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        sheets: Google Sheets settings.
        cache: Read-through cache settings.
        jwt: JWT verification settings.
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
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    sheets: SheetsSettings = Field(default_factory=SheetsSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
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
            default_jwt_secret = "change-this-in-production"
            if self.jwt.secret_key.get_secret_value() == default_jwt_secret:
                raise ValueError(
                    "JWT secret key must be changed from default in production. "
                    "Set JWT_SECRET_KEY environment variable."
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
