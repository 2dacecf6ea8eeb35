"""
Configuration module for the API Gateway.

This module uses Pydantic Settings to load and validate environment variables
for the data service connection, session JWT verification, error profiles,
and CORS settings.

Environment variables are loaded from .env file or system environment.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Environment names that select the verbose error profile
DEVELOPMENT_ENVIRONMENT_NAMES = ("localhost", "local", "development", "dev")


class Environment(str, Enum):
    """Deployment environment, resolved once at startup."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "Environment":
        """
        Map a configured environment name onto an Environment.

        Args:
            name: Raw environment name (e.g. "localhost", "staging")

        Returns:
            DEVELOPMENT for local/development names, PRODUCTION otherwise.
        """
        if name and name.strip().lower() in DEVELOPMENT_ENVIRONMENT_NAMES:
            return cls.DEVELOPMENT
        return cls.PRODUCTION


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All configuration for the data service, session JWTs, error
    resolution and CORS is defined here.
    """

    # =========================================================================
    # Data Service Configuration
    # =========================================================================

    DATA_SERVICE_URL: HttpUrl = Field(
        ...,
        description="Data service base URL (e.g., http://data-service:8000)",
    )

    DATA_SERVICE_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Timeout for proxied data service calls in seconds",
        gt=0,
    )

    DATA_SERVICE_SECRET: Optional[str] = Field(
        None,
        description="Shared secret sent to the data service as X-Internal-Secret",
    )

    # =========================================================================
    # Environment / Error Resolution
    # =========================================================================

    ENVIRONMENT: str = Field(
        default="production",
        description="Environment name; one of DEVELOPMENT_ENVIRONMENT_NAMES (localhost, local, development, dev) enables verbose errors",
    )

    # =========================================================================
    # Session JWT Configuration
    # =========================================================================

    SESSION_JWT_SECRET: str = Field(
        ...,
        description="Secret key for verifying session JWTs",
        min_length=32,
    )

    SESSION_JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, or HS512)",
    )

    SESSION_JWT_EXPIRY_MINUTES: int = Field(
        default=60,
        description="Session JWT expiry time in minutes",
        ge=5,
        le=1440,
    )

    JWT_ISSUER: str = Field(
        default="api-gateway",
        description="Expected 'iss' claim of session JWTs",
    )

    # =========================================================================
    # Gateway Server Configuration
    # =========================================================================

    GATEWAY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the gateway server",
    )

    GATEWAY_PORT: int = Field(
        default=8080,
        description="Port to bind the gateway server",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level",
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    ALLOWED_ORIGIN: str = Field(
        default="*",
        description="Value of the Access-Control-Allow-Origin response header",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def environment(self) -> Environment:
        """Resolved deployment environment."""
        return Environment.from_name(self.ENVIRONMENT)

    @property
    def data_service_url_str(self) -> str:
        """
        Get data service URL as string (for HTTP client usage).

        Returns:
            Data service URL as string without trailing slash.
        """
        return str(self.DATA_SERVICE_URL).rstrip("/")

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("SESSION_JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """
        Validate JWT algorithm is one of the supported HMAC algorithms.

        Raises:
            ValueError: If algorithm is not supported
        """
        allowed_algorithms = ["HS256", "HS384", "HS512"]

        if v not in allowed_algorithms:
            raise ValueError(
                f"JWT algorithm must be one of {allowed_algorithms}, got: {v}"
            )

        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalise the log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.

    Example:
        >>> from api_gateway.app.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.data_service_url_str)
    """
    return Settings()
