"""Application settings and configuration.

This module defines all configuration options for the Kaspa Brawl API.
Settings are loaded from environment variables with sensible defaults.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class VerificationPolicy(str, Enum):
    """How wallet signatures are checked during login."""

    STRICT = "strict"
    PERMISSIVE_FOR_TESTING = "permissive_for_testing"


# Nonce lifetime per environment, in minutes.
NONCE_TTL_BY_ENVIRONMENT: dict[str, int] = {
    "development": 30,
    "production": 10,
    "test": 60,
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Kaspa Brawl", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        alias="ENVIRONMENT",
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    token_ttl_minutes: int = Field(default=60 * 24 * 7, alias="TOKEN_TTL_MINUTES")
    verification_policy: VerificationPolicy = Field(
        default=VerificationPolicy.STRICT,
        alias="VERIFICATION_POLICY",
    )

    # Nonce storage and housekeeping
    nonce_ttl_minutes_override: int | None = Field(default=None, alias="NONCE_TTL_MINUTES")
    nonce_backend: Literal["database", "redis", "memory"] = Field(
        default="database",
        alias="NONCE_BACKEND",
    )
    nonce_sweep_probability: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        alias="NONCE_SWEEP_PROBABILITY",
    )
    nonce_sweep_interval_seconds: float = Field(
        default=0.0,
        ge=0.0,
        alias="NONCE_SWEEP_INTERVAL_SECONDS",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./kaspa_brawl.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis configuration for the redis nonce backend
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Wallet balances
    mock_balances: bool = Field(default=True, alias="MOCK_BALANCES")
    kaspa_api_url: str = Field(default="https://api.kaspa.org", alias="KASPA_API_URL")
    kaspa_api_timeout_seconds: float = Field(default=10.0, alias="KASPA_API_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _refuse_permissive_production(self) -> Settings:
        if (
            self.environment == "production"
            and self.verification_policy is VerificationPolicy.PERMISSIVE_FOR_TESTING
        ):
            raise ValueError(
                "VERIFICATION_POLICY=permissive_for_testing is not allowed in production"
            )
        return self

    @property
    def nonce_ttl_minutes(self) -> int:
        """Return the nonce lifetime for the active environment.

        Returns:
            The explicit override when set, otherwise the environment default.
        """
        if self.nonce_ttl_minutes_override is not None:
            return self.nonce_ttl_minutes_override
        return NONCE_TTL_BY_ENVIRONMENT[self.environment]

    @property
    def nonce_ttl_seconds(self) -> int:
        return self.nonce_ttl_minutes * 60


settings = Settings()  # type: ignore[call-arg]
