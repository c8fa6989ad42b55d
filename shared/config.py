"""
Shared configuration management for the PIN Checker Relay.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PIN_CHECKER_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Tax authority credentials. Left unset here; a lookup fails with an
    # authentication error until both are provided.
    kra_consumer_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("KRA_CONSUMER_KEY", "kra_consumer_key"),
    )
    kra_consumer_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("KRA_CONSUMER_SECRET", "kra_consumer_secret"),
    )

    # Tax authority endpoints
    kra_token_url: str = "https://sbx.kra.go.ke/v1/token/generate"
    kra_pin_url: str = "https://sbx.kra.go.ke/checker/v1/pin"

    # Deadlines (seconds)
    lookup_timeout_seconds: float = 15.0
    token_timeout_seconds: float = 10.0

    # Report downstream failures as HTTP 200 with success=false
    soft_errors: bool = True

    cors_origins: List[str] = ["*"]


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = Field(default=3007, validation_alias=AliasChoices("PORT", "port"))
    host: str = "0.0.0.0"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
