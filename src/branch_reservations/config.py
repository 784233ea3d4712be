"""
Configuration module for the branch reservation settings client.

Loads environment variables and provides the settings needed to reach the
reservations API: root URL, bearer token and request timeout.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from .error_handling.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        api_base_url: Root URL of the reservations API
        api_token: Bearer token sent with every request
        api_timeout: Per-request timeout in seconds
        log_level: Minimum log level
        environment: Logging profile (development, production, test)
    """

    # API configuration
    api_base_url: Optional[str] = Field(
        default=None,
        alias="RESERVATIONS_API_URL",
        description="Root URL of the reservations API"
    )

    api_token: Optional[str] = Field(
        default=None,
        alias="RESERVATIONS_API_TOKEN",
        description="Bearer token for the reservations API"
    )

    api_timeout: float = Field(
        default=30.0,
        gt=0,
        alias="RESERVATIONS_API_TIMEOUT",
        description="Request timeout in seconds"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Minimum log level"
    )

    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Logging profile: development, production or test"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads the environment."""
    global _settings
    _settings = None


def require_api_settings(settings: Settings) -> tuple[str, str]:
    """
    Get the API root and token, failing loudly when either is missing.

    Args:
        settings: Settings to read from

    Returns:
        Tuple of (base_url, token)

    Raises:
        ConfigurationError: If the URL or token is not configured
    """
    if not settings.api_base_url:
        raise ConfigurationError(
            "Reservations API URL not configured. "
            "Please set RESERVATIONS_API_URL environment variable.",
            setting="RESERVATIONS_API_URL"
        )
    if not settings.api_token:
        raise ConfigurationError(
            "Reservations API token not configured. "
            "Please set RESERVATIONS_API_TOKEN environment variable.",
            setting="RESERVATIONS_API_TOKEN"
        )
    return settings.api_base_url, settings.api_token
