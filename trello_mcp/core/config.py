"""
Core configuration module for the Trello MCP server.

This module provides centralized configuration management using Pydantic
Settings. All configuration is loaded from environment variables with the
TRELLO_ prefix (and from a local .env file when present).

Pattern: Pydantic BaseSettings with an lru_cache singleton
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings

from trello_mcp.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the TRELLO_ prefix for environment variables.
    Example: TRELLO_API_KEY=abc123
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="trello-mcp",
        description="Name of the server for logging and MCP identification",
    )
    environment: Literal["development", "production"] = Field(
        default="production",
        description="Deployment environment (controls log rendering)",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # =========================================================================
    # Trello Credentials
    # Pattern: SecretStr for sensitive values
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Trello API key",
    )
    api_token: SecretStr = Field(
        default=SecretStr(""),
        description="Trello API token",
    )

    # =========================================================================
    # HTTP Configuration
    # =========================================================================
    base_url: str = Field(
        default="https://api.trello.com/1",
        description="Base URL of the Trello REST API",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout in seconds for Trello API calls",
    )

    # =========================================================================
    # Rate Limiting Configuration
    # Trello allows 100 requests per 10 seconds per token
    # =========================================================================
    rate_limit_max_requests: int = Field(
        default=100,
        ge=1,
        description="Maximum requests per rate-limit window",
    )
    rate_limit_window_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Length of the rate-limit window in seconds",
    )

    # =========================================================================
    # Bulk Operation Configuration
    # =========================================================================
    bulk_batch_size: int = Field(
        default=80,
        ge=1,
        description="Number of items processed concurrently per bulk batch",
    )
    bulk_batch_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause between bulk batches in seconds",
    )

    model_config = {
        "env_prefix": "TRELLO_",
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the API URL scheme and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return upper

    def require_credentials(self) -> tuple[str, str]:
        """
        Return the API key and token, failing when either is missing.

        Returns:
            Tuple of (api_key, api_token) as plain strings.

        Raises:
            ConfigurationError: If the key or the token is empty.
        """
        key = self.api_key.get_secret_value()
        token = self.api_token.get_secret_value()
        if not key or not token:
            raise ConfigurationError(
                "TRELLO_API_KEY and TRELLO_API_TOKEN must be set. "
                "Get them from https://trello.com/app-key"
            )
        return key, token


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.

    Raises:
        ConfigurationError: If an environment value fails validation.
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(_describe_error(err) for err in e.errors())
        raise ConfigurationError(f"Invalid settings: {problems}") from e


def _describe_error(error: dict) -> str:
    """One validation error as ``TRELLO_FIELD: message``."""
    if not error["loc"]:
        return error["msg"]
    return f"TRELLO_{str(error['loc'][0]).upper()}: {error['msg']}"
