"""
Client settings using pydantic-settings.

Environment variables are prefixed with FHIR_CLIENT_.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fhir_rest_client.constants import DEFAULT_MAX_RESPONSE_SIZE, REQUEST_TIMEOUT_SECONDS


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FHIR_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("max_response_size")
    @classmethod
    def validate_max_response_size(cls, value: int) -> int:
        """Reject negative limits; zero means 'use the default'."""
        if value < 0:
            raise ValueError("FHIR_CLIENT_MAX_RESPONSE_SIZE must not be negative")
        return value or DEFAULT_MAX_RESPONSE_SIZE

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Request settings
    request_timeout: float = REQUEST_TIMEOUT_SECONDS  # Only used for self-created httpx clients
    max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE  # 10 MB default

    # Search settings
    use_post_search: bool = True  # POST {type}/_search instead of GET {type}?query


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Clear the cached settings (used by tests after changing the environment)."""
    get_settings.cache_clear()
