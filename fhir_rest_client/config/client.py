"""
Per-client configuration.

A ClientConfig is built once when a FHIRClient is constructed and is
read-only afterwards, so it can be shared between concurrent calls.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Optional

import httpx

from fhir_rest_client.config.logging import get_logger
from fhir_rest_client.config.settings import Settings, get_settings
from fhir_rest_client.constants import DEFAULT_MAX_RESPONSE_SIZE
from fhir_rest_client.errors import ConfigurationError

logger = get_logger(__name__)

Non2xxStatusHandler = Callable[[httpx.Response, bytes], None]


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a FHIRClient."""

    # Maximum number of response body bytes that will be read
    max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE
    # Called with the response and body when the server returns a non-2xx status.
    # Its primary use is logging; the return value is ignored.
    non_2xx_status_handler: Non2xxStatusHandler | None = None
    # POST {type}/_search with a form body instead of GET {type}?query
    use_post_search: bool = True

    def __post_init__(self) -> None:
        if self.max_response_size < 0:
            raise ConfigurationError(
                f"max_response_size must be positive, got {self.max_response_size}",
                details={"max_response_size": self.max_response_size},
            )

    def normalized(self) -> "ClientConfig":
        """Return this config with an unset (zero) response size replaced by the default."""
        if self.max_response_size == 0:
            return replace(self, max_response_size=DEFAULT_MAX_RESPONSE_SIZE)
        return self

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClientConfig":
        """Create a ClientConfig from environment-driven settings."""
        settings = settings or get_settings()
        return cls(
            max_response_size=settings.max_response_size,
            use_post_search=settings.use_post_search,
        )


def log_non_2xx_response(response: httpx.Response, body: bytes) -> None:
    """Non-2xx status handler that logs the failed exchange."""
    logger.warning(
        "FHIR server returned %d for %s %s (%d body bytes)",
        response.status_code,
        response.request.method,
        response.request.url,
        len(body),
    )
