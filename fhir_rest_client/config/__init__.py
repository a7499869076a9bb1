"""Configuration modules for the FHIR REST client."""

from fhir_rest_client.config.client import ClientConfig, log_non_2xx_response
from fhir_rest_client.config.logging import configure_logging, get_logger
from fhir_rest_client.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "ClientConfig",
    "Settings",
    "get_settings",
    "reset_settings",
    "log_non_2xx_response",
    "configure_logging",
    "get_logger",
]
