"""
Configuration module for gateway settings.
"""

from hl7_gateway.config.settings import (
    DEFAULT_EMR_ENDPOINT,
    DEFAULT_FHIR_BASE_URL,
    GatewaySettings,
)

__all__ = [
    "DEFAULT_EMR_ENDPOINT",
    "DEFAULT_FHIR_BASE_URL",
    "GatewaySettings",
]
