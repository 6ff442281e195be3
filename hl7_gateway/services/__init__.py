"""Request handlers that relay gateway calls to the upstream EMR service."""

from .conversion_service import Hl7ConversionService
from .fhir_proxy_service import FhirProxyService

__all__ = [
    "Hl7ConversionService",
    "FhirProxyService",
]
