from .container import ServiceContainer
from .deps import (
    get_container,
    get_conversion_service,
    get_fhir_proxy_service,
)

__all__ = [
    "ServiceContainer",
    "get_container",
    "get_conversion_service",
    "get_fhir_proxy_service",
]
