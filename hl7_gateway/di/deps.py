from fastapi import Depends, Request

from hl7_gateway.services import FhirProxyService, Hl7ConversionService
from .container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Service container not initialized")
    return container


def get_conversion_service(
    container: ServiceContainer = Depends(get_container),
) -> Hl7ConversionService:
    service = container.conversion_service
    if service is None:
        raise RuntimeError("Conversion service not initialized")
    return service


def get_fhir_proxy_service(
    container: ServiceContainer = Depends(get_container),
) -> FhirProxyService:
    service = container.fhir_proxy_service
    if service is None:
        raise RuntimeError("FHIR proxy service not initialized")
    return service
