"""
FHIR read/search proxy endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from hl7_gateway.di import get_fhir_proxy_service
from hl7_gateway.services import FhirProxyService
from hl7_gateway.utils.logging_utils import get_correlation_id_from_request

logger = logging.getLogger(__name__)

router = APIRouter()


async def _proxy(
    request: Request,
    service: FhirProxyService,
    version: str,
    resource_type: str,
    resource_id: Optional[str] = None,
) -> JSONResponse:
    status_code, payload = await service.fetch_resource(
        version,
        resource_type,
        resource_id,
        query=request.query_params.multi_items(),
        authorization=request.headers.get("authorization"),
        correlation_id=get_correlation_id_from_request(request),
    )
    return JSONResponse(status_code=status_code, content=payload)


@router.get("/{version}/{resource_type}")
async def search_resources(
    version: str,
    resource_type: str,
    request: Request,
    service: FhirProxyService = Depends(get_fhir_proxy_service),
):
    """Search a FHIR resource type; query parameters are forwarded in order."""
    return await _proxy(request, service, version, resource_type)


@router.get("/{version}/{resource_type}/{resource_id}")
async def read_resource(
    version: str,
    resource_type: str,
    resource_id: str,
    request: Request,
    service: FhirProxyService = Depends(get_fhir_proxy_service),
):
    """Read a single FHIR resource by id."""
    return await _proxy(request, service, version, resource_type, resource_id)
