"""
HL7 v2 conversion endpoint.

Relays HL7 v2 messages to the upstream EMR converter and returns its FHIR
output unchanged.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from hl7_gateway.di import get_conversion_service
from hl7_gateway.services import Hl7ConversionService
from hl7_gateway.utils.logging_utils import get_correlation_id_from_request, log_debug

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json_body(request: Request) -> Any:
    """Return the parsed JSON body, or None when it is empty or not JSON."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        log_debug(
            "Ignoring unparseable request body",
            get_correlation_id_from_request(request),
        )
        return None


@router.post("/hl7-to-fhir")
async def convert_hl7_to_fhir(
    request: Request,
    service: Hl7ConversionService = Depends(get_conversion_service),
):
    """
    Convert an HL7 v2 message to FHIR via the upstream EMR service.

    Body: ``{"message": "<HL7 v2>", "resourceType": "Patient"}``.
    The Authorization header is required and forwarded as-is.
    """
    body = await read_json_body(request)
    status_code, payload = await service.convert(
        body,
        request.headers.get("authorization"),
        correlation_id=get_correlation_id_from_request(request),
    )
    return JSONResponse(status_code=status_code, content=payload)
