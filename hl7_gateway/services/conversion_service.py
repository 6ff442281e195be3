"""HL7 v2 to FHIR conversion relay."""

import logging
from typing import Any, Optional, Tuple

import httpx

from hl7_gateway.emr_http_client import EmrHttpClient, response_payload
from hl7_gateway.models import DEFAULT_RESOURCE_TYPE, ConversionRequest, is_blank
from hl7_gateway.utils.error_responses import (
    EMR_SERVICE_ERROR,
    bad_request_response,
    normalize_upstream_error,
    unauthorized_response,
)
from hl7_gateway.utils.logging_utils import log_error, log_info, log_warning

logger = logging.getLogger(__name__)


class Hl7ConversionService:
    """Validates conversion requests and forwards them to the EMR converter."""

    def __init__(self, client: EmrHttpClient) -> None:
        self.client = client

    @staticmethod
    def build_payload(body: dict) -> ConversionRequest:
        return ConversionRequest(
            resourceType=(
                DEFAULT_RESOURCE_TYPE
                if is_blank(body.get("resourceType"))
                else body["resourceType"]
            ),
            message=body["message"],
        )

    async def convert(
        self,
        body: Any,
        authorization: Optional[str],
        correlation_id: str = "",
    ) -> Tuple[int, Any]:
        """
        Forward an HL7 v2 message to the upstream converter.

        Args:
            body: Parsed request body, or None when the request had none
            authorization: Inbound Authorization header, forwarded verbatim
            correlation_id: Request correlation ID for logging

        Returns:
            Tuple of (status_code, JSON payload). Upstream successes are
            passed through unchanged; every failure is an error response.
        """
        if not isinstance(body, dict) or is_blank(body.get("message")):
            log_info("Rejected conversion request without message", correlation_id)
            return bad_request_response()

        if not authorization:
            log_info("Rejected conversion request without authorization", correlation_id)
            return unauthorized_response()

        try:
            payload = self.build_payload(body)
            response = await self.client.post_conversion(payload.model_dump(), authorization)
        except httpx.HTTPStatusError as exc:
            log_warning(
                "EMR service rejected conversion",
                correlation_id,
                status=exc.response.status_code,
            )
            return normalize_upstream_error(exc, EMR_SERVICE_ERROR)
        except Exception as exc:
            log_error(f"Error converting HL7 to FHIR: {exc}", correlation_id)
            return normalize_upstream_error(exc, EMR_SERVICE_ERROR)

        log_info(
            "Conversion relayed",
            correlation_id,
            resource_type=payload.resourceType,
            status=response.status_code,
        )
        return response.status_code, response_payload(response)
