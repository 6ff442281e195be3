"""FHIR read/search relay."""

import logging
from typing import Any, Optional, Tuple

import httpx

from hl7_gateway.emr_http_client import EmrHttpClient, QueryParams, response_payload
from hl7_gateway.utils.error_responses import (
    FHIR_SERVER_ERROR,
    normalize_upstream_error,
    unauthorized_response,
)
from hl7_gateway.utils.logging_utils import log_error, log_info, log_warning

logger = logging.getLogger(__name__)


class FhirProxyService:
    """Relays FHIR reads and searches to the upstream FHIR endpoint."""

    def __init__(self, client: EmrHttpClient) -> None:
        self.client = client

    async def fetch_resource(
        self,
        version: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        query: Optional[QueryParams] = None,
        authorization: Optional[str] = None,
        correlation_id: str = "",
    ) -> Tuple[int, Any]:
        """
        Fetch a FHIR resource or search bundle from the upstream server.

        Version and resource type are forwarded as given; the upstream
        server decides whether they are valid.

        Returns:
            Tuple of (status_code, JSON payload)
        """
        if not authorization:
            log_info("Rejected FHIR request without authorization", correlation_id)
            return unauthorized_response()

        try:
            url = self.client.build_fhir_url(version, resource_type, resource_id, query)
            response = await self.client.get_fhir(url, authorization)
        except httpx.HTTPStatusError as exc:
            log_warning(
                "FHIR server rejected request",
                correlation_id,
                resource_type=resource_type,
                status=exc.response.status_code,
            )
            return normalize_upstream_error(exc, FHIR_SERVER_ERROR)
        except Exception as exc:
            log_error(f"Error retrieving FHIR resource: {exc}", correlation_id)
            return normalize_upstream_error(exc, FHIR_SERVER_ERROR)

        return response.status_code, response_payload(response)
