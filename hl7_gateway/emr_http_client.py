"""Low-level HTTP client for the upstream EMR conversion and FHIR endpoints."""

import logging
import urllib.parse
from collections.abc import Mapping as MappingABC
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import httpx

from hl7_gateway.config import GatewaySettings

logger = logging.getLogger(__name__)

CONVERSION_PATH = "/convert/hl7-to-fhir"

QueryParams = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def response_payload(response: httpx.Response) -> Any:
    """Decode an upstream body as JSON, falling back to text for non-JSON bodies."""

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class EmrHttpClient:
    """Forwards gateway calls to the EMR service over a shared async session.

    The client owns the upstream base addresses and the timeout policy:
    conversion calls are bounded by ``conversion_timeout_seconds`` while FHIR
    reads use ``fhir_timeout_seconds``, which defaults to no timeout at all.
    Non-success upstream statuses surface as :class:`httpx.HTTPStatusError`.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        *,
        session: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.emr_endpoint = settings.emr_endpoint
        self.fhir_base_url = settings.fhir_base_url
        self.conversion_timeout = settings.conversion_timeout_seconds
        self.fhir_timeout = settings.fhir_timeout_seconds
        self.default_headers = {"Content-Type": "application/json"}
        self.session = session or self._initialize_session(transport)

    def _initialize_session(
        self, transport: Optional[httpx.AsyncBaseTransport]
    ) -> httpx.AsyncClient:
        logger.info(
            "EMR HTTP client initialized for %s (FHIR base %s)",
            self.emr_endpoint,
            self.fhir_base_url,
        )
        return httpx.AsyncClient(
            transport=transport,
            timeout=None,
            follow_redirects=True,
        )

    def _headers(self, authorization: str) -> dict:
        headers = dict(self.default_headers)
        headers["Authorization"] = authorization
        return headers

    # ------------------------------------------------------------------
    # URL construction
    # ------------------------------------------------------------------
    def build_conversion_url(self) -> str:
        return f"{self.emr_endpoint}{CONVERSION_PATH}"

    def build_fhir_url(
        self,
        version: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        query: Optional[QueryParams] = None,
    ) -> str:
        """
        Build the upstream FHIR URL for a read or search.

        Args:
            version: FHIR version path segment (e.g. ``r4``)
            resource_type: FHIR resource type path segment
            resource_id: Optional resource id appended as a final segment
            query: Query parameters, in the order they should be emitted

        Returns:
            ``{base}/{version}/{resource_type}[/{id}][?query]``
        """
        url = f"{self.fhir_base_url}/{version}/{resource_type}"
        if resource_id:
            url += f"/{resource_id}"

        if query is not None:
            pairs = list(query.items()) if isinstance(query, MappingABC) else list(query)
            query_string = urllib.parse.urlencode(pairs)
            if query_string:
                url += f"?{query_string}"

        return url

    # ------------------------------------------------------------------
    # Upstream calls
    # ------------------------------------------------------------------
    async def post_conversion(self, payload: Mapping[str, Any], authorization: str) -> httpx.Response:
        """POST a conversion payload; raises for transport errors and non-2xx statuses."""

        url = self.build_conversion_url()
        logger.debug("POST %s (timeout=%s)", url, self.conversion_timeout)
        response = await self.session.post(
            url,
            json=dict(payload),
            headers=self._headers(authorization),
            timeout=self.conversion_timeout,
        )
        response.raise_for_status()
        return response

    async def get_fhir(self, url: str, authorization: str) -> httpx.Response:
        """GET a FHIR URL built by :meth:`build_fhir_url`."""

        logger.debug("GET %s (timeout=%s)", url, self.fhir_timeout)
        response = await self.session.get(
            url,
            headers=self._headers(authorization),
            timeout=self.fhir_timeout,
        )
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self.session.aclose()
