import logging
from typing import Optional

import httpx

from hl7_gateway.config import GatewaySettings
from hl7_gateway.emr_http_client import EmrHttpClient
from hl7_gateway.services import FhirProxyService, Hl7ConversionService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Holds the upstream client and the request handlers built on it."""

    def __init__(
        self,
        settings: GatewaySettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.transport = transport

        self.emr_client: Optional[EmrHttpClient] = None
        self.conversion_service: Optional[Hl7ConversionService] = None
        self.fhir_proxy_service: Optional[FhirProxyService] = None

    async def startup(self) -> None:
        logger.info("Loading EMR HTTP client...")
        self.emr_client = EmrHttpClient(self.settings, transport=self.transport)

        self.conversion_service = Hl7ConversionService(self.emr_client)
        self.fhir_proxy_service = FhirProxyService(self.emr_client)
        logger.info("Gateway services ready")

    async def shutdown(self) -> None:
        if self.emr_client is not None:
            await self.emr_client.aclose()
            self.emr_client = None
        logger.info("EMR HTTP client closed")
