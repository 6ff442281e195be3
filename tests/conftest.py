import json
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from hl7_gateway.config import GatewaySettings
from hl7_gateway.emr_http_client import EmrHttpClient
from hl7_gateway.main import create_app

EMR_ENDPOINT = "http://emr.test"
FHIR_BASE_URL = "http://emr.test/fhir"


class UpstreamRecorder:
    """Records outbound requests and answers them with a configurable handler."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def respond_with(self, status_code: int = 200, json_body=None, **kwargs) -> None:
        self.handler = lambda request: httpx.Response(status_code, json=json_body, **kwargs)

    def raise_error(self, error_factory: Callable[[httpx.Request], Exception]) -> None:
        def _raise(request):
            raise error_factory(request)

        self.handler = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(emr_endpoint=EMR_ENDPOINT, fhir_base_url=FHIR_BASE_URL)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def emr_client(gateway_settings, upstream) -> EmrHttpClient:
    return EmrHttpClient(gateway_settings, transport=httpx.MockTransport(upstream))


@pytest.fixture
def app(gateway_settings, upstream):
    return create_app(gateway_settings, transport=httpx.MockTransport(upstream))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def dependency_overrides_guard(app):
    """Save and restore FastAPI dependency overrides for each test."""

    original_overrides = dict(app.dependency_overrides)

    try:
        yield app.dependency_overrides
    finally:
        app.dependency_overrides = original_overrides
