"""
Tests for the FHIR read/search relay.
"""

import httpx
import pytest

from hl7_gateway.services import FhirProxyService
from hl7_gateway.utils.error_responses import UPSTREAM_FAILURE_MESSAGE


@pytest.fixture
def service(emr_client):
    return FhirProxyService(emr_client)


@pytest.mark.asyncio
@pytest.mark.parametrize("authorization", [None, ""])
async def test_missing_authorization_is_unauthorized(service, upstream, authorization):
    status, payload = await service.fetch_resource(
        "r4", "Patient", "123", {"name": "John"}, authorization=authorization
    )

    assert status == 401
    assert payload["error"] == "Unauthorized"
    assert set(payload) == {"error", "message", "timestamp"}
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_search_without_id_or_query(service, upstream):
    bundle = {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": 1,
        "entry": [{"resource": {"resourceType": "Patient", "id": "123"}}],
    }
    upstream.respond_with(200, bundle)

    status, payload = await service.fetch_resource("r4", "Patient", authorization="Bearer test-token")

    assert status == 200
    assert payload == bundle
    assert str(upstream.last_request.url) == "http://emr.test/fhir/r4/Patient"
    assert upstream.last_request.headers["authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_read_by_id(service, upstream):
    upstream.respond_with(200, {"resourceType": "Patient", "id": "123"})

    await service.fetch_resource("r4", "Patient", "123", authorization="Bearer test-token")

    assert str(upstream.last_request.url) == "http://emr.test/fhir/r4/Patient/123"


@pytest.mark.asyncio
async def test_query_parameters_keep_their_order(service, upstream):
    await service.fetch_resource(
        "r4",
        "Patient",
        query={"name": "John", "birthdate": "1990"},
        authorization="Bearer test-token",
    )

    assert str(upstream.last_request.url) == "http://emr.test/fhir/r4/Patient?name=John&birthdate=1990"


@pytest.mark.asyncio
async def test_version_and_resource_type_are_not_validated(service, upstream):
    await service.fetch_resource("stu3", "NotARealType", authorization="Bearer test-token")

    assert str(upstream.last_request.url) == "http://emr.test/fhir/stu3/NotARealType"


@pytest.mark.asyncio
async def test_upstream_not_found_is_fhir_server_error(service, upstream):
    upstream.respond_with(404, {"message": "Resource not found", "error": "Not Found"})

    status, payload = await service.fetch_resource(
        "r4", "Patient", "missing", authorization="Bearer test-token"
    )

    assert status == 404
    assert payload == {
        "error": "FHIR Server Error",
        "message": "Resource not found",
        "errorDetails": "Not Found",
        "status": 404,
        "timestamp": payload["timestamp"],
    }
    assert isinstance(payload["timestamp"], str)


@pytest.mark.asyncio
async def test_upstream_error_with_operation_outcome_body(service, upstream):
    outcome = {"resourceType": "OperationOutcome", "issue": [{"severity": "error"}]}
    upstream.respond_with(400, outcome)

    status, payload = await service.fetch_resource("r4", "Patient", authorization="Bearer test-token")

    assert status == 400
    assert payload["error"] == "FHIR Server Error"
    assert "400" in payload["message"]
    assert "errorDetails" not in payload


@pytest.mark.asyncio
async def test_network_error_is_generic_internal_server_error(service, upstream):
    upstream.raise_error(lambda request: httpx.ConnectError("Network error", request=request))

    status, payload = await service.fetch_resource("r4", "Patient", authorization="Bearer test-token")

    assert status == 500
    assert payload["error"] == "Internal Server Error"
    assert payload["message"] == UPSTREAM_FAILURE_MESSAGE
    assert "Network error" not in str(payload)
