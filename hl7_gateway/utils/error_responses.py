"""
Standardized error response formatting utilities.

Every failure the gateway reports, whether detected locally or raised by
the upstream EMR service, is rendered into the same ``ErrorResponse``
shape through the helpers in this module.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import httpx

from hl7_gateway.models import ErrorResponse, is_blank

logger = logging.getLogger(__name__)

EMR_SERVICE_ERROR = "EMR Service Error"
FHIR_SERVER_ERROR = "FHIR Server Error"
INTERNAL_SERVER_ERROR = "Internal Server Error"

BAD_REQUEST_MESSAGE = 'Request body must contain a "message" field with HL7 v2 message'
UNAUTHORIZED_MESSAGE = "Authorization header is required"
UPSTREAM_FAILURE_MESSAGE = "An unexpected error occurred while processing the request"
NOT_FOUND_MESSAGE = "The requested endpoint does not exist"
UNHANDLED_ERROR_MESSAGE = "An unexpected error occurred"

_MISSING = object()


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def create_error_response(
    error: str,
    message: Any,
    status: Optional[int] = None,
    error_details: Any = _MISSING,
) -> Dict[str, Any]:
    """
    Create a standardized error response dictionary.

    Args:
        error: Short error label (e.g., "Unauthorized", "FHIR Server Error")
        message: Human-readable error message
        status: Upstream HTTP status, only set for upstream rejections
        error_details: Upstream error detail, omitted when not supplied

    Returns:
        Error response dictionary stamped with the current time
    """
    fields: Dict[str, Any] = {
        "error": error,
        "message": message,
        "timestamp": utc_timestamp(),
    }
    if status is not None:
        fields["status"] = status
    if error_details is not _MISSING:
        fields["errorDetails"] = error_details

    return ErrorResponse(**fields).to_payload()


def bad_request_response() -> Tuple[int, Dict[str, Any]]:
    return 400, create_error_response("Bad Request", BAD_REQUEST_MESSAGE)


def unauthorized_response() -> Tuple[int, Dict[str, Any]]:
    return 401, create_error_response("Unauthorized", UNAUTHORIZED_MESSAGE)


def not_found_response() -> Tuple[int, Dict[str, Any]]:
    return 404, create_error_response("Not Found", NOT_FOUND_MESSAGE)


def _upstream_response(error: BaseException) -> Optional[httpx.Response]:
    """Return the upstream response attached to ``error``, if it has one."""
    response = getattr(error, "response", None)
    if response is None or getattr(response, "status_code", None) is None:
        return None
    return response


def _upstream_body(response: Any) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def normalize_upstream_error(
    error: BaseException,
    label: str,
) -> Tuple[int, Dict[str, Any]]:
    """
    Convert a failed upstream call into a status code and error body.

    When the error carries an upstream HTTP response the caller receives
    the upstream status, tagged with ``label``, plus whatever ``message``
    and ``error`` fields the upstream body supplied. Any other failure
    (connection refused, DNS, timeout, unexpected exception) becomes a
    generic 500 whose message does not include the original error text.

    Args:
        error: Exception caught around the upstream call
        label: Handler-specific error tag for upstream rejections

    Returns:
        Tuple of (status_code, error response dictionary)
    """
    response = _upstream_response(error)

    if response is None:
        return 500, create_error_response(INTERNAL_SERVER_ERROR, UPSTREAM_FAILURE_MESSAGE)

    status_code = int(response.status_code)
    body = _upstream_body(response)

    message = body.get("message")
    if is_blank(message):
        message = str(error)
    error_details = body["error"] if "error" in body else _MISSING

    return status_code, create_error_response(
        label,
        message,
        status=status_code,
        error_details=error_details,
    )
