"""
Data Models for the HL7/FHIR gateway
Defines Pydantic models for the upstream conversion payload and the
gateway's own JSON responses
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RESOURCE_TYPE = "Patient"


def is_blank(value: Any) -> bool:
    """
    Return True for JSON field values that count as absent.

    Only null, false, "", 0 and NaN are blank; empty lists and objects
    count as supplied.
    """
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)):
        return value == 0 or value != value
    return False


# ==================== Upstream Payloads ====================

class ConversionRequest(BaseModel):
    """Payload sent to the upstream HL7 v2 to FHIR converter"""
    model_config = ConfigDict(frozen=True)

    resourceType: Any = DEFAULT_RESOURCE_TYPE
    message: Any


# ==================== API Response Models ====================

class ErrorResponse(BaseModel):
    """Fixed error shape returned for every gateway failure"""
    model_config = ConfigDict(frozen=True)

    error: str
    # Upstream rejections may carry a non-string message; it is relayed as-is.
    message: Any
    status: Optional[int] = None
    errorDetails: Optional[Any] = None
    timestamp: str

    def to_payload(self) -> dict:
        # Optional fields only appear when they were explicitly supplied.
        return self.model_dump(exclude_unset=True)


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = "OK"
    message: str
    timestamp: str = Field(..., description="ISO-8601 time the check ran")
