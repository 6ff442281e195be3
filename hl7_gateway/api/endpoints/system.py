from fastapi import APIRouter

from hl7_gateway.models import HealthCheckResponse
from hl7_gateway.utils.error_responses import utc_timestamp

router = APIRouter()

HEALTH_MESSAGE = "Demo integration service is running"


@router.get("/", response_model=HealthCheckResponse)
async def health_check():
    """
    Liveness check. Always reports OK; no upstream call is made.
    """
    return HealthCheckResponse(
        status="OK",
        message=HEALTH_MESSAGE,
        timestamp=utc_timestamp(),
    )
