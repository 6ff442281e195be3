"""
HL7/FHIR Gateway - Main Application Entry Point
Relays HL7 v2 conversion requests and FHIR queries to an upstream EMR service
"""

# Load environment variables
from dotenv import load_dotenv
load_dotenv()

import logging
import uuid
from http import HTTPStatus
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED

from hl7_gateway.api.api import api_router
from hl7_gateway.config import GatewaySettings
from hl7_gateway.di import ServiceContainer
from hl7_gateway.utils.error_responses import (
    INTERNAL_SERVER_ERROR,
    UNHANDLED_ERROR_MESSAGE,
    create_error_response,
    not_found_response,
)

settings = GatewaySettings.from_env()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


# ==================== ERROR HANDLERS ====================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render framework HTTP errors in the gateway's error shape.
    Unknown paths and unsupported methods both report "Not Found".
    """
    correlation_id = getattr(request.state, "correlation_id", "")

    if exc.status_code in (HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED):
        logger.info(
            "No route [%s] for %s %s", correlation_id, request.method, request.url.path
        )
        status_code, payload = not_found_response()
        return JSONResponse(status_code=status_code, content=payload)

    logger.warning("HTTPException [%s] %s: %s", correlation_id, exc.status_code, exc.detail)
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else "Request failed"
    payload = create_error_response(_reason_phrase(exc.status_code), message)
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled exceptions.

    Runs outside the correlation-id middleware, so the header is set here.
    """
    correlation_id = getattr(request.state, "correlation_id", uuid.uuid4().hex)

    logger.error(
        "Unhandled exception [%s] at %s %s: %s",
        correlation_id,
        request.method,
        request.url.path,
        str(exc),
        exc_info=True
    )

    payload = create_error_response(INTERNAL_SERVER_ERROR, UNHANDLED_ERROR_MESSAGE)
    return JSONResponse(
        status_code=500,
        content=payload,
        headers={"X-Correlation-ID": correlation_id},
    )


def create_app(
    app_settings: Optional[GatewaySettings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        app_settings: Settings to use (defaults to the environment-derived ones)
        transport: Optional httpx transport for the upstream client, used by tests

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = ServiceContainer(app_settings, transport=transport)
        await container.startup()
        app.state.container = container
        logger.info(
            "Gateway started (EMR endpoint %s, FHIR base %s)",
            app_settings.emr_endpoint,
            app_settings.fhir_base_url,
        )

        yield

        logger.info("Shutting down gateway...")
        await container.shutdown()

    app = FastAPI(
        title="HL7 to FHIR Gateway",
        description="Relays HL7 v2 conversion and FHIR queries to an upstream EMR service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(api_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials="*" not in app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(add_correlation_id)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


app = create_app()


# ==================== MAIN ====================

def run() -> None:
    logger.info(f"HL7 to FHIR converter server running on port {settings.port}")

    uvicorn.run(
        "hl7_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
