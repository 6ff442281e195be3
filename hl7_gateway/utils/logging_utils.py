"""
Correlation-id aware logging helpers.

Handlers log through these so every line about a request carries the
``[correlation_id]`` prefix assigned by the gateway middleware, followed by
``key=value`` context.
"""

import logging
from typing import Optional

from fastapi import Request

logger = logging.getLogger("hl7_gateway")


def get_correlation_id_from_request(request: Optional[Request]) -> str:
    """Return the correlation ID stored on the request, or an empty string."""
    if request is None:
        return ""
    return getattr(request.state, "correlation_id", "")


def format_log_message(message: str, correlation_id: str = "", **context) -> str:
    if correlation_id:
        message = f"[{correlation_id}] {message}"
    if context:
        message += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"
    return message


def log_info(message: str, correlation_id: str = "", **context) -> None:
    logger.info(format_log_message(message, correlation_id, **context))


def log_warning(message: str, correlation_id: str = "", **context) -> None:
    logger.warning(format_log_message(message, correlation_id, **context))


def log_error(message: str, correlation_id: str = "", exc_info: bool = False, **context) -> None:
    logger.error(format_log_message(message, correlation_id, **context), exc_info=exc_info)


def log_debug(message: str, correlation_id: str = "", **context) -> None:
    logger.debug(format_log_message(message, correlation_id, **context))
