"""Server error handling - sanitizes errors for client responses.

Clients get a fixed message per error type plus a reference code; the full
exception is logged server-side under the same reference.
"""

import logging
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from flowpath.core.errors import (
    AnswerRequiredError,
    FlowInactiveError,
    FlowNotFoundError,
    PersistenceError,
    SessionCompletedError,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)


# Error messages safe to expose to clients
SAFE_ERROR_MESSAGES = {
    "ConfigError": "Configuration error. Please contact support.",
    "FlowNotFoundError": "Flow not found.",
    "FlowInactiveError": "This flow is not currently active.",
    "FlowConfigurationError": "This flow is misconfigured. Please contact support.",
    "GraphIntegrityError": "This flow is misconfigured. Please contact support.",
    "UnsupportedTopologyError": "Cannot go back from this step.",
    "SessionNotFoundError": "Session not found.",
    "SessionCompletedError": "This session is already completed.",
    "AnswerRequiredError": "An answer is required to continue.",
    "PersistenceError": "Storage is temporarily unavailable. Please try again.",
}

DEFAULT_ERROR_MESSAGE = "An internal error occurred. Please try again later."

SUPPORT_MESSAGE = "If this problem persists, contact support with the reference code."


def create_error_reference() -> str:
    """Generate unique error reference for client/server correlation."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def get_safe_error_message(exception: Exception) -> str:
    """Get client-safe error message for exception type."""
    exception_type = type(exception).__name__
    return SAFE_ERROR_MESSAGES.get(exception_type, DEFAULT_ERROR_MESSAGE)


def get_http_status_for_exception(exception: Exception) -> int:
    """Map exception types to appropriate HTTP status codes."""
    # Client errors (4xx)
    if isinstance(exception, (FlowNotFoundError, SessionNotFoundError)):
        return 404
    if isinstance(exception, (FlowInactiveError, SessionCompletedError)):
        return 409
    if isinstance(exception, AnswerRequiredError):
        return 422

    # Server errors (5xx)
    if isinstance(exception, PersistenceError):
        return 503

    # Configuration and unknown errors
    return 500


def log_error_with_context(
    error_ref: str,
    exception: Exception,
    endpoint: str | None = None,
) -> None:
    """Log error details server-side; stack traces only for server errors."""
    status_code = get_http_status_for_exception(exception)
    logger.log(
        logging.ERROR if status_code >= 500 else logging.INFO,
        f"[{error_ref}] Error in {endpoint or 'unknown'}: {type(exception).__name__}: {exception}",
        exc_info=status_code >= 500,
        extra={
            "error_reference": error_ref,
            "endpoint": endpoint,
            "exception_type": type(exception).__name__,
        },
    )


def error_payload(message: str, error_ref: str) -> dict[str, str]:
    return {"error": message, "reference": error_ref, "message": SUPPORT_MESSAGE}


async def flowpath_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map flowpath errors to sanitized JSON responses with their status code."""
    error_ref = create_error_reference()
    log_error_with_context(error_ref, exc, request.url.path)

    return JSONResponse(
        status_code=get_http_status_for_exception(exc),
        content=error_payload(get_safe_error_message(exc), error_ref),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for uncaught exceptions."""
    error_ref = create_error_reference()
    log_error_with_context(error_ref, exc, request.url.path)

    return JSONResponse(status_code=500, content=error_payload(DEFAULT_ERROR_MESSAGE, error_ref))
