"""
Exception handlers - Map failures to {ok: false, message} responses.

Domain exceptions carry no HTTP knowledge; this module decides the status
code and the client-facing message for each one. Messages never include
exception details, so redemption failures stay indistinguishable.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.models import ErrorResponse
from src.domain.exceptions import (
    DeliveryError,
    DocumentNotFound,
    InvalidOrExpiredCode,
    UserNotFound,
    ValidationError,
    VerificationError,
)

logger = logging.getLogger(__name__)

# (status code, client message) per domain exception type
ERROR_RESPONSES: dict[type[VerificationError], tuple[int, str]] = {
    ValidationError: (status.HTTP_400_BAD_REQUEST, "Invalid request."),
    InvalidOrExpiredCode: (status.HTTP_400_BAD_REQUEST, "Invalid or expired code."),
    UserNotFound: (status.HTTP_404_NOT_FOUND, "No user for this email."),
    DocumentNotFound: (status.HTTP_404_NOT_FOUND, "No PDF stored for this user."),
    DeliveryError: (status.HTTP_502_BAD_GATEWAY, "Could not send email."),
}


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Build a JSON error response in the standard shape."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def verification_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate a domain exception to its status code and message."""
    for exc_type, (status_code, message) in ERROR_RESPONSES.items():
        if isinstance(exc, exc_type):
            logger.info(
                "%s %s -> %d (%s)",
                request.method,
                request.url.path,
                status_code,
                type(exc).__name__,
            )
            return error_response(status_code, message)
    return await unhandled_error_handler(request, exc)


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    message = "Invalid request."
    if isinstance(exc, RequestValidationError):
        fields = sorted(
            {
                err["loc"][-1]
                for err in exc.errors()
                if err.get("loc") and isinstance(err["loc"][-1], str)
            }
        )
        if fields:
            message = f"Invalid request: {', '.join(fields)}."
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework HTTP errors (404, 405, 429) in the standard shape."""
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and return a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on an application."""
    app.add_exception_handler(VerificationError, verification_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
