"""
Exception handlers mapping errors to ``{success: false, message}`` envelopes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from petroleum_ops.core.exceptions import PetroleumOpsError, format_validation_errors
from petroleum_ops.models.common import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def petroleum_ops_exception_handler(request: Request, exc: PetroleumOpsError):
    """Handle application errors (validation, not found, unexpected)."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
        return _error(exc.status_code, GENERIC_ERROR_MESSAGE)
    return _error(exc.status_code, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors as 400."""
    return _error(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (unknown routes, wrong methods)."""
    return _error(exc.status_code, str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle anything else as 500 with a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PetroleumOpsError, petroleum_ops_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
