"""Error handling middleware."""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = structlog.get_logger(__name__)


def _error_body(request: Request, error: str, message: object) -> dict:
    return {
        "error": error,
        "message": message,
        "path": request.url.path,
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Map booking domain errors to their HTTP status.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        JSON error response
    """
    logger.info(
        "domain_error",
        error=exc.__class__.__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.__class__.__name__, exc.message),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions raised by routing or endpoints."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, "HTTPException", exc.detail),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON error response with validation details
    """
    body = _error_body(request, "ValidationError", "Request validation failed")
    body["details"] = jsonable_encoder(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log and hide unexpected failures behind a 500."""
    logger.exception(
        "unhandled_exception",
        error_type=exc.__class__.__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "InternalServerError", "An unexpected error occurred"),
    )
