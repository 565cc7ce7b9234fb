"""Error handling middleware."""

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, InvalidTransitionException

logger = structlog.get_logger(__name__)


def _error_body(request: Request, error: str, message: str, **extra) -> dict:
    return {
        "success": False,
        "error": error,
        "message": message,
        "path": str(request.url),
        **extra,
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        JSON error response
    """
    if isinstance(exc, InvalidTransitionException):
        logger.info(
            "invalid_status_transition",
            path=request.url.path,
            current_status=exc.current_status,
            requested_status=exc.requested_status,
        )
    elif exc.status_code >= 500:
        logger.error("application_error", path=request.url.path, error=exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.__class__.__name__, exc.message),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions raised by the framework (404 routes, 405 methods)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, "HTTPException", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle validation errors.

    Malformed bodies and parameters are reported as 400 with the field details.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else "Request validation failed"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            request,
            "ValidationError",
            message,
            details=jsonable_encoder(errors),
        ),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle storage failures, passing the driver message through."""
    logger.error(
        "database_error",
        path=request.url.path,
        error_type=exc.__class__.__name__,
        error=str(exc.__cause__ or exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "DatabaseError", str(exc.__cause__ or exc)),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "InternalServerError", "An unexpected error occurred"),
    )
