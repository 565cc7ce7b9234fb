"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.config import settings
from app.core.exceptions import AppException
from app.core.redis_client import check_redis_connection, close_redis_connection
from app.database import check_database_connection, engine
from app.middleware.error_handler import (
    app_exception_handler,
    database_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.middleware.logging import LoggingMiddleware, configure_logging

configure_logging()
logger = structlog.get_logger()

EXCEPTION_HANDLERS = {
    AppException: app_exception_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_exception_handler,
    SQLAlchemyError: database_exception_handler,
    Exception: general_exception_handler,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Report backing-service health on startup and release connections on shutdown."""
    logger.info(
        "application_startup",
        environment=settings.environment,
        version=settings.app_version,
        api_prefix=settings.api_prefix,
    )

    if await check_database_connection():
        logger.info("database_connected")
    else:
        logger.error("database_connection_failed")

    # Doctor profiles are read from the database while Redis is down
    if await check_redis_connection():
        logger.info("redis_connected")
    else:
        logger.warning("redis_connection_failed")

    yield

    logger.info("application_shutdown")
    await engine.dispose()
    close_redis_connection()


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers, routes and metrics."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Backend for booking remote medical consultations",
        debug=settings.debug,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    application.add_middleware(LoggingMiddleware)

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        application.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]

    application.include_router(api_router, prefix=settings.api_prefix)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/docs", "/redoc", "/openapi.json", "/metrics"],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    ).instrument(application).expose(application, endpoint="/metrics", include_in_schema=False)

    @application.get("/", tags=["Root"], include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "api": settings.api_prefix,
            "docs": "/docs",
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
