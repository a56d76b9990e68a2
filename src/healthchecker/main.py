"""FastAPI application entry point."""

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from healthchecker import __version__
from healthchecker.api.routes import api_router
from healthchecker.config import Settings, get_settings
from healthchecker.core.registry import Collector
from healthchecker.core.runner import HealthCheckRunner
from healthchecker.middleware.auth import AuthenticationMiddleware
from healthchecker.middleware.logging import LoggingMiddleware, configure_logging
from healthchecker.middleware.request_id import RequestIdMiddleware
from healthchecker.plugins.core import make_core_collector
from healthchecker.plugins.core.checks.database import sqlite_connection_factory
from healthchecker.utils.errors import (
    ErrorCode,
    HealthCheckerError,
    classify_exception,
    create_error_response,
    log_error,
)

logger = logging.getLogger(__name__)

# HTTP status per library error code
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.CHECK_NOT_FOUND: 404,
    ErrorCode.CATEGORY_NOT_FOUND: 404,
    ErrorCode.NO_CHECKS_AVAILABLE: 503,
}


def build_runner(
    settings: Settings,
    collectors: Iterable[Collector] | None = None,
    database: Any | None = None,
) -> HealthCheckRunner:
    """Create a runner for the configured checks.

    When ``database.path`` is configured, every database check opens its
    own connection to that file.

    Args:
        settings: Application settings.
        collectors: Check sources; defaults to the built-in core plugin.
        database: Optional shared DB-API connection, used when no database
            path is configured.

    Returns:
        Configured HealthCheckRunner.
    """
    if collectors is None:
        collectors = [make_core_collector(settings.site)]

    database_factory = None
    if settings.database.path is not None:
        database_factory = sqlite_connection_factory(settings.database)

    return HealthCheckRunner(
        collectors,
        database=database,
        database_factory=database_factory,
        settings=settings.runner,
        disabled_checks=settings.checks.disabled,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and validate settings on startup."""
    settings: Settings = app.state.settings

    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
    )

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    logger.info(
        "Starting healthchecker",
        extra={"version": __version__},
    )

    yield

    logger.info("Shutting down healthchecker")


def create_app(
    settings: Settings | None = None,
    runner: HealthCheckRunner | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.
        runner: Optional runner override, e.g. one with a database handle.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="healthchecker",
        description="Health check report for site configuration and database",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.runner = runner if runner is not None else build_runner(settings)

    # Last added = first executed; CORS outermost for preflight requests
    app.add_middleware(AuthenticationMiddleware, settings=settings)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.server.cors.allowed_methods,
        allow_headers=settings.server.cors.allowed_headers,
    )

    app.add_exception_handler(HealthCheckerError, health_checker_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(api_router)

    return app


async def health_checker_error_handler(request: Request, exc: HealthCheckerError) -> JSONResponse:
    """Map library errors to JSON error responses."""
    request_id = getattr(request.state, "request_id", None)
    code = classify_exception(exc)
    log_error(exc, code=code, request_id=request_id, path=request.url.path)

    body = create_error_response(code, detail=str(exc), request_id=request_id)
    return JSONResponse(
        status_code=ERROR_STATUS.get(code, 500),
        content=body.model_dump(mode="json"),
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    request_id = getattr(request.state, "request_id", None)
    log_error(exc, code=ErrorCode.INTERNAL_ERROR, request_id=request_id, path=request.url.path)

    body = create_error_response(ErrorCode.INTERNAL_ERROR, request_id=request_id)
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# Create the default app instance
app = create_app()
