# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the SheetLMS API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from sheetlms import __version__
from sheetlms.api.middleware.auth import AuthMiddleware
from sheetlms.api.middleware.rate_limit import create_limiter, rate_limit_exceeded_handler
from sheetlms.api.responses import FieldError, error_response
from sheetlms.api.routes import health
from sheetlms.api.v1 import router as api_router
from sheetlms.core.config import Settings, get_settings
from sheetlms.core.exceptions import ForbiddenError, LMSError, NotFoundError, ValidationError
from sheetlms.domains.catalog.service import CatalogService
from sheetlms.domains.progress.service import ProgressService
from sheetlms.domains.quiz.service import QuizService
from sheetlms.infrastructure.cache import ReadThroughCache
from sheetlms.infrastructure.sheets import (
    RowStore,
    SheetRepository,
    SheetsClient,
    SheetsError,
    TabularTransport,
)
from sheetlms.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Logging
    - Sheets client (unless a transport was injected)
    - Read-through cache, repository and services on app.state

    Shutdown closes the Sheets client.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting SheetLMS API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    client: SheetsClient | None = None
    transport: TabularTransport | None = app.state.transport
    if transport is None:
        client = SheetsClient(settings.sheets)
        if settings.sheets.is_configured:
            await client.connect()
        else:
            logger.warning(
                "Sheets credentials are not configured; data endpoints will fail "
                "until SHEETS_SPREADSHEET_ID and service account settings are set"
            )
        transport = client

    cache = ReadThroughCache(ttl_seconds=settings.cache.ttl_seconds)
    repository = SheetRepository(RowStore(transport), cache)
    progress_service = ProgressService(repository)

    app.state.cache = cache
    app.state.repository = repository
    app.state.progress_service = progress_service
    app.state.quiz_service = QuizService(repository, progress_service)
    app.state.catalog_service = CatalogService(repository)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    cache.clear()
    if client is not None:
        await client.close()
        logger.info("Sheets client closed")

    logger.info("Shutting down SheetLMS API")


# =========================================================================
# Exception handlers
# =========================================================================


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap HTTP errors raised by endpoints and dependencies in the envelope."""
    return error_response(
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 with per-field messages."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append(FieldError(field=".".join(location) or "request", message=error.get("msg", "")))
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    """Map domain errors to HTTP status codes."""
    if isinstance(exc, ValidationError):
        errors = [FieldError(field=name, message=msg) for name, msg in exc.field_errors.items()]
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message, errors=errors or None)
    if isinstance(exc, NotFoundError):
        return error_response(status.HTTP_404_NOT_FOUND, exc.message)
    if isinstance(exc, ForbiddenError):
        return error_response(status.HTTP_403_FORBIDDEN, exc.message)
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def sheets_error_handler(request: Request, exc: SheetsError) -> JSONResponse:
    """Log spreadsheet failures and return a generic 500."""
    logger.error(
        "Spreadsheet error on %s %s: %s",
        request.method,
        request.url.path,
        str(exc),
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and return a generic 500 in the envelope."""
    logger.exception(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    settings: Settings | None = None,
    transport: TabularTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Args:
        settings: Settings to use instead of get_settings().
        transport: Tabular transport to use instead of a SheetsClient.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="SheetLMS API",
        description="Learning management backend on a Google spreadsheet",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings
    app.state.transport = transport
    app.state.limiter = create_limiter(settings.rate_limit)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(LMSError, lms_error_handler)
    app.add_exception_handler(SheetsError, sheets_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Rate limiting runs after auth so that limits are keyed by user
    app.add_middleware(SlowAPIMiddleware)

    # Auth middleware - validates JWT tokens
    app.add_middleware(AuthMiddleware, jwt_settings=settings.jwt)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(api_router)

    return app
