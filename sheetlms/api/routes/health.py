# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoint.

Liveness only: it never calls the spreadsheet, so a slow or unavailable
remote does not make the process look dead.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from sheetlms import __version__

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    sheets_configured: bool = Field(description="Whether spreadsheet credentials are set")
    cached_entries: int = Field(description="Entries held by the read-through cache")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check if the API is alive.

    Returns:
        HealthResponse with process details.
    """
    settings = request.app.state.settings
    cache = getattr(request.app.state, "cache", None)

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        sheets_configured=settings.sheets.is_configured,
        cached_entries=len(cache) if cache is not None else 0,
    )
