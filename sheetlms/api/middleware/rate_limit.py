# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Limits are applied per client: the authenticated user ID when present,
otherwise the remote IP address. Counters live in process memory, so
each application instance limits independently.

Example:
    app.state.limiter = create_limiter(settings.rate_limit)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from sheetlms.core.config.settings import RateLimitSettings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Get a unique identifier for the client.

    Uses user ID if authenticated, otherwise uses IP address.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


def create_limiter(settings: RateLimitSettings) -> Limiter:
    """Create a limiter with the configured default limit.

    Args:
        settings: Rate limiting settings.

    Returns:
        Limiter backed by in-memory storage.
    """
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{settings.requests_per_minute}/minute"],
        storage_uri="memory://",
        enabled=settings.enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors.

    Synchronous because SlowAPIMiddleware calls it without awaiting.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        429 response in the standard envelope.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_client_identifier(request),
    )
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": "Too many requests. Please try again later."},
        headers={"Retry-After": "60"},
    )
