# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware.

This package contains middleware for:
- JWT authentication (auth)
- Rate limiting (rate_limit)
"""

from sheetlms.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from sheetlms.api.middleware.rate_limit import (
    create_limiter,
    get_client_identifier,
    rate_limit_exceeded_handler,
)

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "create_limiter",
    "get_client_identifier",
    "rate_limit_exceeded_handler",
]
