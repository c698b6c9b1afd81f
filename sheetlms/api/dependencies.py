# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get authenticated users
- Enforce roles
- Get the service instances created at startup

Example:
    @router.post("/submit")
    async def submit_quiz(
        service: QuizService = Depends(get_quiz_service),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging

from fastapi import HTTPException, Request, status

from sheetlms.api.middleware.auth import CurrentUser, get_current_user
from sheetlms.domains.catalog.service import CatalogService
from sheetlms.domains.progress.service import ProgressService
from sheetlms.domains.quiz.service import QuizService

logger = logging.getLogger(__name__)


# =========================================================================
# Authentication Dependencies
# =========================================================================


def get_optional_user(request: Request) -> CurrentUser | None:
    """Get current user if authenticated, None otherwise.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser or None.
    """
    return get_current_user(request)


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.post("")
        async def create_course(
            user: CurrentUser = Depends(RequireRole("instructor", "admin")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted role codes (any of these).
        """
        self.roles = roles

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: 401 if not authenticated, 403 if no accepted role.
        """
        user = require_auth(request)
        if not user.has_any_role(*self.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user


require_instructor = RequireRole("instructor", "admin")


# =========================================================================
# Service Dependencies
# =========================================================================


def _get_service(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return service


def get_catalog_service(request: Request) -> CatalogService:
    """Get the catalog service."""
    return _get_service(request, "catalog_service")


def get_quiz_service(request: Request) -> QuizService:
    """Get the quiz service."""
    return _get_service(request, "quiz_service")


def get_progress_service(request: Request) -> ProgressService:
    """Get the progress service."""
    return _get_service(request, "progress_service")
