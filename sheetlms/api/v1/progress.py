# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress API endpoints.

- GET /course/{course_id} - Caller's per-module breakdown of a course
- GET /{user_id} - A learner's progress with statistics (self or admin)
"""

import logging

from fastapi import APIRouter, Depends

from sheetlms.api.dependencies import get_progress_service, require_auth
from sheetlms.api.middleware.auth import CurrentUser
from sheetlms.api.responses import ApiResponse
from sheetlms.domains.progress.service import ProgressService
from sheetlms.models.progress import CourseProgress, UserProgressReport

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[CourseProgress],
    summary="Get course progress",
)
async def get_course_progress(
    course_id: str,
    current_user: CurrentUser = Depends(require_auth),
    service: ProgressService = Depends(get_progress_service),
) -> ApiResponse[CourseProgress]:
    """Get the caller's progress through a course."""
    report = await service.get_course_progress(current_user.id, course_id)
    return ApiResponse(data=report)


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserProgressReport],
    summary="Get user progress",
)
async def get_user_progress(
    user_id: str,
    current_user: CurrentUser = Depends(require_auth),
    service: ProgressService = Depends(get_progress_service),
) -> ApiResponse[UserProgressReport]:
    """Get a learner's progress; only the learner or an admin may ask."""
    report = await service.get_user_progress(
        user_id,
        requester_id=current_user.id,
        requester_role=current_user.role,
    )
    return ApiResponse(data=report)
