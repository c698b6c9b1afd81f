# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson API endpoints.

- GET /{lesson_id} - Lesson with questions, progress and navigation
- POST / - Create a lesson (instructor/admin)
- POST /{lesson_id}/quizzes - Add quiz questions (instructor/admin)
"""

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from sheetlms.api.dependencies import (
    get_catalog_service,
    get_optional_user,
    get_quiz_service,
    require_instructor,
)
from sheetlms.api.middleware.auth import CurrentUser
from sheetlms.api.responses import ApiResponse
from sheetlms.domains.catalog.service import CatalogService
from sheetlms.domains.quiz.service import QuizService, question_view
from sheetlms.models.catalog import LessonCreate, LessonDetail
from sheetlms.models.entities import Lesson
from sheetlms.models.quiz import AddQuestionsRequest, QuizQuestionView

logger = logging.getLogger(__name__)

router = APIRouter()


class AddedQuestions(BaseModel):
    """Questions written by an add-questions request."""

    quizzes: list[QuizQuestionView]


@router.get(
    "/{lesson_id}",
    response_model=ApiResponse[LessonDetail],
    summary="Get lesson",
)
async def get_lesson(
    lesson_id: str,
    current_user: CurrentUser | None = Depends(get_optional_user),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[LessonDetail]:
    """Get a lesson with its quiz questions (without answers)."""
    detail = await service.get_lesson(
        lesson_id,
        user_id=current_user.id if current_user else None,
    )
    return ApiResponse(data=detail)


@router.post(
    "",
    response_model=ApiResponse[Lesson],
    status_code=status.HTTP_201_CREATED,
    summary="Create lesson",
)
async def create_lesson(
    data: LessonCreate,
    current_user: CurrentUser = Depends(require_instructor),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[Lesson]:
    """Create a lesson in an existing module."""
    lesson = await service.create_lesson(data)
    return ApiResponse(data=lesson, message="Lesson created successfully")


@router.post(
    "/{lesson_id}/quizzes",
    response_model=ApiResponse[AddedQuestions],
    status_code=status.HTTP_201_CREATED,
    summary="Add quiz questions",
)
async def add_quizzes(
    lesson_id: str,
    data: AddQuestionsRequest,
    current_user: CurrentUser = Depends(require_instructor),
    service: QuizService = Depends(get_quiz_service),
) -> ApiResponse[AddedQuestions]:
    """Add questions to a lesson; incomplete items are skipped."""
    created = await service.add_questions(lesson_id, data.questions)
    return ApiResponse(
        data=AddedQuestions(quizzes=[question_view(question) for question in created]),
        message=f"{len(created)} quiz questions added successfully",
    )
