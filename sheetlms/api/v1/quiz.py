# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz API endpoints.

- GET /lesson/{lesson_id} - Questions of a lesson without answers
- POST /submit - Score answers and record progress

Example:
    POST /api/quiz/submit
    {"lesson_id": "L1", "answers": [{"quiz_id": "q1", "selected_answer": "b"}]}
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sheetlms.api.dependencies import get_quiz_service, require_auth
from sheetlms.api.middleware.auth import CurrentUser
from sheetlms.api.responses import ApiResponse
from sheetlms.domains.quiz.service import QuizService
from sheetlms.models.quiz import QuizQuestionView, QuizResult, QuizSubmitRequest

logger = logging.getLogger(__name__)

router = APIRouter()


class QuizList(BaseModel):
    """A lesson's questions."""

    quizzes: list[QuizQuestionView]
    total: int


@router.get(
    "/lesson/{lesson_id}",
    response_model=ApiResponse[QuizList],
    summary="List lesson questions",
)
async def list_lesson_questions(
    lesson_id: str,
    service: QuizService = Depends(get_quiz_service),
) -> ApiResponse[QuizList]:
    """List a lesson's questions without their answers."""
    questions = await service.list_questions(lesson_id)
    return ApiResponse(data=QuizList(quizzes=questions, total=len(questions)))


@router.post(
    "/submit",
    response_model=ApiResponse[QuizResult],
    summary="Submit quiz",
)
async def submit_quiz(
    submission: QuizSubmitRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: QuizService = Depends(get_quiz_service),
) -> ApiResponse[QuizResult]:
    """Score a submission and record the caller's progress."""
    outcome = await service.submit(current_user.id, submission)
    return ApiResponse(data=outcome.result, message=outcome.message)
