# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz service.

Lists a lesson's questions without their answers, lets instructors add
questions, and scores learner submissions. A scored submission is
recorded through ProgressService.upsert so that the learner holds a
single progress row per lesson.
"""

import logging
from uuid import uuid4

from sheetlms.core.exceptions import NotFoundError
from sheetlms.domains.progress.service import ProgressService
from sheetlms.domains.quiz.scoring import score_submission
from sheetlms.infrastructure.sheets.repository import SheetRepository
from sheetlms.infrastructure.sheets.schema import EntityKind
from sheetlms.models.entities import Lesson, QuizQuestion
from sheetlms.models.quiz import (
    NewQuizQuestion,
    QuizQuestionView,
    QuizSubmission,
    QuizSubmitRequest,
)

logger = logging.getLogger(__name__)

PASSED_MESSAGE = "Congratulations! You passed the quiz!"
FAILED_MESSAGE = "Keep trying! You need 70% to pass."


def question_view(question: QuizQuestion) -> QuizQuestionView:
    """Public view of a question, without its correct answer."""
    return QuizQuestionView(id=question.id, question=question.question, options=question.options)


class QuizService:
    """Service for quiz listing, authoring and submission.

    Attributes:
        repository: Spreadsheet repository.
        progress_service: Records submission outcomes.
    """

    def __init__(self, repository: SheetRepository, progress_service: ProgressService) -> None:
        self.repository = repository
        self.progress_service = progress_service

    async def _get_lesson(self, lesson_id: str) -> Lesson:
        lesson = await self.repository.find_by_id(EntityKind.LESSON, lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    async def get_questions(self, lesson_id: str) -> list[QuizQuestion]:
        """Every question of a lesson in sheet order."""
        return await self.repository.filter(EntityKind.QUIZ, "lesson_id", lesson_id)

    async def list_questions(self, lesson_id: str) -> list[QuizQuestionView]:
        """List a lesson's questions without answers.

        Raises:
            NotFoundError: If the lesson does not exist.
        """
        await self._get_lesson(lesson_id)
        return [question_view(question) for question in await self.get_questions(lesson_id)]

    async def add_questions(
        self,
        lesson_id: str,
        questions: list[NewQuizQuestion],
    ) -> list[QuizQuestion]:
        """Add questions to a lesson.

        Items missing a field or carrying an answer other than a-d are
        skipped. Answers are stored lowercase.

        Args:
            lesson_id: Lesson to attach the questions to.
            questions: Candidate questions.

        Returns:
            The questions that were written.

        Raises:
            NotFoundError: If the lesson does not exist.
        """
        await self._get_lesson(lesson_id)

        created: list[QuizQuestion] = []
        for item in questions:
            if not item.is_complete:
                logger.debug("Skipping incomplete quiz question for lesson %s", lesson_id)
                continue
            question = QuizQuestion(
                id=str(uuid4()),
                lesson_id=lesson_id,
                question=item.question,
                option_a=item.option_a,
                option_b=item.option_b,
                option_c=item.option_c,
                option_d=item.option_d,
                correct_answer=item.correct_answer,
            )
            await self.repository.insert(EntityKind.QUIZ, question)
            created.append(question)

        logger.info(
            "Added %d of %d quiz questions to lesson %s",
            len(created),
            len(questions),
            lesson_id,
        )
        return created

    async def submit(self, user_id: str, request: QuizSubmitRequest) -> QuizSubmission:
        """Score a submission and record the learner's progress.

        Args:
            user_id: Submitting learner.
            request: Lesson ID and answers.

        Returns:
            The scored result with a pass/fail message.

        Raises:
            NotFoundError: If the lesson does not exist.
            NoQuestionsError: If the lesson has no questions.
            RemoteUnavailableError: If reading or writing the spreadsheet fails.
        """
        await self._get_lesson(request.lesson_id)
        questions = await self.get_questions(request.lesson_id)

        result = score_submission(request.lesson_id, questions, request.answers)

        await self.progress_service.upsert(
            user_id=user_id,
            lesson_id=request.lesson_id,
            score=result.score,
            status=result.status,
        )

        logger.info(
            "Quiz submitted: user=%s, lesson=%s, score=%d, passed=%s",
            user_id,
            request.lesson_id,
            result.score,
            result.passed,
        )
        return QuizSubmission(
            message=PASSED_MESSAGE if result.passed else FAILED_MESSAGE,
            result=result,
        )
