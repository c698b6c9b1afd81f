# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz scoring engine.

Scores a submission against a lesson's full question set:

    score  = round_half_up(correct / questions_in_lesson * 100)
    status = completed if score >= PASSING_SCORE else ongoing

The denominator is the lesson's question count, not the number of answers,
so a partial submission cannot reach 100. Answers to unknown question ids
are ignored, and each question counts at most once (its first answer).
Letters compare case-insensitively; results echo each letter as submitted.
"""

from collections.abc import Sequence

from sheetlms.core.exceptions import NoQuestionsError
from sheetlms.models.entities import ProgressStatus, QuizQuestion
from sheetlms.models.quiz import QuestionResult, QuizAnswer, QuizResult
from sheetlms.utils.rounding import percentage

PASSING_SCORE = 70


def status_for_score(score: int) -> ProgressStatus:
    """Classify a score as completed (passed) or ongoing."""
    return ProgressStatus.COMPLETED if score >= PASSING_SCORE else ProgressStatus.ONGOING


def score_submission(
    lesson_id: str,
    questions: Sequence[QuizQuestion],
    answers: Sequence[QuizAnswer],
) -> QuizResult:
    """Score submitted answers against a lesson's questions.

    Args:
        lesson_id: Lesson the questions belong to.
        questions: Every quiz question of the lesson.
        answers: Submitted (question id, letter) pairs.

    Returns:
        Score, pass/fail status and per-question results.

    Raises:
        NoQuestionsError: If the lesson has no questions.
    """
    if not questions:
        raise NoQuestionsError(lesson_id)

    by_id = {question.id: question for question in questions}
    seen: set[str] = set()
    results: list[QuestionResult] = []
    correct = 0

    for answer in answers:
        question = by_id.get(answer.quiz_id)
        if question is None or answer.quiz_id in seen:
            continue
        seen.add(answer.quiz_id)

        is_correct = answer.selected_answer.strip().lower() == question.correct_answer.lower()
        if is_correct:
            correct += 1

        results.append(
            QuestionResult(
                quiz_id=question.id,
                question=question.question,
                selected_answer=answer.selected_answer,
                correct_answer=question.correct_answer,
                is_correct=is_correct,
            )
        )

    score = percentage(correct, len(questions))
    status = status_for_score(score)

    return QuizResult(
        score=score,
        total_questions=len(questions),
        correct_answers=correct,
        status=status,
        passed=status == ProgressStatus.COMPLETED,
        results=results,
    )
