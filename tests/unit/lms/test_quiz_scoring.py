# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for quiz scoring."""

import pytest

from sheetlms.core.exceptions import NoQuestionsError
from sheetlms.domains.quiz.scoring import PASSING_SCORE, score_submission, status_for_score
from sheetlms.models.entities import ProgressStatus, QuizQuestion
from sheetlms.models.quiz import QuizAnswer


def make_questions(*letters: str) -> list[QuizQuestion]:
    """One question per correct letter, ids q1..qN."""
    return [
        QuizQuestion(
            id=f"q{index}",
            lesson_id="L1",
            question=f"Question {index}",
            option_a="A",
            option_b="B",
            option_c="C",
            option_d="D",
            correct_answer=letter,
        )
        for index, letter in enumerate(letters, start=1)
    ]


def make_answers(*letters: str) -> list[QuizAnswer]:
    return [
        QuizAnswer(quiz_id=f"q{index}", selected_answer=letter)
        for index, letter in enumerate(letters, start=1)
    ]


@pytest.fixture
def lesson_questions() -> list[QuizQuestion]:
    """Four questions answered b, c, a, d."""
    return make_questions("b", "c", "a", "d")


class TestScoreSubmission:
    """Tests for score_submission."""

    def test_all_correct(self, lesson_questions):
        """Test a perfect submission scores 100 and completes."""
        result = score_submission("L1", lesson_questions, make_answers("b", "c", "a", "d"))

        assert result.score == 100
        assert result.correct_answers == 4
        assert result.total_questions == 4
        assert result.status == ProgressStatus.COMPLETED
        assert result.passed is True
        assert all(item.is_correct for item in result.results)

    def test_three_of_four_passes(self, lesson_questions):
        """Test 75 is above the passing score."""
        result = score_submission("L1", lesson_questions, make_answers("b", "c", "a", "a"))

        assert result.score == 75
        assert result.status == ProgressStatus.COMPLETED
        assert result.results[3].is_correct is False
        assert result.results[3].correct_answer == "d"

    def test_one_of_four_is_ongoing(self, lesson_questions):
        """Test a failing score leaves the lesson ongoing."""
        result = score_submission("L1", lesson_questions, make_answers("b", "a", "b", "a"))

        assert result.score == 25
        assert result.status == ProgressStatus.ONGOING
        assert result.passed is False

    def test_all_same_letter(self, lesson_questions):
        """Test answering a to everything hits only q3."""
        result = score_submission("L1", lesson_questions, make_answers("a", "a", "a", "a"))

        assert result.score == 25
        assert result.status == ProgressStatus.ONGOING
        assert [item.is_correct for item in result.results] == [False, False, True, False]

    def test_none_correct(self, lesson_questions):
        """Test zero correct answers score 0."""
        result = score_submission("L1", lesson_questions, make_answers("a", "a", "b", "a"))

        assert result.score == 0
        assert result.correct_answers == 0
        assert result.status == ProgressStatus.ONGOING

    def test_partial_submission_uses_lesson_total(self, lesson_questions):
        """Test unanswered questions count as wrong."""
        result = score_submission("L1", lesson_questions, make_answers("b", "c"))

        assert result.score == 50
        assert result.total_questions == 4
        assert len(result.results) == 2

    def test_unknown_question_ids_ignored(self, lesson_questions):
        """Test answers to questions of other lessons are dropped."""
        answers = make_answers("b") + [QuizAnswer(quiz_id="q99", selected_answer="a")]

        result = score_submission("L1", lesson_questions, answers)

        assert result.correct_answers == 1
        assert [item.quiz_id for item in result.results] == ["q1"]

    def test_duplicate_answers_count_once(self, lesson_questions):
        """Test only the first answer to a question is scored."""
        answers = [
            QuizAnswer(quiz_id="q1", selected_answer="a"),
            QuizAnswer(quiz_id="q1", selected_answer="b"),
            QuizAnswer(quiz_id="q1", selected_answer="b"),
        ]

        result = score_submission("L1", lesson_questions, answers)

        assert result.correct_answers == 0
        assert len(result.results) == 1
        assert result.results[0].selected_answer == "a"

    def test_letters_compare_case_insensitively(self, lesson_questions):
        """Test upper-case letters match lower-case answers."""
        result = score_submission("L1", lesson_questions, make_answers("B", " C ", "A", "D"))

        assert result.score == 100

    def test_results_echo_letters_as_submitted(self, lesson_questions):
        """Test per-question results show the submitted letter unchanged."""
        result = score_submission("L1", lesson_questions, make_answers("B", " c ", "d"))

        assert [item.selected_answer for item in result.results] == ["B", " c ", "d"]
        assert [item.is_correct for item in result.results] == [True, True, False]

    def test_answer_model_keeps_raw_letter(self):
        """Test QuizAnswer does not rewrite the submitted letter."""
        assert QuizAnswer(quiz_id="q1", selected_answer=" B ").selected_answer == " B "

    def test_stored_answer_case_ignored(self):
        """Test a stored upper-case answer still matches."""
        questions = make_questions("B")

        result = score_submission("L1", questions, make_answers("b"))

        assert result.score == 100

    def test_no_questions_raises(self):
        """Test scoring a lesson without questions."""
        with pytest.raises(NoQuestionsError) as exc_info:
            score_submission("L9", [], make_answers("a"))

        assert exc_info.value.lesson_id == "L9"

    def test_score_rounds_half_up(self):
        """Test 1 of 8 rounds 12.5 up to 13."""
        questions = make_questions(*("a" * 8))

        result = score_submission("L1", questions, make_answers("a"))

        assert result.score == 13

    def test_passing_boundary(self):
        """Test exactly 70 passes."""
        questions = make_questions(*("a" * 10))

        result = score_submission("L1", questions, make_answers(*("a" * 7)))

        assert result.score == 70
        assert result.status == ProgressStatus.COMPLETED

    def test_just_below_boundary(self):
        """Test 2 of 3 (67) does not pass."""
        questions = make_questions("a", "a", "a")

        result = score_submission("L1", questions, make_answers("a", "a", "b"))

        assert result.score == 67
        assert result.status == ProgressStatus.ONGOING


class TestStatusForScore:
    """Tests for status_for_score."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, ProgressStatus.ONGOING),
            (PASSING_SCORE - 1, ProgressStatus.ONGOING),
            (PASSING_SCORE, ProgressStatus.COMPLETED),
            (100, ProgressStatus.COMPLETED),
        ],
    )
    def test_threshold(self, score, expected):
        """Test the passing threshold."""
        assert status_for_score(score) == expected
