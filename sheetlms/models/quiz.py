# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz request and response models."""

from pydantic import BaseModel, Field

from sheetlms.models.entities import ANSWER_LETTERS, ProgressStatus


class QuizAnswer(BaseModel):
    """One submitted answer."""

    quiz_id: str = Field(min_length=1, description="Quiz question ID")
    selected_answer: str = Field(description="Selected option letter (a-d), any case")


class QuizSubmitRequest(BaseModel):
    """Quiz submission payload."""

    lesson_id: str = Field(min_length=1, description="Lesson ID")
    answers: list[QuizAnswer] = Field(min_length=1, description="Submitted answers")


class QuizQuestionView(BaseModel):
    """A question as shown before submission; never carries the answer."""

    id: str = Field(description="Quiz question ID")
    question: str = Field(description="Question text")
    options: dict[str, str] = Field(description="Option texts keyed by letter")


class QuestionResult(BaseModel):
    """Per-question outcome, shown only after submission."""

    quiz_id: str = Field(description="Quiz question ID")
    question: str = Field(description="Question text")
    selected_answer: str = Field(description="Letter as submitted")
    correct_answer: str = Field(description="Correct letter")
    is_correct: bool = Field(description="Whether the submitted letter was correct")


class QuizResult(BaseModel):
    """Outcome of scoring one submission."""

    score: int = Field(ge=0, le=100, description="Score percentage")
    total_questions: int = Field(description="Questions in the lesson")
    correct_answers: int = Field(description="Correctly answered questions")
    status: ProgressStatus = Field(description="completed when passed, else ongoing")
    passed: bool = Field(description="Whether the passing score was reached")
    results: list[QuestionResult] = Field(description="Per-question outcomes")


class QuizSubmission(BaseModel):
    """Scoring outcome plus the learner-facing message."""

    message: str
    result: QuizResult


class NewQuizQuestion(BaseModel):
    """A question to add to a lesson.

    All fields are optional here because incomplete items are skipped
    rather than rejected.
    """

    question: str = ""
    option_a: str = ""
    option_b: str = ""
    option_c: str = ""
    option_d: str = ""
    correct_answer: str = ""

    @property
    def is_complete(self) -> bool:
        """Check whether every field is filled and the answer is a valid letter."""
        fields = (
            self.question,
            self.option_a,
            self.option_b,
            self.option_c,
            self.option_d,
        )
        return all(text.strip() for text in fields) and (
            self.correct_answer.strip().lower() in ANSWER_LETTERS
        )


class AddQuestionsRequest(BaseModel):
    """Payload for adding questions to a lesson."""

    questions: list[NewQuizQuestion] = Field(min_length=1, description="Questions to add")
