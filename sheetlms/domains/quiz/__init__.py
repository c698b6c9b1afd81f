# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz domain: scoring engine and quiz service."""

from sheetlms.domains.quiz.scoring import PASSING_SCORE, score_submission, status_for_score
from sheetlms.domains.quiz.service import QuizService

__all__ = ["PASSING_SCORE", "QuizService", "score_submission", "status_for_score"]
