# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models for entities, requests and reports."""

from sheetlms.models.entities import (
    ANSWER_LETTERS,
    Course,
    Lesson,
    Module,
    Progress,
    ProgressStatus,
    QuizQuestion,
    SheetEntity,
    User,
    UserRole,
)

__all__ = [
    "ANSWER_LETTERS",
    "Course",
    "Lesson",
    "Module",
    "Progress",
    "ProgressStatus",
    "QuizQuestion",
    "SheetEntity",
    "User",
    "UserRole",
]
