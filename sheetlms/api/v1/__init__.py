# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API routes package.

Modules:
    courses: Course listing, detail and authoring endpoints.
    lessons: Lesson detail and authoring endpoints.
    quiz: Quiz listing and submission endpoints.
    progress: Learner progress endpoints.
"""

from fastapi import APIRouter

from sheetlms.api.v1 import courses, lessons, progress, quiz

router = APIRouter(prefix="/api")

router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
router.include_router(quiz.router, prefix="/quiz", tags=["Quiz"])
router.include_router(progress.router, prefix="/progress", tags=["Progress"])

__all__ = ["router"]
