# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress report models."""

from datetime import datetime

from pydantic import BaseModel, Field

from sheetlms.models.entities import ProgressStatus


class EntityRef(BaseModel):
    """Minimal reference to a related entity."""

    id: str
    title: str


class LessonProgress(BaseModel):
    """A learner's state on one lesson; defaults to not started."""

    status: ProgressStatus = ProgressStatus.NOT_STARTED
    score: int = 0
    updated_at: datetime | None = None


class LessonProgressItem(BaseModel):
    """A lesson with the learner's progress on it."""

    id: str
    title: str
    order: int
    progress: LessonProgress


class ModuleProgress(BaseModel):
    """Roll-up of a module's lessons."""

    id: str
    title: str
    order: int
    lessons: list[LessonProgressItem]
    completed_lessons: int = Field(description="Lessons with status completed")
    total_lessons: int
    is_completed: bool = Field(description="Every lesson completed and at least one lesson")


class CourseProgressStatistics(BaseModel):
    """Course-level totals."""

    total_modules: int
    total_lessons: int
    completed_lessons: int
    completion_percentage: int


class CourseSummary(BaseModel):
    """Course header shown with a progress breakdown."""

    id: str
    title: str
    description: str


class CourseProgress(BaseModel):
    """A learner's per-module breakdown of one course."""

    course: CourseSummary
    module_progress: list[ModuleProgress]
    statistics: CourseProgressStatistics


class ProgressItem(BaseModel):
    """A progress row enriched with its lesson, module and course."""

    id: str
    user_id: str
    lesson_id: str
    score: int
    status: ProgressStatus
    updated_at: datetime | None = None
    lesson: EntityRef | None = None
    module: EntityRef | None = None
    course: EntityRef | None = None


class UserProgressStatistics(BaseModel):
    """Totals across every lesson for one learner."""

    total_lessons: int
    completed_lessons: int
    completion_percentage: int
    average_score: int
    in_progress_count: int


class UserProgressReport(BaseModel):
    """Everything a learner has done, with statistics."""

    progress: list[ProgressItem]
    statistics: UserProgressStatistics
