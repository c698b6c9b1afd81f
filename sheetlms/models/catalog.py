# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog request and response models.

Covers courses, modules and lessons: creation payloads, the paginated
course listing, course detail with ordered modules and lesson detail with
navigation.
"""

from pydantic import BaseModel, Field

from sheetlms.models.entities import Course, Lesson, Module, Progress
from sheetlms.models.progress import EntityRef
from sheetlms.models.quiz import QuizQuestionView


class CourseCreate(BaseModel):
    """Payload for creating a course.

    Required fields are checked by the service so that every missing
    field is reported together.
    """

    title: str = ""
    description: str = ""
    category: str = ""
    thumbnail: str = ""


class ModuleCreate(BaseModel):
    """Payload for adding a module to a course."""

    title: str = ""
    order: int | None = Field(default=None, ge=1, description="Sibling order, defaults to 1")


class LessonCreate(BaseModel):
    """Payload for creating a lesson."""

    module_id: str = ""
    title: str = ""
    youtube_url: str = ""
    summary: str = ""
    order: int | None = Field(default=None, ge=1, description="Sibling order, defaults to 1")


class CourseListItem(Course):
    """A course in the listing, with its module count."""

    module_count: int = 0


class Pagination(BaseModel):
    """Pagination block of a listing."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class CoursePage(BaseModel):
    """One page of the course listing."""

    courses: list[CourseListItem]
    pagination: Pagination


class ModuleWithLessons(Module):
    """A module with its lessons sorted by order."""

    lessons: list[Lesson] = Field(default_factory=list)


class CourseDetail(BaseModel):
    """A course with its modules and the caller's progress rows."""

    course: Course
    modules: list[ModuleWithLessons]
    user_progress: list[Progress] = Field(default_factory=list)


class LessonNavigation(BaseModel):
    """Previous and next lessons within the same module."""

    prev_lesson: EntityRef | None = None
    next_lesson: EntityRef | None = None


class LessonDetail(BaseModel):
    """A lesson with context, questions (no answers) and progress."""

    lesson: Lesson
    module: EntityRef | None = None
    course: EntityRef | None = None
    quizzes: list[QuizQuestionView]
    user_progress: Progress | None = None
    navigation: LessonNavigation
