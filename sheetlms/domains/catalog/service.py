# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog service.

This module provides the CatalogService class for:
- Listing courses with pagination, category filter and module counts
- Listing categories
- Course detail with modules and lessons in order
- Lesson detail with questions, progress and navigation
- Creating courses, modules and lessons

Rows are append-only. Referenced parents (course for a module, module for
a lesson) must exist at creation time; nothing else is checked.
"""

from __future__ import annotations

import logging
import math
from uuid import uuid4

from sheetlms.core.exceptions import NotFoundError, ValidationError
from sheetlms.domains.progress.aggregator import sort_by_order
from sheetlms.domains.quiz.service import question_view
from sheetlms.infrastructure.sheets.repository import SheetRepository
from sheetlms.infrastructure.sheets.schema import EntityKind
from sheetlms.models.catalog import (
    CourseCreate,
    CourseDetail,
    CourseListItem,
    CoursePage,
    LessonCreate,
    LessonDetail,
    LessonNavigation,
    ModuleCreate,
    ModuleWithLessons,
    Pagination,
)
from sheetlms.models.entities import Course, Lesson, Module
from sheetlms.models.progress import EntityRef
from sheetlms.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _require(fields: dict[str, str], messages: dict[str, str]) -> None:
    """Raise ValidationError listing every blank required field."""
    errors = {
        name: messages[name] for name, value in fields.items() if not value or not value.strip()
    }
    if errors:
        raise ValidationError("Validation failed", field_errors=errors)


class CatalogService:
    """Service for courses, modules and lessons.

    Attributes:
        repository: Spreadsheet repository.
    """

    def __init__(self, repository: SheetRepository) -> None:
        self.repository = repository

    async def list_courses(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
    ) -> CoursePage:
        """List one page of courses.

        Args:
            page: 1-based page number.
            limit: Courses per page.
            category: Case-insensitive category filter.

        Returns:
            The page of courses with module counts and pagination.
        """
        courses = await self.repository.find_all(EntityKind.COURSE)
        if category:
            wanted = category.lower()
            courses = [course for course in courses if course.category.lower() == wanted]

        start = (page - 1) * limit
        page_courses = courses[start : start + limit]

        modules = await self.repository.find_all(EntityKind.MODULE)
        counts: dict[str, int] = {}
        for module in modules:
            counts[module.course_id] = counts.get(module.course_id, 0) + 1

        items = [
            CourseListItem(**course.model_dump(), module_count=counts.get(course.id, 0))
            for course in page_courses
        ]

        return CoursePage(
            courses=items,
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(len(courses) / limit),
                total_items=len(courses),
                items_per_page=limit,
            ),
        )

    async def list_categories(self) -> list[str]:
        """Unique course categories in first-seen order."""
        courses = await self.repository.find_all(EntityKind.COURSE)
        return list(dict.fromkeys(course.category for course in courses))

    async def get_course(self, course_id: str, user_id: str | None = None) -> CourseDetail:
        """Get a course with its modules and lessons sorted by order.

        Args:
            course_id: Course ID.
            user_id: Authenticated caller, whose progress rows are included.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = await self.repository.find_by_id(EntityKind.COURSE, course_id)
        if course is None:
            raise NotFoundError("Course", course_id)

        modules = await self.repository.filter(EntityKind.MODULE, "course_id", course_id)
        lessons = await self.repository.find_all(EntityKind.LESSON)

        modules_with_lessons = [
            ModuleWithLessons(
                **module.model_dump(),
                lessons=sort_by_order(lesson for lesson in lessons if lesson.module_id == module.id),
            )
            for module in sort_by_order(modules)
        ]

        user_progress = []
        if user_id:
            user_progress = await self.repository.filter(EntityKind.PROGRESS, "user_id", user_id)

        return CourseDetail(
            course=course,
            modules=modules_with_lessons,
            user_progress=user_progress,
        )

    async def create_course(self, data: CourseCreate, instructor_id: str) -> Course:
        """Create a course owned by instructor_id.

        Raises:
            ValidationError: If title, description or category is blank.
        """
        _require(
            {"title": data.title, "description": data.description, "category": data.category},
            {
                "title": "Title is required",
                "description": "Description is required",
                "category": "Category is required",
            },
        )

        course = Course(
            id=str(uuid4()),
            title=data.title.strip(),
            description=data.description.strip(),
            category=data.category.strip(),
            thumbnail=data.thumbnail,
            instructor_id=instructor_id,
            created_at=utc_now(),
        )
        await self.repository.insert(EntityKind.COURSE, course)
        logger.info("Created course %s by %s", course.id, instructor_id)
        return course

    async def add_module(self, course_id: str, data: ModuleCreate) -> Module:
        """Add a module to an existing course.

        Raises:
            ValidationError: If the title is blank.
            NotFoundError: If the course does not exist.
        """
        _require({"title": data.title}, {"title": "Module title is required"})

        course = await self.repository.find_by_id(EntityKind.COURSE, course_id)
        if course is None:
            raise NotFoundError("Course", course_id)

        module = Module(
            id=str(uuid4()),
            course_id=course_id,
            title=data.title,
            order=data.order or 1,
        )
        await self.repository.insert(EntityKind.MODULE, module)
        logger.info("Added module %s to course %s", module.id, course_id)
        return module

    async def create_lesson(self, data: LessonCreate) -> Lesson:
        """Create a lesson in an existing module.

        Raises:
            ValidationError: If module_id, title or youtube_url is blank.
            NotFoundError: If the module does not exist.
        """
        _require(
            {"module_id": data.module_id, "title": data.title, "youtube_url": data.youtube_url},
            {
                "module_id": "Module ID is required",
                "title": "Title is required",
                "youtube_url": "YouTube URL is required",
            },
        )

        module = await self.repository.find_by_id(EntityKind.MODULE, data.module_id)
        if module is None:
            raise NotFoundError("Module", data.module_id)

        lesson = Lesson(
            id=str(uuid4()),
            module_id=data.module_id,
            title=data.title,
            video_url=data.youtube_url,
            summary=data.summary,
            order=data.order or 1,
        )
        await self.repository.insert(EntityKind.LESSON, lesson)
        logger.info("Created lesson %s in module %s", lesson.id, data.module_id)
        return lesson

    async def get_lesson(self, lesson_id: str, user_id: str | None = None) -> LessonDetail:
        """Get a lesson with its context, questions and navigation.

        Questions never carry their correct answer. Navigation points to
        the neighbouring lessons of the same module by order.

        Args:
            lesson_id: Lesson ID.
            user_id: Authenticated caller, whose progress is included.

        Raises:
            NotFoundError: If the lesson does not exist.
        """
        lesson = await self.repository.find_by_id(EntityKind.LESSON, lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)

        questions = await self.repository.filter(EntityKind.QUIZ, "lesson_id", lesson_id)

        user_progress = None
        if user_id:
            rows = await self.repository.filter(EntityKind.PROGRESS, "user_id", user_id)
            user_progress = next((row for row in rows if row.lesson_id == lesson_id), None)

        module = await self.repository.find_by_id(EntityKind.MODULE, lesson.module_id)
        course = None
        navigation = LessonNavigation()
        if module is not None:
            course = await self.repository.find_by_id(EntityKind.COURSE, module.course_id)
            siblings = sort_by_order(
                await self.repository.filter(EntityKind.LESSON, "module_id", lesson.module_id)
            )
            index = next(i for i, sibling in enumerate(siblings) if sibling.id == lesson_id)
            if index > 0:
                prev = siblings[index - 1]
                navigation.prev_lesson = EntityRef(id=prev.id, title=prev.title)
            if index < len(siblings) - 1:
                nxt = siblings[index + 1]
                navigation.next_lesson = EntityRef(id=nxt.id, title=nxt.title)

        return LessonDetail(
            lesson=lesson,
            module=EntityRef(id=module.id, title=module.title) if module else None,
            course=EntityRef(id=course.id, title=course.title) if course else None,
            quizzes=[question_view(question) for question in questions],
            user_progress=user_progress,
            navigation=navigation,
        )
