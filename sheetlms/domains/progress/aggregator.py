# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress aggregation.

Pure functions that derive completion figures from already-fetched
courses, modules, lessons and progress rows. Nothing here touches the
spreadsheet, so callers decide how fresh their inputs are.

Rules:
- A lesson with no progress row is {status: not_started, score: 0}.
- A module is completed only when all of its lessons are completed and
  it has at least one lesson.
- Percentages and averages round half up; an empty denominator yields 0.

Usage:
    from sheetlms.domains.progress.aggregator import build_course_progress

    report = build_course_progress(course, modules, lessons, user_progress)
    report.statistics.completion_percentage
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from sheetlms.models.entities import (
    Course,
    Lesson,
    Module,
    Progress,
    ProgressStatus,
)
from sheetlms.models.progress import (
    CourseProgress,
    CourseProgressStatistics,
    CourseSummary,
    EntityRef,
    LessonProgress,
    LessonProgressItem,
    ModuleProgress,
    ProgressItem,
    UserProgressReport,
    UserProgressStatistics,
)
from sheetlms.utils.rounding import percentage, round_half_up

OrderedT = TypeVar("OrderedT", Module, Lesson)


def progress_by_lesson(progress_rows: Iterable[Progress]) -> dict[str, Progress]:
    """Index progress rows by lesson id; later rows win over earlier ones."""
    return {row.lesson_id: row for row in progress_rows}


def lesson_progress(progress: Progress | None) -> LessonProgress:
    """Progress view for a lesson, defaulting to not started."""
    if progress is None:
        return LessonProgress()
    return LessonProgress(
        status=progress.status,
        score=progress.score,
        updated_at=progress.updated_at,
    )


def sort_by_order(items: Iterable[OrderedT]) -> list[OrderedT]:
    """Sort siblings by their order field; ties keep sheet order."""
    return sorted(items, key=lambda item: item.order)


def build_module_progress(
    module: Module,
    lessons: Sequence[Lesson],
    progress_map: dict[str, Progress],
) -> ModuleProgress:
    """Roll up a module from its lessons.

    Args:
        module: The module.
        lessons: Lessons of this module (any order).
        progress_map: The learner's progress keyed by lesson id.
    """
    items = [
        LessonProgressItem(
            id=lesson.id,
            title=lesson.title,
            order=lesson.order,
            progress=lesson_progress(progress_map.get(lesson.id)),
        )
        for lesson in sort_by_order(lessons)
    ]
    completed = sum(1 for item in items if item.progress.status == ProgressStatus.COMPLETED)

    return ModuleProgress(
        id=module.id,
        title=module.title,
        order=module.order,
        lessons=items,
        completed_lessons=completed,
        total_lessons=len(items),
        is_completed=bool(items) and completed == len(items),
    )


def average_score(progress_rows: Sequence[Progress]) -> int:
    """Mean score over progress rows, rounded half up; 0 for no rows."""
    if not progress_rows:
        return 0
    return round_half_up(sum(row.score for row in progress_rows) / len(progress_rows))


def build_course_progress(
    course: Course,
    modules: Sequence[Module],
    lessons: Sequence[Lesson],
    user_progress: Sequence[Progress],
) -> CourseProgress:
    """Per-module breakdown of one learner's progress in a course.

    Args:
        course: The course.
        modules: All modules (filtered to the course here).
        lessons: All lessons (filtered to the course's modules here).
        user_progress: The learner's progress rows.
    """
    course_modules = sort_by_order(m for m in modules if m.course_id == course.id)
    module_ids = {module.id for module in course_modules}
    course_lessons = [lesson for lesson in lessons if lesson.module_id in module_ids]
    lesson_ids = {lesson.id for lesson in course_lessons}
    progress_map = progress_by_lesson(p for p in user_progress if p.lesson_id in lesson_ids)

    module_progress = [
        build_module_progress(
            module,
            [lesson for lesson in course_lessons if lesson.module_id == module.id],
            progress_map,
        )
        for module in course_modules
    ]
    completed = sum(item.completed_lessons for item in module_progress)

    return CourseProgress(
        course=CourseSummary(id=course.id, title=course.title, description=course.description),
        module_progress=module_progress,
        statistics=CourseProgressStatistics(
            total_modules=len(course_modules),
            total_lessons=len(course_lessons),
            completed_lessons=completed,
            completion_percentage=percentage(completed, len(course_lessons)),
        ),
    )


def build_user_progress(
    user_progress: Sequence[Progress],
    lessons: Sequence[Lesson],
    modules: Sequence[Module],
    courses: Sequence[Course],
) -> UserProgressReport:
    """Enrich a learner's progress rows and compute overall statistics.

    total_lessons counts every lesson in the catalog, so the completion
    percentage is relative to everything the learner could take.
    """
    lessons_by_id = {lesson.id: lesson for lesson in lessons}
    modules_by_id = {module.id: module for module in modules}
    courses_by_id = {course.id: course for course in courses}

    items = []
    for row in user_progress:
        lesson = lessons_by_id.get(row.lesson_id)
        module = modules_by_id.get(lesson.module_id) if lesson else None
        course = courses_by_id.get(module.course_id) if module else None
        items.append(
            ProgressItem(
                id=row.id,
                user_id=row.user_id,
                lesson_id=row.lesson_id,
                score=row.score,
                status=row.status,
                updated_at=row.updated_at,
                lesson=EntityRef(id=lesson.id, title=lesson.title) if lesson else None,
                module=EntityRef(id=module.id, title=module.title) if module else None,
                course=EntityRef(id=course.id, title=course.title) if course else None,
            )
        )

    completed_lessons = len(
        {row.lesson_id for row in user_progress if row.status == ProgressStatus.COMPLETED}
    )
    in_progress = len(
        {row.lesson_id for row in user_progress if row.status == ProgressStatus.ONGOING}
    )

    return UserProgressReport(
        progress=items,
        statistics=UserProgressStatistics(
            total_lessons=len(lessons),
            completed_lessons=completed_lessons,
            completion_percentage=percentage(completed_lessons, len(lessons)),
            average_score=average_score(user_progress),
            in_progress_count=in_progress,
        ),
    )
