# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress service.

This module provides the ProgressService class for:
- Creating or overwriting a learner's progress on a lesson (upsert)
- Building a learner's overall progress report
- Building a learner's per-course breakdown

The upsert keeps at most one progress row per (user, lesson) pair by
reading fresh, then overwriting the existing row in place or appending a
new one. The spreadsheet offers no conditional write, so upserts for the
same pair are serialized through a per-key lock. The lock only covers
this process; a second process writing the same spreadsheet can still
race and produce a duplicate row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from sheetlms.core.exceptions import ForbiddenError, NotFoundError
from sheetlms.domains.progress.aggregator import build_course_progress, build_user_progress
from sheetlms.infrastructure.sheets.repository import SheetRepository
from sheetlms.infrastructure.sheets.schema import EntityKind
from sheetlms.models.entities import Progress, ProgressStatus, UserRole
from sheetlms.models.progress import CourseProgress, UserProgressReport
from sheetlms.utils.datetime import utc_now
from sheetlms.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


@dataclass
class UpsertResult:
    """Outcome of a progress upsert.

    Attributes:
        progress: The row as written.
        created: True when a new row was appended, False when overwritten.
    """

    progress: Progress
    created: bool


class ProgressService:
    """Service for learner progress.

    Attributes:
        repository: Spreadsheet repository.
    """

    def __init__(self, repository: SheetRepository, locks: KeyedLock | None = None) -> None:
        """Initialize progress service.

        Args:
            repository: Spreadsheet repository.
            locks: Per-key locks for upserts; share one instance across
                every ProgressService of the process.
        """
        self.repository = repository
        self._locks = locks or KeyedLock()

    async def upsert(
        self,
        user_id: str,
        lesson_id: str,
        score: int,
        status: ProgressStatus,
    ) -> UpsertResult:
        """Create or overwrite the progress row for (user_id, lesson_id).

        An existing row keeps its id. Last write wins.

        Args:
            user_id: Learner ID.
            lesson_id: Lesson ID.
            score: Score 0-100.
            status: Progress status.

        Returns:
            The written row and whether it was created.

        Raises:
            RemoteUnavailableError: If any spreadsheet call fails.
        """
        async with self._locks.acquire((user_id, lesson_id)):
            rows = await self.repository.find_all(EntityKind.PROGRESS, use_cache=False)
            existing = next(
                (row for row in rows if row.user_id == user_id and row.lesson_id == lesson_id),
                None,
            )
            updated_at = utc_now()

            if existing is not None:
                position = await self.repository.find_position(
                    EntityKind.PROGRESS, "id", existing.id
                )
                if position is not None:
                    progress = existing.model_copy(
                        update={"score": score, "status": status, "updated_at": updated_at}
                    )
                    await self.repository.overwrite(EntityKind.PROGRESS, position, progress)
                    logger.info(
                        "Updated progress: user=%s, lesson=%s, score=%d, status=%s",
                        user_id,
                        lesson_id,
                        score,
                        status.value,
                    )
                    return UpsertResult(progress=progress, created=False)

                logger.warning(
                    "Progress row %s vanished before overwrite, appending instead",
                    existing.id,
                )

            progress = Progress(
                id=existing.id if existing is not None else str(uuid4()),
                user_id=user_id,
                lesson_id=lesson_id,
                score=score,
                status=status,
                updated_at=updated_at,
            )
            await self.repository.insert(EntityKind.PROGRESS, progress)
            logger.info(
                "Created progress: user=%s, lesson=%s, score=%d, status=%s",
                user_id,
                lesson_id,
                score,
                status.value,
            )
            return UpsertResult(progress=progress, created=True)

    async def get_lesson_progress(self, user_id: str, lesson_id: str) -> Progress | None:
        """Get a learner's progress row for one lesson, if any."""
        rows = await self.repository.filter(EntityKind.PROGRESS, "user_id", user_id)
        return next((row for row in rows if row.lesson_id == lesson_id), None)

    async def get_user_progress(
        self,
        user_id: str,
        requester_id: str,
        requester_role: UserRole,
    ) -> UserProgressReport:
        """Build a learner's progress report.

        Args:
            user_id: Learner whose progress is requested.
            requester_id: Authenticated caller.
            requester_role: Caller's role.

        Raises:
            ForbiddenError: If a non-admin asks for someone else's progress.
        """
        if requester_id != user_id and requester_role != UserRole.ADMIN:
            raise ForbiddenError("You can only view your own progress")

        user_progress = await self.repository.filter(EntityKind.PROGRESS, "user_id", user_id)
        lessons = await self.repository.find_all(EntityKind.LESSON)
        modules = await self.repository.find_all(EntityKind.MODULE)
        courses = await self.repository.find_all(EntityKind.COURSE)

        return build_user_progress(user_progress, lessons, modules, courses)

    async def get_course_progress(self, user_id: str, course_id: str) -> CourseProgress:
        """Build a learner's per-module breakdown of a course.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = await self.repository.find_by_id(EntityKind.COURSE, course_id)
        if course is None:
            raise NotFoundError("Course", course_id)

        modules = await self.repository.filter(EntityKind.MODULE, "course_id", course_id)
        lessons = await self.repository.find_all(EntityKind.LESSON)
        user_progress = await self.repository.filter(EntityKind.PROGRESS, "user_id", user_id)

        return build_course_progress(course, modules, lessons, user_progress)
