# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed entity records stored in the spreadsheet.

Every cell in the spreadsheet is text. These models parse that text once,
at the read boundary, into typed fields (ints, enums, datetimes) so that
nothing downstream re-parses strings. Parsing is lenient: blank or garbled
numeric cells fall back to defaults instead of failing the whole table.

Field names match the sheet headers, except Lesson.video_url which is
stored in the "youtube_url" column.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sheetlms.utils.datetime import parse_iso

logger = logging.getLogger(__name__)

ANSWER_LETTERS = ("a", "b", "c", "d")


class UserRole(str, Enum):
    """Roles a user may hold."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class ProgressStatus(str, Enum):
    """Lesson progress states."""

    NOT_STARTED = "not_started"
    ONGOING = "ongoing"
    COMPLETED = "completed"


def _parse_int(value: Any, default: int) -> int:
    if isinstance(value, int):
        return value
    text = str(value or "").strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        logger.warning("Unparseable integer cell %r, using %d", text, default)
        return default


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parse_iso(str(value))
    except ValueError:
        logger.warning("Unparseable timestamp cell %r", value)
        return None


class SheetEntity(BaseModel):
    """Base class for records stored as sheet rows."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique identifier")


class User(SheetEntity):
    """A registered user."""

    name: str = ""
    email: str = ""
    password_hash: str = ""
    role: UserRole = UserRole.STUDENT
    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> Any:
        text = str(value or "").strip().lower()
        if text not in {role.value for role in UserRole}:
            return UserRole.STUDENT
        return text

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: Any) -> datetime | None:
        return _parse_timestamp(value)


class Course(SheetEntity):
    """A course owned by an instructor."""

    title: str = ""
    description: str = ""
    category: str = ""
    thumbnail: str = ""
    instructor_id: str = ""
    created_at: datetime | None = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: Any) -> datetime | None:
        return _parse_timestamp(value)


class Module(SheetEntity):
    """A module within a course; siblings sort by order."""

    course_id: str = ""
    title: str = ""
    order: int = 1

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> int:
        return _parse_int(value, 1)


class Lesson(SheetEntity):
    """A lesson within a module; siblings sort by order."""

    module_id: str = ""
    title: str = ""
    video_url: str = Field(default="", alias="youtube_url")
    summary: str = ""
    order: int = 1

    @field_validator("order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> int:
        return _parse_int(value, 1)


class QuizQuestion(SheetEntity):
    """A multiple choice question attached to a lesson."""

    lesson_id: str = ""
    question: str = ""
    option_a: str = ""
    option_b: str = ""
    option_c: str = ""
    option_d: str = ""
    correct_answer: str = ""

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _normalize_answer(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @property
    def options(self) -> dict[str, str]:
        """Option texts keyed by answer letter."""
        return {
            "a": self.option_a,
            "b": self.option_b,
            "c": self.option_c,
            "d": self.option_d,
        }


class Progress(SheetEntity):
    """A learner's progress on one lesson."""

    user_id: str = ""
    lesson_id: str = ""
    score: int = Field(default=0, ge=0, le=100)
    status: ProgressStatus = ProgressStatus.NOT_STARTED
    updated_at: datetime | None = None

    @field_validator("score", mode="before")
    @classmethod
    def _parse_score(cls, value: Any) -> int:
        return min(max(_parse_int(value, 0), 0), 100)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Any:
        if isinstance(value, ProgressStatus):
            return value
        text = str(value or "").strip().lower()
        if text not in {status.value for status in ProgressStatus}:
            return ProgressStatus.NOT_STARTED
        return text

    @field_validator("updated_at", mode="before")
    @classmethod
    def _parse_updated_at(cls, value: Any) -> datetime | None:
        return _parse_timestamp(value)
