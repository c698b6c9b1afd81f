# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity schema registry.

Declares, for each entity kind, the sheet that stores it and the fixed
ordered list of columns used to turn records into rows and back. The
registry is resolved once at import time; a schema whose columns do not
map onto its model fails loudly then rather than on the first request.

New columns must be appended at the end of a schema. Rows written before
the change simply lack the trailing cell, which reads back as "".

Example:
    >>> schema = get_schema(EntityKind.COURSE)
    >>> schema.table
    'Courses'
    >>> course = schema.parse({"id": "c1", "title": "Intro", ...})
    >>> schema.serialize(course)
    ['c1', 'Intro', ...]
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar

from sheetlms.infrastructure.sheets.row_store import MAX_COLUMNS
from sheetlms.models.entities import (
    Course,
    Lesson,
    Module,
    Progress,
    QuizQuestion,
    SheetEntity,
    User,
)
from sheetlms.utils.datetime import format_iso

EntityT = TypeVar("EntityT", bound=SheetEntity)


class EntityKind(str, Enum):
    """Entity kinds, each backed by one sheet."""

    USER = "user"
    COURSE = "course"
    MODULE = "module"
    LESSON = "lesson"
    QUIZ = "quiz"
    PROGRESS = "progress"


def to_cell(value: Any) -> str:
    """Render a typed field value as cell text."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return format_iso(value) or ""
    return str(value)


@dataclass(frozen=True)
class EntitySchema(Generic[EntityT]):
    """Column layout and codec for one entity kind.

    Attributes:
        kind: Entity kind.
        table: Sheet name.
        columns: Header names in column order.
        model: Pydantic model the rows parse into.
    """

    kind: EntityKind
    table: str
    columns: tuple[str, ...]
    model: type[EntityT]
    _fields: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.columns) > MAX_COLUMNS:
            raise ValueError(f"{self.table}: {len(self.columns)} columns exceed {MAX_COLUMNS}")
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"{self.table}: duplicate column names")

        by_column = {
            (info.alias or name): name for name, info in self.model.model_fields.items()
        }
        missing = [column for column in self.columns if column not in by_column]
        if missing:
            raise ValueError(f"{self.table}: columns {missing} have no field on {self.model.__name__}")
        object.__setattr__(self, "_fields", {column: by_column[column] for column in self.columns})

    def parse(self, record: Mapping[str, str]) -> EntityT:
        """Build a typed entity from a header-keyed record.

        Cells outside the schema are ignored; missing cells read as "".
        """
        return self.model.model_validate(
            {column: record.get(column, "") for column in self.columns}
        )

    def serialize(self, entity: EntityT) -> list[str]:
        """Render an entity as a row of cell text in column order."""
        return [self.cell(entity, column) for column in self.columns]

    def cell(self, entity: EntityT, column: str) -> str:
        """Render one column of an entity as cell text.

        Raises:
            KeyError: If column is not part of this schema.
        """
        return to_cell(getattr(entity, self._fields[column]))

    def has_column(self, column: str) -> bool:
        """Check whether a column belongs to this schema."""
        return column in self._fields


USER_SCHEMA = EntitySchema(
    kind=EntityKind.USER,
    table="Users",
    columns=("id", "name", "email", "password_hash", "role", "created_at"),
    model=User,
)

COURSE_SCHEMA = EntitySchema(
    kind=EntityKind.COURSE,
    table="Courses",
    columns=(
        "id",
        "title",
        "description",
        "category",
        "thumbnail",
        "instructor_id",
        "created_at",
    ),
    model=Course,
)

MODULE_SCHEMA = EntitySchema(
    kind=EntityKind.MODULE,
    table="Modules",
    columns=("id", "course_id", "title", "order"),
    model=Module,
)

LESSON_SCHEMA = EntitySchema(
    kind=EntityKind.LESSON,
    table="Lessons",
    columns=("id", "module_id", "title", "youtube_url", "summary", "order"),
    model=Lesson,
)

QUIZ_SCHEMA = EntitySchema(
    kind=EntityKind.QUIZ,
    table="Quizzes",
    columns=(
        "id",
        "lesson_id",
        "question",
        "option_a",
        "option_b",
        "option_c",
        "option_d",
        "correct_answer",
    ),
    model=QuizQuestion,
)

PROGRESS_SCHEMA = EntitySchema(
    kind=EntityKind.PROGRESS,
    table="User_Progress",
    columns=("id", "user_id", "lesson_id", "score", "status", "updated_at"),
    model=Progress,
)

SCHEMAS: dict[EntityKind, EntitySchema] = {
    schema.kind: schema
    for schema in (
        USER_SCHEMA,
        COURSE_SCHEMA,
        MODULE_SCHEMA,
        LESSON_SCHEMA,
        QUIZ_SCHEMA,
        PROGRESS_SCHEMA,
    )
}


def get_schema(kind: EntityKind) -> EntitySchema:
    """Get the schema registered for an entity kind."""
    return SCHEMAS[kind]


def describe_layout() -> dict[str, list[str]]:
    """Return the header row every sheet must start with, keyed by sheet name.

    Used to prepare a fresh spreadsheet: create one sheet per entry and
    put the listed headers in row 1.
    """
    return {schema.table: list(schema.columns) for schema in SCHEMAS.values()}
