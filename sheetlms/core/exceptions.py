# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain exceptions shared by SheetLMS services.

This module defines the exception hierarchy raised by domain services:
- LMSError: Base exception for all domain errors
- ValidationError: Missing or malformed input, with per-field messages
- NoQuestionsError: A quiz submission for a lesson with no questions
- NotFoundError: A referenced entity does not exist
- ForbiddenError: The caller lacks the role or ownership required

Transport failures are raised by the sheets infrastructure
(RemoteUnavailableError) and are not part of this hierarchy.
"""


class LMSError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize domain error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(LMSError):
    """Input validation failed.

    Attributes:
        field_errors: Mapping of field name to error message.
    """

    def __init__(
        self,
        message: str,
        field_errors: dict[str, str] | None = None,
        details: dict | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Human-readable error description.
            field_errors: Mapping of field name to error message.
            details: Optional dictionary with additional error context.
        """
        self.field_errors = field_errors or {}
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with field errors."""
        if self.field_errors:
            errors = "; ".join(f"{field}: {msg}" for field, msg in self.field_errors.items())
            return f"{self.message} - Errors: {errors}"
        return self.message


class NoQuestionsError(ValidationError):
    """Raised when a quiz is submitted for a lesson without questions.

    Attributes:
        lesson_id: The lesson that has no quiz questions.
    """

    def __init__(self, lesson_id: str):
        """Initialize no-questions error.

        Args:
            lesson_id: The lesson that has no quiz questions.
        """
        self.lesson_id = lesson_id
        super().__init__(
            "No quiz questions found for this lesson",
            details={"lesson_id": lesson_id},
        )


class NotFoundError(LMSError):
    """Referenced entity not found.

    Attributes:
        entity: Entity kind that was looked up (e.g. "Lesson").
        entity_id: The ID that was not found.
    """

    def __init__(
        self,
        entity: str,
        entity_id: str | None = None,
        details: dict | None = None,
    ):
        """Initialize not found error.

        Args:
            entity: Entity kind that was looked up.
            entity_id: The ID that was not found.
            details: Optional dictionary with additional error context.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", details)

    def __str__(self) -> str:
        """Return string representation with entity ID."""
        if self.entity_id:
            return f"{self.message} (id: {self.entity_id})"
        return self.message


class ForbiddenError(LMSError):
    """Caller lacks the required role or owns a different resource."""

    pass
