# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response envelope shared by every API endpoint.

Successful responses:
    {"success": true, "data": {...}, "message": "..."}

Failed responses:
    {"success": false, "message": "...", "errors": [{"field": ..., "message": ...}]}
"""

from typing import Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class FieldError(BaseModel):
    """A validation failure on one input field."""

    field: str = Field(description="Field name")
    message: str = Field(description="What is wrong with the field")


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard response envelope."""

    success: bool = True
    data: DataT | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Envelope for failed requests."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None


def error_response(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON error response in the standard envelope.

    Args:
        status_code: HTTP status code.
        message: Human-readable message.
        errors: Per-field validation errors.
        headers: Extra response headers.
    """
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )
