# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the Google Sheets backend.

This module defines the exception hierarchy for sheet operations:
- SheetsError: Base exception for all sheet-related errors
- RemoteUnavailableError: The Sheets API call failed
- InvalidPositionError: A row position that cannot be overwritten
- RowTooWideError: A row with more cells than the addressable columns
"""


class SheetsError(Exception):
    """Base exception for all sheet-related errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize sheets error.

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


class RemoteUnavailableError(SheetsError):
    """The Sheets API call failed.

    Raised for timeouts, connection errors, non-2xx responses and
    credential refresh failures.

    Attributes:
        status_code: HTTP status code from the API response, if any.
        response_body: Raw response body if available.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict | None = None,
    ):
        """Initialize remote unavailable error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code from the API response.
            response_body: Raw response body if available.
            details: Optional dictionary with additional error context.
        """
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with status code."""
        base = self.message
        if self.status_code:
            base = f"[{self.status_code}] {base}"
        if self.details:
            base = f"{base} - Details: {self.details}"
        return base


class InvalidPositionError(SheetsError):
    """Row position cannot be overwritten.

    Positions are 1-based and position 1 is the header row, so only
    positions >= 2 address data rows.

    Attributes:
        table: Sheet name.
        position: The rejected position.
    """

    def __init__(self, table: str, position: int):
        """Initialize invalid position error.

        Args:
            table: Sheet name.
            position: The rejected position.
        """
        self.table = table
        self.position = position
        super().__init__(
            f"Row position {position} is not a data row",
            details={"table": table, "position": position},
        )


class RowTooWideError(SheetsError):
    """Row has more cells than the addressable column span.

    Attributes:
        table: Sheet name.
        width: Number of cells in the rejected row.
    """

    def __init__(self, table: str, width: int, max_columns: int):
        """Initialize row width error.

        Args:
            table: Sheet name.
            width: Number of cells in the rejected row.
            max_columns: Maximum number of addressable columns.
        """
        self.table = table
        self.width = width
        super().__init__(
            f"Row has {width} cells, at most {max_columns} are supported",
            details={"table": table},
        )
