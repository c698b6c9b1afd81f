# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Row store adapter over a tabular transport.

The row store turns a sheet into a sequence of header-keyed records and
back. It carries no business knowledge and keeps no state between calls:
every operation goes to the transport.

Positions are 1-based row numbers as shown in the spreadsheet UI, so
position 1 is the header row and the first record lives at position 2.

Example:
    store = RowStore(sheets_client)
    records = await store.read_all("Courses")
    await store.append("Courses", ["c1", "Intro", ...])
    position = await store.find_position("Courses", "id", "c1")
    await store.overwrite("Courses", position, ["c1", "Intro v2", ...])
"""

import logging
from typing import Protocol

from sheetlms.infrastructure.sheets.exceptions import InvalidPositionError, RowTooWideError

logger = logging.getLogger(__name__)

MAX_COLUMNS = 26
FIRST_DATA_ROW = 2

Record = dict[str, str]


class TabularTransport(Protocol):
    """Remote tabular service operations the row store relies on."""

    async def read_range(self, range_: str) -> list[list[str]]: ...

    async def append_row(self, range_: str, values: list[str]) -> None: ...

    async def update_row(self, range_: str, values: list[str]) -> None: ...


def column_letter(index: int) -> str:
    """Return the A1 column letter for a zero-based column index."""
    if not 0 <= index < MAX_COLUMNS:
        raise ValueError(f"Column index {index} outside A..Z")
    return chr(ord("A") + index)


def table_range(table: str) -> str:
    """A1 range covering every addressable column of a sheet."""
    return f"{table}!A:{column_letter(MAX_COLUMNS - 1)}"


def row_range(table: str, position: int) -> str:
    """A1 range covering a single row of a sheet."""
    return f"{table}!A{position}:{column_letter(MAX_COLUMNS - 1)}{position}"


class RowStore:
    """Adapter between a tabular transport and header-keyed records."""

    def __init__(self, transport: TabularTransport) -> None:
        """Initialize the row store.

        Args:
            transport: Remote tabular service (usually a SheetsClient).
        """
        self._transport = transport

    async def _read_rows(self, table: str) -> list[list[str]]:
        return await self._transport.read_range(table_range(table))

    async def read_all(self, table: str) -> list[Record]:
        """Read every data row of a table.

        Args:
            table: Sheet name.

        Returns:
            Records in sheet order, each mapping header name to cell text.
            Cells missing at the end of a row map to "". An empty table or
            one holding only the header yields [].

        Raises:
            RemoteUnavailableError: If the transport call fails.
        """
        rows = await self._read_rows(table)
        if not rows:
            return []

        headers = rows[0]
        records = []
        for row in rows[1:]:
            records.append(
                {
                    header: row[index] if index < len(row) else ""
                    for index, header in enumerate(headers)
                }
            )

        logger.debug("Read %d records from %s", len(records), table)
        return records

    async def append(self, table: str, values: list[str]) -> None:
        """Append one row at the end of a table.

        No uniqueness or referential checks are made; callers validate.

        Args:
            table: Sheet name.
            values: Cell values in the table's column order.

        Raises:
            RowTooWideError: If values has more than 26 cells.
            RemoteUnavailableError: If the transport call fails.
        """
        self._check_width(table, values)
        await self._transport.append_row(table_range(table), values)
        logger.debug("Appended row to %s", table)

    async def overwrite(self, table: str, position: int, values: list[str]) -> None:
        """Replace exactly one data row.

        Args:
            table: Sheet name.
            position: 1-based row position; must be >= 2.
            values: Cell values in the table's column order.

        Raises:
            InvalidPositionError: If position addresses the header or less.
            RowTooWideError: If values has more than 26 cells.
            RemoteUnavailableError: If the transport call fails.
        """
        if position < FIRST_DATA_ROW:
            raise InvalidPositionError(table, position)
        self._check_width(table, values)
        await self._transport.update_row(row_range(table, position), values)
        logger.debug("Overwrote row %d of %s", position, table)

    async def find_position(self, table: str, column: str, value: str) -> int | None:
        """Find the first row whose column equals value.

        Always performs a fresh read; comparison is exact string equality.

        Args:
            table: Sheet name.
            column: Header name of the column to scan.
            value: Cell text to look for.

        Returns:
            1-based position of the first match, or None when there is no
            match or the column does not exist.

        Raises:
            RemoteUnavailableError: If the transport call fails.
        """
        rows = await self._read_rows(table)
        if not rows:
            return None

        headers = rows[0]
        if column not in headers:
            logger.warning("Column %s not found in %s", column, table)
            return None
        column_index = headers.index(column)

        for offset, row in enumerate(rows[1:]):
            cell = row[column_index] if column_index < len(row) else ""
            if cell == value:
                return offset + FIRST_DATA_ROW

        return None

    def _check_width(self, table: str, values: list[str]) -> None:
        if len(values) > MAX_COLUMNS:
            raise RowTooWideError(table, len(values), MAX_COLUMNS)
