# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Google Sheets persistence.

Layers, leaf first:
- client: SheetsClient, the Sheets REST API transport
- row_store: RowStore, header-keyed records over any tabular transport
- schema: EntitySchema registry, typed records <-> positional rows
- repository: SheetRepository, cached query helpers on typed entities

Example:
    client = SheetsClient(settings.sheets)
    await client.connect()
    repository = SheetRepository(RowStore(client), cache)
    course = await repository.find_by_id(EntityKind.COURSE, "c1")
"""

from sheetlms.infrastructure.sheets.client import SHEETS_SCOPES, SheetsClient
from sheetlms.infrastructure.sheets.exceptions import (
    InvalidPositionError,
    RemoteUnavailableError,
    RowTooWideError,
    SheetsError,
)
from sheetlms.infrastructure.sheets.repository import SheetRepository, TableSnapshot
from sheetlms.infrastructure.sheets.row_store import (
    MAX_COLUMNS,
    RowStore,
    TabularTransport,
)
from sheetlms.infrastructure.sheets.schema import (
    SCHEMAS,
    EntityKind,
    EntitySchema,
    describe_layout,
    get_schema,
)

__all__ = [
    # Transport
    "SHEETS_SCOPES",
    "SheetsClient",
    "TabularTransport",
    # Row store
    "MAX_COLUMNS",
    "RowStore",
    # Schema
    "SCHEMAS",
    "EntityKind",
    "EntitySchema",
    "describe_layout",
    "get_schema",
    # Repository
    "SheetRepository",
    "TableSnapshot",
    # Errors
    "SheetsError",
    "RemoteUnavailableError",
    "InvalidPositionError",
    "RowTooWideError",
]
