# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Spreadsheet initialization.

Writes the header row of every entity sheet that is still empty, so a
freshly created spreadsheet matches the layout the schemas expect.
Sheets that already have a header are left untouched; a header that
differs from the expected one is reported but never rewritten.

The sheets themselves (tabs) must already exist.
"""

import asyncio
import logging

from sheetlms.infrastructure.sheets.row_store import TabularTransport, table_range
from sheetlms.infrastructure.sheets.schema import describe_layout

logger = logging.getLogger(__name__)


async def ensure_headers(transport: TabularTransport) -> dict[str, str]:
    """Write missing header rows.

    Args:
        transport: Tabular transport to the spreadsheet.

    Returns:
        Per sheet: "created", "ok" or "mismatch".
    """
    results: dict[str, str] = {}
    for table, columns in describe_layout().items():
        rows = await transport.read_range(table_range(table))
        if not rows or not any(cell.strip() for cell in rows[0]):
            await transport.append_row(table_range(table), list(columns))
            logger.info("Wrote header row for %s", table)
            results[table] = "created"
            continue

        header = [cell.strip() for cell in rows[0]]
        if header[: len(columns)] != list(columns):
            logger.warning("Header of %s differs from expected columns %s", table, columns)
            results[table] = "mismatch"
        else:
            results[table] = "ok"
    return results


if __name__ == "__main__":
    from sheetlms.core.config import get_settings
    from sheetlms.infrastructure.sheets.client import SheetsClient
    from sheetlms.utils.logging import setup_logging

    async def main():
        settings = get_settings()
        setup_logging(settings)
        client = SheetsClient(settings.sheets)
        await client.connect()
        try:
            for table, result in (await ensure_headers(client)).items():
                logger.info("%s: %s", table, result)
        finally:
            await client.close()

    asyncio.run(main())
