# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Query helpers over the row store.

SheetRepository offers find-all / find-one / filter / find-position on
typed entities, plus the two write operations the system needs (append
and overwrite). Reads go through the read-through cache when one is
configured; a read that must observe the latest write passes
use_cache=False.

Each cached entry is a TableSnapshot: the parsed records of one sheet in
sheet order plus an index by id, rebuilt whenever the sheet is re-read.

Lookups compare the text form of a column exactly: no type coercion and
no case-folding.
"""

import logging
from dataclasses import dataclass, field

from sheetlms.infrastructure.cache.ttl_cache import ReadThroughCache
from sheetlms.infrastructure.sheets.row_store import RowStore
from sheetlms.infrastructure.sheets.schema import (
    EntityKind,
    EntitySchema,
    get_schema,
)
from sheetlms.models.entities import SheetEntity

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "sheet"


@dataclass
class TableSnapshot:
    """Parsed contents of one sheet.

    Attributes:
        records: Entities in sheet order.
        by_id: First entity for each id.
    """

    records: list[SheetEntity]
    by_id: dict[str, SheetEntity] = field(default_factory=dict)

    @classmethod
    def build(cls, records: list[SheetEntity]) -> "TableSnapshot":
        by_id: dict[str, SheetEntity] = {}
        for record in records:
            by_id.setdefault(record.id, record)
        return cls(records=records, by_id=by_id)


def cache_key(table: str) -> str:
    """Cache key for a sheet's snapshot."""
    return f"{CACHE_KEY_PREFIX}:{table}"


class SheetRepository:
    """Typed, cached access to every entity kind.

    Attributes:
        store: Underlying row store.
        cache: Optional read-through cache.
    """

    def __init__(self, store: RowStore, cache: ReadThroughCache | None = None) -> None:
        """Initialize the repository.

        Args:
            store: Row store adapter.
            cache: Read-through cache shared by the application, or None
                to always read from the spreadsheet.
        """
        self.store = store
        self.cache = cache

    async def _load_snapshot(self, schema: EntitySchema) -> TableSnapshot:
        records = await self.store.read_all(schema.table)
        return TableSnapshot.build([schema.parse(record) for record in records])

    async def snapshot(self, kind: EntityKind, use_cache: bool = True) -> TableSnapshot:
        """Get the parsed contents of a kind's sheet.

        Args:
            kind: Entity kind.
            use_cache: Serve from the cache when fresh. A fresh read made
                with use_cache=False still refreshes the cache entry.
        """
        schema = get_schema(kind)
        if self.cache is None:
            return await self._load_snapshot(schema)

        key = cache_key(schema.table)
        if use_cache:
            return await self.cache.get_or_load(key, lambda: self._load_snapshot(schema))

        return await self.cache.refresh(key, lambda: self._load_snapshot(schema))

    async def find_all(self, kind: EntityKind, use_cache: bool = True) -> list[SheetEntity]:
        """Return every entity of a kind in sheet order."""
        snapshot = await self.snapshot(kind, use_cache=use_cache)
        return list(snapshot.records)

    async def find_one(
        self,
        kind: EntityKind,
        column: str,
        value: str,
        use_cache: bool = True,
    ) -> SheetEntity | None:
        """Return the first entity whose column text equals value, or None."""
        schema = get_schema(kind)
        snapshot = await self.snapshot(kind, use_cache=use_cache)
        if column == "id":
            return snapshot.by_id.get(value)

        for record in snapshot.records:
            if schema.cell(record, column) == value:
                return record
        return None

    async def find_by_id(
        self,
        kind: EntityKind,
        entity_id: str,
        use_cache: bool = True,
    ) -> SheetEntity | None:
        """Return the entity with the given id, or None."""
        return await self.find_one(kind, "id", entity_id, use_cache=use_cache)

    async def filter(
        self,
        kind: EntityKind,
        column: str,
        value: str,
        use_cache: bool = True,
    ) -> list[SheetEntity]:
        """Return every entity whose column text equals value, in sheet order."""
        schema = get_schema(kind)
        snapshot = await self.snapshot(kind, use_cache=use_cache)
        return [record for record in snapshot.records if schema.cell(record, column) == value]

    async def find_position(self, kind: EntityKind, column: str, value: str) -> int | None:
        """Return the 1-based row position of the first match.

        Never served from the cache: positions are only meaningful against
        the sheet as it is now.
        """
        schema = get_schema(kind)
        return await self.store.find_position(schema.table, column, value)

    async def insert(self, kind: EntityKind, entity: SheetEntity) -> SheetEntity:
        """Append an entity as a new row.

        Callers are responsible for uniqueness and referential checks.
        """
        schema = get_schema(kind)
        await self.store.append(schema.table, schema.serialize(entity))
        self._invalidate(schema)
        logger.info("Inserted %s %s", kind.value, entity.id)
        return entity

    async def overwrite(self, kind: EntityKind, position: int, entity: SheetEntity) -> SheetEntity:
        """Replace the row at position with an entity."""
        schema = get_schema(kind)
        await self.store.overwrite(schema.table, position, schema.serialize(entity))
        self._invalidate(schema)
        logger.info("Overwrote %s %s at row %d", kind.value, entity.id, position)
        return entity

    def invalidate(self, kind: EntityKind) -> None:
        """Drop cached reads of a kind's sheet."""
        self._invalidate(get_schema(kind))

    def _invalidate(self, schema: EntitySchema) -> None:
        if self.cache is not None:
            self.cache.invalidate(cache_key(schema.table))
