# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process read-through cache with time-boxed entries.

Entries live for a fixed time-to-live and are dropped explicitly by
pattern after writes. The cache is an ordinary object created once per
application and handed to the components that read through it; it starts
empty and is never persisted.

Writers must invalidate after, never before, the underlying write
succeeds; otherwise a concurrent reader can refill the cache with the
pre-write data.

Example:
    cache = ReadThroughCache(ttl_seconds=300)

    courses = await cache.get_or_load("sheet:Courses", load_courses)
    ...
    await store.append("Courses", row)
    cache.invalidate("sheet:Courses")
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0

_MISSING = object()


@dataclass
class CacheEntry:
    """A cached value and the clock reading when it was stored."""

    value: Any
    stored_at: float


class ReadThroughCache:
    """Mapping of logical query keys to (value, timestamp) pairs.

    Attributes:
        ttl_seconds: Maximum entry age; an entry is fresh while
            now - stored_at < ttl_seconds.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Time-to-live for every entry.
            clock: Monotonic clock returning seconds; injectable for tests.
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._generations: dict[str, int] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for key, or default when missing or stale.

        Stale entries are removed on access.
        """
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return default

        if self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            self.misses += 1
            return default

        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value under key, stamped with the current clock."""
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached value or load, store and return a fresh one.

        Loader failures propagate and leave the cache untouched. A value
        loaded while the key was invalidated is returned but not stored,
        since it may predate the write that caused the invalidation.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        return await self.refresh(key, loader)

    async def refresh(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Load a fresh value, store it unless invalidated meanwhile, and return it."""
        generation = self._generations.setdefault(key, 0)
        value = await loader()
        if self._generations[key] == generation:
            self.set(key, value)
        else:
            logger.debug("Discarding load of %s invalidated while in flight", key)
        return value

    def invalidate(self, pattern: str) -> int:
        """Drop every entry whose key contains pattern.

        Loads of matching keys that are still in flight will not be stored.

        Returns:
            Number of entries removed.
        """
        for key in self._generations:
            if pattern in key:
                self._generations[key] = self._generations.get(key, 0) + 1
        doomed = [key for key in self._entries if pattern in key]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug("Invalidated %d cache entries matching %s", len(doomed), pattern)
        return len(doomed)

    def clear(self) -> None:
        """Drop every entry."""
        for key in self._generations:
            self._generations[key] += 1
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._entries)
