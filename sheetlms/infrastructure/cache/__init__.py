# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cache infrastructure.

This package provides the in-process read-through cache that sits in
front of spreadsheet reads.

Example:
    from sheetlms.infrastructure.cache import ReadThroughCache

    cache = ReadThroughCache(ttl_seconds=settings.cache.ttl_seconds)
"""

from sheetlms.infrastructure.cache.ttl_cache import (
    DEFAULT_TTL_SECONDS,
    CacheEntry,
    ReadThroughCache,
)

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CacheEntry",
    "ReadThroughCache",
]
