# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for SheetLMS.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
- rounding: Round-half-up helpers for scores and percentages
- locks: Per-key asyncio locks
"""

from sheetlms.utils.datetime import ensure_utc, format_iso, now, parse_iso, utc_now
from sheetlms.utils.locks import KeyedLock
from sheetlms.utils.logging import bind_context, clear_context, get_logger, setup_logging
from sheetlms.utils.rounding import percentage, round_half_up

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "now",
    "ensure_utc",
    "format_iso",
    "parse_iso",
    # Numbers
    "round_half_up",
    "percentage",
    # Concurrency
    "KeyedLock",
]
