# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for SheetLMS.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from sheetlms.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.cache.ttl_seconds)
    300.0
"""

from sheetlms.core.config.settings import (
    APISettings,
    CacheSettings,
    CORSSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    SheetsSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "SheetsSettings",
    "CacheSettings",
    "JWTSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
