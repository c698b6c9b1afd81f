# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog domain: courses, modules and lessons."""

from sheetlms.domains.catalog.service import CatalogService

__all__ = ["CatalogService"]
