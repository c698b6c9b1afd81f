# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress domain: upsert protocol and aggregation."""

from sheetlms.domains.progress.service import ProgressService, UpsertResult

__all__ = ["ProgressService", "UpsertResult"]
