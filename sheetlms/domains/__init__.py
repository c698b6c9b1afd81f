# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SheetLMS.

Domains:
    catalog: Courses, modules and lessons.
    quiz: Quiz authoring, listing, scoring and submission.
    progress: Progress upsert and aggregation.
"""
