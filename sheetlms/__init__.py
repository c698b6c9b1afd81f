"""SheetLMS Backend.

Learning-management backend that keeps its courses, lessons, quizzes and
learner progress in a Google spreadsheet.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
