# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rounding helpers.

Python's built-in round() rounds halves to even; scores and percentages
shown to learners round halves up instead (62.5 -> 63).
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float | Decimal) -> int:
    """Round a non-negative number to the nearest integer, halves up."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """Return part/whole as a rounded percentage, 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))
