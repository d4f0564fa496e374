"""
Rental day counting.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

_DAY = timedelta(days=1)


def _as_datetime(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def rental_days(start: date, end: date) -> int:
    """
    Billable rental days between start and end.

    ceil(|end - start| / 1 day), never less than 1. An inverted range is
    normalized by the absolute difference rather than rejected.

    Example:
        rental_days(date(2024, 5, 1), date(2024, 5, 4))  # 3
        rental_days(date(2024, 5, 1), date(2024, 5, 1))  # 1
    """
    span = abs(_as_datetime(end) - _as_datetime(start))
    return max(1, math.ceil(span / _DAY))


__all__ = ("rental_days",)
