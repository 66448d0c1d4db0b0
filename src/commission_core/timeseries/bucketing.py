"""Period keys for day, week and month buckets.

Key formats sort chronologically as plain strings:

- day:   ``YYYY-MM-DD``
- week:  ``YYYY-MM-W{n}`` where n = ceil((day_of_month + offset) / 7) and
  offset is the weekday of the first of the month counted from Sunday = 0.
  Weeks are numbered within their month, so the key carries the month.
- month: ``YYYY-MM``
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any

from commission_core.exceptions import InputShapeError


class Granularity(str, Enum):
    """Bucket size of a time series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def coerce_granularity(value: Any) -> Granularity:
    """Accept a Granularity or its string value ("day", "week", "month").

    Raises:
        InputShapeError: If value is not a known granularity.
    """
    if isinstance(value, Granularity):
        return value
    if isinstance(value, str):
        try:
            return Granularity(value.strip().lower())
        except ValueError:
            pass
    raise InputShapeError(f"granularity must be one of: day, week, month; got {value!r}")


def week_of_month(moment: date) -> int:
    """Return the Sunday-based week number of moment within its month (1..6).

    Examples:
        >>> week_of_month(date(2025, 1, 1))  # Wednesday, offset 3
        1
        >>> week_of_month(date(2025, 1, 5))  # first Sunday
        2
    """
    first = moment.replace(day=1)
    offset = (first.weekday() + 1) % 7
    return math.ceil((moment.day + offset) / 7)


def bucket_key(moment: datetime, granularity: Granularity | str) -> str:
    """Return the period key of moment for a granularity.

    Examples:
        >>> bucket_key(datetime(2025, 3, 9, 14, 0), "day")
        '2025-03-09'
        >>> bucket_key(datetime(2025, 3, 9, 14, 0), "week")
        '2025-03-W3'
        >>> bucket_key(datetime(2025, 3, 9, 14, 0), "month")
        '2025-03'
    """
    granularity = coerce_granularity(granularity)
    if granularity is Granularity.DAY:
        return moment.strftime("%Y-%m-%d")
    if granularity is Granularity.WEEK:
        return f"{moment.year:04d}-{moment.month:02d}-W{week_of_month(moment)}"
    return f"{moment.year:04d}-{moment.month:02d}"
