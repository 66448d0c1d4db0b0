"""Shared utilities for commission_core.

This module provides date handling used across the engine:

- Timestamp parsing: ISO-8601 strings, dates and datetimes to naive datetimes
- DateRange: inclusive window filters built from optional ISO-8601 bounds
- Calendar helpers: month windows for statements
- Safe percentages that never produce NaN or infinity

Examples:
    >>> from commission_core.utils import DateRange
    >>> window = DateRange.from_iso("2025-01-01", "2025-01-31")
    >>> window.label()
    ('2025-01-01', '2025-01-31')

"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pandas as pd

from commission_core.exceptions import InputShapeError

ALL_TIME_LABEL = "All Time"


def parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp into a naive datetime.

    Timezone-aware values are converted to UTC before the timezone is dropped,
    so all records of a snapshot compare on the same clock.

    Args:
        value: ISO-8601 string, date, datetime or pandas Timestamp.

    Returns:
        Naive datetime.

    Raises:
        InputShapeError: If the value cannot be parsed, or is not a
            string, date or datetime. Numbers are rejected rather than read as
            epoch offsets.

    Examples:
        >>> parse_timestamp("2025-01-15T10:30:00Z")
        datetime.datetime(2025, 1, 15, 10, 30)

    """
    if not isinstance(value, (str, date)):
        raise InputShapeError(f"Expected a timestamp string, date or datetime, got {value!r}")
    if isinstance(value, str) and not value.strip():
        raise InputShapeError("Expected a timestamp, got an empty string")
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise InputShapeError(f"Could not parse timestamp {value!r}: {e}") from e
    if pd.isna(ts):
        raise InputShapeError(f"Could not parse timestamp {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


def _is_date_only(value: Any) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and len(value.strip()) == 10


@dataclass(frozen=True)
class DateRange:
    """Inclusive time window; either bound may be open.

    Attributes:
        start: Earliest timestamp included, or None for no lower bound.
        end: Latest timestamp included, or None for no upper bound.
        start_label: Bound as given by the caller, for reporting.
        end_label: Bound as given by the caller, for reporting.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    start_label: Optional[str] = None
    end_label: Optional[str] = None

    @classmethod
    def from_iso(cls, start: Any = None, end: Any = None) -> DateRange:
        """Build a range from ISO-8601 bounds.

        A date-only end bound ("2025-01-31") includes the whole day.

        Raises:
            InputShapeError: If a bound cannot be parsed or start is after end.
        """
        start_ts = parse_timestamp(start) if start is not None else None
        end_ts = parse_timestamp(end) if end is not None else None
        if end_ts is not None and _is_date_only(end):
            end_ts = end_ts + timedelta(days=1) - timedelta(microseconds=1)
        if start_ts is not None and end_ts is not None and start_ts > end_ts:
            raise InputShapeError(f"Date range start {start!r} is after end {end!r}")
        return cls(
            start=start_ts,
            end=end_ts,
            start_label=str(start) if start is not None else None,
            end_label=str(end) if end is not None else None,
        )

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, moment: datetime) -> bool:
        """Return True if moment falls inside the window (bounds inclusive)."""
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True

    def label(self) -> tuple[str, str]:
        """Return (start, end) labels, "All Time" for open bounds."""
        return (self.start_label or ALL_TIME_LABEL, self.end_label or ALL_TIME_LABEL)


def coerce_date_range(value: Any) -> DateRange:
    """Normalize the optional date_range argument accepted by public functions.

    Accepts None, a DateRange, or a (start, end) pair of ISO-8601 bounds.
    """
    if value is None:
        return DateRange()
    if isinstance(value, DateRange):
        return value
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return DateRange.from_iso(value[0], value[1])
    raise InputShapeError(
        f"date_range must be a DateRange or a (start, end) pair, got {type(value).__name__}"
    )


def month_range(year: int, month: int) -> DateRange:
    """Return the inclusive DateRange covering one calendar month.

    Raises:
        InputShapeError: If year or month is not a valid calendar value.

    Examples:
        >>> month_range(2025, 2).label()
        ('2025-02-01', '2025-02-28')
    """
    for name, value in (("year", year), ("month", month)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputShapeError(f"{name} must be an integer, got {value!r}")
    if not 1 <= month <= 12:
        raise InputShapeError(f"month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InputShapeError(f"year must be between 1 and 9999, got {year}")
    last_day = calendar.monthrange(year, month)[1]
    return DateRange.from_iso(date(year, month, 1).isoformat(), date(year, month, last_day).isoformat())


def safe_percentage(numerator: float, denominator: float) -> float:
    """Return numerator / denominator * 100, or 0.0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator * 100
    return 0.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator
    return 0.0
