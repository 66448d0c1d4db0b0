"""Bucket transactions into day, week or month series with derived metrics.

A series is rebuilt from the snapshot on every call. Per bucket:

- revenue: sum of gross_amount over revenue-eligible records
- transaction_count: every record in the bucket, eligible or not
- eligible_count: records that contributed to revenue
- success_rate: completed records / transaction_count * 100

Derived metrics are computed over the complete series and only then is the
series cut to the most recent points (config.daily_limit, weekly_limit,
monthly_limit), so the first kept point still carries its real growth rate
and cumulative total.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from commission_core.config import AnalyticsConfig
from commission_core.records import TransactionRecord, ensure_records, records_to_frame
from commission_core.timeseries.bucketing import Granularity, bucket_key, coerce_granularity

logger = logging.getLogger(__name__)

POINT_COLUMNS = [
    "period",
    "granularity",
    "revenue",
    "transaction_count",
    "eligible_count",
    "average_value",
    "revenue_growth",
    "transaction_growth",
    "moving_average",
    "cumulative_revenue",
    "revenue_per_transaction",
    "success_rate",
]


@dataclass(frozen=True)
class TimeSeriesPoint:
    """One bucket of a trend series.

    Attributes:
        period: Bucket key (YYYY-MM-DD, YYYY-MM-W{n} or YYYY-MM).
        granularity: "day", "week" or "month".
        revenue: Eligible gross revenue in the bucket.
        transaction_count: All records in the bucket.
        eligible_count: Revenue-eligible records in the bucket.
        average_value: revenue / eligible_count.
        revenue_growth: Percent change of revenue vs. the previous bucket.
        transaction_growth: Percent change of transaction_count vs. the
            previous bucket.
        moving_average: Trailing mean of revenue (daily series only, None
            until the window is full).
        cumulative_revenue: Running revenue total up to this bucket.
        revenue_per_transaction: revenue / transaction_count.
        success_rate: Completed share of transaction_count, in percent.
    """

    period: str
    granularity: str
    revenue: float
    transaction_count: int
    eligible_count: int
    average_value: float
    revenue_growth: float
    transaction_growth: float
    moving_average: Optional[float]
    cumulative_revenue: float
    revenue_per_transaction: float
    success_rate: float


def growth_rates(values: pd.Series) -> pd.Series:
    """Percent change of each value vs. the previous one.

    The first value and any value whose predecessor is 0 get 0.0.

    Examples:
        >>> growth_rates(pd.Series([100.0, 150.0, 0.0, 50.0])).tolist()
        [0.0, 50.0, -100.0, 0.0]
    """
    values = values.astype(float)
    previous = values.shift(1).fillna(0.0)
    denominator = previous.where(previous != 0, 1.0)
    rates = np.where(previous != 0, (values - previous) / denominator * 100, 0.0)
    return pd.Series(rates, index=values.index, dtype=float)


def _safe_divide(numerator: pd.Series, denominator: pd.Series, scale: float = 1.0) -> pd.Series:
    safe = denominator.where(denominator > 0, 1)
    return pd.Series(
        np.where(denominator > 0, numerator / safe * scale, 0.0),
        index=numerator.index,
        dtype=float,
    )


def _series_frame(
    records: Sequence[TransactionRecord],
    granularity: Granularity,
    config: AnalyticsConfig,
) -> pd.DataFrame:
    df = records_to_frame(records)
    if df.empty:
        return pd.DataFrame(columns=POINT_COLUMNS)

    df["period"] = [bucket_key(ts.to_pydatetime(), granularity) for ts in df["occurred_at"]]
    df["eligible_revenue"] = df["gross_amount"].where(df["is_revenue_eligible"], 0.0)

    series = (
        df.groupby("period", sort=True)
        .agg(
            revenue=("eligible_revenue", "sum"),
            transaction_count=("gross_amount", "size"),
            eligible_count=("is_revenue_eligible", "sum"),
            completed_count=("is_completed", "sum"),
        )
        .reset_index()
    )
    series["transaction_count"] = series["transaction_count"].astype(int)
    series["eligible_count"] = series["eligible_count"].astype(int)
    series["granularity"] = granularity.value

    series["average_value"] = _safe_divide(series["revenue"], series["eligible_count"])
    series["revenue_per_transaction"] = _safe_divide(series["revenue"], series["transaction_count"])
    series["success_rate"] = _safe_divide(
        series["completed_count"], series["transaction_count"], scale=100.0
    )
    series["revenue_growth"] = growth_rates(series["revenue"])
    series["transaction_growth"] = growth_rates(series["transaction_count"])
    series["cumulative_revenue"] = series["revenue"].cumsum()

    if granularity is Granularity.DAY:
        window = config.moving_average_window
        series["moving_average"] = (
            series["revenue"].rolling(window=window, min_periods=window).mean()
        )
    else:
        series["moving_average"] = np.nan

    limit = config.limit_for(granularity.value)
    return series[POINT_COLUMNS].tail(limit).reset_index(drop=True)


def bucket(
    records: Sequence[TransactionRecord],
    granularity: Granularity | str,
    config: Optional[AnalyticsConfig] = None,
) -> List[TimeSeriesPoint]:
    """Build a trend series at one granularity.

    Args:
        records: Snapshot of transaction records.
        granularity: Granularity or "day", "week", "month".
        config: AnalyticsConfig; defaults are used when None.

    Returns:
        Points in ascending period order, at most config.limit_for(granularity)
        of them. Empty when records is empty.

    Raises:
        InputShapeError: If records is malformed or granularity is unknown.

    Examples:
        >>> points = bucket(records, "month")
        >>> [p.period for p in points]
        ['2025-01', '2025-02']
    """
    records = ensure_records(records)
    granularity = coerce_granularity(granularity)
    config = config or AnalyticsConfig()

    frame = _series_frame(records, granularity, config)
    points = [
        TimeSeriesPoint(
            period=row.period,
            granularity=row.granularity,
            revenue=float(row.revenue),
            transaction_count=int(row.transaction_count),
            eligible_count=int(row.eligible_count),
            average_value=float(row.average_value),
            revenue_growth=float(row.revenue_growth),
            transaction_growth=float(row.transaction_growth),
            moving_average=None if pd.isna(row.moving_average) else float(row.moving_average),
            cumulative_revenue=float(row.cumulative_revenue),
            revenue_per_transaction=float(row.revenue_per_transaction),
            success_rate=float(row.success_rate),
        )
        for row in frame.itertuples(index=False)
    ]
    logger.info(
        "Bucketed %d record(s) into %d %s point(s)", len(records), len(points), granularity.value
    )
    return points


def bucket_frame(
    records: Sequence[TransactionRecord],
    granularity: Granularity | str,
    config: Optional[AnalyticsConfig] = None,
) -> pd.DataFrame:
    """Same series as bucket(), as a DataFrame with POINT_COLUMNS."""
    points = bucket(records, granularity, config)
    if not points:
        return pd.DataFrame(columns=POINT_COLUMNS)
    return pd.DataFrame([asdict(p) for p in points], columns=POINT_COLUMNS)
