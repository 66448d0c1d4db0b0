"""Trend analysis across daily, weekly and monthly series."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import List, Optional

from commission_core.config import AnalyticsConfig
from commission_core.records import TransactionRecord, ensure_records
from commission_core.timeseries.bucketing import Granularity
from commission_core.timeseries.trends import TimeSeriesPoint, bucket

logger = logging.getLogger(__name__)

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"

SEASONAL_PATTERN = "Annual pattern detected"
NO_SEASONAL_PATTERN = "Insufficient data for seasonal analysis"
SEASONAL_MIN_MONTHS = 12


@dataclass(frozen=True)
class TrendSummary:
    """Headline figures of a trend analysis.

    Averages are over the kept (truncated) series. Growth rates compare the
    last two monthly points. Best/worst periods are the first point with the
    highest/lowest revenue, or "" when the series is empty.
    """

    total_revenue: float
    total_transactions: int
    average_daily_revenue: float
    average_monthly_revenue: float
    revenue_growth_rate: float
    transaction_growth_rate: float
    best_day: str
    worst_day: str
    best_month: str
    worst_month: str
    seasonal_pattern: str
    trend_direction: str


@dataclass(frozen=True)
class TrendAnalysis:
    daily: List[TimeSeriesPoint]
    weekly: List[TimeSeriesPoint]
    monthly: List[TimeSeriesPoint]
    summary: TrendSummary


def _mean_revenue(points: List[TimeSeriesPoint]) -> float:
    if not points:
        return 0.0
    return sum(p.revenue for p in points) / len(points)


def _best_period(points: List[TimeSeriesPoint]) -> str:
    if not points:
        return ""
    best = points[0]
    for point in points[1:]:
        if point.revenue > best.revenue:
            best = point
    return best.period


def _worst_period(points: List[TimeSeriesPoint]) -> str:
    if not points:
        return ""
    worst = points[0]
    for point in points[1:]:
        if point.revenue < worst.revenue:
            worst = point
    return worst.period


def trend_direction(growth_rate: float, threshold: float = 5.0) -> str:
    """Classify a growth rate as increasing, decreasing or stable.

    Examples:
        >>> trend_direction(12.5)
        'increasing'
        >>> trend_direction(-5.0)
        'stable'
    """
    if growth_rate > threshold:
        return INCREASING
    if growth_rate < -threshold:
        return DECREASING
    return STABLE


def analyze_trends(
    records: Sequence[TransactionRecord],
    config: Optional[AnalyticsConfig] = None,
) -> TrendAnalysis:
    """Build daily, weekly and monthly series and summarize them.

    Args:
        records: Snapshot of transaction records.
        config: AnalyticsConfig; defaults are used when None.

    Returns:
        TrendAnalysis. With no records every series is empty and the summary
        is zeroed with a "stable" direction.
    """
    records = ensure_records(records)
    config = config or AnalyticsConfig()

    daily = bucket(records, Granularity.DAY, config)
    weekly = bucket(records, Granularity.WEEK, config)
    monthly = bucket(records, Granularity.MONTH, config)

    if len(monthly) >= 2:
        revenue_growth = monthly[-1].revenue_growth
        transaction_growth = monthly[-1].transaction_growth
    else:
        revenue_growth = 0.0
        transaction_growth = 0.0

    summary = TrendSummary(
        total_revenue=sum(r.gross_amount for r in records if r.is_revenue_eligible),
        total_transactions=len(records),
        average_daily_revenue=_mean_revenue(daily),
        average_monthly_revenue=_mean_revenue(monthly),
        revenue_growth_rate=revenue_growth,
        transaction_growth_rate=transaction_growth,
        best_day=_best_period(daily),
        worst_day=_worst_period(daily),
        best_month=_best_period(monthly),
        worst_month=_worst_period(monthly),
        seasonal_pattern=(
            SEASONAL_PATTERN if len(monthly) >= SEASONAL_MIN_MONTHS else NO_SEASONAL_PATTERN
        ),
        trend_direction=trend_direction(revenue_growth, config.trend_threshold),
    )
    logger.info(
        "Trend analysis: %d day(s), %d week(s), %d month(s), direction %s",
        len(daily),
        len(weekly),
        len(monthly),
        summary.trend_direction,
    )
    return TrendAnalysis(daily=daily, weekly=weekly, monthly=monthly, summary=summary)
