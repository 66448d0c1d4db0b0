"""Time-series bucketing and trend analysis.

- **bucketing**: period keys for day, week and month buckets.
- **trends**: per-bucket revenue, counts, growth rates, moving average,
  cumulative revenue and success rate.
- **summary**: best/worst periods and trend direction over all three series.

Example:
    >>> from commission_core.timeseries import bucket, analyze_trends
    >>>
    >>> monthly = bucket(records, "month")
    >>> analysis = analyze_trends(records)
    >>> analysis.summary.trend_direction
    'increasing'
"""

from commission_core.timeseries.bucketing import (
    Granularity,
    bucket_key,
    coerce_granularity,
    week_of_month,
)
from commission_core.timeseries.summary import (
    TrendAnalysis,
    TrendSummary,
    analyze_trends,
    trend_direction,
)
from commission_core.timeseries.trends import (
    POINT_COLUMNS,
    TimeSeriesPoint,
    bucket,
    bucket_frame,
    growth_rates,
)

__all__ = [
    "POINT_COLUMNS",
    "Granularity",
    "TimeSeriesPoint",
    "TrendAnalysis",
    "TrendSummary",
    "analyze_trends",
    "bucket",
    "bucket_frame",
    "bucket_key",
    "coerce_granularity",
    "growth_rates",
    "trend_direction",
    "week_of_month",
]
