"""Detail panels for a drill-down view.

describe() turns a DrillDownState into the figures shown next to it:

- ORGANIZATION: totals of the organization, its share of snapshot revenue,
  a payment-channel breakdown, a monthly trend and the latest transactions.
- PAYMENT_CHANNEL: the same figures with an organization breakdown instead.
- TRANSACTION: the transactions of the selected day within the working set.
- OVERVIEW: None (the overview is served by the aggregation module).

Revenue figures use the revenue-eligible subset; counts and success rates
use every record of the working set.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

import pandas as pd

from commission_core.aggregation.breakdowns import (
    organization_performance,
    payment_channel_analysis,
)
from commission_core.config import AnalyticsConfig
from commission_core.navigation.drilldown import DrillDownState, ViewLevel
from commission_core.records import TransactionRecord, ensure_records
from commission_core.timeseries.bucketing import Granularity
from commission_core.timeseries.trends import TimeSeriesPoint, bucket
from commission_core.utils import safe_percentage, safe_ratio

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SegmentDetails:
    """Figures for an organization or payment-channel view.

    Attributes:
        level: ORGANIZATION or PAYMENT_CHANNEL.
        segment_id: Selected organization_id or payment_channel_id.
        name: Display label (last breadcrumb entry of the segment).
        total_revenue: Eligible gross revenue.
        total_commission: Eligible applied commission.
        transaction_count: All records in the segment.
        average_value: total_revenue per eligible record.
        revenue_share: total_revenue as % of eligible snapshot revenue.
        revenue_efficiency: Revenue after costs as % of total_revenue.
        success_rate: Completed records as % of transaction_count.
        breakdown: Channel breakdown (organization view) or organization
            breakdown (payment-channel view).
        monthly_trend: Monthly series of the segment.
        recent_transactions: Latest records, newest first.
    """

    level: ViewLevel
    segment_id: str
    name: str
    total_revenue: float
    total_commission: float
    transaction_count: int
    average_value: float
    revenue_share: float
    revenue_efficiency: float
    success_rate: float
    breakdown: pd.DataFrame
    monthly_trend: List[TimeSeriesPoint]
    recent_transactions: List[TransactionRecord]


@dataclass(frozen=True)
class TransactionDayDetails:
    """Transactions of the selected day."""

    day: date
    transactions: List[TransactionRecord]
    total_revenue: float
    total_commission: float
    transaction_count: int
    average_value: float
    success_rate: float


Details = Union[SegmentDetails, TransactionDayDetails]


def _eligible_revenue(records: Sequence[TransactionRecord]) -> float:
    return sum(r.gross_amount for r in records if r.is_revenue_eligible)


def recent_transactions(records: Sequence[TransactionRecord], limit: int) -> List[TransactionRecord]:
    """Return the latest records, newest first. Ties keep input order."""
    ordered = sorted(records, key=lambda r: r.occurred_at, reverse=True)
    return ordered[:limit]


def _segment_details(
    state: DrillDownState,
    snapshot: Sequence[TransactionRecord],
    config: AnalyticsConfig,
) -> SegmentDetails:
    records = state.working_set
    rows = [r for r in records if r.is_revenue_eligible]
    total_revenue = _eligible_revenue(records)
    total_commission = sum(r.applied_commission_amount for r in rows)
    completed = sum(1 for r in records if r.is_completed)

    if state.level is ViewLevel.ORGANIZATION:
        segment_id = state.selected_organization
        breakdown = payment_channel_analysis(records, config)
    else:
        segment_id = state.selected_payment_channel
        breakdown = organization_performance(records, config=config)

    return SegmentDetails(
        level=state.level,
        segment_id=segment_id or "",
        name=state.breadcrumb[2] if len(state.breadcrumb) > 2 else (segment_id or ""),
        total_revenue=total_revenue,
        total_commission=total_commission,
        transaction_count=len(records),
        average_value=safe_ratio(total_revenue, len(rows)),
        revenue_share=safe_percentage(total_revenue, _eligible_revenue(snapshot)),
        revenue_efficiency=safe_percentage(
            sum(r.revenue_after_costs for r in rows), total_revenue
        ),
        success_rate=safe_percentage(completed, len(records)),
        breakdown=breakdown,
        monthly_trend=bucket(records, Granularity.MONTH, config),
        recent_transactions=recent_transactions(records, config.recent_transactions),
    )


def _day_details(state: DrillDownState) -> TransactionDayDetails:
    day = state.selected_date
    records = [r for r in state.working_set if r.occurred_at.date() == day]
    rows = [r for r in records if r.is_revenue_eligible]
    total_revenue = _eligible_revenue(records)
    return TransactionDayDetails(
        day=day,
        transactions=sorted(records, key=lambda r: r.occurred_at),
        total_revenue=total_revenue,
        total_commission=sum(r.applied_commission_amount for r in rows),
        transaction_count=len(records),
        average_value=safe_ratio(total_revenue, len(rows)),
        success_rate=safe_percentage(sum(1 for r in records if r.is_completed), len(records)),
    )


def describe(
    state: DrillDownState,
    snapshot: Sequence[TransactionRecord],
    config: Optional[AnalyticsConfig] = None,
) -> Optional[Details]:
    """Compute the detail panel of a drill-down view.

    Args:
        state: Current navigator state.
        snapshot: Full snapshot, used for revenue shares.
        config: AnalyticsConfig; defaults are used when None.

    Returns:
        SegmentDetails, TransactionDayDetails, or None at the overview.

    Example:
        >>> nav = DrillDownNavigator(records)
        >>> details = describe(nav.select_organization("Acme"), nav.snapshot)
        >>> details.revenue_share
        62.5
    """
    snapshot = ensure_records(snapshot, "snapshot")
    config = config or AnalyticsConfig()

    if state.level is ViewLevel.OVERVIEW:
        return None
    if state.level is ViewLevel.TRANSACTION:
        details = _day_details(state)
        logger.debug("Day details for %s: %d record(s)", details.day, details.transaction_count)
        return details
    return _segment_details(state, snapshot, config)
