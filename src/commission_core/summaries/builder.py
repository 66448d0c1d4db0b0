"""Per-actor commission summaries, statements and rankings.

Every function filters the snapshot (actor, optional inclusive date range),
restricts it to revenue-eligible records and sums with the aggregator. Bad
arguments raise InputShapeError immediately; a window with no eligible
records returns a zeroed result, since "no activity" is a normal state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from commission_core.aggregation.aggregate import GroupTotals, aggregate, eligible
from commission_core.config import AnalyticsConfig
from commission_core.records import TransactionRecord, ensure_identifier, ensure_records
from commission_core.utils import DateRange, coerce_date_range, month_range, safe_percentage, safe_ratio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommissionSummary:
    """Commission totals of one actor over a window.

    Attributes:
        total_commission: Sum of applied_commission_amount.
        total_revenue: Sum of gross_amount.
        total_transactions: Number of eligible records.
        average_commission: total_commission / total_transactions.
        commission_rate: total_commission / revenue_after_costs * 100.
        revenue_after_costs: Sum of revenue_after_costs.
        efficiency: total_commission / total_revenue * 100.
    """

    total_commission: float = 0.0
    total_revenue: float = 0.0
    total_transactions: int = 0
    average_commission: float = 0.0
    commission_rate: float = 0.0
    revenue_after_costs: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class ChannelBreakdown:
    """Commission of one actor through one payment channel.

    commission_rate is commission as a percentage of gross revenue.
    """

    payment_channel_id: str
    payment_channel_name: str
    total_commission: float
    total_revenue: float
    transaction_count: int
    average_commission: float
    commission_rate: float


@dataclass(frozen=True)
class TopOrganization:
    organization_id: str
    organization_name: str
    commission: float
    revenue: float
    transactions: int


@dataclass(frozen=True)
class MonthlyStatement:
    """Commission statement of one actor for one calendar month."""

    year: int
    month: int
    actor_id: str
    actor_name: Optional[str]
    summary: CommissionSummary
    breakdown: List[ChannelBreakdown] = field(default_factory=list)
    top_organizations: List[TopOrganization] = field(default_factory=list)

    @property
    def total_commission(self) -> float:
        return self.summary.total_commission

    @property
    def total_revenue(self) -> float:
        return self.summary.total_revenue

    @property
    def total_transactions(self) -> int:
        return self.summary.total_transactions


@dataclass(frozen=True)
class ActorPerformance:
    """One row of an actor ranking.

    Attributes:
        rank: 1-based position after sorting by total_commission, largest
            first. Ties keep input order.
        commission_efficiency: total_commission / total_revenue * 100.
    """

    actor_id: str
    actor_name: Optional[str]
    total_commission: float
    total_revenue: float
    total_transactions: int
    average_commission: float
    commission_efficiency: float
    rank: int


@dataclass(frozen=True)
class ComparisonTotals:
    """Totals over all ranked actors; average_efficiency is the plain mean."""

    total_commission: float = 0.0
    total_revenue: float = 0.0
    total_transactions: int = 0
    average_efficiency: float = 0.0


@dataclass(frozen=True)
class ActorComparison:
    """Actor ranking over a window.

    Attributes:
        actors: Ranked rows, largest commission first.
        period_start: Start bound as given, or "All Time".
        period_end: End bound as given, or "All Time".
        summary: Totals over all ranked actors.
    """

    actors: List[ActorPerformance]
    period_start: str
    period_end: str
    summary: ComparisonTotals


@dataclass(frozen=True)
class InactiveActor:
    """An actor with no eligible records in a window.

    last_transaction_date is the latest occurred_at of the actor over the
    whole snapshot, eligible or not.
    """

    actor_id: str
    actor_name: Optional[str]
    last_transaction_date: Optional[datetime]


@dataclass(frozen=True)
class CommissionEfficiency:
    """Efficiency metrics of one actor over a window.

    Attributes:
        commission_efficiency: Commission as % of revenue after costs.
        cost_efficiency: Revenue after costs as % of gross revenue.
    """

    actor_id: str
    actor_name: Optional[str]
    total_commission: float = 0.0
    total_revenue: float = 0.0
    revenue_after_costs: float = 0.0
    commission_efficiency: float = 0.0
    cost_efficiency: float = 0.0
    average_commission_per_transaction: float = 0.0
    average_revenue_per_transaction: float = 0.0


# =============================================================================
# Helpers
# =============================================================================


def _in_window(records: Sequence[TransactionRecord], window: DateRange) -> List[TransactionRecord]:
    if window.is_unbounded:
        return list(records)
    return [r for r in records if window.contains(r.occurred_at)]


def _actor_rows(
    records: Sequence[TransactionRecord], actor_id: str, window: DateRange
) -> List[TransactionRecord]:
    """Eligible records of one actor inside the window."""
    own = [r for r in records if r.actor_id == actor_id]
    return eligible(_in_window(own, window))


def _actor_name(records: Sequence[TransactionRecord], actor_id: str) -> Optional[str]:
    for record in records:
        if record.actor_id == actor_id and record.actor_name:
            return record.actor_name
    return None


def _actor_names(records: Sequence[TransactionRecord]) -> Dict[str, Optional[str]]:
    """actor_id -> first known display name, in order of first appearance."""
    names: Dict[str, Optional[str]] = {}
    for record in records:
        if names.get(record.actor_id) is None:
            names[record.actor_id] = record.actor_name or None
    return names


def _summarize_rows(rows: Sequence[TransactionRecord]) -> CommissionSummary:
    if not rows:
        return CommissionSummary()
    totals: GroupTotals = aggregate(rows, lambda r: "all")["all"]
    revenue_after_costs = sum(r.revenue_after_costs for r in rows)
    return CommissionSummary(
        total_commission=totals.commission_total,
        total_revenue=totals.revenue_total,
        total_transactions=totals.transaction_count,
        average_commission=totals.average_commission,
        commission_rate=safe_percentage(totals.commission_total, revenue_after_costs),
        revenue_after_costs=revenue_after_costs,
        efficiency=safe_percentage(totals.commission_total, totals.revenue_total),
    )


def _channel_breakdown(
    rows: Sequence[TransactionRecord], config: AnalyticsConfig
) -> List[ChannelBreakdown]:
    names: Dict[str, str] = {}
    for record in rows:
        if record.payment_channel_name and record.payment_channel_id not in names:
            names[record.payment_channel_id] = record.payment_channel_name

    breakdown = [
        ChannelBreakdown(
            payment_channel_id=channel_id,
            payment_channel_name=names.get(channel_id) or config.channel_name(channel_id),
            total_commission=totals.commission_total,
            total_revenue=totals.revenue_total,
            transaction_count=totals.transaction_count,
            average_commission=totals.average_commission,
            commission_rate=safe_percentage(totals.commission_total, totals.revenue_total),
        )
        for channel_id, totals in aggregate(rows, lambda r: r.payment_channel_id).items()
    ]
    return sorted(breakdown, key=lambda b: b.total_commission, reverse=True)


# =============================================================================
# Public functions
# =============================================================================


def summarize_actor(
    records: Sequence[TransactionRecord],
    actor_id: str,
    date_range: Any = None,
) -> CommissionSummary:
    """Summarize the commission of one actor.

    Args:
        records: Snapshot of transaction records.
        actor_id: Actor to summarize.
        date_range: Optional DateRange or (start, end) ISO-8601 pair; bounds
            are inclusive and None means open.

    Returns:
        CommissionSummary; zeroed when the actor has no eligible records in
        the window.

    Raises:
        InputShapeError: If records, actor_id or date_range is malformed.

    Examples:
        >>> summary = summarize_actor(records, "emp-7", ("2025-01-01", "2025-03-31"))
        >>> round(summary.efficiency, 2)
        5.25
    """
    records = ensure_records(records)
    actor_id = ensure_identifier(actor_id, "actor_id")
    window = coerce_date_range(date_range)
    rows = _actor_rows(records, actor_id, window)
    logger.debug("Summarizing %d eligible record(s) for actor %s", len(rows), actor_id)
    return _summarize_rows(rows)


def payment_channel_breakdown(
    records: Sequence[TransactionRecord],
    actor_id: str,
    date_range: Any = None,
    config: Optional[AnalyticsConfig] = None,
) -> List[ChannelBreakdown]:
    """Commission of one actor per payment channel, largest commission first."""
    records = ensure_records(records)
    actor_id = ensure_identifier(actor_id, "actor_id")
    window = coerce_date_range(date_range)
    config = config or AnalyticsConfig()
    return _channel_breakdown(_actor_rows(records, actor_id, window), config)


def generate_statement(
    records: Sequence[TransactionRecord],
    actor_id: str,
    year: int,
    month: int,
    config: Optional[AnalyticsConfig] = None,
) -> MonthlyStatement:
    """Build the monthly commission statement of one actor.

    The statement holds the month's summary, the payment-channel breakdown
    (largest commission first) and the top organizations by commission
    (config.top_organizations, 5 by default).

    Raises:
        InputShapeError: If year/month is not a valid calendar month or any
            other argument is malformed.
    """
    records = ensure_records(records)
    actor_id = ensure_identifier(actor_id, "actor_id")
    window = month_range(year, month)
    config = config or AnalyticsConfig()

    rows = _actor_rows(records, actor_id, window)
    if not rows:
        logger.info("No eligible records for actor %s in %04d-%02d", actor_id, year, month)
        return MonthlyStatement(
            year=year,
            month=month,
            actor_id=actor_id,
            actor_name=_actor_name(records, actor_id),
            summary=CommissionSummary(),
        )

    org_names: Dict[str, str] = {}
    for record in rows:
        org_names.setdefault(record.organization_id, record.organization_label)

    organizations = [
        TopOrganization(
            organization_id=org_id,
            organization_name=org_names[org_id],
            commission=totals.commission_total,
            revenue=totals.revenue_total,
            transactions=totals.transaction_count,
        )
        for org_id, totals in aggregate(rows, lambda r: r.organization_id).items()
    ]
    organizations.sort(key=lambda o: o.commission, reverse=True)

    statement = MonthlyStatement(
        year=year,
        month=month,
        actor_id=actor_id,
        actor_name=_actor_name(rows, actor_id) or _actor_name(records, actor_id),
        summary=_summarize_rows(rows),
        breakdown=_channel_breakdown(rows, config),
        top_organizations=organizations[: config.top_organizations],
    )
    logger.info(
        "Statement %04d-%02d for actor %s: %d transaction(s)",
        year,
        month,
        actor_id,
        statement.total_transactions,
    )
    return statement


def compare_actors(
    records: Sequence[TransactionRecord],
    date_range: Any = None,
) -> ActorComparison:
    """Rank all actors with eligible records in the window by commission.

    Ranks are 1-based and assigned after a stable sort, so tied actors keep
    the order in which they first appear in records.

    Examples:
        >>> comparison = compare_actors(records, ("2025-01-01", "2025-03-31"))
        >>> [(a.actor_id, a.rank) for a in comparison.actors]
        [('A', 1), ('B', 2)]
    """
    records = ensure_records(records)
    window = coerce_date_range(date_range)
    names = _actor_names(records)

    totals = aggregate(_in_window(records, window), lambda r: r.actor_id)
    ordered = sorted(totals.items(), key=lambda item: item[1].commission_total, reverse=True)
    actors = [
        ActorPerformance(
            actor_id=actor_id,
            actor_name=names.get(actor_id),
            total_commission=group.commission_total,
            total_revenue=group.revenue_total,
            total_transactions=group.transaction_count,
            average_commission=group.average_commission,
            commission_efficiency=safe_percentage(group.commission_total, group.revenue_total),
            rank=index + 1,
        )
        for index, (actor_id, group) in enumerate(ordered)
    ]

    summary = ComparisonTotals(
        total_commission=sum(a.total_commission for a in actors),
        total_revenue=sum(a.total_revenue for a in actors),
        total_transactions=sum(a.total_transactions for a in actors),
        average_efficiency=safe_ratio(
            sum(a.commission_efficiency for a in actors), len(actors)
        ),
    )
    period_start, period_end = window.label()
    logger.info("Ranked %d actor(s) for %s to %s", len(actors), period_start, period_end)
    return ActorComparison(
        actors=actors, period_start=period_start, period_end=period_end, summary=summary
    )


def find_inactive(
    records: Sequence[TransactionRecord],
    date_range: Any = None,
) -> List[InactiveActor]:
    """List actors with no eligible records in the window.

    Actors come from the full snapshot in order of first appearance. Each is
    annotated with its latest transaction timestamp over the full snapshot.
    """
    records = ensure_records(records)
    window = coerce_date_range(date_range)

    active = {r.actor_id for r in eligible(_in_window(records, window))}
    names = _actor_names(records)
    last_seen: Dict[str, datetime] = {}
    for record in records:
        current = last_seen.get(record.actor_id)
        if current is None or record.occurred_at > current:
            last_seen[record.actor_id] = record.occurred_at

    inactive = [
        InactiveActor(
            actor_id=actor_id,
            actor_name=name,
            last_transaction_date=last_seen.get(actor_id),
        )
        for actor_id, name in names.items()
        if actor_id not in active
    ]
    logger.info("%d of %d actor(s) inactive in window", len(inactive), len(names))
    return inactive


def calculate_efficiency(
    records: Sequence[TransactionRecord],
    actor_id: str,
    date_range: Any = None,
) -> CommissionEfficiency:
    """Efficiency metrics of one actor; zeroed when there is no activity."""
    records = ensure_records(records)
    actor_id = ensure_identifier(actor_id, "actor_id")
    window = coerce_date_range(date_range)

    rows = _actor_rows(records, actor_id, window)
    summary = _summarize_rows(rows)
    count = summary.total_transactions
    return CommissionEfficiency(
        actor_id=actor_id,
        actor_name=_actor_name(records, actor_id),
        total_commission=summary.total_commission,
        total_revenue=summary.total_revenue,
        revenue_after_costs=summary.revenue_after_costs,
        commission_efficiency=safe_percentage(summary.total_commission, summary.revenue_after_costs),
        cost_efficiency=safe_percentage(summary.revenue_after_costs, summary.total_revenue),
        average_commission_per_transaction=safe_ratio(summary.total_commission, count),
        average_revenue_per_transaction=safe_ratio(summary.total_revenue, count),
    )


class CommissionSummaryBuilder:
    """Summary functions bound to one snapshot and one configuration.

    Example:
        >>> builder = CommissionSummaryBuilder(records, AnalyticsConfig())
        >>> builder.statement("emp-7", 2025, 1).total_commission
        1250.0
        >>> builder.inactive(("2025-03-01", "2025-03-31"))
        [InactiveActor(actor_id='emp-9', ...)]
    """

    def __init__(
        self,
        records: Sequence[TransactionRecord],
        config: Optional[AnalyticsConfig] = None,
    ) -> None:
        self._records = ensure_records(records)
        self._config = config or AnalyticsConfig()

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return self._records

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    def summarize(self, actor_id: str, date_range: Any = None) -> CommissionSummary:
        return summarize_actor(self._records, actor_id, date_range)

    def channel_breakdown(self, actor_id: str, date_range: Any = None) -> List[ChannelBreakdown]:
        return payment_channel_breakdown(self._records, actor_id, date_range, self._config)

    def statement(self, actor_id: str, year: int, month: int) -> MonthlyStatement:
        return generate_statement(self._records, actor_id, year, month, self._config)

    def compare(self, date_range: Any = None) -> ActorComparison:
        return compare_actors(self._records, date_range)

    def inactive(self, date_range: Any = None) -> List[InactiveActor]:
        return find_inactive(self._records, date_range)

    def efficiency(self, actor_id: str, date_range: Any = None) -> CommissionEfficiency:
        return calculate_efficiency(self._records, actor_id, date_range)
