"""Console output formatting utilities.

This is the presentation boundary: monetary values are rounded to 2
decimals here and nowhere else.
"""

from __future__ import annotations

import calendar
import re

from commission_core.navigation.drilldown import DrillDownState
from commission_core.summaries.builder import ActorComparison, CommissionSummary, MonthlyStatement
from commission_core.timeseries.summary import TrendSummary


def sanitize_for_console(text: str) -> str:
    """Remove non-ASCII characters and HTML tags from text.

    Display names come from external systems and may hold characters a
    cp1252 Windows console cannot encode.

    Args:
        text: Text that may contain non-ASCII characters and HTML tags.

    Returns:
        Text safe for console output.
    """
    text = re.sub(r"[^\x00-\x7F]+", "", text)
    text = re.sub(r"<[^>]+>", "", text)
    return text


def format_money(value: float) -> str:
    """Format a monetary value with 2 decimals and thousands separators.

    Examples:
        >>> format_money(1234.5)
        '$1,234.50'
        >>> format_money(-12.5)
        '-$12.50'
    """
    rounded = round(value, 2)
    if rounded < 0:
        return f"-${-rounded:,.2f}"
    return f"${rounded:,.2f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def format_summary(summary: CommissionSummary) -> str:
    lines = [
        f"Total commission:    {format_money(summary.total_commission)}",
        f"Total revenue:       {format_money(summary.total_revenue)}",
        f"Revenue after costs: {format_money(summary.revenue_after_costs)}",
        f"Transactions:        {summary.total_transactions}",
        f"Average commission:  {format_money(summary.average_commission)}",
        f"Commission rate:     {format_percent(summary.commission_rate)}",
        f"Efficiency:          {format_percent(summary.efficiency)}",
    ]
    return "\n".join(lines)


def format_statement(statement: MonthlyStatement) -> str:
    """Build a human-readable monthly commission statement.

    Args:
        statement: Result of generate_statement().

    Returns:
        Text for console output.
    """
    actor = sanitize_for_console(statement.actor_name or statement.actor_id)
    lines = []
    lines.append(
        f"Commission Statement - {actor} - "
        f"{calendar.month_name[statement.month]} {statement.year}"
    )
    lines.append("=" * 60)

    if statement.total_transactions == 0:
        lines.append("No eligible transactions in this month.")
        return "\n".join(lines)

    lines.append(format_summary(statement.summary))
    lines.append("")

    lines.append("By payment channel:")
    for channel in statement.breakdown:
        name = sanitize_for_console(channel.payment_channel_name)
        lines.append(
            f"  {name}: {format_money(channel.total_commission)} "
            f"on {format_money(channel.total_revenue)} "
            f"({channel.transaction_count} transactions, "
            f"{format_percent(channel.commission_rate)})"
        )
    lines.append("")

    lines.append("Top organizations:")
    for position, org in enumerate(statement.top_organizations, start=1):
        name = sanitize_for_console(org.organization_name)
        lines.append(
            f"  {position}. {name}: {format_money(org.commission)} "
            f"({org.transactions} transactions)"
        )

    return "\n".join(lines)


def format_comparison(comparison: ActorComparison) -> str:
    """Build a ranking table of actors."""
    lines = []
    lines.append(f"Actor Ranking ({comparison.period_start} to {comparison.period_end})")
    lines.append("=" * 60)

    if not comparison.actors:
        lines.append("No eligible transactions in this period.")
        return "\n".join(lines)

    for actor in comparison.actors:
        name = sanitize_for_console(actor.actor_name or actor.actor_id)
        lines.append(
            f"{actor.rank:>3}. {name:<24} {format_money(actor.total_commission):>14} "
            f"{format_percent(actor.commission_efficiency):>8}"
        )

    lines.append("-" * 60)
    totals = comparison.summary
    lines.append(f"Total commission:   {format_money(totals.total_commission)}")
    lines.append(f"Total revenue:      {format_money(totals.total_revenue)}")
    lines.append(f"Transactions:       {totals.total_transactions}")
    lines.append(f"Average efficiency: {format_percent(totals.average_efficiency)}")
    return "\n".join(lines)


def format_trend_summary(summary: TrendSummary) -> str:
    lines = [
        f"Total revenue:        {format_money(summary.total_revenue)}",
        f"Transactions:         {summary.total_transactions}",
        f"Avg daily revenue:    {format_money(summary.average_daily_revenue)}",
        f"Avg monthly revenue:  {format_money(summary.average_monthly_revenue)}",
        f"Revenue growth (MoM): {format_percent(summary.revenue_growth_rate)}",
        f"Best day / month:     {summary.best_day or '-'} / {summary.best_month or '-'}",
        f"Worst day / month:    {summary.worst_day or '-'} / {summary.worst_month or '-'}",
        f"Trend:                {summary.trend_direction}",
        f"Seasonality:          {summary.seasonal_pattern}",
    ]
    return "\n".join(lines)


def format_breadcrumb(state: DrillDownState) -> str:
    """Join the breadcrumb labels of a drill-down state.

    Examples:
        >>> format_breadcrumb(nav.select_organization("Acme"))
        'Root > Organizations > Acme'
    """
    return " > ".join(sanitize_for_console(label) for label in state.breadcrumb)
