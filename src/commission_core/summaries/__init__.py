"""Commission summaries, monthly statements and actor rankings.

Example:
    >>> from commission_core.summaries import CommissionSummaryBuilder
    >>>
    >>> builder = CommissionSummaryBuilder(records)
    >>> statement = builder.statement("emp-7", 2025, 1)
    >>> ranking = builder.compare(("2025-01-01", "2025-03-31"))
"""

from commission_core.summaries.builder import (
    ActorComparison,
    ActorPerformance,
    ChannelBreakdown,
    CommissionEfficiency,
    CommissionSummary,
    CommissionSummaryBuilder,
    ComparisonTotals,
    InactiveActor,
    MonthlyStatement,
    TopOrganization,
    calculate_efficiency,
    compare_actors,
    find_inactive,
    generate_statement,
    payment_channel_breakdown,
    summarize_actor,
)

__all__ = [
    "ActorComparison",
    "ActorPerformance",
    "ChannelBreakdown",
    "CommissionEfficiency",
    "CommissionSummary",
    "CommissionSummaryBuilder",
    "ComparisonTotals",
    "InactiveActor",
    "MonthlyStatement",
    "TopOrganization",
    "calculate_efficiency",
    "compare_actors",
    "find_inactive",
    "generate_statement",
    "payment_channel_breakdown",
    "summarize_actor",
]
