"""Transaction aggregation.

- **aggregate**: per-key commission/revenue totals over the eligible subset,
  one flat pass per dimension (actor, organization, payment channel, or any
  tuple of record fields).
- **breakdowns**: organization and payment-channel revenue tables with
  revenue share, as DataFrames.

Example:
    >>> from commission_core.aggregation import by_actor, totals_to_frame
    >>>
    >>> totals = by_actor(records)
    >>> chart_df = totals_to_frame(totals, key_names=["actor_id"])
"""

from commission_core.aggregation.aggregate import (
    GroupTotals,
    aggregate,
    by_actor,
    by_fields,
    by_organization,
    by_payment_channel,
    eligible,
    totals_to_frame,
)
from commission_core.aggregation.breakdowns import (
    organization_performance,
    payment_channel_analysis,
)

__all__ = [
    "GroupTotals",
    "aggregate",
    "by_actor",
    "by_fields",
    "by_organization",
    "by_payment_channel",
    "eligible",
    "organization_performance",
    "payment_channel_analysis",
    "totals_to_frame",
]
