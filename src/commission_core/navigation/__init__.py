"""Drill-down navigation.

- **drilldown**: the DrillDownNavigator state machine and its immutable
  DrillDownState.
- **details**: figures for the current view (segment totals, breakdowns,
  monthly trend, day transactions).

Example:
    >>> from commission_core.navigation import DrillDownNavigator, describe
    >>>
    >>> nav = DrillDownNavigator(records)
    >>> state = nav.select_organization("Acme")
    >>> details = describe(state, nav.snapshot)
"""

from commission_core.navigation.details import (
    SegmentDetails,
    TransactionDayDetails,
    describe,
    recent_transactions,
)
from commission_core.navigation.drilldown import (
    DrillDownNavigator,
    DrillDownState,
    ViewLevel,
)

__all__ = [
    "DrillDownNavigator",
    "DrillDownState",
    "SegmentDetails",
    "TransactionDayDetails",
    "ViewLevel",
    "describe",
    "recent_transactions",
]
