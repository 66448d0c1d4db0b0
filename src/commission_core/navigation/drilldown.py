"""Drill-down navigation over a transaction snapshot.

The navigator is a small state machine with four view levels:

    OVERVIEW --select_organization--> ORGANIZATION --select_date--> TRANSACTION
    OVERVIEW --select_payment_channel--> PAYMENT_CHANNEL --select_date--> TRANSACTION

Any level returns to OVERVIEW with reset(). A selection of an organization or
payment channel is allowed from any level and always starts again from the
full snapshot. Each transition replaces one immutable DrillDownState, so the
level, selection, breadcrumb and working set can never disagree.

The navigator keeps one state per breadcrumb step. navigate_to(index) returns
to the deepest step whose breadcrumb ends at or before index: the category
label ("Organizations") collapses to the overview and the organization label
returns to the organization view.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from commission_core.config import AnalyticsConfig
from commission_core.exceptions import InputShapeError, NavigationError
from commission_core.records import TransactionRecord, ensure_identifier, ensure_records
from commission_core.utils import parse_timestamp

logger = logging.getLogger(__name__)


class ViewLevel(str, Enum):
    """Drill-down view levels."""

    OVERVIEW = "overview"
    ORGANIZATION = "organization"
    PAYMENT_CHANNEL = "payment_channel"
    TRANSACTION = "transaction"


@dataclass(frozen=True)
class DrillDownState:
    """One drill-down view.

    Attributes:
        level: Current view level.
        selected_organization: organization_id in focus, if any.
        selected_payment_channel: payment_channel_id in focus, if any.
        selected_date: Day in focus at TRANSACTION level.
        breadcrumb: Labels from the root to the current view.
        working_set: Records visible at this view.
    """

    level: ViewLevel
    breadcrumb: tuple[str, ...]
    working_set: tuple[TransactionRecord, ...]
    selected_organization: Optional[str] = None
    selected_payment_channel: Optional[str] = None
    selected_date: Optional[date] = None

    @property
    def is_overview(self) -> bool:
        return self.level is ViewLevel.OVERVIEW


def _coerce_date(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_timestamp(value).date()


class DrillDownNavigator:
    """Drill-down state machine bound to one snapshot.

    Example:
        >>> nav = DrillDownNavigator(records)
        >>> nav.select_organization("Acme").breadcrumb
        ('Root', 'Organizations', 'Acme')
        >>> nav.select_date("2025-01-15").level
        <ViewLevel.TRANSACTION: 'transaction'>
        >>> nav.navigate_to(0).breadcrumb
        ('Root',)
    """

    def __init__(
        self,
        records: Sequence[TransactionRecord],
        config: Optional[AnalyticsConfig] = None,
    ) -> None:
        self._snapshot = ensure_records(records)
        self._config = config or AnalyticsConfig()
        self._overview = DrillDownState(
            level=ViewLevel.OVERVIEW,
            breadcrumb=(self._config.root_label,),
            working_set=self._snapshot,
        )
        self._stack: List[DrillDownState] = [self._overview]

    @property
    def state(self) -> DrillDownState:
        """Current view."""
        return self._stack[-1]

    @property
    def snapshot(self) -> tuple[TransactionRecord, ...]:
        return self._snapshot

    @property
    def history(self) -> tuple[DrillDownState, ...]:
        """States from the overview to the current view, one per breadcrumb step."""
        return tuple(self._stack)

    def _push(self, state: DrillDownState) -> DrillDownState:
        self._stack.append(state)
        logger.debug(
            "Navigated to %s (%s), %d record(s)",
            state.level.value,
            " > ".join(state.breadcrumb),
            len(state.working_set),
        )
        return state

    def select_organization(self, organization_id: str) -> DrillDownState:
        """Focus on one organization, starting from the full snapshot.

        The breadcrumb label is the organization's display name when the
        records carry one. An organization without records yields an empty
        working set.
        """
        organization_id = ensure_identifier(organization_id, "organization_id")
        working_set = tuple(r for r in self._snapshot if r.organization_id == organization_id)
        label = working_set[0].organization_label if working_set else organization_id
        self._stack = [self._overview]
        return self._push(
            DrillDownState(
                level=ViewLevel.ORGANIZATION,
                selected_organization=organization_id,
                breadcrumb=(self._config.root_label, self._config.organizations_label, label),
                working_set=working_set,
            )
        )

    def select_payment_channel(self, payment_channel_id: Any) -> DrillDownState:
        """Focus on one payment channel, starting from the full snapshot."""
        if isinstance(payment_channel_id, bool) or not isinstance(payment_channel_id, (str, int)):
            raise InputShapeError(
                f"Invalid payment_channel_id: expected a string or integer, got {payment_channel_id!r}"
            )
        channel_id = ensure_identifier(str(payment_channel_id), "payment_channel_id")
        working_set = tuple(r for r in self._snapshot if r.payment_channel_id == channel_id)
        if working_set and working_set[0].payment_channel_name:
            label = working_set[0].payment_channel_name
        else:
            label = self._config.channel_name(channel_id)
        self._stack = [self._overview]
        return self._push(
            DrillDownState(
                level=ViewLevel.PAYMENT_CHANNEL,
                selected_payment_channel=channel_id,
                breadcrumb=(self._config.root_label, self._config.payment_channels_label, label),
                working_set=working_set,
            )
        )

    def select_date(self, day: Any) -> DrillDownState:
        """Focus on one day inside the current organization or channel view.

        The working set is unchanged; day details are derived from it. From
        TRANSACTION level the date replaces the previous one.

        Raises:
            NavigationError: If called from the overview.
            InputShapeError: If day cannot be parsed.
        """
        current = self.state
        if current.level is ViewLevel.OVERVIEW:
            raise NavigationError(
                "select_date requires an organization or payment channel view; "
                "select one from the overview first"
            )
        selected = _coerce_date(day)
        if current.level is ViewLevel.TRANSACTION:
            self._stack.pop()
            current = self.state
        return self._push(
            DrillDownState(
                level=ViewLevel.TRANSACTION,
                selected_organization=current.selected_organization,
                selected_payment_channel=current.selected_payment_channel,
                selected_date=selected,
                breadcrumb=current.breadcrumb + (selected.isoformat(),),
                working_set=current.working_set,
            )
        )

    def reset(self) -> DrillDownState:
        """Return to the overview with the full snapshot."""
        self._stack = [self._overview]
        logger.debug("Drill-down reset to overview")
        return self._overview

    def navigate_to(self, index: int) -> DrillDownState:
        """Jump to a breadcrumb entry.

        Index 0 is the root and equals reset(). Other indices return to the
        deepest view whose breadcrumb ends at or before the entry.

        Raises:
            InputShapeError: If index is not an integer.
            NavigationError: If index is outside the current breadcrumb.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise InputShapeError(f"Invalid breadcrumb index: expected an integer, got {index!r}")
        breadcrumb = self.state.breadcrumb
        if not 0 <= index < len(breadcrumb):
            raise NavigationError(
                f"Breadcrumb index {index} out of range for {len(breadcrumb)} entries"
            )
        if index == 0:
            return self.reset()
        while len(self._stack) > 1 and len(self.state.breadcrumb) > index + 1:
            self._stack.pop()
        logger.debug("Navigated to breadcrumb %d (%s)", index, self.state.level.value)
        return self.state

    def back(self) -> DrillDownState:
        """Go up one view. At the overview this is a no-op."""
        if len(self._stack) > 1:
            self._stack.pop()
        return self.state
