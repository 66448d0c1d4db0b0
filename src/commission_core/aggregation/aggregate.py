"""Group eligible transactions by dimension keys.

Each call is one flat pass over a fresh frame: records are filtered to the
revenue-eligible subset, tagged with the key returned by a dimension function,
and summed per key. Independent dimensions (actor, organization, channel) run
as separate passes, so each result is directly chart-ready.

Grain of the result: one GroupTotals per distinct key, in order of first
appearance. Amounts are never rounded here; rounding belongs to presentation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from commission_core.exceptions import InputShapeError
from commission_core.records import FRAME_COLUMNS, TransactionRecord, ensure_records

logger = logging.getLogger(__name__)

KeyFn = Callable[[TransactionRecord], Hashable]


@dataclass(frozen=True)
class GroupTotals:
    """Totals for one group.

    Attributes:
        commission_total: Sum of applied_commission_amount.
        revenue_total: Sum of gross_amount.
        transaction_count: Number of eligible records in the group.
        average_commission: commission_total / transaction_count.
    """

    commission_total: float
    revenue_total: float
    transaction_count: int
    average_commission: float


def eligible(records: Sequence[TransactionRecord]) -> List[TransactionRecord]:
    """Return the revenue-eligible subset, preserving order."""
    return [r for r in records if r.is_revenue_eligible]


def aggregate(records: Sequence[TransactionRecord], key_fn: KeyFn) -> Dict[Hashable, GroupTotals]:
    """Sum commission and revenue of eligible records per dimension key.

    Args:
        records: Snapshot of transaction records.
        key_fn: Function returning the group key of a record. Return a tuple
            to group by several dimensions at once.

    Returns:
        Mapping of key to GroupTotals, in order of first appearance. Empty
        when there are no eligible records.

    Raises:
        InputShapeError: If records is malformed, key_fn is not callable, or
            key_fn returns an unhashable key.

    Examples:
        >>> totals = aggregate(records, lambda r: r.actor_id)
        >>> totals["A"].transaction_count
        2
    """
    records = ensure_records(records)
    if not callable(key_fn):
        raise InputShapeError(f"key_fn must be callable, got {type(key_fn).__name__}")

    rows = eligible(records)
    if not rows:
        logger.debug("No eligible records to aggregate (%d input records)", len(records))
        return {}

    # Integer codes per key keep arbitrary hashable keys (tuples included)
    # out of pandas' index machinery.
    key_codes: Dict[Hashable, int] = {}
    codes = []
    for record in rows:
        key = key_fn(record)
        try:
            codes.append(key_codes.setdefault(key, len(key_codes)))
        except TypeError as e:
            raise InputShapeError(f"key_fn returned an unhashable key: {key!r}") from e

    frame = pd.DataFrame(
        {
            "code": codes,
            "commission": [r.applied_commission_amount for r in rows],
            "revenue": [r.gross_amount for r in rows],
        }
    )
    grouped = frame.groupby("code", sort=True).agg(
        commission_total=("commission", "sum"),
        revenue_total=("revenue", "sum"),
        transaction_count=("commission", "size"),
    )

    keys = list(key_codes)
    result: Dict[Hashable, GroupTotals] = {}
    for code, row in grouped.iterrows():
        count = int(row["transaction_count"])
        commission_total = float(row["commission_total"])
        result[keys[code]] = GroupTotals(
            commission_total=commission_total,
            revenue_total=float(row["revenue_total"]),
            transaction_count=count,
            average_commission=commission_total / count if count > 0 else 0.0,
        )

    logger.debug("Aggregated %d eligible record(s) into %d group(s)", len(rows), len(result))
    return result


def by_actor(records: Sequence[TransactionRecord]) -> Dict[Hashable, GroupTotals]:
    """Aggregate eligible records per actor_id."""
    return aggregate(records, lambda r: r.actor_id)


def by_organization(records: Sequence[TransactionRecord]) -> Dict[Hashable, GroupTotals]:
    """Aggregate eligible records per organization_id."""
    return aggregate(records, lambda r: r.organization_id)


def by_payment_channel(records: Sequence[TransactionRecord]) -> Dict[Hashable, GroupTotals]:
    """Aggregate eligible records per payment_channel_id."""
    return aggregate(records, lambda r: r.payment_channel_id)


def by_fields(
    records: Sequence[TransactionRecord], *field_names: str
) -> Dict[Hashable, GroupTotals]:
    """Aggregate eligible records by one or more record attributes.

    With a single field the keys are plain values; with several fields the
    keys are tuples in field order.

    Raises:
        InputShapeError: If no field is given or a field is not a record column.

    Examples:
        >>> by_fields(records, "actor_id", "organization_id")[("A", "Acme")]
        GroupTotals(...)
    """
    if not field_names:
        raise InputShapeError("by_fields requires at least one field name")
    unknown = [name for name in field_names if name not in FRAME_COLUMNS]
    if unknown:
        raise InputShapeError(f"Unknown record field(s): {unknown}")
    if len(field_names) == 1:
        name = field_names[0]
        return aggregate(records, lambda r: getattr(r, name))
    return aggregate(records, lambda r: tuple(getattr(r, name) for name in field_names))


def totals_to_frame(
    totals: Dict[Hashable, GroupTotals],
    key_names: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Convert an aggregate() result into a chart-ready DataFrame.

    Args:
        totals: Result of aggregate() or one of its convenience passes.
        key_names: Column name(s) for the key. Defaults to ["key"]; give one
            name per element when keys are tuples.

    Returns:
        DataFrame with the key column(s) followed by commission_total,
        revenue_total, transaction_count, average_commission, sorted
        descending by commission_total.
    """
    key_names = list(key_names or ["key"])
    value_columns = ["commission_total", "revenue_total", "transaction_count", "average_commission"]
    rows = []
    for key, group in totals.items():
        key_values = key if isinstance(key, tuple) and len(key_names) > 1 else (key,)
        if len(key_values) != len(key_names):
            raise InputShapeError(
                f"Key {key!r} does not match key_names {key_names}"
            )
        row = dict(zip(key_names, key_values))
        row.update(
            commission_total=group.commission_total,
            revenue_total=group.revenue_total,
            transaction_count=group.transaction_count,
            average_commission=group.average_commission,
        )
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=key_names + value_columns)

    df = pd.DataFrame(rows, columns=key_names + value_columns)
    return df.sort_values("commission_total", ascending=False, kind="stable").reset_index(drop=True)
