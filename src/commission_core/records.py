"""Transaction record schema.

TransactionRecord is the single input type of the engine: one immutable row of
a snapshot supplied by an external retrieval layer. Raw rows are converted
into records once, at ingestion (see commission_core.ingestion); everything
downstream reads typed attributes instead of probing dictionaries.

Grain:
    One row per financial transaction (actor x organization x payment channel
    x timestamp).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import pandas as pd

from commission_core.exceptions import InputShapeError


class CompletionStatus(str, Enum):
    """Processing status of a transaction."""

    COMPLETED = "completed"
    FAILED = "failed"
    PENDING = "pending"


# Accepted spellings of each field in raw rows -> canonical attribute name
FIELD_ALIASES: Dict[str, str] = {
    "actorId": "actor_id",
    "organizationId": "organization_id",
    "paymentChannelId": "payment_channel_id",
    "grossAmount": "gross_amount",
    "revenueAfterCosts": "revenue_after_costs",
    "appliedCommissionAmount": "applied_commission_amount",
    "appliedCommissionPercentage": "applied_commission_percentage",
    "isRevenueEligible": "is_revenue_eligible",
    "occurredAt": "occurred_at",
    "completionStatus": "completion_status",
    "actorName": "actor_name",
    "organizationName": "organization_name",
    "paymentChannelName": "payment_channel_name",
    "transactionId": "transaction_id",
}

REQUIRED_FIELDS = [
    "actor_id",
    "organization_id",
    "payment_channel_id",
    "gross_amount",
    "revenue_after_costs",
    "applied_commission_amount",
    "applied_commission_percentage",
    "is_revenue_eligible",
    "occurred_at",
    "completion_status",
]

OPTIONAL_FIELDS = [
    "actor_name",
    "organization_name",
    "payment_channel_name",
    "transaction_id",
]

FRAME_COLUMNS = REQUIRED_FIELDS + OPTIONAL_FIELDS


@dataclass(frozen=True)
class TransactionRecord:
    """One financial transaction.

    Attributes:
        actor_id: Commission-earning party (employee or partner).
        organization_id: Organization (company) the transaction belongs to.
        payment_channel_id: Payment channel (method) identifier.
        gross_amount: Gross revenue of the transaction.
        revenue_after_costs: Revenue left after operational costs.
        applied_commission_amount: Commission paid to the actor.
        applied_commission_percentage: Commission rate applied, 0..1.
        is_revenue_eligible: Only eligible records contribute to totals.
        occurred_at: Naive timestamp of the transaction. Aware values are
            converted to UTC on construction.
        completion_status: completed, failed or pending.
        actor_name: Optional display name of the actor.
        organization_name: Optional display name of the organization.
        payment_channel_name: Optional display name of the payment channel.
        transaction_id: Optional identifier from the source system.
    """

    actor_id: str
    organization_id: str
    payment_channel_id: str
    gross_amount: float
    revenue_after_costs: float
    applied_commission_amount: float
    applied_commission_percentage: float
    is_revenue_eligible: bool
    occurred_at: datetime
    completion_status: CompletionStatus = CompletionStatus.COMPLETED
    actor_name: Optional[str] = None
    organization_name: Optional[str] = None
    payment_channel_name: Optional[str] = None
    transaction_id: Optional[str] = None

    def __post_init__(self) -> None:
        # aware timestamps are stored as naive UTC
        occurred_at = self.occurred_at
        if isinstance(occurred_at, datetime) and occurred_at.tzinfo is not None:
            naive = occurred_at.astimezone(timezone.utc).replace(tzinfo=None)
            object.__setattr__(self, "occurred_at", naive)

    @property
    def is_completed(self) -> bool:
        return self.completion_status is CompletionStatus.COMPLETED

    @property
    def organization_label(self) -> str:
        """Display label of the organization (name, else id)."""
        return self.organization_name or self.organization_id


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys of a raw row to canonical snake_case attribute names."""
    return {FIELD_ALIASES.get(key, key): value for key, value in row.items()}


def ensure_records(records: Any, name: str = "records") -> tuple[TransactionRecord, ...]:
    """Check that records is a sequence of TransactionRecord and return it as a tuple.

    Raises:
        InputShapeError: If records is not a list/tuple or contains other objects.
    """
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise InputShapeError(
            f"Invalid {name}: expected a sequence of TransactionRecord, got {type(records).__name__}"
        )
    for index, record in enumerate(records):
        if not isinstance(record, TransactionRecord):
            raise InputShapeError(
                f"Invalid {name}[{index}]: expected TransactionRecord, got {type(record).__name__}"
            )
    return tuple(records)


def ensure_identifier(value: Any, name: str) -> str:
    """Check that value is a non-empty string identifier."""
    if not isinstance(value, str) or not value.strip():
        raise InputShapeError(f"Invalid {name}: expected a non-empty string, got {value!r}")
    return value


def records_to_frame(records: Sequence[TransactionRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per record.

    Columns follow FRAME_COLUMNS plus a helper column 'is_completed'.
    'completion_status' holds plain strings and 'occurred_at' is datetime64.
    An empty input yields an empty frame with the same columns.
    """
    rows = [
        {
            "actor_id": r.actor_id,
            "organization_id": r.organization_id,
            "payment_channel_id": r.payment_channel_id,
            "gross_amount": float(r.gross_amount),
            "revenue_after_costs": float(r.revenue_after_costs),
            "applied_commission_amount": float(r.applied_commission_amount),
            "applied_commission_percentage": float(r.applied_commission_percentage),
            "is_revenue_eligible": bool(r.is_revenue_eligible),
            "occurred_at": r.occurred_at,
            "completion_status": r.completion_status.value,
            "actor_name": r.actor_name,
            "organization_name": r.organization_name,
            "payment_channel_name": r.payment_channel_name,
            "transaction_id": r.transaction_id,
            "is_completed": r.is_completed,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS + ["is_completed"])
    df["occurred_at"] = pd.to_datetime(df["occurred_at"])
    for col in (
        "gross_amount",
        "revenue_after_costs",
        "applied_commission_amount",
        "applied_commission_percentage",
    ):
        df[col] = df[col].astype(float)
    df["is_revenue_eligible"] = df["is_revenue_eligible"].astype(bool)
    df["is_completed"] = df["is_completed"].astype(bool)
    return df
