"""Ingestion gate: raw rows to TransactionRecord.

Rows come from an external retrieval layer as plain mappings. Each row is
validated exactly once here; downstream code only ever sees typed records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from commission_core.exceptions import InputShapeError
from commission_core.records import CompletionStatus, TransactionRecord, normalize_row
from commission_core.utils import parse_timestamp
from commission_core.validation import validate

logger = logging.getLogger(__name__)


@dataclass
class RejectedRow:
    """A raw row that failed validation.

    Attributes:
        index: Position of the row in the input.
        errors: Every violated rule for that row.
        row: The raw row as received.
    """

    index: int
    errors: List[str]
    row: Dict[str, Any]


@dataclass
class IngestResult:
    """Result of ingesting a batch of raw rows.

    Attributes:
        records: Valid rows converted to TransactionRecord, in input order.
        rejected: Rows that failed validation.
    """

    records: List[TransactionRecord] = field(default_factory=list)
    rejected: List[RejectedRow] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.rejected


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _build_record(row: Dict[str, Any]) -> TransactionRecord:
    status = row["completion_status"]
    if not isinstance(status, CompletionStatus):
        status = CompletionStatus(status.strip().lower())
    return TransactionRecord(
        actor_id=row["actor_id"],
        organization_id=row["organization_id"],
        payment_channel_id=str(row["payment_channel_id"]),
        gross_amount=float(row["gross_amount"]),
        revenue_after_costs=float(row["revenue_after_costs"]),
        applied_commission_amount=float(row["applied_commission_amount"]),
        applied_commission_percentage=float(row["applied_commission_percentage"]),
        is_revenue_eligible=bool(row["is_revenue_eligible"]),
        occurred_at=parse_timestamp(row["occurred_at"]),
        completion_status=status,
        actor_name=_optional_str(row.get("actor_name")),
        organization_name=_optional_str(row.get("organization_name")),
        payment_channel_name=_optional_str(row.get("payment_channel_name")),
        transaction_id=_optional_str(row.get("transaction_id")),
    )


def from_mapping(row: Mapping[str, Any]) -> TransactionRecord:
    """Convert one raw row into a TransactionRecord.

    Args:
        row: Mapping with snake_case or camelCase keys.

    Returns:
        TransactionRecord.

    Raises:
        InputShapeError: If row is not a mapping or fails validation. The
            message lists every violated rule.
    """
    if not isinstance(row, Mapping):
        raise InputShapeError(f"Expected a mapping, got {type(row).__name__}")
    result = validate(row)
    if not result.is_valid:
        raise InputShapeError("Invalid transaction row: " + "; ".join(result.errors))
    return _build_record(normalize_row(dict(row)))


def ingest(rows: Iterable[Mapping[str, Any]]) -> IngestResult:
    """Validate a batch of raw rows and convert the valid ones.

    Invalid rows are not an error for the batch: they are reported in
    IngestResult.rejected with their index and errors.

    Args:
        rows: Iterable of raw mappings.

    Returns:
        IngestResult with converted records and rejected rows.

    Raises:
        InputShapeError: If rows is not iterable (or is a string/mapping).
    """
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        raise InputShapeError(f"Expected an iterable of rows, got {type(rows).__name__}")

    result = IngestResult()
    for index, row in enumerate(rows):
        validation = validate(row)
        if not validation.is_valid:
            raw = dict(row) if isinstance(row, Mapping) else {"value": row}
            result.rejected.append(RejectedRow(index=index, errors=validation.errors, row=raw))
            logger.debug("Rejected row %d: %s", index, validation.errors)
            continue
        result.records.append(_build_record(normalize_row(dict(row))))

    if result.rejected:
        logger.warning(
            "Ingested %d record(s), rejected %d invalid row(s)",
            len(result.records),
            len(result.rejected),
        )
    else:
        logger.info("Ingested %d record(s)", len(result.records))
    return result
