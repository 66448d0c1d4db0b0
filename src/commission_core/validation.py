"""Structural and numeric validation of a single transaction.

validate() is the one gate every raw row passes through before it becomes a
TransactionRecord. It never raises: every violated rule is collected into one
ValidationResult so that several problems surface together.

Rules:
    - gross_amount, applied_commission_amount: non-negative finite numbers
    - revenue_after_costs: finite number
    - applied_commission_percentage: number in [0, 1]
    - actor_id, organization_id: non-empty strings
    - payment_channel_id: non-empty string or integer
    - is_revenue_eligible: bool (or 0/1)
    - occurred_at: parseable timestamp
    - completion_status: completed, failed or pending
"""

from __future__ import annotations

import numbers
from dataclasses import asdict, dataclass, field
from typing import Any, List, Mapping

import numpy as np

from commission_core.exceptions import InputShapeError
from commission_core.records import CompletionStatus, TransactionRecord, normalize_row
from commission_core.utils import parse_timestamp

NON_NEGATIVE_AMOUNTS = ["gross_amount", "applied_commission_amount"]
SIGNED_AMOUNTS = ["revenue_after_costs"]
IDENTIFIERS = ["actor_id", "organization_id"]


@dataclass
class ValidationResult:
    """Outcome of a validation pass.

    Attributes:
        is_valid: True when no rule was violated.
        errors: Human-readable description of every violated rule.
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> ValidationResult:
        return cls(is_valid=not errors, errors=list(errors))


def is_number(value: Any) -> bool:
    """Return True for real numbers, excluding bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _is_finite_number(value: Any) -> bool:
    return is_number(value) and bool(np.isfinite(float(value)))


def validate(candidate: Any) -> ValidationResult:
    """Validate one transaction candidate.

    Args:
        candidate: A raw mapping (snake_case or camelCase keys) or a
            TransactionRecord.

    Returns:
        ValidationResult listing every violated rule.

    Examples:
        >>> validate({"actor_id": ""}).is_valid
        False
    """
    if isinstance(candidate, TransactionRecord):
        row = asdict(candidate)
    elif isinstance(candidate, Mapping):
        row = normalize_row(dict(candidate))
    else:
        return ValidationResult.from_errors(
            [f"candidate must be a mapping or TransactionRecord, got {type(candidate).__name__}"]
        )

    errors: List[str] = []

    for name in NON_NEGATIVE_AMOUNTS:
        value = row.get(name)
        if value is None:
            errors.append(f"{name} is required")
        elif not _is_finite_number(value) or value < 0:
            errors.append(f"{name} must be a non-negative finite number")

    for name in SIGNED_AMOUNTS:
        value = row.get(name)
        if value is None:
            errors.append(f"{name} is required")
        elif not _is_finite_number(value):
            errors.append(f"{name} must be a finite number")

    rate = row.get("applied_commission_percentage")
    if rate is None:
        errors.append("applied_commission_percentage is required")
    elif not _is_finite_number(rate) or rate < 0 or rate > 1:
        errors.append("applied_commission_percentage must be between 0 and 1")

    for name in IDENTIFIERS:
        value = row.get(name)
        if value is None:
            errors.append(f"{name} is required")
        elif not isinstance(value, str):
            errors.append(f"{name} must be a string")
        elif not value.strip():
            errors.append(f"{name} cannot be empty")

    channel = row.get("payment_channel_id")
    if channel is None:
        errors.append("payment_channel_id is required")
    elif isinstance(channel, bool) or not isinstance(channel, (str, int)):
        errors.append("payment_channel_id must be a string or integer")
    elif isinstance(channel, str) and not channel.strip():
        errors.append("payment_channel_id cannot be empty")

    eligible = row.get("is_revenue_eligible")
    if eligible is None:
        errors.append("is_revenue_eligible is required")
    elif not isinstance(eligible, (bool, np.bool_)) and not (
        isinstance(eligible, numbers.Integral) and eligible in (0, 1)
    ):
        errors.append("is_revenue_eligible must be a boolean")

    occurred_at = row.get("occurred_at")
    if occurred_at is None:
        errors.append("occurred_at is required")
    else:
        try:
            parse_timestamp(occurred_at)
        except InputShapeError:
            errors.append("occurred_at must be a valid timestamp")

    status = row.get("completion_status")
    if status is None:
        errors.append("completion_status is required")
    elif not isinstance(status, CompletionStatus) and (
        not isinstance(status, str)
        or status.strip().lower() not in {s.value for s in CompletionStatus}
    ):
        errors.append("completion_status must be one of: completed, failed, pending")

    return ValidationResult.from_errors(errors)
