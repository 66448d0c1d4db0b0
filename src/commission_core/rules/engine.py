"""Tiered commission rules.

A rule table is an ordered list of amount ranges, each with a rate. Matching
sorts the table by min_amount; every rule except the last covers
[min_amount, max_amount) and the last one covers [min_amount, max_amount], so
the top of the table is never left unmatched. An amount that no rule covers
gets rate 0: no commission is a valid outcome.

Example:
    >>> rules = [
    ...     CommissionRule(0, 1000, 0.05),
    ...     CommissionRule(1000, 5000, 0.06),
    ...     CommissionRule(5000, math.inf, 0.07),
    ... ]
    >>> apply_rules(1000, rules)
    0.06
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, List

from commission_core.exceptions import InputShapeError, RuleSetError
from commission_core.validation import ValidationResult, is_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommissionRule:
    """One tier of a commission table.

    Attributes:
        min_amount: Lower bound (inclusive).
        max_amount: Upper bound (exclusive, inclusive for the last tier).
            May be math.inf.
        rate: Commission rate in [0, 1].
    """

    min_amount: float
    max_amount: float
    rate: float


def _sort_key(rule: CommissionRule) -> tuple[int, float]:
    # non-numeric bounds sort last so validate_rule_set can report them
    if is_number(rule.min_amount):
        return (0, rule.min_amount)
    return (1, 0.0)


def _ensure_rules(rules: Any) -> List[CommissionRule]:
    if isinstance(rules, (str, bytes)) or not isinstance(rules, Sequence):
        raise InputShapeError(
            f"Invalid rules: expected a sequence of CommissionRule, got {type(rules).__name__}"
        )
    for index, rule in enumerate(rules):
        if not isinstance(rule, CommissionRule):
            raise InputShapeError(
                f"Invalid rules[{index}]: expected CommissionRule, got {type(rule).__name__}"
            )
    return sorted(rules, key=_sort_key)


def apply_rules(amount: float, rules: Sequence[CommissionRule]) -> float:
    """Return the commission rate for amount under a tiered rule table.

    Args:
        amount: Transaction amount.
        rules: Rule table in any order.

    Returns:
        Rate of the matching rule, or 0.0 if none matches (or rules is empty).

    Raises:
        InputShapeError: If amount is not a number or rules holds other objects.
    """
    if not is_number(amount) or math.isnan(amount):
        raise InputShapeError(f"Invalid amount: expected a number, got {amount!r}")
    sorted_rules = _ensure_rules(rules)
    if not sorted_rules:
        return 0.0
    for rule in sorted_rules:
        if not (is_number(rule.min_amount) and is_number(rule.max_amount) and is_number(rule.rate)):
            raise InputShapeError(f"Invalid rule {rule!r}: bounds and rate must be numbers")

    last_index = len(sorted_rules) - 1
    for index, rule in enumerate(sorted_rules):
        if index == last_index:
            below_max = amount <= rule.max_amount
        else:
            below_max = amount < rule.max_amount
        if amount >= rule.min_amount and below_max:
            return rule.rate

    logger.debug("No commission rule matches amount %s", amount)
    return 0.0


def validate_rule_set(rules: Sequence[CommissionRule]) -> ValidationResult:
    """Check that a rule table is complete and consistent.

    Requires at least one rule; every rate in [0, 1]; every amount >= 0;
    min_amount < max_amount per rule; and, after sorting, each rule's
    max_amount equal to the next rule's min_amount. Every gap and every
    overlap is reported. Never raises.

    Returns:
        ValidationResult listing every violation.
    """
    try:
        sorted_rules = _ensure_rules(rules)
    except InputShapeError as e:
        return ValidationResult.from_errors([str(e)])

    errors: List[str] = []
    if not sorted_rules:
        errors.append("At least one commission rule is required")
        return ValidationResult.from_errors(errors)

    for index, rule in enumerate(sorted_rules):
        label = f"Rule {index + 1} [{rule.min_amount}, {rule.max_amount}]"
        numeric = True
        for name in ("min_amount", "max_amount", "rate"):
            value = getattr(rule, name)
            if not is_number(value) or math.isnan(value):
                errors.append(f"{label}: {name} must be a number")
                numeric = False
        if not numeric:
            continue
        if rule.rate < 0 or rule.rate > 1:
            errors.append(f"{label}: rate must be between 0 and 1, got {rule.rate}")
        if rule.min_amount < 0 or rule.max_amount < 0:
            errors.append(f"{label}: amounts must be non-negative")
        if rule.min_amount >= rule.max_amount:
            errors.append(f"{label}: min_amount must be less than max_amount")

    for index, (current, following) in enumerate(zip(sorted_rules, sorted_rules[1:])):
        if not (is_number(current.max_amount) and is_number(following.min_amount)):
            continue
        if current.max_amount < following.min_amount:
            errors.append(
                f"Gap between rule {index + 1} and rule {index + 2}: "
                f"{current.max_amount} to {following.min_amount} is not covered"
            )
        elif current.max_amount > following.min_amount:
            overlap_end = current.max_amount
            if is_number(following.max_amount):
                overlap_end = min(current.max_amount, following.max_amount)
            errors.append(
                f"Overlap between rule {index + 1} and rule {index + 2}: "
                f"{following.min_amount} to {overlap_end} is covered twice"
            )

    return ValidationResult.from_errors(errors)


class CommissionRuleEngine:
    """A rule table bound to an engine instance.

    Pass the engine to whatever needs rates instead of reaching for a shared
    table.

    Example:
        >>> engine = CommissionRuleEngine(rules, strict=True)
        >>> engine.rate_for(7500)
        0.07
        >>> engine.commission_for(7500)
        525.0
    """

    def __init__(self, rules: Sequence[CommissionRule], strict: bool = False) -> None:
        """Initialize the engine.

        Args:
            rules: Rule table in any order.
            strict: If True, reject an invalid table immediately.

        Raises:
            RuleSetError: If strict is True and the table is invalid.
        """
        self._rules = tuple(_ensure_rules(rules))
        if strict:
            result = validate_rule_set(self._rules)
            if not result.is_valid:
                raise RuleSetError(result.errors)

    @property
    def rules(self) -> tuple[CommissionRule, ...]:
        """Rules sorted by min_amount."""
        return self._rules

    def validate(self) -> ValidationResult:
        return validate_rule_set(self._rules)

    def rate_for(self, amount: float) -> float:
        return apply_rules(amount, self._rules)

    def commission_for(self, amount: float) -> float:
        """Commission for amount (amount x rate), not rounded."""
        return amount * self.rate_for(amount)
