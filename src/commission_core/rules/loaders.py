"""Loading commission rule tables from configuration.

Rule files are JSON arrays of objects:

    [
        {"min_amount": 0, "max_amount": 1000, "rate": 0.05},
        {"min_amount": 1000, "max_amount": 5000, "rate": 0.06},
        {"min_amount": 5000, "max_amount": null, "rate": 0.07}
    ]

A null (or "inf") max_amount means the tier is open-ended. camelCase keys
(minAmount, maxAmount) are accepted too.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List

from commission_core.exceptions import ConfigError
from commission_core.rules.engine import CommissionRule

logger = logging.getLogger(__name__)

_KEY_ALIASES = {"minAmount": "min_amount", "maxAmount": "max_amount"}


def _to_amount(value: Any, key: str, index: int) -> float:
    if value is None or (isinstance(value, str) and value.strip().lower() in {"inf", "infinity"}):
        if key == "max_amount":
            return math.inf
        raise ConfigError(f"Rule {index + 1}: {key} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Rule {index + 1}: {key} must be a number, got {value!r}")
    return float(value)


def rules_from_dicts(items: Iterable[Dict[str, Any]]) -> List[CommissionRule]:
    """Build CommissionRule objects from plain dictionaries.

    The result is not validated for gaps or overlaps; use validate_rule_set
    or CommissionRuleEngine(strict=True) for that.

    Raises:
        ConfigError: If an item is malformed.
    """
    rules: List[CommissionRule] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigError(f"Rule {index + 1}: expected an object, got {type(item).__name__}")
        normalized = {_KEY_ALIASES.get(k, k): v for k, v in item.items()}
        if "rate" not in normalized:
            raise ConfigError(f"Rule {index + 1}: rate is required")
        rate = normalized["rate"]
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise ConfigError(f"Rule {index + 1}: rate must be a number, got {rate!r}")
        rules.append(
            CommissionRule(
                min_amount=_to_amount(normalized.get("min_amount"), "min_amount", index),
                max_amount=_to_amount(normalized.get("max_amount"), "max_amount", index),
                rate=float(rate),
            )
        )
    return rules


def load_rules_from_json(path: str | Path) -> List[CommissionRule]:
    """Load a commission rule table from a JSON file.

    Args:
        path: Path to the JSON rule file.

    Returns:
        List of CommissionRule in file order.

    Raises:
        ConfigError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not load commission rules from {path}: {e}") from e
    if not isinstance(data, list):
        raise ConfigError(f"Commission rules in {path} must be a JSON array")
    rules = rules_from_dicts(data)
    logger.info("Loaded %d commission rule(s) from %s", len(rules), path)
    return rules
