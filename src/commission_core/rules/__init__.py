"""Tiered commission rules.

Example:
    >>> from commission_core.rules import CommissionRuleEngine, load_rules_from_json
    >>>
    >>> engine = CommissionRuleEngine(load_rules_from_json("rules.json"), strict=True)
    >>> engine.rate_for(1000)
    0.06
"""

from commission_core.rules.engine import (
    CommissionRule,
    CommissionRuleEngine,
    apply_rules,
    validate_rule_set,
)
from commission_core.rules.loaders import load_rules_from_json, rules_from_dicts

__all__ = [
    "CommissionRule",
    "CommissionRuleEngine",
    "apply_rules",
    "load_rules_from_json",
    "rules_from_dicts",
    "validate_rule_set",
]
