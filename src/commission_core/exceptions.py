"""Domain-specific exceptions for commission_core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from CommissionAPIError for easy catching.

Validation-style functions (``validate``, ``validate_rule_set``) never raise;
they return a ValidationResult. The exceptions below are reserved for
programming-level failures: arguments of the wrong shape, broken
configuration, or impossible navigation steps. An empty or inactive dataset is
never an error.
"""

from __future__ import annotations


class CommissionAPIError(Exception):
    """Base exception for all commission_core errors.

    Users can catch this exception to handle any commission_core error.
    """

    pass


class InputShapeError(CommissionAPIError, TypeError):
    """Raised when an argument does not have the expected type or shape.

    This exception is raised when:
    - A record collection is not a sequence of TransactionRecord objects
    - An identifier is not a non-empty string
    - A date bound or calendar month cannot be parsed
    - A raw row fails schema validation during conversion
    """

    pass


class ConfigError(CommissionAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Unknown configuration keys are present
    - Configuration or rule files cannot be loaded or parsed
    """

    pass


class RuleSetError(CommissionAPIError):
    """Raised when a commission rule table is used strictly but is invalid.

    Attributes:
        errors: Every violation found in the rule table (gaps, overlaps,
            out-of-range rates), not just the first one.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid commission rule set: " + "; ".join(self.errors))


class NavigationError(CommissionAPIError):
    """Raised when a drill-down transition is not allowed from the current view."""

    pass
