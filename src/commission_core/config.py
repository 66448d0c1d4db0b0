"""Unified configuration for commission_core.

This module provides a single configuration class shared by the summary
builder, the time-series bucketer and the drill-down navigator. Components
receive it explicitly; there is no global configuration object.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

from commission_core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAMES: Dict[str, str] = {
    "1": "ACH",
    "2": "Check Payment",
    "3": "Virtual Card",
    "4": "Instant Deposit",
    "999": "Interest",
}


@dataclass
class AnalyticsConfig:
    """Tunable limits and labels used across the analytics engine.

    Attributes:
        daily_limit: Most recent daily points kept in a trend series.
        weekly_limit: Most recent weekly points kept in a trend series.
        monthly_limit: Most recent monthly points kept in a trend series.
        moving_average_window: Trailing window (points) of the daily moving average.
        top_organizations: Organizations listed in a monthly statement.
        top_performers: Organizations listed in an organization performance table.
        recent_transactions: Transactions listed in drill-down details.
        trend_threshold: Month-over-month growth (%) above which a trend is
            "increasing" (and below its negative, "decreasing").
        root_label: First breadcrumb entry of the drill-down navigator.
        organizations_label: Breadcrumb entry preceding a selected organization.
        payment_channels_label: Breadcrumb entry preceding a selected channel.
        channel_names: Display names keyed by payment channel id.
    """

    daily_limit: int = 90
    weekly_limit: int = 52
    monthly_limit: int = 24
    moving_average_window: int = 7
    top_organizations: int = 5
    top_performers: int = 10
    recent_transactions: int = 10
    trend_threshold: float = 5.0
    root_label: str = "Root"
    organizations_label: str = "Organizations"
    payment_channels_label: str = "Payment Channels"
    channel_names: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CHANNEL_NAMES))

    def __post_init__(self) -> None:
        for name in (
            "daily_limit",
            "weekly_limit",
            "monthly_limit",
            "moving_average_window",
            "top_organizations",
            "top_performers",
            "recent_transactions",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.trend_threshold, bool) or not isinstance(
            self.trend_threshold, (int, float)
        ):
            raise ConfigError(f"trend_threshold must be a number, got {self.trend_threshold!r}")
        for name in ("root_label", "organizations_label", "payment_channels_label"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{name} must be a non-empty string")
        if not isinstance(self.channel_names, dict):
            raise ConfigError("channel_names must be a mapping of channel id to name")
        self.channel_names = {str(k): str(v) for k, v in self.channel_names.items()}

    def channel_name(self, channel_id: Any) -> str:
        """Return the display name for a payment channel id.

        Examples:
            >>> AnalyticsConfig().channel_name(1)
            'ACH'
            >>> AnalyticsConfig().channel_name(42)
            'Method 42'
        """
        return self.channel_names.get(str(channel_id), f"Method {channel_id}")

    def limit_for(self, granularity: str) -> int:
        """Return the truncation limit for a granularity ("day", "week" or "month")."""
        limits = {
            "day": self.daily_limit,
            "week": self.weekly_limit,
            "month": self.monthly_limit,
        }
        try:
            return limits[granularity]
        except KeyError:
            raise ConfigError(f"Unknown granularity: {granularity!r}") from None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AnalyticsConfig:
        """Create a config from a plain dictionary, rejecting unknown keys.

        Args:
            data: Mapping of attribute names to values.

        Returns:
            AnalyticsConfig instance.

        Raises:
            ConfigError: If data is not a mapping, has unknown keys, or holds
                invalid values.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a JSON object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str | Path) -> AnalyticsConfig:
        """Load a config from a JSON file.

        Examples:
            >>> config = AnalyticsConfig.from_json("analytics.json")
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load configuration from {path}: {e}") from e
        logger.debug("Loaded analytics configuration from %s", path)
        return cls.from_dict(data)
