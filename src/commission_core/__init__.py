"""Commission Core - commission and revenue analytics over transaction snapshots.

This package turns a flat snapshot of financial transactions into
hierarchical summaries, trend series, commission statements and drill-down
views. It performs no I/O: callers supply the records and receive
dataclasses and DataFrames.

Module Structure:
    commission_core.records: TransactionRecord schema
    commission_core.ingestion: Raw rows to validated records
    commission_core.validation: Field validation (never raises)
    commission_core.rules: Tiered commission rules
    commission_core.aggregation: Per-actor/organization/channel totals
    commission_core.timeseries: Day/week/month buckets and trend analysis
    commission_core.summaries: Actor summaries, statements and rankings
    commission_core.navigation: Drill-down state machine and details
    commission_core.formatters: Console output
    commission_core.config: AnalyticsConfig

Quick Start:
    >>> from commission_core import AnalyticsConfig, ingest
    >>> from commission_core.summaries import CommissionSummaryBuilder
    >>> from commission_core.timeseries import bucket
    >>>
    >>> result = ingest(rows)
    >>> builder = CommissionSummaryBuilder(result.records, AnalyticsConfig())
    >>>
    >>> # Monthly statement for one actor
    >>> statement = builder.statement("emp-7", 2025, 1)
    >>>
    >>> # Monthly revenue trend
    >>> monthly = bucket(result.records, "month")

Grain Reference:
    records: one TransactionRecord per transaction
    aggregation: one GroupTotals per dimension key (eligible records only)
    timeseries: one TimeSeriesPoint per period key
"""

__version__ = "0.1.0"

from commission_core.config import AnalyticsConfig
from commission_core.exceptions import (
    CommissionAPIError,
    ConfigError,
    InputShapeError,
    NavigationError,
    RuleSetError,
)
from commission_core.ingestion import IngestResult, from_mapping, ingest
from commission_core.records import CompletionStatus, TransactionRecord
from commission_core.utils import DateRange
from commission_core.validation import ValidationResult, validate

__all__ = [
    "AnalyticsConfig",
    "CommissionAPIError",
    "CompletionStatus",
    "ConfigError",
    "DateRange",
    "IngestResult",
    "InputShapeError",
    "NavigationError",
    "RuleSetError",
    "TransactionRecord",
    "ValidationResult",
    "__version__",
    "from_mapping",
    "ingest",
    "validate",
]
