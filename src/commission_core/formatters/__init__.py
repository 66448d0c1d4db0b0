"""Output formatting utilities."""

from commission_core.formatters.console import (
    format_breadcrumb,
    format_comparison,
    format_money,
    format_percent,
    format_statement,
    format_summary,
    format_trend_summary,
    sanitize_for_console,
)

__all__ = [
    "format_breadcrumb",
    "format_comparison",
    "format_money",
    "format_percent",
    "format_statement",
    "format_summary",
    "format_trend_summary",
    "sanitize_for_console",
]
