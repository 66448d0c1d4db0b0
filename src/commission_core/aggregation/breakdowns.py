"""Revenue breakdown tables for overview charts.

These are the organization and payment-channel tables shown next to the
trend charts: total revenue, transaction count, average transaction value and
share of total revenue per group, largest first. They are built from the
eligible subset in one group-by each.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

import pandas as pd

from commission_core.config import AnalyticsConfig
from commission_core.records import TransactionRecord, ensure_records, records_to_frame

logger = logging.getLogger(__name__)

BREAKDOWN_COLUMNS = [
    "total_revenue",
    "total_commission",
    "transaction_count",
    "average_value",
    "revenue_share",
]


def _breakdown(df: pd.DataFrame, key: str, label_col: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=[key, "name"] + BREAKDOWN_COLUMNS)

    total_revenue = df["gross_amount"].sum()
    grouped = (
        df.groupby(key, sort=False)
        .agg(
            name=(label_col, "first"),
            total_revenue=("gross_amount", "sum"),
            total_commission=("applied_commission_amount", "sum"),
            transaction_count=("gross_amount", "size"),
        )
        .reset_index()
    )
    grouped["average_value"] = grouped["total_revenue"] / grouped["transaction_count"]
    if total_revenue > 0:
        grouped["revenue_share"] = grouped["total_revenue"] / total_revenue * 100
    else:
        grouped["revenue_share"] = 0.0
    grouped["transaction_count"] = grouped["transaction_count"].astype(int)
    return grouped.sort_values("total_revenue", ascending=False, kind="stable").reset_index(
        drop=True
    )


def _eligible_frame(records: Sequence[TransactionRecord]) -> pd.DataFrame:
    df = records_to_frame(ensure_records(records))
    return df[df["is_revenue_eligible"]].copy()


def organization_performance(
    records: Sequence[TransactionRecord],
    top_n: Optional[int] = None,
    config: Optional[AnalyticsConfig] = None,
) -> pd.DataFrame:
    """Revenue per organization, largest first.

    Args:
        records: Snapshot of transaction records.
        top_n: Number of organizations to keep. Defaults to
            config.top_performers (10).
        config: AnalyticsConfig; defaults are used when None.

    Returns:
        DataFrame with columns organization_id, name, total_revenue,
        total_commission, transaction_count, average_value, revenue_share.
        revenue_share is relative to all eligible revenue, not just the
        organizations kept.
    """
    config = config or AnalyticsConfig()
    limit = top_n if top_n is not None else config.top_performers
    df = _eligible_frame(records)
    df["organization_name"] = df["organization_name"].fillna(df["organization_id"])
    result = _breakdown(df, "organization_id", "organization_name").head(limit)
    logger.debug("Organization performance: %d row(s)", len(result))
    return result.reset_index(drop=True)


def payment_channel_analysis(
    records: Sequence[TransactionRecord],
    config: Optional[AnalyticsConfig] = None,
) -> pd.DataFrame:
    """Revenue per payment channel, largest first.

    Channel names come from the records when present, else from
    config.channel_names.

    Returns:
        DataFrame with columns payment_channel_id, name, total_revenue,
        total_commission, transaction_count, average_value, revenue_share.
    """
    config = config or AnalyticsConfig()
    df = _eligible_frame(records)
    fallback = df["payment_channel_id"].map(config.channel_name)
    df["payment_channel_name"] = df["payment_channel_name"].fillna(fallback)
    result = _breakdown(df, "payment_channel_id", "payment_channel_name")
    logger.debug("Payment channel analysis: %d row(s)", len(result))
    return result
