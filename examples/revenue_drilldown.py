"""Example: Revenue trends and drill-down navigation

This example builds daily/monthly revenue series, prints the trend summary
and walks the drill-down navigator from the overview into one organization
and one day, then back via the breadcrumb.
"""

import logging

import numpy as np
import pandas as pd

from commission_core import CompletionStatus, TransactionRecord
from commission_core.aggregation import organization_performance, payment_channel_analysis
from commission_core.formatters import format_breadcrumb, format_money, format_trend_summary
from commission_core.navigation import DrillDownNavigator, describe
from commission_core.timeseries import analyze_trends, bucket_frame

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

rng = np.random.default_rng(11)
days = pd.date_range("2024-01-01", "2025-03-31", freq="D")
records = []
for day in days:
    for _ in range(int(rng.poisson(4))):
        gross = float(np.round(rng.lognormal(6.5, 0.6), 2))
        records.append(
            TransactionRecord(
                actor_id=f"emp-{rng.integers(1, 4)}",
                organization_id=f"org-{rng.integers(1, 6)}",
                payment_channel_id=str(rng.choice(["1", "2", "3", "4"])),
                gross_amount=gross,
                revenue_after_costs=round(gross * 0.65, 2),
                applied_commission_amount=round(gross * 0.05, 2),
                applied_commission_percentage=0.05,
                is_revenue_eligible=bool(rng.random() > 0.05),
                occurred_at=(day + pd.Timedelta(hours=int(rng.integers(8, 20)))).to_pydatetime(),
                completion_status=(
                    CompletionStatus.COMPLETED if rng.random() > 0.08 else CompletionStatus.FAILED
                ),
            )
        )

print("=" * 80)
print(f"Trend analysis over {len(records)} transactions")
print("=" * 80)
analysis = analyze_trends(records)
print(format_trend_summary(analysis.summary))

print("\nLast 6 months:")
print(bucket_frame(records, "month").tail(6)[["period", "revenue", "revenue_growth", "success_rate"]])

print("\nTop organizations:")
print(organization_performance(records, top_n=5))
print("\nPayment channels:")
print(payment_channel_analysis(records))

print("\n" + "=" * 80)
print("Drill-down")
print("=" * 80)
nav = DrillDownNavigator(records)

state = nav.select_organization("org-1")
details = describe(state, nav.snapshot)
print(format_breadcrumb(state))
print(f"  Revenue: {format_money(details.total_revenue)} ({details.revenue_share:.2f}% of total)")
print(f"  Success rate: {details.success_rate:.2f}%")

state = nav.select_date("2025-03-14")
day = describe(state, nav.snapshot)
print(format_breadcrumb(state))
print(f"  {day.transaction_count} transaction(s), revenue {format_money(day.total_revenue)}")

state = nav.navigate_to(2)
print(f"Back to: {format_breadcrumb(state)}")
state = nav.navigate_to(0)
print(f"Reset to: {format_breadcrumb(state)}")
