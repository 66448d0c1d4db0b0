"""Example: Commission statements and actor rankings

This example ingests raw transaction rows, applies a tiered commission table,
and prints a monthly statement, an actor ranking and the list of inactive
actors.

Prerequisites:
- Optionally, a JSON file of raw rows (camelCase or snake_case keys).
  Synthetic rows are generated when the file does not exist.
"""

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from commission_core import AnalyticsConfig, ingest
from commission_core.formatters import format_comparison, format_statement
from commission_core.rules import CommissionRule, CommissionRuleEngine
from commission_core.summaries import CommissionSummaryBuilder

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

data_file = Path("data/transactions.json")

engine = CommissionRuleEngine(
    [
        CommissionRule(0, 1000, 0.05),
        CommissionRule(1000, 5000, 0.06),
        CommissionRule(5000, float("inf"), 0.07),
    ],
    strict=True,
)


def synthetic_rows(n: int = 400, seed: int = 7) -> list:
    """Random transactions for three actors over Q1 2025."""
    rng = np.random.default_rng(seed)
    timestamps = pd.Timestamp("2025-01-01") + pd.to_timedelta(rng.integers(0, 90 * 24, n), unit="h")
    actors = {"emp-1": "Alice", "emp-2": "Bob", "emp-3": "Carol"}
    rows = []
    for i in range(n):
        actor_id = rng.choice(list(actors))
        gross = float(np.round(rng.gamma(2.0, 900.0), 2))
        rate = engine.rate_for(gross)
        rows.append(
            {
                "actorId": str(actor_id),
                "actorName": actors[str(actor_id)],
                "organizationId": f"org-{rng.integers(1, 8)}",
                "paymentChannelId": int(rng.choice([1, 2, 3, 4])),
                "grossAmount": gross,
                "revenueAfterCosts": round(gross * 0.7, 2),
                "appliedCommissionAmount": round(gross * rate, 2),
                "appliedCommissionPercentage": rate,
                "isRevenueEligible": bool(rng.random() > 0.1),
                "occurredAt": timestamps[i].isoformat(),
                "completionStatus": str(rng.choice(["completed", "completed", "failed"])),
            }
        )
    return rows


print("=" * 80)
print("Example: Commission statement")
print("=" * 80)

if data_file.exists():
    print(f"\nLoading rows from: {data_file}")
    rows = json.loads(data_file.read_text(encoding="utf-8"))
else:
    print(f"\nData file not found: {data_file}")
    print("Using synthetic data for demonstration instead...")
    rows = synthetic_rows()

result = ingest(rows)
print(f"Ingested {len(result.records)} records, rejected {len(result.rejected)}")

builder = CommissionSummaryBuilder(result.records, AnalyticsConfig())

print()
print(format_statement(builder.statement("emp-1", 2025, 1)))

print()
print(format_comparison(builder.compare(("2025-01-01", "2025-03-31"))))

print("\nInactive in March 2025:")
inactive = builder.inactive(("2025-03-01", "2025-03-31"))
if not inactive:
    print("  (none)")
for actor in inactive:
    print(f"  {actor.actor_name or actor.actor_id}: last transaction {actor.last_transaction_date}")
