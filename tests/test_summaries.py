"""Tests for actor summaries, statements and rankings."""

from datetime import datetime

import pytest

from commission_core.config import AnalyticsConfig
from commission_core.exceptions import InputShapeError
from commission_core.summaries import (
    CommissionSummary,
    CommissionSummaryBuilder,
    calculate_efficiency,
    compare_actors,
    find_inactive,
    generate_statement,
    payment_channel_breakdown,
    summarize_actor,
)
from commission_core.utils import DateRange
from tests.test_utils import make_record


@pytest.fixture
def snapshot() -> list:
    """Records for actors A, B and C across January to March 2025.

    C only has eligible activity in January and an ineligible record in March.
    """
    return [
        make_record(
            actor_id="A",
            actor_name="Alice",
            gross_amount=1000.0,
            commission=50.0,
            revenue_after_costs=500.0,
            occurred_at=datetime(2025, 1, 10),
            organization_id="Acme",
            payment_channel_id="1",
        ),
        make_record(
            actor_id="A",
            actor_name="Alice",
            gross_amount=3000.0,
            commission=150.0,
            revenue_after_costs=1500.0,
            occurred_at=datetime(2025, 1, 20),
            organization_id="Globex",
            payment_channel_id="3",
        ),
        make_record(
            actor_id="A",
            gross_amount=500.0,
            commission=25.0,
            revenue_after_costs=250.0,
            occurred_at=datetime(2025, 2, 5),
            organization_id="Acme",
            payment_channel_id="1",
        ),
        make_record(
            actor_id="B",
            actor_name="Bob",
            gross_amount=2000.0,
            commission=120.0,
            occurred_at=datetime(2025, 1, 15),
        ),
        make_record(
            actor_id="C",
            actor_name="Carol",
            gross_amount=800.0,
            commission=40.0,
            occurred_at=datetime(2025, 1, 3),
        ),
        make_record(
            actor_id="C",
            gross_amount=900.0,
            commission=0.0,
            occurred_at=datetime(2025, 3, 12, 16, 30),
            is_revenue_eligible=False,
        ),
    ]


class TestSummarizeActor:
    """Tests for summarize_actor()."""

    def test_all_time_summary(self, snapshot: list) -> None:
        summary = summarize_actor(snapshot, "A")

        assert summary.total_commission == pytest.approx(225.0)
        assert summary.total_revenue == pytest.approx(4500.0)
        assert summary.total_transactions == 3
        assert summary.average_commission == pytest.approx(75.0)
        assert summary.revenue_after_costs == pytest.approx(2250.0)
        assert summary.commission_rate == pytest.approx(10.0)
        assert summary.efficiency == pytest.approx(5.0)

    def test_date_range_is_inclusive(self, snapshot: list) -> None:
        summary = summarize_actor(snapshot, "A", ("2025-01-10", "2025-01-20"))
        assert summary.total_transactions == 2
        assert summary.total_commission == pytest.approx(200.0)

    def test_no_activity_gives_zeroed_summary(self, snapshot: list) -> None:
        assert summarize_actor(snapshot, "Z") == CommissionSummary()
        assert summarize_actor([], "A").total_transactions == 0

    def test_zero_revenue_after_costs_gives_zero_rate(self) -> None:
        records = [make_record(revenue_after_costs=0.0)]
        assert summarize_actor(records, "A").commission_rate == 0.0

    @pytest.mark.parametrize("actor_id", ["", None, 7])
    def test_bad_actor_id(self, snapshot: list, actor_id: object) -> None:
        with pytest.raises(InputShapeError):
            summarize_actor(snapshot, actor_id)  # type: ignore[arg-type]

    def test_bad_date_range(self, snapshot: list) -> None:
        with pytest.raises(InputShapeError):
            summarize_actor(snapshot, "A", "2025-01-01")
        with pytest.raises(InputShapeError):
            summarize_actor(snapshot, "A", ("2025-13-01", None))


class TestStatement:
    """Tests for generate_statement() and payment_channel_breakdown()."""

    def test_monthly_statement(self, snapshot: list) -> None:
        statement = generate_statement(snapshot, "A", 2025, 1)

        assert statement.actor_name == "Alice"
        assert statement.total_commission == pytest.approx(200.0)
        assert statement.total_revenue == pytest.approx(4000.0)
        assert statement.total_transactions == 2
        assert [b.payment_channel_name for b in statement.breakdown] == ["Virtual Card", "ACH"]
        assert [o.organization_id for o in statement.top_organizations] == ["Globex", "Acme"]

    def test_top_organizations_limit(self) -> None:
        records = [
            make_record(organization_id=f"org-{i}", commission=float(i), gross_amount=100.0)
            for i in range(1, 8)
        ]
        statement = generate_statement(records, "A", 2025, 1)
        assert len(statement.top_organizations) == 5
        assert statement.top_organizations[0].organization_id == "org-7"

        config = AnalyticsConfig(top_organizations=2)
        assert len(generate_statement(records, "A", 2025, 1, config).top_organizations) == 2

    def test_empty_month(self, snapshot: list) -> None:
        statement = generate_statement(snapshot, "A", 2024, 12)
        assert statement.total_transactions == 0
        assert statement.breakdown == []
        assert statement.top_organizations == []
        assert statement.actor_name == "Alice"

    def test_invalid_month(self, snapshot: list) -> None:
        with pytest.raises(InputShapeError):
            generate_statement(snapshot, "A", 2025, 13)

    def test_channel_breakdown(self, snapshot: list) -> None:
        breakdown = payment_channel_breakdown(snapshot, "A")
        assert [b.payment_channel_id for b in breakdown] == ["3", "1"]
        ach = breakdown[1]
        assert ach.total_commission == pytest.approx(75.0)
        assert ach.transaction_count == 2
        assert ach.commission_rate == pytest.approx(5.0)


class TestCompareActors:
    """Tests for compare_actors()."""

    def test_ranking(self, snapshot: list) -> None:
        comparison = compare_actors(snapshot)

        assert [(a.actor_id, a.rank) for a in comparison.actors] == [
            ("A", 1),
            ("B", 2),
            ("C", 3),
        ]
        assert comparison.period_start == "All Time"
        assert comparison.period_end == "All Time"
        assert comparison.summary.total_commission == pytest.approx(385.0)
        assert comparison.summary.total_transactions == 5
        expected_efficiency = (225.0 / 4500.0 * 100 + 6.0 + 5.0) / 3
        assert comparison.summary.average_efficiency == pytest.approx(expected_efficiency)

    def test_ties_keep_input_order(self) -> None:
        records = [
            make_record(actor_id="X", commission=10.0),
            make_record(actor_id="Y", commission=10.0),
            make_record(actor_id="Z", commission=20.0),
        ]
        ranked = [(a.actor_id, a.rank) for a in compare_actors(records).actors]
        assert ranked == [("Z", 1), ("X", 2), ("Y", 3)]

    def test_period_labels(self, snapshot: list) -> None:
        comparison = compare_actors(snapshot, DateRange.from_iso("2025-02-01"))
        assert comparison.period_start == "2025-02-01"
        assert comparison.period_end == "All Time"
        assert [a.actor_id for a in comparison.actors] == ["A"]

    def test_empty_window(self, snapshot: list) -> None:
        comparison = compare_actors(snapshot, ("2030-01-01", "2030-12-31"))
        assert comparison.actors == []
        assert comparison.summary.average_efficiency == 0.0


class TestFindInactive:
    """Tests for find_inactive()."""

    def test_inactive_actor_with_last_transaction_over_full_history(self, snapshot: list) -> None:
        """C has no eligible records in March; its last date comes from the ineligible record."""
        inactive = find_inactive(snapshot, ("2025-02-01", "2025-03-31"))

        ids = [a.actor_id for a in inactive]
        assert ids == ["B", "C"]
        carol = inactive[1]
        assert carol.actor_name == "Carol"
        assert carol.last_transaction_date == datetime(2025, 3, 12, 16, 30)

    def test_everyone_active_all_time(self, snapshot: list) -> None:
        assert find_inactive(snapshot) == []


class TestEfficiencyAndBuilder:
    """Tests for calculate_efficiency() and CommissionSummaryBuilder."""

    def test_efficiency(self, snapshot: list) -> None:
        result = calculate_efficiency(snapshot, "A")
        assert result.commission_efficiency == pytest.approx(10.0)
        assert result.cost_efficiency == pytest.approx(50.0)
        assert result.average_commission_per_transaction == pytest.approx(75.0)
        assert result.average_revenue_per_transaction == pytest.approx(1500.0)

    def test_efficiency_without_activity(self, snapshot: list) -> None:
        result = calculate_efficiency(snapshot, "C", ("2025-03-01", "2025-03-31"))
        assert result.total_commission == 0.0
        assert result.actor_name == "Carol"

    def test_builder_matches_functions(self, snapshot: list) -> None:
        builder = CommissionSummaryBuilder(snapshot)

        assert builder.summarize("A") == summarize_actor(snapshot, "A")
        assert builder.statement("A", 2025, 1) == generate_statement(snapshot, "A", 2025, 1)
        assert builder.compare() == compare_actors(snapshot)
        assert builder.inactive(("2025-02-01", None)) == find_inactive(
            snapshot, ("2025-02-01", None)
        )
        assert builder.efficiency("B") == calculate_efficiency(snapshot, "B")
        assert builder.channel_breakdown("A") == payment_channel_breakdown(snapshot, "A")

    def test_builder_rejects_bad_records(self) -> None:
        with pytest.raises(InputShapeError):
            CommissionSummaryBuilder([{"actor_id": "A"}])  # type: ignore[list-item]
