"""Tests for the drill-down navigator and its detail panels."""

from datetime import date, datetime

import pytest

from commission_core.config import AnalyticsConfig
from commission_core.exceptions import InputShapeError, NavigationError
from commission_core.navigation import (
    DrillDownNavigator,
    SegmentDetails,
    TransactionDayDetails,
    ViewLevel,
    describe,
)
from commission_core.records import CompletionStatus
from tests.test_utils import make_record


@pytest.fixture
def records() -> list:
    return [
        make_record(
            organization_id="Acme",
            gross_amount=500.0,
            occurred_at=datetime(2025, 1, 15, 9),
            payment_channel_id="1",
        ),
        make_record(
            organization_id="Acme",
            gross_amount=300.0,
            occurred_at=datetime(2025, 1, 15, 17),
            payment_channel_id="3",
            completion_status=CompletionStatus.FAILED,
        ),
        make_record(
            organization_id="Acme",
            gross_amount=200.0,
            occurred_at=datetime(2025, 2, 1, 8),
            payment_channel_id="1",
        ),
        make_record(
            organization_id="Globex",
            organization_name="Globex Corp",
            gross_amount=1000.0,
            occurred_at=datetime(2025, 1, 20),
            payment_channel_id="1",
        ),
        make_record(
            organization_id="Initech",
            gross_amount=400.0,
            occurred_at=datetime(2025, 1, 21),
            payment_channel_id="2",
            is_revenue_eligible=False,
        ),
    ]


@pytest.fixture
def nav(records: list) -> DrillDownNavigator:
    return DrillDownNavigator(records)


class TestTransitions:
    """Tests for navigator transitions."""

    def test_initial_state_is_overview(self, nav: DrillDownNavigator, records: list) -> None:
        state = nav.state
        assert state.level is ViewLevel.OVERVIEW
        assert state.breadcrumb == ("Root",)
        assert state.working_set == tuple(records)

    def test_select_organization_then_reset_via_breadcrumb(
        self, nav: DrillDownNavigator, records: list
    ) -> None:
        """Selecting an organization filters the working set; breadcrumb index 0 resets."""
        state = nav.select_organization("Acme")

        assert state.level is ViewLevel.ORGANIZATION
        assert state.breadcrumb == ("Root", "Organizations", "Acme")
        assert state.selected_organization == "Acme"
        assert len(state.working_set) == 3
        assert all(r.organization_id == "Acme" for r in state.working_set)

        state = nav.navigate_to(0)
        assert state.level is ViewLevel.OVERVIEW
        assert state.breadcrumb == ("Root",)
        assert state.working_set == tuple(records)
        assert state.selected_organization is None

    def test_breadcrumb_uses_display_name(self, nav: DrillDownNavigator) -> None:
        assert nav.select_organization("Globex").breadcrumb[-1] == "Globex Corp"

    def test_select_payment_channel(self, nav: DrillDownNavigator) -> None:
        state = nav.select_payment_channel(1)
        assert state.level is ViewLevel.PAYMENT_CHANNEL
        assert state.selected_payment_channel == "1"
        assert state.breadcrumb == ("Root", "Payment Channels", "ACH")
        assert len(state.working_set) == 3

    def test_select_date_keeps_working_set(self, nav: DrillDownNavigator) -> None:
        org_state = nav.select_organization("Acme")
        state = nav.select_date("2025-01-15")

        assert state.level is ViewLevel.TRANSACTION
        assert state.selected_date == date(2025, 1, 15)
        assert state.selected_organization == "Acme"
        assert state.breadcrumb == ("Root", "Organizations", "Acme", "2025-01-15")
        assert state.working_set == org_state.working_set

    def test_select_date_replaces_previous_date(self, nav: DrillDownNavigator) -> None:
        nav.select_organization("Acme")
        nav.select_date(date(2025, 1, 15))
        state = nav.select_date(datetime(2025, 2, 1, 8))
        assert state.breadcrumb == ("Root", "Organizations", "Acme", "2025-02-01")
        assert len(nav.history) == 3

    def test_select_date_from_overview_is_rejected(self, nav: DrillDownNavigator) -> None:
        with pytest.raises(NavigationError):
            nav.select_date("2025-01-15")
        assert nav.state.level is ViewLevel.OVERVIEW

    def test_selection_from_any_level_starts_from_full_snapshot(
        self, nav: DrillDownNavigator
    ) -> None:
        nav.select_organization("Acme")
        nav.select_date("2025-01-15")
        state = nav.select_organization("Globex")

        assert state.breadcrumb == ("Root", "Organizations", "Globex Corp")
        assert len(state.working_set) == 1
        assert len(nav.history) == 2

    def test_unknown_organization_gives_empty_working_set(self, nav: DrillDownNavigator) -> None:
        state = nav.select_organization("Nobody")
        assert state.working_set == ()
        assert state.breadcrumb[-1] == "Nobody"

    def test_bad_selections(self, nav: DrillDownNavigator) -> None:
        with pytest.raises(InputShapeError):
            nav.select_organization("")
        with pytest.raises(InputShapeError):
            nav.select_payment_channel(True)
        nav.select_organization("Acme")
        with pytest.raises(InputShapeError):
            nav.select_date("not a date")


class TestBreadcrumbNavigation:
    """Tests for navigate_to() and back()."""

    def test_category_label_collapses_to_overview(self, nav: DrillDownNavigator) -> None:
        nav.select_organization("Acme")
        state = nav.navigate_to(1)
        assert state.level is ViewLevel.OVERVIEW
        assert state.breadcrumb == ("Root",)

    def test_organization_label_returns_to_organization_view(
        self, nav: DrillDownNavigator
    ) -> None:
        org_state = nav.select_organization("Acme")
        nav.select_date("2025-01-15")
        state = nav.navigate_to(2)
        assert state == org_state
        assert state.level is ViewLevel.ORGANIZATION

    def test_last_index_keeps_current_state(self, nav: DrillDownNavigator) -> None:
        nav.select_organization("Acme")
        current = nav.select_date("2025-01-15")
        assert nav.navigate_to(3) == current

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range_index(self, nav: DrillDownNavigator, index: int) -> None:
        nav.select_organization("Acme")
        with pytest.raises(NavigationError):
            nav.navigate_to(index)

    def test_non_integer_index(self, nav: DrillDownNavigator) -> None:
        with pytest.raises(InputShapeError):
            nav.navigate_to("0")  # type: ignore[arg-type]

    def test_back(self, nav: DrillDownNavigator) -> None:
        nav.select_payment_channel("1")
        nav.select_date("2025-01-20")
        assert nav.back().level is ViewLevel.PAYMENT_CHANNEL
        assert nav.back().level is ViewLevel.OVERVIEW
        assert nav.back().level is ViewLevel.OVERVIEW

    def test_custom_labels(self, records: list) -> None:
        config = AnalyticsConfig(root_label="Revenue Analysis", organizations_label="Companies")
        nav = DrillDownNavigator(records, config)
        assert nav.select_organization("Acme").breadcrumb == (
            "Revenue Analysis",
            "Companies",
            "Acme",
        )


class TestDetails:
    """Tests for describe()."""

    def test_overview_has_no_details(self, nav: DrillDownNavigator) -> None:
        assert describe(nav.state, nav.snapshot) is None

    def test_organization_details(self, nav: DrillDownNavigator) -> None:
        details = describe(nav.select_organization("Acme"), nav.snapshot)

        assert isinstance(details, SegmentDetails)
        assert details.name == "Acme"
        assert details.total_revenue == pytest.approx(1000.0)
        assert details.transaction_count == 3
        assert details.revenue_share == pytest.approx(50.0)
        assert details.success_rate == pytest.approx(200.0 / 3)
        assert details.revenue_efficiency == pytest.approx(80.0)
        assert details.breakdown["payment_channel_id"].tolist() == ["1", "3"]
        assert [p.period for p in details.monthly_trend] == ["2025-01", "2025-02"]
        assert details.recent_transactions[0].occurred_at == datetime(2025, 2, 1, 8)

    def test_payment_channel_details(self, nav: DrillDownNavigator) -> None:
        details = describe(nav.select_payment_channel("1"), nav.snapshot)

        assert isinstance(details, SegmentDetails)
        assert details.name == "ACH"
        assert details.total_revenue == pytest.approx(1700.0)
        assert details.breakdown["organization_id"].tolist() == ["Globex", "Acme"]

    def test_recent_transactions_limit(self, records: list) -> None:
        config = AnalyticsConfig(recent_transactions=2)
        nav = DrillDownNavigator(records, config)
        details = describe(nav.select_organization("Acme"), nav.snapshot, config)
        assert len(details.recent_transactions) == 2

    def test_day_details(self, nav: DrillDownNavigator) -> None:
        nav.select_organization("Acme")
        details = describe(nav.select_date("2025-01-15"), nav.snapshot)

        assert isinstance(details, TransactionDayDetails)
        assert details.day == date(2025, 1, 15)
        assert details.transaction_count == 2
        assert details.total_revenue == pytest.approx(800.0)
        assert details.success_rate == pytest.approx(50.0)
