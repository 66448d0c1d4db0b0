"""Tests for record validation and the ingestion gate."""

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from commission_core.exceptions import InputShapeError
from commission_core.ingestion import from_mapping, ingest
from commission_core.records import CompletionStatus, records_to_frame
from commission_core.summaries import summarize_actor
from commission_core.timeseries import bucket
from commission_core.utils import DateRange, month_range, parse_timestamp
from commission_core.validation import validate
from tests.test_utils import make_raw_row, make_record


class TestValidate:
    """Tests for validate()."""

    def test_valid_row_passes(self) -> None:
        """A complete camelCase row has no errors."""
        result = validate(make_raw_row())
        assert result.is_valid is True
        assert result.errors == []

    def test_valid_record_passes(self) -> None:
        """A TransactionRecord can be validated directly."""
        assert validate(make_record()).is_valid is True

    def test_collects_every_violation(self) -> None:
        """Several problems surface together instead of stopping at the first."""
        row = make_raw_row(
            grossAmount=-5.0,
            appliedCommissionPercentage=1.5,
            actorId="",
            organizationId=42,
        )
        result = validate(row)

        assert result.is_valid is False
        assert "gross_amount must be a non-negative finite number" in result.errors
        assert "applied_commission_percentage must be between 0 and 1" in result.errors
        assert "actor_id cannot be empty" in result.errors
        assert "organization_id must be a string" in result.errors
        assert len(result.errors) == 4

    @pytest.mark.parametrize("amount", [math.nan, math.inf, -math.inf, "1000", True])
    def test_rejects_non_finite_or_non_numeric_amounts(self, amount: object) -> None:
        """NaN, infinities, numeric strings and booleans are not amounts."""
        result = validate(make_raw_row(grossAmount=amount))
        assert "gross_amount must be a non-negative finite number" in result.errors

    def test_revenue_after_costs_may_be_negative(self) -> None:
        """Revenue after costs can go below zero, but must be finite."""
        assert validate(make_raw_row(revenueAfterCosts=-20.0)).is_valid is True
        result = validate(make_raw_row(revenueAfterCosts=math.inf))
        assert "revenue_after_costs must be a finite number" in result.errors

    def test_missing_fields_are_reported(self) -> None:
        """An empty mapping reports every required field."""
        result = validate({})
        assert "actor_id is required" in result.errors
        assert "occurred_at is required" in result.errors
        assert "completion_status is required" in result.errors

    def test_bad_timestamp_and_status(self) -> None:
        result = validate(make_raw_row(occurredAt="not a date", completionStatus="done"))
        assert "occurred_at must be a valid timestamp" in result.errors
        assert "completion_status must be one of: completed, failed, pending" in result.errors

    def test_non_mapping_never_raises(self) -> None:
        """validate() reports a wrong type instead of raising."""
        result = validate(["not", "a", "row"])
        assert result.is_valid is False
        assert len(result.errors) == 1

    @pytest.mark.parametrize("flag", [np.array([1, 0]), [True], "yes", 2, 0.5])
    def test_non_boolean_eligibility_is_reported_not_raised(self, flag: object) -> None:
        result = validate(make_raw_row(isRevenueEligible=flag))
        assert result.errors == ["is_revenue_eligible must be a boolean"]

    @pytest.mark.parametrize("flag", [0, 1, np.bool_(True), np.int64(1)])
    def test_integer_eligibility_flags_pass(self, flag: object) -> None:
        assert validate(make_raw_row(isRevenueEligible=flag)).is_valid is True

    @pytest.mark.parametrize("moment", [1736942400, 1736942400.5, np.int64(1736942400)])
    def test_numeric_timestamp_is_rejected(self, moment: object) -> None:
        """Epoch numbers are not read as timestamps."""
        result = validate(make_raw_row(occurredAt=moment))
        assert result.errors == ["occurred_at must be a valid timestamp"]


class TestIngestion:
    """Tests for ingest() and from_mapping()."""

    def test_ingest_splits_valid_and_rejected_rows(self) -> None:
        rows = [
            make_raw_row(),
            make_raw_row(grossAmount=-1.0),
            make_raw_row(actorId="B", completionStatus="FAILED"),
        ]
        result = ingest(rows)

        assert len(result.records) == 2
        assert len(result.rejected) == 1
        assert result.rejected[0].index == 1
        assert result.is_clean is False
        assert result.records[1].completion_status is CompletionStatus.FAILED

    def test_channel_id_is_stored_as_string(self) -> None:
        record = from_mapping(make_raw_row(paymentChannelId=3))
        assert record.payment_channel_id == "3"

    def test_timezone_aware_timestamp_is_converted_to_utc(self) -> None:
        record = from_mapping(make_raw_row(occurredAt="2025-01-15T10:30:00-05:00"))
        assert record.occurred_at == datetime(2025, 1, 15, 15, 30)
        assert record.occurred_at.tzinfo is None

    def test_numeric_timestamp_is_not_coerced(self) -> None:
        with pytest.raises(InputShapeError):
            from_mapping(make_raw_row(occurredAt=1736942400))
        result = ingest([make_raw_row(occurredAt=1736942400)])
        assert result.records == []
        assert result.rejected[0].errors == ["occurred_at must be a valid timestamp"]

    def test_aware_record_timestamp_is_stored_as_naive_utc(self) -> None:
        """Records built directly with aware datetimes work with naive ones downstream."""
        eastern = timezone(timedelta(hours=-5))
        aware = make_record(occurred_at=datetime(2025, 1, 15, 22, 0, tzinfo=eastern))
        naive = make_record(occurred_at=datetime(2025, 1, 15, 9, 0))

        assert aware.occurred_at == datetime(2025, 1, 16, 3, 0)
        assert aware.occurred_at.tzinfo is None
        assert validate(aware).is_valid is True

        summary = summarize_actor([aware, naive], "A", ("2025-01-01", "2025-01-31"))
        assert summary.total_transactions == 2
        assert [p.period for p in bucket([aware, naive], "day")] == ["2025-01-15", "2025-01-16"]

    def test_snake_case_keys_are_accepted(self) -> None:
        row = {
            "actor_id": "A",
            "organization_id": "Acme",
            "payment_channel_id": "2",
            "gross_amount": 10,
            "revenue_after_costs": 8,
            "applied_commission_amount": 1,
            "applied_commission_percentage": 0.1,
            "is_revenue_eligible": 1,
            "occurred_at": datetime(2025, 2, 1),
            "completion_status": "pending",
            "organization_name": "Acme Corp",
        }
        record = from_mapping(row)
        assert record.is_revenue_eligible is True
        assert record.organization_label == "Acme Corp"
        assert record.gross_amount == 10.0

    def test_from_mapping_raises_with_all_errors(self) -> None:
        with pytest.raises(InputShapeError) as exc_info:
            from_mapping(make_raw_row(grossAmount=-1.0, actorId=""))
        message = str(exc_info.value)
        assert "gross_amount" in message
        assert "actor_id" in message

    def test_ingest_rejects_non_iterable(self) -> None:
        with pytest.raises(InputShapeError):
            ingest(make_raw_row())

    def test_records_to_frame_columns(self) -> None:
        df = records_to_frame([make_record(), make_record(actor_id="B")])
        assert len(df) == 2
        assert df["completion_status"].tolist() == ["completed", "completed"]
        assert df["is_completed"].all()


class TestDateHandling:
    """Tests for timestamp parsing and date windows."""

    def test_date_only_end_covers_whole_day(self) -> None:
        window = DateRange.from_iso("2025-01-01", "2025-01-31")
        assert window.contains(datetime(2025, 1, 31, 23, 59, 59))
        assert not window.contains(datetime(2025, 2, 1, 0, 0))

    def test_unbounded_range_labels(self) -> None:
        assert DateRange().label() == ("All Time", "All Time")
        assert DateRange.from_iso(start="2025-01-01").label() == ("2025-01-01", "All Time")

    def test_start_after_end_is_rejected(self) -> None:
        with pytest.raises(InputShapeError):
            DateRange.from_iso("2025-02-01", "2025-01-01")

    def test_month_range_handles_leap_year(self) -> None:
        window = month_range(2024, 2)
        assert window.contains(datetime(2024, 2, 29, 18, 0))
        assert not window.contains(datetime(2024, 3, 1))

    @pytest.mark.parametrize("month", [0, 13, "1"])
    def test_month_range_rejects_bad_month(self, month: object) -> None:
        with pytest.raises(InputShapeError):
            month_range(2025, month)  # type: ignore[arg-type]

    def test_parse_timestamp_rejects_empty(self) -> None:
        with pytest.raises(InputShapeError):
            parse_timestamp("")
