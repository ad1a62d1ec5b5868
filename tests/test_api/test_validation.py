"""Tests for the client-side request checks."""

from datetime import date, datetime, timedelta

import pytest

from amber_api.api.errors import InvalidRange, InvalidResolution, LimitExceeded, ValidationError
from amber_api.api.validation import (
    MAX_INTERVAL_COUNT,
    validate_date_range,
    validate_interval_count,
    validate_resolution,
    validate_state,
)
from amber_api.models.types import Resolution, State

START = date(2021, 5, 5)


class TestValidateDateRange:
    @pytest.mark.parametrize("days", [0, 1, 6, 7])
    def test_spans_up_to_seven_days_pass(self, days):
        validate_date_range(START, START + timedelta(days=days))

    @pytest.mark.parametrize("days", [8, 10, 31, 365])
    def test_spans_over_seven_days_fail(self, days):
        with pytest.raises(InvalidRange) as exc:
            validate_date_range(START, START + timedelta(days=days))
        assert exc.value.start == START
        assert exc.value.end == START + timedelta(days=days)
        assert f"{days} days" in str(exc.value)

    def test_end_before_start_fails(self):
        with pytest.raises(InvalidRange, match="before"):
            validate_date_range(START, START - timedelta(days=1))

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            validate_date_range(START, START + timedelta(days=8))

    def test_datetimes_compare_by_calendar_day(self):
        validate_date_range(datetime(2021, 5, 1, 23, 0), datetime(2021, 5, 8, 23, 30))
        validate_date_range(datetime(2021, 5, 5, 18, 0), datetime(2021, 5, 5, 9, 0))

    def test_datetime_span_over_seven_days_reports_dates(self):
        with pytest.raises(InvalidRange) as exc:
            validate_date_range(datetime(2021, 5, 1, 0, 0), datetime(2021, 5, 9, 0, 0))
        assert exc.value.start == date(2021, 5, 1)
        assert exc.value.end == date(2021, 5, 9)
        assert "8 days" in str(exc.value)


class TestValidateIntervalCount:
    @pytest.mark.parametrize(
        "next_count, previous_count",
        [(None, None), (0, 0), (48, 48), (2048, None), (None, 2048), (1024, 1024), (2047, 1)],
    )
    def test_within_limit_passes(self, next_count, previous_count):
        validate_interval_count(next_count, previous_count)

    @pytest.mark.parametrize(
        "next_count, previous_count",
        [(2049, None), (None, 2049), (1025, 1024), (2048, 1), (5000, 5000)],
    )
    def test_over_limit_fails(self, next_count, previous_count):
        with pytest.raises(LimitExceeded) as exc:
            validate_interval_count(next_count, previous_count)
        assert exc.value.limit == MAX_INTERVAL_COUNT
        assert exc.value.next == next_count
        assert exc.value.previous == previous_count

    def test_negative_count_fails(self):
        with pytest.raises(LimitExceeded):
            validate_interval_count(-1, 10)


class TestValidateResolution:
    def test_none_defers_to_site(self):
        assert validate_resolution(None) is None

    @pytest.mark.parametrize("value, expected", [(5, Resolution.FIVE_MINUTE), (30, Resolution.THIRTY_MINUTE)])
    def test_valid_values(self, value, expected):
        assert validate_resolution(value) is expected

    @pytest.mark.parametrize("value", [0, 1, 15, 60, -5, True, "5", 5.0])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidResolution) as exc:
            validate_resolution(value)
        assert exc.value.value == value


class TestValidateState:
    def test_accepts_enum_and_any_case(self):
        assert validate_state(State.VIC) is State.VIC
        assert validate_state("NSW") is State.NSW
        assert validate_state("sa") is State.SA

    def test_unknown_state_fails(self):
        with pytest.raises(ValidationError, match="tas"):
            validate_state("tas")
