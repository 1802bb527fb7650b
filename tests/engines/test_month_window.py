"""
Tests for month keys and month selection.

Covers:
- Month key formatting from dates and ISO strings
- Parsing and validation of month keys
- Shifting across year boundaries
- Trend window ordering
- Service and entry selection by month
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from shop_engines.month_window import (
    current_month_key,
    entries_for_services,
    ids_of,
    month_key_of,
    month_window,
    parse_month_key,
    services_in_month,
    shift_month,
)
from shop_kernel.domain.clock import DeterministicClock
from shop_kernel.domain.records import Service, TimeEntry
from shop_kernel.exceptions import InvalidMonthKeyError


def _service(svc_id: str, service_date) -> Service:
    return Service(id=svc_id, service_date=service_date)


def _entry(entry_id: str, service_id: str) -> TimeEntry:
    return TimeEntry(id=entry_id, service_id=service_id, employee_id="emp-1", hours=Decimal("1"))


class TestMonthKeyOf:
    """Formatting a date as YYYY-MM."""

    def test_date(self):
        assert month_key_of(date(2024, 3, 5)) == "2024-03"

    def test_datetime(self):
        assert month_key_of(datetime(2024, 12, 31, 23, 59)) == "2024-12"

    @pytest.mark.parametrize("value", ["2024-03-05", "2024-03-05T10:00:00", "2024-03"])
    def test_iso_strings(self, value):
        assert month_key_of(value) == "2024-03"

    @pytest.mark.parametrize("value", [None, "", "garbage", "2024-13-01", "2024-00-10", "24-03-05", 202403])
    def test_unusable_values_yield_none(self, value):
        assert month_key_of(value) is None


class TestParseMonthKey:
    """Strict YYYY-MM validation."""

    def test_valid(self):
        assert parse_month_key("2024-03") == (2024, 3)

    @pytest.mark.parametrize("key", ["2024-3", "2024-13", "2024-00", "2024-03-01", "March", "", None])
    def test_invalid_raises(self, key):
        with pytest.raises(InvalidMonthKeyError) as exc_info:
            parse_month_key(key)
        assert exc_info.value.code == "INVALID_MONTH_KEY"
        assert exc_info.value.month_key == key

    def test_invalid_key_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_month_key("2024-99")


class TestShiftMonth:
    """Calendar arithmetic on month keys."""

    def test_back_across_year(self):
        assert shift_month("2024-01", -1) == "2023-12"

    def test_forward_across_year(self):
        assert shift_month("2023-12", 1) == "2024-01"

    def test_zero_delta(self):
        assert shift_month("2024-06", 0) == "2024-06"

    def test_many_years(self):
        assert shift_month("2024-03", -25) == "2022-02"

    def test_malformed_key_raises(self):
        with pytest.raises(InvalidMonthKeyError):
            shift_month("2024/03", 1)


class TestMonthWindow:
    """Trailing window of month keys."""

    def test_six_months_oldest_first(self):
        assert month_window("2024-03", 6) == [
            "2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03",
        ]

    def test_single_month(self):
        assert month_window("2024-03", 1) == ["2024-03"]

    def test_zero_months(self):
        assert month_window("2024-03", 0) == []


class TestCurrentMonthKey:

    def test_uses_clock(self):
        clock = DeterministicClock(datetime(2025, 7, 1, 8, 0, tzinfo=UTC))
        assert current_month_key(clock) == "2025-07"


class TestMonthSelection:
    """Services by date, entries through their service."""

    def test_services_in_month_keeps_order(self):
        services = [
            _service("a", date(2024, 3, 31)),
            _service("b", date(2024, 4, 1)),
            _service("c", date(2024, 3, 1)),
        ]
        assert [s.id for s in services_in_month(services, "2024-03")] == ["a", "c"]

    def test_service_without_date_matches_no_month(self):
        services = [_service("a", None), _service("b", date(2024, 3, 2))]
        assert ids_of(services_in_month(services, "2024-03")) == {"b"}

    def test_entries_follow_their_service(self):
        entries = [_entry("e1", "a"), _entry("e2", "b"), _entry("e3", "a")]
        assert [e.id for e in entries_for_services(entries, {"a"})] == ["e1", "e3"]

    def test_entry_date_is_ignored(self):
        entry = TimeEntry(
            id="e1", service_id="a", employee_id="emp-1",
            hours=Decimal("2"), entry_date=date(2024, 4, 2),
        )
        march = ids_of(services_in_month([_service("a", date(2024, 3, 30))], "2024-03"))
        assert entries_for_services([entry], march) == [entry]
