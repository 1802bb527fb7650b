"""
Tests for the change-driven recompute loop.

Covers:
- Full refresh per signal batch, coalescing of queued signals
- Month selection
- Loader failures keep the previous report
- Background thread start/stop
"""

import logging
import threading
from datetime import date
from decimal import Decimal

import pytest

from shop_kernel.domain.records import BillingSetting, RecordKind, Service, ShopSnapshot, TimeEntry
from shop_kernel.exceptions import InvalidMonthKeyError, SnapshotLoadError
from shop_modules.reporting import ReportingConfig, ReportingService
from shop_services import ChangeSignal, RecomputeLoop


def _snapshot(hours: str) -> ShopSnapshot:
    return ShopSnapshot(
        services=(Service(id="svc-1", service_date=date(2024, 3, 5)),),
        time_entries=(
            TimeEntry(id="te-1", service_id="svc-1", employee_id="emp-1", hours=Decimal(hours)),
        ),
        billing=BillingSetting(hourly_rate=Decimal("10")),
    )


class _Store:
    """Snapshot loader that counts fetches and can be told to fail."""

    def __init__(self):
        self.hours = "1"
        self.fetches = 0
        self.fail = False

    def __call__(self) -> ShopSnapshot:
        self.fetches += 1
        if self.fail:
            raise SnapshotLoadError("services", "connection lost")
        return _snapshot(self.hours)


@pytest.fixture
def store() -> _Store:
    return _Store()


@pytest.fixture
def reporting(clock) -> ReportingService:
    return ReportingService(clock=clock, config=ReportingConfig())


class TestRefresh:

    def test_refresh_publishes_report(self, store, reporting):
        published = []
        loop = RecomputeLoop(store, reporting, month_key="2024-03", on_report=published.append)
        report = loop.refresh()
        assert report is loop.latest
        assert published == [report]
        assert report.totals.revenue == Decimal("10")

    def test_month_defaults_to_clock(self, store, reporting):
        loop = RecomputeLoop(store, reporting)
        assert loop.refresh().month_key == "2024-03"

    def test_invalid_month_rejected(self, store, reporting):
        with pytest.raises(InvalidMonthKeyError):
            RecomputeLoop(store, reporting, month_key="March")

    def test_failure_keeps_previous_report(self, store, reporting, caplog):
        caplog.set_level(logging.ERROR, logger="shop_kernel")
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        first = loop.refresh()
        store.fail = True
        assert loop.refresh() is None
        assert loop.latest is first
        assert "recompute_failed" in caplog.messages


class TestProcessPending:

    def test_no_signals_no_fetch(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        assert loop.process_pending() == 0
        assert store.fetches == 0

    def test_queued_signals_coalesce(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        loop.notify(ChangeSignal(RecordKind.TIME_ENTRIES))
        loop.notify(ChangeSignal(RecordKind.SERVICES))
        loop.notify(ChangeSignal(RecordKind.SETTINGS))
        assert loop.process_pending() == 3
        assert store.fetches == 1

    def test_any_kind_triggers_full_refetch(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        loop.refresh()
        store.hours = "5"
        loop.notify(ChangeSignal(RecordKind.EMPLOYEES))
        loop.process_pending()
        assert loop.latest.totals.total_hours == Decimal("5")

    def test_select_month(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        loop.select_month("2024-04")
        loop.process_pending()
        assert loop.month_key == "2024-04"
        assert loop.latest.month_key == "2024-04"
        assert loop.latest.totals.total_hours == Decimal("0")

    def test_select_invalid_month(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03")
        with pytest.raises(InvalidMonthKeyError):
            loop.select_month("2024-13")
        assert loop.month_key == "2024-03"


class TestBackgroundThread:

    def test_signal_processed_in_background(self, store, reporting):
        done = threading.Event()
        loop = RecomputeLoop(
            store, reporting, month_key="2024-03",
            on_report=lambda report: done.set(),
            poll_interval_seconds=0.05,
        )
        loop.start()
        try:
            assert loop.is_running
            loop.notify(ChangeSignal(RecordKind.SERVICES))
            assert done.wait(timeout=5)
        finally:
            loop.stop(timeout=5)
        assert not loop.is_running
        assert loop.latest is not None

    def test_start_twice_is_noop(self, store, reporting):
        loop = RecomputeLoop(store, reporting, month_key="2024-03", poll_interval_seconds=0.05)
        loop.start()
        thread = loop._thread
        loop.start()
        assert loop._thread is thread
        loop.stop(timeout=5)
