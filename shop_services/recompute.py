"""
RecomputeLoop -- change-driven dashboard recomputation.

Contract:
    Any ``ChangeSignal`` (a row in one of the five tables changed, or the
    selected month changed) causes one full re-fetch of the snapshot and one
    full recomputation of the dashboard.  There is no partial invalidation.

Architecture: shop_services.  Composes an injected snapshot loader with
    ``shop_modules.reporting.ReportingService``.  The host that watches the
    store only has to call ``notify()``.

Invariants enforced:
    - Every published report is derived from exactly one snapshot.
    - Signals queued while a refresh is pending are coalesced into it.
    - A failing load or computation is logged; the previous report stays
      published and the loop keeps consuming signals.
    - ``stop()`` completes the refresh in progress before returning.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable

from shop_engines import parse_month_key
from shop_kernel.domain.records import RecordKind, ShopSnapshot
from shop_kernel.logging_config import LogContext, get_logger
from shop_modules.reporting import DashboardReport, ReportingService

logger = get_logger("services.recompute")


@dataclass(frozen=True)
class ChangeSignal:
    """Something changed; ``kind`` is None when only the month changed."""

    kind: RecordKind | None = None


_STOP = object()


class RecomputeLoop:
    """Consumes change signals and republishes the dashboard.

    Contract:
        - ``notify()`` is thread-safe and never blocks.
        - ``process_pending()`` drains the queue on the calling thread.
        - ``start()`` / ``stop()`` for background thread operation.

    Non-goals:
        - Does NOT subscribe to the store itself.
        - Does NOT debounce beyond coalescing already-queued signals.
    """

    def __init__(
        self,
        load_snapshot: Callable[[], ShopSnapshot],
        reporting_service: ReportingService,
        month_key: str | None = None,
        on_report: Callable[[DashboardReport], None] | None = None,
        poll_interval_seconds: float = 0.5,
    ):
        if month_key is not None:
            parse_month_key(month_key)
        self._load_snapshot = load_snapshot
        self._reporting = reporting_service
        self._month_key = month_key
        self._on_report = on_report
        self._poll_interval = poll_interval_seconds
        self._signals: queue.Queue = queue.Queue()
        self._refresh_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._latest: DashboardReport | None = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def latest(self) -> DashboardReport | None:
        """Most recently published report, or None before the first refresh."""
        return self._latest

    @property
    def month_key(self) -> str | None:
        return self._month_key

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def notify(self, signal: ChangeSignal) -> None:
        """Queue a change signal."""
        self._signals.put(signal)

    def select_month(self, month_key: str) -> None:
        """Switch the reported month and queue a recomputation."""
        parse_month_key(month_key)
        self._month_key = month_key
        self.notify(ChangeSignal())

    def refresh(self) -> DashboardReport | None:
        """Fetch a fresh snapshot and recompute the whole dashboard.

        Returns the new report, or None when the refresh failed.
        """
        with self._refresh_lock, LogContext.bind(month_key=self._month_key):
            try:
                snapshot = self._load_snapshot()
                report = self._reporting.dashboard(snapshot, self._month_key)
            except Exception:
                logger.exception("recompute_failed")
                return None
            self._latest = report
            logger.info(
                "dashboard_republished",
                extra={"month_key": report.month_key, "net_profit": report.totals.net_profit},
            )
        if self._on_report is not None:
            self._on_report(report)
        return report

    def process_pending(self) -> int:
        """Drain queued signals and refresh once if there were any.

        Returns the number of signals consumed.
        """
        signals = self._drain()
        if signals:
            self._refresh_for(signals)
        return len(signals)

    def start(self) -> None:
        """Start consuming signals in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="dashboard-recompute",
            daemon=True,
        )
        self._thread.start()
        logger.info("recompute_loop_started")

    def stop(self, timeout: float = 30.0) -> None:
        """Signal stop and wait for the consumer thread to finish.

        Args:
            timeout: Max seconds to wait for the thread to finish.
        """
        self._stop_event.set()
        self._signals.put(_STOP)
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("recompute_loop_stopped")

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _drain(self, first: object | None = None) -> list[ChangeSignal]:
        items = [] if first is None else [first]
        while True:
            try:
                items.append(self._signals.get_nowait())
            except queue.Empty:
                break
        return [s for s in items if s is not _STOP]

    def _refresh_for(self, signals: list[ChangeSignal]) -> None:
        kinds = sorted({s.kind.value for s in signals if s.kind is not None})
        logger.info(
            "recompute_triggered",
            extra={"signal_count": len(signals), "kinds": kinds},
        )
        self.refresh()

    def _run_loop(self) -> None:
        """Background consumer. Exits when stop_event is set."""
        while not self._stop_event.is_set():
            try:
                first = self._signals.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            signals = self._drain(first)
            if self._stop_event.is_set() or not signals:
                continue
            try:
                self._refresh_for(signals)
            except Exception:
                logger.exception("recompute_loop_exception")
