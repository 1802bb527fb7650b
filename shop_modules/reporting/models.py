"""
Dashboard Report Models (``shop_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects returned by ``ReportingService``: the
monthly dashboard, the services overview, and the single-service detail.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Row types come
from ``shop_engines.profitability``; this module only bundles them.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Collections are tuples so a finished report cannot be altered.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from shop_engines import (
    EmployeeProfit,
    LaborTotals,
    MonthTotals,
    ServiceProfit,
    ServiceTypeCount,
    TrendPoint,
)
from shop_kernel.domain.records import Service, TimeEntry


@dataclass(frozen=True)
class DashboardReport:
    """Everything the monthly dashboard shows."""

    month_key: str
    hourly_rate: Decimal
    generated_at: str  # ISO format timestamp from injected clock
    totals: MonthTotals
    by_employee: tuple[EmployeeProfit, ...]
    top_service_types: tuple[ServiceTypeCount, ...]
    by_service: tuple[ServiceProfit, ...]
    trend: tuple[TrendPoint, ...]


@dataclass(frozen=True)
class ServicesOverview:
    """Per-service rows of one month and their column totals."""

    month_key: str
    generated_at: str
    rows: tuple[ServiceProfit, ...]
    summary: LaborTotals


@dataclass(frozen=True)
class ServiceDetailReport:
    """One service, its time entries, and its labor totals."""

    service: Service
    generated_at: str
    entries: tuple[TimeEntry, ...]
    totals: LaborTotals


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def render_to_dict(report: DashboardReport | ServicesOverview | ServiceDetailReport) -> dict[str, Any]:
    """JSON-ready dict of a report; Decimals become strings, dates ISO text."""
    return _plain(asdict(report))
