"""
shop_engines.profitability -- Labor revenue, cost, and profit aggregation.

Responsibility:
    Derive the shop's financial figures from a snapshot of services, time
    entries, employee cost rates, the billing rate, and the fixed-expense
    total: whole-shop month totals, per-employee, per-service and
    per-service-type breakdowns, and a multi-month trend.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import shop_kernel.domain and sibling engines.
    Consumed by ``shop_modules.reporting.service``.

Invariants enforced:
    - revenue = hours * billing_rate; cost = sum(hours * employee cost rate);
      net_profit = revenue - cost - fixed_expenses, computed exactly in that
      form (no rounding inside the engine).
    - is_profitable is ``net_profit >= 0``: breaking even counts as profitable;
      a NaN net profit is not profitable.
    - Non-finite inputs never raise: invalid operations yield NaN, and rows
      with a NaN profit sort last.
    - Entries of unknown employees keep their hours and revenue but add no
      cost.
    - Every trend point uses the CURRENT billing rate and fixed-expense
      total; past rates and expenses are not reconstructed.
    - Sorts are stable: ties keep encounter order.
    - Purity: inputs are never mutated; identical inputs give identical
      outputs.

Failure modes:
    - None for typed inputs.  Empty inputs give zero metrics and empty
      breakdowns.

Usage:
    from shop_engines.profitability import compute_month_totals

    totals = compute_month_totals(
        month_key="2024-03",
        services=snapshot.services,
        entries=snapshot.time_entries,
        cost_rates=derive_cost_rates(snapshot.employees),
        billing_rate=Decimal("25"),
        fixed_expenses_total=Decimal("500"),
    )
    totals.net_profit  # Decimal("-380") for 8h at 25/h, 10/h cost, 500 fixed
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shop_engines.cost_rates import cost_rate_for
from shop_engines.month_window import (
    entries_for_services,
    ids_of,
    month_window,
    services_in_month,
)
from shop_engines.numeric import is_non_negative, propagating, sorted_desc_nan_last
from shop_engines.tracer import traced_engine
from shop_kernel.domain.records import (
    ZERO,
    Employee,
    FixedExpense,
    Service,
    TimeEntry,
)

UNTYPED = "Untyped"
UNKNOWN_EMPLOYEE = "Unknown"
TOP_SERVICE_TYPES = 10
TREND_MONTHS = 6


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LaborTotals:
    """Labor-only figures (no fixed expenses) for a set of entries."""

    hours: Decimal = ZERO
    revenue: Decimal = ZERO
    cost: Decimal = ZERO
    profit: Decimal = ZERO


@dataclass(frozen=True)
class MonthTotals:
    """Whole-shop figures for one calendar month."""

    month_key: str
    total_hours: Decimal
    revenue: Decimal
    cost: Decimal
    fixed_expenses: Decimal
    net_profit: Decimal
    is_profitable: bool


@dataclass(frozen=True)
class EmployeeProfit:
    """One employee's labor contribution in the month."""

    employee_id: str
    name: str
    role: str
    hours: Decimal
    revenue: Decimal
    cost: Decimal
    profit: Decimal


@dataclass(frozen=True)
class ServiceTypeCount:
    """Number of services and labor hours for one service type."""

    service_type: str
    count: int
    hours: Decimal


@dataclass(frozen=True)
class ServiceProfit:
    """Labor figures for one service."""

    service_id: str
    service_no: str | None
    plate: str | None
    service_type: str | None
    service_date: date | None
    hours: Decimal
    revenue: Decimal
    cost: Decimal
    profit: Decimal


@dataclass(frozen=True)
class TrendPoint:
    """Whole-shop figures for one month of the trend window."""

    month_key: str
    revenue: Decimal
    cost: Decimal
    fixed_expenses: Decimal
    net_profit: Decimal


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def fixed_expense_total(expenses: Iterable[FixedExpense]) -> Decimal:
    """Sum of all fixed expenses; 0 when there are none."""
    with propagating():
        return sum((x.amount_monthly for x in expenses), ZERO)


def service_type_label(service_type: str | None, untyped_label: str = UNTYPED) -> str:
    """Trimmed service type, or the untyped label when blank or absent."""
    return (service_type or "").strip() or untyped_label


def month_entries(
    services: Iterable[Service],
    entries: Iterable[TimeEntry],
    month_key: str,
) -> list[TimeEntry]:
    """Entries whose service is dated inside the month."""
    return entries_for_services(entries, ids_of(services_in_month(services, month_key)))


def labor_totals(
    entries: Iterable[TimeEntry],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
) -> LaborTotals:
    """Hours, revenue, cost and labor profit of a set of entries."""
    hours = ZERO
    cost = ZERO
    with propagating():
        for entry in entries:
            hours += entry.hours
            cost += entry.hours * cost_rate_for(cost_rates, entry.employee_id)
        revenue = hours * billing_rate
        profit = revenue - cost
    return LaborTotals(hours=hours, revenue=revenue, cost=cost, profit=profit)


def _month_totals(
    month_key: str,
    services: Iterable[Service],
    entries: Iterable[TimeEntry],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
    fixed_expenses_total: Decimal,
) -> MonthTotals:
    labor = labor_totals(
        month_entries(services, entries, month_key), cost_rates, billing_rate,
    )
    with propagating():
        net_profit = labor.revenue - labor.cost - fixed_expenses_total
    return MonthTotals(
        month_key=month_key,
        total_hours=labor.hours,
        revenue=labor.revenue,
        cost=labor.cost,
        fixed_expenses=fixed_expenses_total,
        net_profit=net_profit,
        is_profitable=is_non_negative(net_profit),
    )


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------


@traced_engine(
    "profitability.month_totals", "1.0",
    fingerprint_fields=("month_key", "billing_rate", "fixed_expenses_total"),
)
def compute_month_totals(
    *,
    month_key: str,
    services: Sequence[Service],
    entries: Sequence[TimeEntry],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
    fixed_expenses_total: Decimal,
) -> MonthTotals:
    """Whole-shop totals for the month, fixed expenses included."""
    return _month_totals(
        month_key, services, entries, cost_rates, billing_rate, fixed_expenses_total,
    )


@traced_engine(
    "profitability.by_employee", "1.0",
    fingerprint_fields=("billing_rate",),
)
def profit_by_employee(
    *,
    entries: Sequence[TimeEntry],
    employees: Sequence[Employee],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
    unknown_name: str = UNKNOWN_EMPLOYEE,
) -> list[EmployeeProfit]:
    """
    Group the month's entries by employee, most profitable first.

    Entries of an employee missing from ``employees`` still form a row,
    named ``unknown_name`` with an empty role.
    """
    hours_by_emp: dict[str, Decimal] = {}
    cost_by_emp: dict[str, Decimal] = {}
    with propagating():
        for entry in entries:
            emp_id = entry.employee_id
            hours_by_emp[emp_id] = hours_by_emp.get(emp_id, ZERO) + entry.hours
            cost_by_emp[emp_id] = (
                cost_by_emp.get(emp_id, ZERO)
                + entry.hours * cost_rate_for(cost_rates, emp_id)
            )

    directory: dict[str, Employee] = {}
    for employee in employees:
        directory.setdefault(employee.id, employee)

    rows: list[EmployeeProfit] = []
    for emp_id, hours in hours_by_emp.items():
        emp = directory.get(emp_id)
        cost = cost_by_emp[emp_id]
        with propagating():
            revenue = hours * billing_rate
            profit = revenue - cost
        rows.append(
            EmployeeProfit(
                employee_id=emp_id,
                name=emp.name if emp is not None and emp.name is not None else unknown_name,
                role=emp.role if emp is not None and emp.role is not None else "",
                hours=hours,
                revenue=revenue,
                cost=cost,
                profit=profit,
            )
        )

    return sorted_desc_nan_last(rows, key=lambda r: r.profit)


@traced_engine("profitability.service_types", "1.0", fingerprint_fields=("limit",))
def service_type_breakdown(
    *,
    month_services: Sequence[Service],
    entries: Sequence[TimeEntry],
    services: Sequence[Service],
    limit: int = TOP_SERVICE_TYPES,
    untyped_label: str = UNTYPED,
) -> list[ServiceTypeCount]:
    """
    Services and hours per service type, busiest types first.

    Hours come from ``entries`` (the month's entries) resolved to a type
    through ``services``; counts come from ``month_services``.  A type with
    services but no hours, or hours but no services, still appears.
    Sorted by (count desc, hours desc) and cut to ``limit`` rows.
    """
    by_id = {s.id: s for s in services}
    counts: dict[str, int] = {}
    hours: dict[str, Decimal] = {}

    with propagating():
        for entry in entries:
            svc = by_id.get(entry.service_id)
            label = service_type_label(svc.service_type if svc else None, untyped_label)
            counts.setdefault(label, 0)
            hours[label] = hours.get(label, ZERO) + entry.hours

    for svc in month_services:
        label = service_type_label(svc.service_type, untyped_label)
        counts[label] = counts.get(label, 0) + 1
        hours.setdefault(label, ZERO)

    rows = [
        ServiceTypeCount(service_type=label, count=count, hours=hours[label])
        for label, count in counts.items()
    ]
    # NaN hours rank below any number within the same count
    rows.sort(
        key=lambda r: (r.count, not r.hours.is_nan(), ZERO if r.hours.is_nan() else r.hours),
        reverse=True,
    )
    return rows[:limit]


@traced_engine("profitability.by_service", "1.0", fingerprint_fields=("billing_rate",))
def profit_by_service(
    *,
    month_services: Sequence[Service],
    entries: Sequence[TimeEntry],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
) -> list[ServiceProfit]:
    """One row per service in ``month_services``, zeros for services without entries."""
    by_service: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        by_service.setdefault(entry.service_id, []).append(entry)

    rows: list[ServiceProfit] = []
    for svc in month_services:
        labor = labor_totals(by_service.get(svc.id, ()), cost_rates, billing_rate)
        rows.append(
            ServiceProfit(
                service_id=svc.id,
                service_no=svc.service_no,
                plate=svc.plate,
                service_type=svc.service_type,
                service_date=svc.service_date,
                hours=labor.hours,
                revenue=labor.revenue,
                cost=labor.cost,
                profit=labor.profit,
            )
        )
    return rows


def summarize_services(rows: Iterable[ServiceProfit]) -> LaborTotals:
    """Column totals of the per-service rows."""
    hours = revenue = cost = profit = ZERO
    with propagating():
        for row in rows:
            hours += row.hours
            revenue += row.revenue
            cost += row.cost
            profit += row.profit
    return LaborTotals(hours=hours, revenue=revenue, cost=cost, profit=profit)


@traced_engine(
    "profitability.trend", "1.0",
    fingerprint_fields=("month_key", "billing_rate", "fixed_expenses_total", "months"),
)
def profit_trend(
    *,
    month_key: str,
    services: Sequence[Service],
    entries: Sequence[TimeEntry],
    cost_rates: Mapping[str, Decimal],
    billing_rate: Decimal,
    fixed_expenses_total: Decimal,
    months: int = TREND_MONTHS,
) -> list[TrendPoint]:
    """
    Whole-shop figures for the ``months`` months ending at ``month_key``,
    oldest first.  Each month gets the current rate and fixed expenses.
    """
    points: list[TrendPoint] = []
    for key in month_window(month_key, months):
        totals = _month_totals(
            key, services, entries, cost_rates, billing_rate, fixed_expenses_total,
        )
        points.append(
            TrendPoint(
                month_key=key,
                revenue=totals.revenue,
                cost=totals.cost,
                fixed_expenses=totals.fixed_expenses,
                net_profit=totals.net_profit,
            )
        )
    return points
