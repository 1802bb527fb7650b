"""
shop_engines.cost_rates -- Employee cost-per-hour derivation.

Responsibility:
    Turn each employee's monthly salary and contracted monthly hours into
    the cost the shop pays per labor hour, and expose the lookup every
    downstream cost computation uses.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import shop_kernel.domain.

Invariants enforced:
    - Division by zero is defined as 0: an employee without contracted
      hours costs nothing per hour.
    - A missing employee id resolves to a cost rate of 0.
    - Never raises: non-finite salaries propagate numerically (Infinity /
      Infinity is NaN), and a NaN hour count is treated as "not positive".

Usage:
    from shop_engines.cost_rates import derive_cost_rates, cost_rate_for

    rates = derive_cost_rates(employees=snapshot.employees)
    cost_rate_for(rates, "emp-1")  # Decimal("10") for 1600 / 160
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from shop_engines.numeric import propagating
from shop_engines.tracer import traced_engine
from shop_kernel.domain.records import ZERO, Employee


def cost_per_hour(monthly_salary: Decimal, monthly_hours: Decimal) -> Decimal:
    """Salary divided by contracted hours; 0 when hours are not positive."""
    if monthly_hours.is_nan() or not monthly_hours > ZERO:
        return ZERO
    with propagating():
        return monthly_salary / monthly_hours


@traced_engine("cost_rates", "1.0")
def derive_cost_rates(employees: Iterable[Employee]) -> dict[str, Decimal]:
    """
    Map employee id -> cost per hour.

    Later rows with a repeated id replace earlier ones.
    """
    rates: dict[str, Decimal] = {}
    for employee in employees:
        rates[employee.id] = cost_per_hour(
            employee.monthly_salary, employee.monthly_hours,
        )
    return rates


def cost_rate_for(cost_rates: Mapping[str, Decimal], employee_id: str) -> Decimal:
    """Cost rate for one employee; unknown employees cost 0 per hour."""
    return cost_rates.get(employee_id, ZERO)
