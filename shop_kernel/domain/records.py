"""
Shop Record Model (``shop_kernel.domain.records``).

Responsibility
--------------
Frozen dataclass value objects for the five record kinds the profitability
engines consume: employees, services (billable jobs), per-job time entries,
recurring fixed expenses, and the shop-wide billing setting.  Also the
``ShopSnapshot`` bundle that carries one consistent read of all five.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Built by the
ingestion layer from loosely-typed store rows; consumed read-only by
``shop_engines`` and ``shop_modules.reporting``.

Invariants enforced
-------------------
* All records are ``frozen=True`` (immutable after construction).
* All monetary and hour fields use ``Decimal`` -- NEVER ``float``.
* Identifiers are opaque strings.
* A TimeEntry belongs to a month through its Service's ``service_date``;
  ``entry_date`` is informational only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class RecordKind(str, Enum):
    """The five record tables; values are the store's table names."""

    EMPLOYEES = "employees"
    SERVICES = "services"
    TIME_ENTRIES = "time_entries"
    FIXED_EXPENSES = "fixed_expenses"
    SETTINGS = "settings"


@dataclass(frozen=True)
class Employee:
    """A shop employee with a monthly salary and contracted hours."""
    id: str
    name: str | None = None
    role: str | None = None
    monthly_salary: Decimal = ZERO
    monthly_hours: Decimal = ZERO


@dataclass(frozen=True)
class Service:
    """A billable repair job."""
    id: str
    service_date: date | None
    service_no: str | None = None
    plate: str | None = None
    service_type: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TimeEntry:
    """Labor hours booked by one employee against one service."""
    id: str
    service_id: str
    employee_id: str
    hours: Decimal
    entry_date: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class FixedExpense:
    """A recurring monthly cost not tied to any service."""
    id: str
    name: str
    amount_monthly: Decimal = ZERO


@dataclass(frozen=True)
class BillingSetting:
    """Shop-wide price charged per labor hour."""
    hourly_rate: Decimal


@dataclass(frozen=True)
class ShopSnapshot:
    """
    One consistent read of all five record kinds.

    Recomputation always consumes a full fresh snapshot; nothing is patched
    incrementally, so every derived figure is consistent with some single
    point in time.
    """
    employees: tuple[Employee, ...] = ()
    services: tuple[Service, ...] = ()
    time_entries: tuple[TimeEntry, ...] = ()
    fixed_expenses: tuple[FixedExpense, ...] = ()
    billing: BillingSetting | None = None
    rejected_rows: int = 0

    @property
    def hourly_rate(self) -> Decimal:
        """Billing rate, or 0 when no setting row was loaded."""
        return self.billing.hourly_rate if self.billing is not None else ZERO
