"""
Pure domain layer.

Immutable record types and the injectable clock.  NO dependencies on the
database, the configuration layer, or I/O.
"""

from shop_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from shop_kernel.domain.records import (
    BillingSetting,
    Employee,
    FixedExpense,
    RecordKind,
    Service,
    ShopSnapshot,
    TimeEntry,
)

__all__ = [
    "BillingSetting",
    "Clock",
    "DeterministicClock",
    "Employee",
    "FixedExpense",
    "RecordKind",
    "Service",
    "ShopSnapshot",
    "SystemClock",
    "TimeEntry",
]
