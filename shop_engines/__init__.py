"""
Module: shop_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines: cost rates, month window, profitability.  This is
    the canonical import surface for higher layers (shop_modules,
    shop_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import shop_kernel.domain / shop_kernel.exceptions (and sibling
    engine modules).  MUST NOT import shop_services or shop_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic for money and hours.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from shop_engines import derive_cost_rates, compute_month_totals
    from shop_engines import shift_month, profit_trend
"""

from shop_engines.cost_rates import cost_per_hour, cost_rate_for, derive_cost_rates
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
from shop_engines.profitability import (
    TOP_SERVICE_TYPES,
    TREND_MONTHS,
    UNKNOWN_EMPLOYEE,
    UNTYPED,
    EmployeeProfit,
    LaborTotals,
    MonthTotals,
    ServiceProfit,
    ServiceTypeCount,
    TrendPoint,
    compute_month_totals,
    fixed_expense_total,
    labor_totals,
    month_entries,
    profit_by_employee,
    profit_by_service,
    profit_trend,
    service_type_breakdown,
    service_type_label,
    summarize_services,
)

__all__ = [
    # cost_rates
    "cost_per_hour",
    "cost_rate_for",
    "derive_cost_rates",
    # month_window
    "current_month_key",
    "entries_for_services",
    "ids_of",
    "month_key_of",
    "month_window",
    "parse_month_key",
    "services_in_month",
    "shift_month",
    # profitability
    "TOP_SERVICE_TYPES",
    "TREND_MONTHS",
    "UNKNOWN_EMPLOYEE",
    "UNTYPED",
    "EmployeeProfit",
    "LaborTotals",
    "MonthTotals",
    "ServiceProfit",
    "ServiceTypeCount",
    "TrendPoint",
    "compute_month_totals",
    "fixed_expense_total",
    "labor_totals",
    "month_entries",
    "profit_by_employee",
    "profit_by_service",
    "profit_trend",
    "service_type_breakdown",
    "service_type_label",
    "summarize_services",
]
