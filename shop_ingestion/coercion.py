"""
Record coercion: pure transformation from loosely-typed store rows to
typed shop records.

The store hands back dicts whose values may be strings, floats, ints,
Decimals, dates or None.  Everything the engines rely on (Decimal
arithmetic, real dates, non-blank ids) is established here, so the engines
never have to validate.  ZERO I/O.

Rules:
    - Missing ids or references raise RecordCoercionError.
    - A service without a parseable date raises RecordCoercionError: it
      could never belong to a month.
    - Non-numeric money and hour values become 0; negative salaries,
      contracted hours and expense amounts are clamped to 0.
    - Entry hours are otherwise kept as given, negatives included.
    - Numbers written with a decimal comma ("12,5") are accepted.
    - The billing rate must be a positive number.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from shop_kernel.domain.records import (
    ZERO,
    BillingSetting,
    Employee,
    FixedExpense,
    RecordKind,
    Service,
    TimeEntry,
)
from shop_kernel.exceptions import RecordCoercionError
from shop_kernel.logging_config import get_logger

logger = get_logger("ingestion.coercion")


# -----------------------------------------------------------------------------
# Scalar coercion (pure)
# -----------------------------------------------------------------------------


def parse_number(value: Any) -> Decimal | None:
    """Finite Decimal from a number or numeric string, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        s = value.strip().replace(",", ".")
        if not s:
            return None
        try:
            result = Decimal(s)
        except InvalidOperation:
            return None
    else:
        return None
    return result if result.is_finite() else None


def parse_date(value: Any) -> date | None:
    """Calendar date from a date, datetime or ISO string, else None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            return date.fromisoformat(s[:10])
        except ValueError:
            return None
    return None


def parse_text(value: Any) -> str | None:
    """Stripped text; blank or missing becomes None."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


# -----------------------------------------------------------------------------
# Field helpers
# -----------------------------------------------------------------------------


def _required_text(row: dict[str, Any], field: str, kind: RecordKind) -> str:
    value = parse_text(row.get(field))
    if value is None:
        raise RecordCoercionError(kind.value, parse_text(row.get("id")), field, "is missing")
    return value


def _amount(row: dict[str, Any], field: str, kind: RecordKind, record_id: str) -> Decimal:
    raw = row.get(field)
    value = parse_number(raw)
    if value is None:
        if raw is not None:
            logger.warning(
                "non_numeric_value_zeroed",
                extra={"kind": kind.value, "record_id": record_id, "field": field},
            )
        return ZERO
    if value < ZERO:
        logger.warning(
            "negative_value_clamped",
            extra={"kind": kind.value, "record_id": record_id, "field": field, "value": value},
        )
        return ZERO
    return value


# -----------------------------------------------------------------------------
# Record coercion (pure apart from warning logs)
# -----------------------------------------------------------------------------


def coerce_employee(row: dict[str, Any]) -> Employee:
    kind = RecordKind.EMPLOYEES
    record_id = _required_text(row, "id", kind)
    return Employee(
        id=record_id,
        name=parse_text(row.get("name")),
        role=parse_text(row.get("role")),
        monthly_salary=_amount(row, "monthly_salary", kind, record_id),
        monthly_hours=_amount(row, "monthly_hours", kind, record_id),
    )


def coerce_service(row: dict[str, Any]) -> Service:
    kind = RecordKind.SERVICES
    record_id = _required_text(row, "id", kind)
    service_date = parse_date(row.get("service_date"))
    if service_date is None:
        raise RecordCoercionError(
            kind.value, record_id, "service_date", "is missing or not an ISO date",
        )
    return Service(
        id=record_id,
        service_date=service_date,
        service_no=parse_text(row.get("service_no")),
        plate=parse_text(row.get("plate")),
        service_type=parse_text(row.get("service_type")),
        notes=parse_text(row.get("notes")),
    )


def coerce_time_entry(row: dict[str, Any]) -> TimeEntry:
    kind = RecordKind.TIME_ENTRIES
    record_id = _required_text(row, "id", kind)
    hours = parse_number(row.get("hours"))
    if hours is None:
        logger.warning(
            "non_numeric_value_zeroed",
            extra={"kind": kind.value, "record_id": record_id, "field": "hours"},
        )
        hours = ZERO
    return TimeEntry(
        id=record_id,
        service_id=_required_text(row, "service_id", kind),
        employee_id=_required_text(row, "employee_id", kind),
        hours=hours,
        entry_date=parse_date(row.get("entry_date")),
        notes=parse_text(row.get("notes")),
    )


def coerce_fixed_expense(row: dict[str, Any]) -> FixedExpense:
    kind = RecordKind.FIXED_EXPENSES
    record_id = _required_text(row, "id", kind)
    return FixedExpense(
        id=record_id,
        name=parse_text(row.get("name")) or "",
        amount_monthly=_amount(row, "amount_monthly", kind, record_id),
    )


def coerce_billing_setting(row: dict[str, Any]) -> BillingSetting:
    rate = parse_number(row.get("hourly_rate"))
    if rate is None or rate <= ZERO:
        raise RecordCoercionError(
            RecordKind.SETTINGS.value,
            parse_text(row.get("id")),
            "hourly_rate",
            "must be a positive number",
        )
    return BillingSetting(hourly_rate=rate)


COERCERS = {
    RecordKind.EMPLOYEES: coerce_employee,
    RecordKind.SERVICES: coerce_service,
    RecordKind.TIME_ENTRIES: coerce_time_entry,
    RecordKind.FIXED_EXPENSES: coerce_fixed_expense,
    RecordKind.SETTINGS: coerce_billing_setting,
}
