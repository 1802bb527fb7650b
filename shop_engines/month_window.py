"""
shop_engines.month_window -- Calendar-month selection of services and entries.

Responsibility:
    Format dates as "YYYY-MM" month keys, select the services that fall in
    a month, follow them to their time entries, and shift month keys
    backward or forward across year boundaries.

Architecture position:
    Engines -- pure calculation layer, zero I/O, zero clock reads
    (``current_month_key`` takes the clock as a parameter).

Invariants enforced:
    - Month membership is decided by the Service's date only; a time
      entry's own date is never consulted.
    - ``month_key_of`` never raises: a missing or malformed date yields
      None, which matches no month.
    - ``shift_month(shift_month(M, d), -d) == M``.
    - Filters preserve input order and never mutate their inputs.

Failure modes:
    - InvalidMonthKeyError from ``parse_month_key`` / ``shift_month`` /
      ``month_window`` when the month key itself is not "YYYY-MM".
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from datetime import date

from shop_kernel.domain.clock import Clock
from shop_kernel.domain.records import Service, TimeEntry
from shop_kernel.exceptions import InvalidMonthKeyError

MONTHS_PER_YEAR = 12

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})(?:$|-)")


def month_key_of(value: date | str | None) -> str | None:
    """
    "YYYY-MM" key of a date, or None when the value has no usable month.

    ISO strings ("2024-03-05", "2024-03-05T10:00:00") are accepted so rows
    that skipped coercion still land in the right month.
    """
    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}"
    if isinstance(value, str):
        match = _DATE_PREFIX_RE.match(value.strip())
        if match and 1 <= int(match.group(2)) <= MONTHS_PER_YEAR:
            return f"{match.group(1)}-{match.group(2)}"
    return None


def parse_month_key(month_key: str) -> tuple[int, int]:
    """Split a month key into (year, month); raise on anything else."""
    if not isinstance(month_key, str):
        raise InvalidMonthKeyError(month_key)
    match = _MONTH_KEY_RE.match(month_key)
    if match is None:
        raise InvalidMonthKeyError(month_key)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise InvalidMonthKeyError(month_key)
    return year, month


def shift_month(month_key: str, delta: int) -> str:
    """Month key `delta` months away (negative = past)."""
    year, month = parse_month_key(month_key)
    index = year * MONTHS_PER_YEAR + (month - 1) + delta
    new_year, new_month = divmod(index, MONTHS_PER_YEAR)
    return f"{new_year:04d}-{new_month + 1:02d}"


def month_window(month_key: str, count: int) -> list[str]:
    """The `count` month keys ending at `month_key`, oldest first."""
    parse_month_key(month_key)
    return [shift_month(month_key, -offset) for offset in range(count - 1, -1, -1)]


def current_month_key(clock: Clock) -> str:
    """Month key of the clock's current local date."""
    return month_key_of(clock.now().date())


def services_in_month(services: Iterable[Service], month_key: str) -> list[Service]:
    """Services dated inside the month, in input order."""
    return [s for s in services if month_key_of(s.service_date) == month_key]


def ids_of(services: Iterable[Service]) -> set[str]:
    return {s.id for s in services}


def entries_for_services(
    entries: Iterable[TimeEntry],
    service_ids: Collection[str],
) -> list[TimeEntry]:
    """Entries booked against any of the given services, in input order."""
    return [e for e in entries if e.service_id in service_ids]
