"""
shop_engines.numeric -- Decimal arithmetic that never raises.

Responsibility:
    Engines must not raise for typed inputs, including non-finite ones.
    Under the default Decimal context ``Infinity / Infinity``,
    ``Infinity * 0`` and ordering comparisons against NaN signal
    ``InvalidOperation``.  Engine arithmetic runs inside ``propagating()``
    so those operations yield NaN, and comparisons go through the NaN-aware
    helpers below.

Architecture position:
    Engines -- pure helpers shared by the calculation modules.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import Decimal, DivisionByZero, InvalidOperation, getcontext, localcontext
from typing import TypeVar

from shop_kernel.domain.records import ZERO

T = TypeVar("T")


def propagating():
    """Local Decimal context in which invalid operations produce NaN."""
    ctx = getcontext().copy()
    ctx.traps[InvalidOperation] = False
    ctx.traps[DivisionByZero] = False
    return localcontext(ctx)


def is_non_negative(value: Decimal) -> bool:
    """``value >= 0``; NaN is never non-negative."""
    return not value.is_nan() and value >= ZERO


def sorted_desc_nan_last(items: Iterable[T], key: Callable[[T], Decimal]) -> list[T]:
    """Stable descending sort on ``key``; items whose key is NaN go last, in input order."""
    items = list(items)
    numbers = [item for item in items if not key(item).is_nan()]
    nans = [item for item in items if key(item).is_nan()]
    return sorted(numbers, key=key, reverse=True) + nans
