"""
shop_ingestion -- Boundary coercion of store rows into shop records.

Turns the loosely-typed rows of the record store (database or JSON export)
into immutable ``shop_kernel.domain.records`` values and assembles them
into a ``ShopSnapshot``.

Architecture:
    shop_ingestion/ is a top-level package. Nothing in kernel/ or engines/
    imports from ingestion.
"""

from shop_ingestion.coercion import (
    coerce_billing_setting,
    coerce_employee,
    coerce_fixed_expense,
    coerce_service,
    coerce_time_entry,
    parse_date,
    parse_number,
    parse_text,
)
from shop_ingestion.adapters import JsonSnapshotAdapter
from shop_ingestion.snapshot import build_snapshot, load_snapshot

__all__ = [
    "JsonSnapshotAdapter",
    "build_snapshot",
    "coerce_billing_setting",
    "coerce_employee",
    "coerce_fixed_expense",
    "coerce_service",
    "coerce_time_entry",
    "load_snapshot",
    "parse_date",
    "parse_number",
    "parse_text",
]
