"""
Snapshot assembly: store rows -> ShopSnapshot.

Coerces every row of every record kind, drops (and logs) the rows that
cannot be coerced, and resolves the billing rate, falling back to the
configured default when the settings row is missing or unusable.

A snapshot is always built from a full read of all five tables; there is
no incremental path.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session

from shop_ingestion.coercion import COERCERS
from shop_kernel.domain.records import BillingSetting, RecordKind, ShopSnapshot
from shop_kernel.exceptions import RecordCoercionError
from shop_kernel.logging_config import LogContext, get_logger
from shop_kernel.selectors.snapshot_selector import SnapshotSelector

logger = get_logger("ingestion.snapshot")


def _coerce_rows(kind: RecordKind, rows: Sequence[dict[str, Any]]) -> tuple[list[Any], int]:
    coerce = COERCERS[kind]
    records: list[Any] = []
    rejected = 0
    for row in rows:
        try:
            records.append(coerce(row))
        except RecordCoercionError as exc:
            rejected += 1
            logger.warning(
                "row_rejected",
                extra={
                    "kind": exc.kind,
                    "record_id": exc.record_id,
                    "field": exc.field,
                    "reason": exc.reason,
                },
            )
    return records, rejected


def build_snapshot(
    rows_by_kind: Mapping[RecordKind, Sequence[dict[str, Any]]],
    default_hourly_rate: Decimal,
) -> ShopSnapshot:
    """
    Coerce raw rows of all five kinds into one ShopSnapshot.

    Kinds absent from ``rows_by_kind`` are treated as empty tables.
    """
    coerced: dict[RecordKind, list[Any]] = {}
    rejected = 0
    for kind in RecordKind:
        records, dropped = _coerce_rows(kind, rows_by_kind.get(kind, ()))
        coerced[kind] = records
        rejected += dropped

    settings = coerced[RecordKind.SETTINGS]
    if settings:
        billing = settings[0]
    else:
        billing = BillingSetting(hourly_rate=default_hourly_rate)
        logger.info(
            "billing_rate_defaulted",
            extra={"hourly_rate": default_hourly_rate},
        )

    snapshot = ShopSnapshot(
        employees=tuple(coerced[RecordKind.EMPLOYEES]),
        services=tuple(coerced[RecordKind.SERVICES]),
        time_entries=tuple(coerced[RecordKind.TIME_ENTRIES]),
        fixed_expenses=tuple(coerced[RecordKind.FIXED_EXPENSES]),
        billing=billing,
        rejected_rows=rejected,
    )
    logger.info(
        "snapshot_built",
        extra={
            "employee_count": len(snapshot.employees),
            "service_count": len(snapshot.services),
            "time_entry_count": len(snapshot.time_entries),
            "fixed_expense_count": len(snapshot.fixed_expenses),
            "rejected_rows": rejected,
        },
    )
    return snapshot


def load_snapshot(session: Session, default_hourly_rate: Decimal) -> ShopSnapshot:
    """Read all five tables through the session and build a snapshot."""
    with LogContext.bind(snapshot_id=str(uuid4())):
        rows = SnapshotSelector(session).fetch_rows()
        return build_snapshot(rows, default_hourly_rate)
