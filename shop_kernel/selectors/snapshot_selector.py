"""
Module: shop_kernel.selectors.snapshot_selector
Responsibility: Read all five record tables in one session and hand them
    back as plain row dicts keyed by ``RecordKind``.  Coercion into typed
    records is the ingestion layer's job, not the selector's.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Read-only.
    - Every call reads every table: there is no partial or incremental
      refresh, so a snapshot always reflects one read of the whole store.
    - Row order follows the dashboard's listing order: employees, time
      entries and fixed expenses by creation time, services newest first.

Failure modes:
    - SnapshotLoadError wraps any SQLAlchemyError, naming the table that
      failed.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from shop_kernel.domain.records import RecordKind
from shop_kernel.exceptions import SnapshotLoadError
from shop_kernel.logging_config import get_logger
from shop_kernel.models.store import (
    EmployeeModel,
    FixedExpenseModel,
    ServiceModel,
    SettingsModel,
    TimeEntryModel,
)
from shop_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.snapshot")

SETTINGS_ROW_ID = 1

_COLUMNS: dict[RecordKind, tuple[str, ...]] = {
    RecordKind.EMPLOYEES: ("id", "name", "role", "monthly_salary", "monthly_hours"),
    RecordKind.SERVICES: (
        "id", "service_no", "plate", "service_type", "service_date", "notes",
    ),
    RecordKind.TIME_ENTRIES: (
        "id", "service_id", "employee_id", "hours", "entry_date", "notes",
    ),
    RecordKind.FIXED_EXPENSES: ("id", "name", "amount_monthly"),
    RecordKind.SETTINGS: ("id", "hourly_rate"),
}


class SnapshotSelector(BaseSelector):
    """Reads the record store into plain row dicts."""

    def _statement(self, kind: RecordKind):
        if kind == RecordKind.EMPLOYEES:
            return select(EmployeeModel).order_by(EmployeeModel.created_at, EmployeeModel.id)
        if kind == RecordKind.SERVICES:
            return select(ServiceModel).order_by(
                ServiceModel.service_date.desc(), ServiceModel.id,
            )
        if kind == RecordKind.TIME_ENTRIES:
            return select(TimeEntryModel).order_by(TimeEntryModel.created_at, TimeEntryModel.id)
        if kind == RecordKind.FIXED_EXPENSES:
            return select(FixedExpenseModel).order_by(
                FixedExpenseModel.created_at, FixedExpenseModel.id,
            )
        return select(SettingsModel).where(SettingsModel.id == SETTINGS_ROW_ID)

    def fetch(self, kind: RecordKind) -> list[dict[str, Any]]:
        """Read one table as a list of row dicts."""
        columns = _COLUMNS[kind]
        try:
            models = self.session.scalars(self._statement(kind)).all()
        except SQLAlchemyError as exc:
            raise SnapshotLoadError(kind.value, str(exc)) from exc
        return [{col: getattr(m, col) for col in columns} for m in models]

    def fetch_rows(self) -> dict[RecordKind, list[dict[str, Any]]]:
        """Read all five tables."""
        rows = {kind: self.fetch(kind) for kind in RecordKind}
        logger.info(
            "snapshot_rows_fetched",
            extra={kind.value: len(rows[kind]) for kind in RecordKind},
        )
        return rows
