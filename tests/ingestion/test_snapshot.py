"""
Tests for snapshot assembly and the JSON snapshot adapter.

Covers:
- Coercion of every kind into one ShopSnapshot
- Rejected rows counted and logged, good rows kept
- Billing rate fallback to the configured default
- Reading JSON exports from disk
"""

import json
import logging
from decimal import Decimal
from pathlib import Path

import pytest

from shop_ingestion import JsonSnapshotAdapter, build_snapshot
from shop_kernel.domain.records import RecordKind
from shop_kernel.exceptions import SnapshotLoadError

DEFAULT_RATE = Decimal("31")


def _rows(**overrides):
    rows = {
        RecordKind.EMPLOYEES: [{"id": "emp-1", "name": "Ana", "monthly_salary": 1600, "monthly_hours": 160}],
        RecordKind.SERVICES: [{"id": "svc-1", "service_date": "2024-03-05", "service_type": "Brakes"}],
        RecordKind.TIME_ENTRIES: [{"id": "te-1", "service_id": "svc-1", "employee_id": "emp-1", "hours": 8}],
        RecordKind.FIXED_EXPENSES: [{"id": "fx-1", "name": "Rent", "amount_monthly": 500}],
        RecordKind.SETTINGS: [{"id": 1, "hourly_rate": 25}],
    }
    rows.update(overrides)
    return rows


class TestBuildSnapshot:

    def test_all_kinds_coerced(self):
        snapshot = build_snapshot(_rows(), DEFAULT_RATE)
        assert len(snapshot.employees) == 1
        assert len(snapshot.services) == 1
        assert len(snapshot.time_entries) == 1
        assert len(snapshot.fixed_expenses) == 1
        assert snapshot.hourly_rate == Decimal("25")
        assert snapshot.rejected_rows == 0

    def test_bad_rows_dropped_and_counted(self, caplog):
        caplog.set_level(logging.WARNING, logger="shop_kernel")
        snapshot = build_snapshot(
            _rows(**{
                RecordKind.SERVICES: [
                    {"id": "svc-1", "service_date": "2024-03-05"},
                    {"id": "svc-2", "service_date": None},
                ],
                RecordKind.TIME_ENTRIES: [{"id": "te-1", "hours": 3}],
            }),
            DEFAULT_RATE,
        )
        assert [s.id for s in snapshot.services] == ["svc-1"]
        assert snapshot.time_entries == ()
        assert snapshot.rejected_rows == 2
        rejected = [r for r in caplog.records if r.getMessage() == "row_rejected"]
        assert {r.kind for r in rejected} == {"services", "time_entries"}

    def test_missing_settings_uses_default(self):
        snapshot = build_snapshot(_rows(**{RecordKind.SETTINGS: []}), DEFAULT_RATE)
        assert snapshot.hourly_rate == DEFAULT_RATE

    def test_invalid_rate_uses_default(self):
        snapshot = build_snapshot(
            _rows(**{RecordKind.SETTINGS: [{"id": 1, "hourly_rate": 0}]}), DEFAULT_RATE,
        )
        assert snapshot.hourly_rate == DEFAULT_RATE
        assert snapshot.rejected_rows == 1

    def test_absent_kinds_are_empty(self):
        snapshot = build_snapshot({}, DEFAULT_RATE)
        assert snapshot.employees == ()
        assert snapshot.services == ()
        assert snapshot.hourly_rate == DEFAULT_RATE


class TestJsonSnapshotAdapter:

    def _write(self, tmp_path, payload) -> Path:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_reads_tables(self, tmp_path):
        path = self._write(tmp_path, {
            "employees": [{"id": "emp-1", "Monthly_Salary": 1600}],
            "settings": {"id": 1, "hourly_rate": 25.5},
        })
        rows = JsonSnapshotAdapter().read(path)
        assert rows[RecordKind.EMPLOYEES] == [{"id": "emp-1", "monthly_salary": 1600}]
        assert rows[RecordKind.SETTINGS] == [{"id": 1, "hourly_rate": Decimal("25.5")}]
        assert rows[RecordKind.SERVICES] == []

    def test_round_trip_into_snapshot(self, tmp_path):
        path = self._write(tmp_path, {
            "services": [{"id": "svc-1", "service_date": "2024-03-05"}],
            "time_entries": [{"id": "te-1", "service_id": "svc-1", "employee_id": "e", "hours": 1.5}],
        })
        snapshot = build_snapshot(JsonSnapshotAdapter().read(path), DEFAULT_RATE)
        assert snapshot.time_entries[0].hours == Decimal("1.5")

    def test_non_object_root_rejected(self, tmp_path):
        path = self._write(tmp_path, [1, 2, 3])
        with pytest.raises(SnapshotLoadError):
            JsonSnapshotAdapter().read(path)

    def test_non_array_table_rejected(self, tmp_path):
        path = self._write(tmp_path, {"services": "nope"})
        with pytest.raises(SnapshotLoadError) as exc_info:
            JsonSnapshotAdapter().read(path)
        assert exc_info.value.kind == "services"

    def test_malformed_json_rejected(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotLoadError):
            JsonSnapshotAdapter().read(path)

    def test_non_utf8_bytes_rejected(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"services": "\xff"}')
        with pytest.raises(SnapshotLoadError) as exc_info:
            JsonSnapshotAdapter().read(path)
        assert "utf-8" in str(exc_info.value)
