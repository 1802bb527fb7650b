"""
JSON snapshot adapter.

Reads a JSON export of the record store: one object whose keys are the
table names ("employees", "services", "time_entries", "fixed_expenses",
"settings"), each holding an array of row objects.  "settings" may also be
a single object.  Missing tables are read as empty.

File I/O only; coercion happens in ``shop_ingestion.snapshot``.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from shop_kernel.domain.records import RecordKind
from shop_kernel.exceptions import SnapshotLoadError


def _normalize_row_keys(item: dict[str, Any]) -> dict[str, Any]:
    """Copy with string keys stripped and lowercased."""
    return {str(k).strip().lower(): v for k, v in item.items() if isinstance(k, str)}


class JsonSnapshotAdapter:
    """Read a JSON store export as rows per record kind."""

    def read(self, source_path: Path, encoding: str = "utf-8") -> dict[RecordKind, list[dict[str, Any]]]:
        with source_path.open("r", encoding=encoding) as f:
            try:
                data = json.load(f, parse_float=Decimal)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise SnapshotLoadError(
                    "snapshot", f"{source_path} is not valid {encoding} JSON: {exc}",
                ) from exc
        if not isinstance(data, dict):
            raise SnapshotLoadError("snapshot", f"{source_path} does not hold a JSON object")

        rows: dict[RecordKind, list[dict[str, Any]]] = {}
        for kind in RecordKind:
            table = data.get(kind.value, [])
            if isinstance(table, dict):
                table = [table]
            if not isinstance(table, list):
                raise SnapshotLoadError(kind.value, f"expected an array in {source_path}")
            rows[kind] = [_normalize_row_keys(item) for item in table if isinstance(item, dict)]
        return rows
