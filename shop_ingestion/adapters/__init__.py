"""Source adapters for store exports."""

from shop_ingestion.adapters.json_adapter import JsonSnapshotAdapter

__all__ = ["JsonSnapshotAdapter"]
