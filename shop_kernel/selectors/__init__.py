"""Selectors for the shop kernel (read side)."""

from shop_kernel.selectors.snapshot_selector import SnapshotSelector

__all__ = [
    "SnapshotSelector",
]
