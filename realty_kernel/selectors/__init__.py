"""Selectors for the record store (read side)."""

from realty_kernel.selectors.snapshot_selector import SnapshotSelector

__all__ = ["SnapshotSelector"]
