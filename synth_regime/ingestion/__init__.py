"""Forecast snapshot records and parsing."""

from .snapshot import Snapshot, load_snapshot_store

__all__ = ["Snapshot", "load_snapshot_store"]
