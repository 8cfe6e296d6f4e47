"""
In-memory per-asset analytics state (ring buffers, tilt history, regime bookkeeping).
"""

from .flat_snap import FlatSnap

# Buffers
from .snapshot_buffer import SnapshotRingBuffer
from .tilt_history import TiltEntry, TiltHistory

# Bookkeeping
from .regime_tracker import RegimeRecord, RegimeTracker, RegimeTransition
from .store import AnalyticsStore, AssetState

__all__ = [
    "FlatSnap",

    # Buffers
    "SnapshotRingBuffer",
    "TiltEntry",
    "TiltHistory",

    # Bookkeeping
    "RegimeRecord",
    "RegimeTracker",
    "RegimeTransition",
    "AnalyticsStore",
    "AssetState",
]
