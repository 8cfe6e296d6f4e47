"""Owner of all per-asset in-memory analytics state."""
from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Dict, Iterable, List, Optional
import logging

from synth_regime.ingestion.snapshot import Snapshot
from synth_regime.errors import UnknownAssetError
from .flat_snap import FlatSnap
from .regime_tracker import RegimeTracker, RegimeTransition
from .snapshot_buffer import DEFAULT_CAPACITY, SnapshotRingBuffer
from .tilt_history import DEFAULT_TILT_CAPACITY, TiltHistory

logger = logging.getLogger(__name__)


@dataclass
class AssetState:
    symbol: str
    snaps: SnapshotRingBuffer[FlatSnap]
    raw: SnapshotRingBuffer[Snapshot]
    tilts: TiltHistory
    transitions: SnapshotRingBuffer[RegimeTransition]
    # Serialises ingest/classify/signal for one asset
    lock: RLock = field(default_factory=RLock)


class AnalyticsStore:
    """
    Per-asset buffers, tilt histories and regime bookkeeping.

    One store per engine; tests and parallel engines get independent state.
    """

    def __init__(
        self,
        assets: Iterable[str] = (),
        snapshot_capacity: int = DEFAULT_CAPACITY,
        tilt_capacity: int = DEFAULT_TILT_CAPACITY,
        regime_history_capacity: int = 500,
        auto_register: bool = True,
    ):
        self.snapshot_capacity = snapshot_capacity
        self.tilt_capacity = tilt_capacity
        self.regime_history_capacity = regime_history_capacity
        self.auto_register = auto_register
        self.regime_tracker = RegimeTracker()

        self._assets: Dict[str, AssetState] = {}
        self._registry_lock = Lock()

        for asset in assets:
            self.register(asset)

    @staticmethod
    def normalize(symbol: str) -> str:
        return symbol.strip().upper()

    def register(self, symbol: str) -> AssetState:
        """Create buffers for symbol (no-op if already tracked)."""
        key = self.normalize(symbol)
        with self._registry_lock:
            state = self._assets.get(key)
            if state is None:
                state = AssetState(
                    symbol=key,
                    snaps=SnapshotRingBuffer(maxlen=self.snapshot_capacity),
                    raw=SnapshotRingBuffer(maxlen=self.snapshot_capacity),
                    tilts=TiltHistory(maxlen=self.tilt_capacity),
                    transitions=SnapshotRingBuffer(maxlen=self.regime_history_capacity),
                )
                self._assets[key] = state
                logger.info(
                    "Registered analytics buffers for %s (capacity=%d, tilt_window=%d)",
                    key,
                    self.snapshot_capacity,
                    self.tilt_capacity,
                )
            return state

    def get(self, symbol: str, create: Optional[bool] = None) -> AssetState:
        """
        Return state for symbol.

        Unknown symbols are registered when ``create`` (default: auto_register)
        is true, otherwise UnknownAssetError is raised.
        """
        key = self.normalize(symbol)
        state = self._assets.get(key)
        if state is not None:
            return state
        if create if create is not None else self.auto_register:
            return self.register(key)
        raise UnknownAssetError(key)

    def has(self, symbol: str) -> bool:
        return self.normalize(symbol) in self._assets

    def assets(self) -> List[str]:
        return sorted(self._assets)

    def reset(self, symbol: str) -> None:
        """Clear every buffer held for symbol."""
        state = self.get(symbol, create=False)
        with state.lock:
            state.snaps.clear()
            state.raw.clear()
            state.tilts.clear()
            state.transitions.clear()
            self.regime_tracker.reset(state.symbol)
