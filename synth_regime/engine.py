"""Orchestrates snapshot ingestion, regime classification and signal generation."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Union
import logging

from synth_regime.analysis.percentiles import (
    PercentileSummary,
    PercentileTrend,
    detect_percentile_trend,
    summarize_percentiles,
)
from synth_regime.analysis.quantiles import extract_quantiles
from synth_regime.analysis.rolling_stats import RollingStats, compute_rolling_stats
from synth_regime.errors import SnapshotError
from synth_regime.ingestion.snapshot import Snapshot
from synth_regime.regimes.market_regime import RegimeResult, classify
from synth_regime.signals.generator import dispatch_signal
from synth_regime.signals.signal import Signal
from synth_regime.state.flat_snap import FlatSnap
from synth_regime.state.store import AnalyticsStore, AssetState

logger = logging.getLogger(__name__)

TREND_HOURS = 24


class SignalEngine:
    """
    Entry point for the surrounding agent/report layer.

    All per-asset state lives in the AnalyticsStore; operations on one asset
    are serialised by that asset's lock.
    """

    def __init__(self, store: Optional[AnalyticsStore] = None):
        self.store = store if store is not None else AnalyticsStore()

    @classmethod
    def from_config(cls) -> "SignalEngine":
        from synth_regime import config

        return cls(
            AnalyticsStore(
                assets=config.ASSETS,
                snapshot_capacity=config.SNAPSHOT_BUFFER_CAPACITY,
                tilt_capacity=config.TILT_HISTORY_CAPACITY,
                regime_history_capacity=config.REGIME_HISTORY_CAPACITY,
                auto_register=config.AUTO_REGISTER_ASSETS,
            )
        )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def ingest(self, asset: str, snapshot: Union[Snapshot, Mapping[str, Any]]) -> bool:
        """
        Extract quantiles from a snapshot and buffer the result.

        Malformed or unusable snapshots are logged and skipped; returns True
        only when the snapshot was buffered.
        """
        state = self.store.get(asset)

        try:
            if not isinstance(snapshot, Snapshot):
                snapshot = Snapshot.from_payload(snapshot)
            levels = extract_quantiles(snapshot.probability_below)
        except SnapshotError as exc:
            logger.warning("Skipping malformed %s snapshot: %s", state.symbol, exc)
            return False

        if levels is None:
            logger.warning(
                "Skipping %s snapshot at %s: fewer than 2 price levels",
                state.symbol,
                snapshot.timestamp,
            )
            return False

        flat = FlatSnap(
            timestamp=snapshot.timestamp,
            symbol=state.symbol,
            price=snapshot.current_price,
            q10=levels.q10,
            q50=levels.q50,
            q90=levels.q90,
        )

        with state.lock:
            if not state.snaps.push(flat):
                return False
            state.raw.push(snapshot)

        logger.debug(
            "Buffered %s snapshot t=%s price=%.2f q10=%.2f q50=%.2f q90=%.2f (size=%d)",
            state.symbol,
            flat.timestamp,
            flat.price,
            flat.q10,
            flat.q50,
            flat.q90,
            state.snaps.size(),
        )
        return True

    # ------------------------------------------------------------------
    # Regime
    # ------------------------------------------------------------------
    def rolling_stats(self, asset: str) -> Optional[RollingStats]:
        state = self.store.get(asset, create=False)
        with state.lock:
            return compute_rolling_stats(state.snaps.history())

    def classify_regime(self, asset: str) -> Optional[RegimeResult]:
        """Current regime for asset, or None with insufficient 24h history."""
        state = self.store.get(asset, create=False)
        with state.lock:
            _, _, regime = self._evaluate(state)
        return regime

    def _evaluate(
        self, state: AssetState
    ) -> Tuple[Optional[FlatSnap], Optional[RollingStats], Optional[RegimeResult]]:
        history = state.snaps.history()
        latest = history[-1] if history else None
        stats = compute_rolling_stats(history)
        if stats is None:
            return latest, None, None

        regime = classify(stats)
        self._track(state, regime, latest.timestamp)
        return latest, stats, regime

    def _track(self, state: AssetState, regime: RegimeResult, timestamp: int) -> None:
        transition = self.store.regime_tracker.track_transition(
            state.symbol, regime.regime, timestamp, confidence=regime.confidence
        )
        if transition is not None:
            state.transitions.push(transition)

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------
    def generate_signal(self, asset: str) -> Signal:
        """Classify the regime and run the matching strategy on the latest snapshot."""
        state = self.store.get(asset, create=False)
        with state.lock:
            latest, stats, regime = self._evaluate(state)
            signal = dispatch_signal(latest, stats, regime, state.tilts)

        logger.debug(
            "%s signal %s strength=%.3f regime=%s reason=%s",
            state.symbol,
            signal.direction.value,
            signal.strength,
            regime.regime.value if regime else None,
            signal.reason,
        )
        return signal

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def percentile_summary(self, asset: str, current_price: float) -> Optional[PercentileSummary]:
        state = self.store.get(asset, create=False)
        return summarize_percentiles(state.raw.history(), current_price)

    def percentile_trend(self, asset: str) -> PercentileTrend:
        """Trend of the forecast median, resampled to hourly medians over the last day."""
        state = self.store.get(asset, create=False)
        frame = state.snaps.to_frame()
        if frame.empty:
            return detect_percentile_trend([])
        hourly = frame["q50"].resample("1h").median().dropna()
        return detect_percentile_trend(hourly.tolist()[-TREND_HOURS:])

    def status(self, asset: str) -> dict:
        state = self.store.get(asset, create=False)
        latest = state.snaps.latest()
        record = self.store.regime_tracker.current(state.symbol)
        return {
            "symbol": state.symbol,
            "size": state.snaps.size(),
            "max_size": state.snaps.maxlen,
            "tilt_history_size": state.tilts.size(),
            "last_timestamp": latest.timestamp if latest else None,
            "last_price": latest.price if latest else None,
            "regime": record.regime.value if record else None,
            "regime_since": record.since if record else None,
        }
