"""
synth_regime: forecast-driven market regime and signal engine

Consumes periodic 24h probabilistic price-forecast snapshots, classifies the
recent market regime from realised drift, and emits directional signals with
a bounded strength: range-band breakouts when ranging, contrarian fades of
the bias-corrected forecast skew when trending.
"""

__version__ = '0.1.0'

# Make key imports available at package level
from synth_regime.config import (
    ASSETS,
    SNAPSHOT_BUFFER_CAPACITY,
    TILT_HISTORY_CAPACITY,
)
from synth_regime.engine import SignalEngine
from synth_regime.ingestion.snapshot import Snapshot
from synth_regime.regimes.market_regime import MarketRegime, RegimeResult
from synth_regime.signals.signal import Direction, Signal
from synth_regime.state.store import AnalyticsStore

__all__ = [
    '__version__',
    'ASSETS',
    'SNAPSHOT_BUFFER_CAPACITY',
    'TILT_HISTORY_CAPACITY',
    'SignalEngine',
    'Snapshot',
    'MarketRegime',
    'RegimeResult',
    'Direction',
    'Signal',
    'AnalyticsStore',
]
