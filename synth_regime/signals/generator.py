"""Regime-dispatched signal generation."""
from typing import Optional

from synth_regime.analysis.rolling_stats import RollingStats
from synth_regime.regimes.market_regime import MarketRegime, RegimeResult
from synth_regime.state.flat_snap import FlatSnap
from synth_regime.state.tilt_history import TiltHistory
from .contrarian import contrarian_signal
from .range_band import range_band_signal
from .signal import Signal


def dispatch_signal(
    snap: Optional[FlatSnap],
    stats: Optional[RollingStats],
    regime: Optional[RegimeResult],
    history: TiltHistory,
) -> Signal:
    """
    Pick the strategy for the current regime.

    RANGE uses the range bands, trends use the contrarian filter chain and
    CHOPPY never signals. Missing inputs resolve to NEUTRAL.
    """
    if snap is None:
        return Signal.neutral("no snapshots buffered")
    if stats is None or regime is None:
        return Signal.neutral("insufficient data: fewer than 3 paired 24h observations")

    if regime.regime == MarketRegime.CHOPPY:
        return Signal.neutral("market too choppy for signals")
    if regime.regime == MarketRegime.RANGE:
        return range_band_signal(snap)
    return contrarian_signal(snap, stats.bias, regime, history)
