"""
Enhanced contrarian signal for trending regimes.

Trades against the bias-corrected forecast skew ("tilt") once it is large,
persistent and statistically unusual relative to recent tilts. The filter
chain runs in order: minimum tilt, persistence, z-score, then strength
adjustments for acceleration and regime confidence.
"""
from __future__ import annotations

from typing import List, Tuple
import logging

import numpy as np

from synth_regime.regimes.market_regime import REGIME_MULTIPLIERS, RegimeResult
from synth_regime.state.flat_snap import FlatSnap
from synth_regime.state.tilt_history import TiltEntry, TiltHistory
from .signal import Direction, Signal

logger = logging.getLogger(__name__)

MIN_TILT = 0.005  # 0.5%
PERSISTENCE_PRIOR = 2
Z_THRESHOLD = 2.0
Z_MIN_SAMPLES = 3
ACCEL_SCALE = 100.0
ACCEL_BOOST_CAP = 0.5
ACCEL_DAMPEN = 0.7


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def compute_tilt(snap: FlatSnap, bias: float) -> float:
    """Median forecast deviation from price, net of recent forecast bias."""
    return snap.q50 / snap.price - 1.0 - bias


def tilt_zscore(tilt: float, tilts: List[float]) -> Tuple[float, float, float]:
    """(z, mean, std) of tilt against the population of tilts; z is 0 when undefined."""
    if len(tilts) < Z_MIN_SAMPLES:
        return 0.0, 0.0, 0.0
    arr = np.asarray(tilts, dtype=float)
    mean = float(np.mean(arr))
    std = float(np.std(arr))
    if std == 0:
        return 0.0, mean, std
    return (tilt - mean) / std, mean, std


def tilt_acceleration(current: TiltEntry, previous: TiltEntry) -> float:
    """Tilt change per second between consecutive entries (0 if no time elapsed)."""
    elapsed_seconds = (current.timestamp - previous.timestamp) / 1000.0
    if elapsed_seconds <= 0:
        return 0.0
    return (current.tilt - previous.tilt) / elapsed_seconds


def contrarian_signal(
    snap: FlatSnap,
    bias: float,
    regime: RegimeResult,
    history: TiltHistory,
) -> Signal:
    tilt = compute_tilt(snap, bias)
    entry = TiltEntry(timestamp=snap.timestamp, tilt=tilt, regime=regime.regime)

    # Recorded before filtering so rejected evaluations still shape the window
    history.append(entry)
    entries = history.entries()

    if abs(tilt) < MIN_TILT:
        logger.debug("%s tilt %.4f below minimum", snap.symbol, tilt)
        return Signal.neutral(f"tilt {tilt:+.2%} below minimum {MIN_TILT:.1%}", tilt=tilt)

    prior = entries[:-1][-PERSISTENCE_PRIOR:]
    if len(prior) < PERSISTENCE_PRIOR or any(_sign(e.tilt) != _sign(tilt) for e in prior):
        logger.debug("%s tilt %.4f lacks persistence (%d prior)", snap.symbol, tilt, len(prior))
        return Signal.neutral("insufficient persistence", tilt=tilt)

    z, tilt_mean, tilt_std = tilt_zscore(tilt, [e.tilt for e in entries])
    if abs(z) < Z_THRESHOLD:
        logger.debug("%s tilt z-score %.2f below threshold", snap.symbol, z)
        return Signal.neutral(
            f"z-score {z:.2f} below threshold {Z_THRESHOLD:.1f}",
            tilt=tilt,
            z_score=z,
        )

    strength = min(abs(z) / 3.0, 1.0)

    accel = tilt_acceleration(entry, entries[-2])
    if _sign(accel) == _sign(tilt):
        accel_factor = 1.0 + min(abs(accel) * ACCEL_SCALE, ACCEL_BOOST_CAP)
        accel_label = "accelerating"
    else:
        accel_factor = ACCEL_DAMPEN
        accel_label = "decelerating"
    strength *= accel_factor

    regime_factor = REGIME_MULTIPLIERS[regime.regime] * (0.5 + 0.5 * regime.confidence)
    strength *= regime_factor

    direction = Direction.LONG if tilt < 0 else Direction.SHORT
    strength = max(0.0, min(1.0, strength))

    return Signal(
        direction=direction,
        strength=strength,
        reason=(
            f"enhanced contrarian: tilt {tilt:+.2%} persistent, z-score {z:.2f}, "
            f"{accel_label} ({accel_factor:.2f}x), {regime.regime.value} "
            f"conf {regime.confidence:.2f}"
        ),
        metrics={
            "tilt": tilt,
            "z_score": z,
            "tilt_mean": tilt_mean,
            "tilt_std": tilt_std,
            "acceleration": accel,
            "accel_factor": accel_factor,
            "regime_factor": regime_factor,
        },
    )
