"""Rolling 24h drift and forecast-bias statistics over buffered snapshots."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

import numpy as np

from synth_regime.state.flat_snap import FlatSnap

logger = logging.getLogger(__name__)

HORIZON_MS = 24 * 60 * 60 * 1000
MATCH_TOLERANCE_MS = 2 * 60 * 1000
MIN_OBSERVATIONS = 3
WINDOW = 8


@dataclass(frozen=True)
class RollingStats:
    drift_mean: float
    drift_std: float
    bias: float
    realised: Tuple[float, ...]
    bias_errors: Tuple[float, ...]

    @property
    def samples(self) -> int:
        return len(self.realised)


def _closest_prior(history: Sequence[FlatSnap], i: int, target: int) -> Optional[FlatSnap]:
    best: Optional[FlatSnap] = None
    best_gap: Optional[int] = None
    for j in range(i):
        gap = abs(history[j].timestamp - target)
        if best_gap is None or gap < best_gap:
            best, best_gap = history[j], gap
    if best_gap is None or best_gap > MATCH_TOLERANCE_MS:
        return None
    return best


def paired_observations(history: Sequence[FlatSnap]) -> List[Tuple[float, float]]:
    """
    Pair each snapshot with its ~24h-earlier counterpart.

    Returns ``(realised, bias_error)`` tuples oldest→newest, where realised is the
    price change since the earlier snapshot and bias_error is realised minus the
    change its median forecast predicted.
    """
    observations: List[Tuple[float, float]] = []
    for i, snap in enumerate(history):
        earlier = _closest_prior(history, i, snap.timestamp - HORIZON_MS)
        if earlier is None:
            continue
        realised = snap.price / earlier.price - 1.0
        predicted = earlier.q50 / earlier.price - 1.0
        observations.append((realised, realised - predicted))
    return observations


def compute_rolling_stats(history: Sequence[FlatSnap]) -> Optional[RollingStats]:
    """
    Drift mean/std (population) and mean forecast bias over the last 8 observations.

    Returns None when fewer than three paired observations exist in the buffer.
    """
    observations = paired_observations(history)
    if len(observations) < MIN_OBSERVATIONS:
        logger.debug(
            "Insufficient paired observations: %d < %d", len(observations), MIN_OBSERVATIONS
        )
        return None

    recent = observations[-WINDOW:]
    realised = np.array([r for r, _ in recent], dtype=float)
    bias_errors = np.array([b for _, b in recent], dtype=float)

    return RollingStats(
        drift_mean=float(np.mean(realised)),
        drift_std=float(np.std(realised)),
        bias=float(np.mean(bias_errors)),
        realised=tuple(float(x) for x in realised),
        bias_errors=tuple(float(x) for x in bias_errors),
    )
