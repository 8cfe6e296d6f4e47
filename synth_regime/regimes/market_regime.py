"""Deterministic market regime classification from rolling drift statistics."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from synth_regime.analysis.rolling_stats import RollingStats

VOL_EPSILON = 0.001
CHOPPY_VOL_RATIO = 2.0
RANGE_DRIFT_RATIO = 0.4


class MarketRegime(str, Enum):
    TREND_UP = "TREND_UP"
    TREND_DOWN = "TREND_DOWN"
    RANGE = "RANGE"
    CHOPPY = "CHOPPY"


# Strength multipliers shared by the contrarian path and diagnostics
REGIME_MULTIPLIERS: Dict[MarketRegime, float] = {
    MarketRegime.TREND_UP: 1.0,
    MarketRegime.TREND_DOWN: 1.0,
    MarketRegime.RANGE: 0.7,
    MarketRegime.CHOPPY: 0.3,
}


@dataclass(frozen=True)
class RegimeResult:
    regime: MarketRegime
    confidence: float
    vol_normalized: float
    drift_mean: float
    drift_std: float

    @property
    def is_trending(self) -> bool:
        return self.regime in (MarketRegime.TREND_UP, MarketRegime.TREND_DOWN)

    def to_dict(self) -> dict:
        return {
            "regime": self.regime.value,
            "confidence": self.confidence,
            "vol_normalized": self.vol_normalized,
            "drift_mean": self.drift_mean,
            "drift_std": self.drift_std,
        }


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def classify(stats: RollingStats) -> RegimeResult:
    """
    Map drift mean/std to a regime using ordered rules.

    Noise dominating drift is CHOPPY, drift small against its spread is RANGE,
    anything else trends in the direction of the mean.
    """
    mean = stats.drift_mean
    std = stats.drift_std
    vol_normalized = std / (abs(mean) + VOL_EPSILON)

    if vol_normalized > CHOPPY_VOL_RATIO:
        regime = MarketRegime.CHOPPY
        confidence = min(vol_normalized / 3.0, 1.0)
    elif abs(mean) <= RANGE_DRIFT_RATIO * std:
        regime = MarketRegime.RANGE
        band = RANGE_DRIFT_RATIO * std
        confidence = 1.0 - abs(mean) / band if band > 0 else 1.0
    else:
        regime = MarketRegime.TREND_UP if mean > 0 else MarketRegime.TREND_DOWN
        confidence = min(abs(mean) / std, 1.0) if std > 0 else 1.0

    return RegimeResult(
        regime=regime,
        confidence=_clamp01(confidence),
        vol_normalized=float(vol_normalized),
        drift_mean=float(mean),
        drift_std=float(std),
    )
