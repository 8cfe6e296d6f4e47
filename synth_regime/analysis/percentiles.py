"""Descriptive percentile table over pooled forecast price levels."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from synth_regime.ingestion.snapshot import Snapshot

REPORT_PERCENTILES: Tuple[int, ...] = (0, 1, 5, 10, 20, 30, 40, 50, 60, 70, 80, 90, 95, 99, 100)


@dataclass(frozen=True)
class PercentileLevel:
    percentile: int
    price: float


@dataclass(frozen=True)
class PercentileSummary:
    rank: int
    levels: List[PercentileLevel] = field(default_factory=list)
    sample_count: int = 0

    def price_at(self, percentile: int) -> Optional[float]:
        for level in self.levels:
            if level.percentile == percentile:
                return level.price
        return None

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "levels": [{"percentile": lv.percentile, "price": lv.price} for lv in self.levels],
            "sample_count": self.sample_count,
        }


def pooled_predictions(snapshots: Iterable[Snapshot]) -> np.ndarray:
    """Every probability-below price level across snapshots, ascending."""
    prices: List[float] = []
    for snap in snapshots:
        prices.extend(snap.probability_below.keys())
    return np.sort(np.asarray(prices, dtype=float))


def summarize_percentiles(
    snapshots: Iterable[Snapshot],
    current_price: float,
) -> Optional[PercentileSummary]:
    """
    Percentile levels at ``floor(p/100*(N-1))`` and the current price's rank.

    The rank is the rounded share of pooled predictions strictly below the
    current price. Returns None when no predictions are buffered.
    """
    predictions = pooled_predictions(snapshots)
    n = int(predictions.size)
    if n == 0:
        return None

    levels = [
        PercentileLevel(percentile=p, price=float(predictions[int(math.floor(p / 100 * (n - 1)))]))
        for p in REPORT_PERCENTILES
    ]
    below = int(np.count_nonzero(predictions < current_price))
    rank = int(math.floor(100 * below / n + 0.5))

    return PercentileSummary(rank=rank, levels=levels, sample_count=n)


class TrendDirection(str, Enum):
    UPWARD = "UPWARD"
    DOWNWARD = "DOWNWARD"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class PercentileTrend:
    direction: TrendDirection
    strength: float  # weighted step score

    def to_dict(self) -> dict:
        return {"direction": self.direction.value, "strength": self.strength}


MIN_TREND_POINTS = 6
TREND_SCORE_THRESHOLD = 1.5
# (most recent points, step threshold in %, weight)
TREND_WINDOWS: Tuple[Tuple[int, float, float], ...] = (
    (6, 0.1, 0.6),
    (12, 0.05, 0.3),
    (24, 0.02, 0.1),
)


def _step_score(medians: Sequence[float], threshold_pct: float) -> int:
    score = 0
    for prev, curr in zip(medians[:-1], medians[1:]):
        change = (curr - prev) / prev * 100 if prev > 0 else 0.0
        if change > threshold_pct:
            score += 1
        elif change < -threshold_pct:
            score -= 1
    return score


def detect_percentile_trend(medians: Sequence[float]) -> PercentileTrend:
    """
    Direction of a median (P50) series, oldest→newest.

    Counts up/down steps over the last 6, 12 and 24 points with shrinking
    thresholds and weights 0.6/0.3/0.1; a weighted score beyond ±1.5 is a trend.
    """
    if len(medians) < MIN_TREND_POINTS:
        return PercentileTrend(TrendDirection.NEUTRAL, 0.0)

    score = sum(
        weight * _step_score(medians[-points:], threshold)
        for points, threshold, weight in TREND_WINDOWS
    )
    if score > TREND_SCORE_THRESHOLD:
        direction = TrendDirection.UPWARD
    elif score < -TREND_SCORE_THRESHOLD:
        direction = TrendDirection.DOWNWARD
    else:
        direction = TrendDirection.NEUTRAL
    return PercentileTrend(direction, float(score))
