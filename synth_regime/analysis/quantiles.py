"""Quantile extraction from a forecast's probability-below curve."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from synth_regime.errors import SnapshotError

TARGET_PROBABILITIES = (0.1, 0.5, 0.9)


@dataclass(frozen=True)
class QuantileLevels:
    q10: float
    q50: float
    q90: float


def _sorted_points(probability_below: Mapping[float, float]) -> List[Tuple[float, float]]:
    # (price, prob) ascending by probability, price breaks ties
    try:
        points = [(float(price), float(prob)) for price, prob in probability_below.items()]
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid probability_below curve: {exc}") from exc
    return sorted(points, key=lambda point: (point[1], point[0]))


def interpolate_price(points: List[Tuple[float, float]], p: float) -> float:
    """
    Price at cumulative probability ``p``, interpolating linearly in probability space.

    Targets outside the curve clamp to the boundary price. When several levels
    share probability ``p`` exactly, the midpoint of that flat stretch is returned.
    """
    lowest_price, lowest_prob = points[0]
    highest_price, highest_prob = points[-1]
    if p <= lowest_prob:
        return lowest_price
    if p >= highest_prob:
        return highest_price

    flat = [price for price, prob in points if prob == p]
    if flat:
        return (min(flat) + max(flat)) / 2.0

    for (lower_price, lower_prob), (upper_price, upper_prob) in zip(points[:-1], points[1:]):
        if lower_prob < p < upper_prob:
            t = (p - lower_prob) / (upper_prob - lower_prob)
            return lower_price + t * (upper_price - lower_price)

    return highest_price  # pragma: no cover - unreachable for sorted points


def extract_quantiles(probability_below: Mapping[float, float]) -> Optional[QuantileLevels]:
    """q10/q50/q90 price levels, or None when fewer than two price levels exist."""
    points = _sorted_points(probability_below)
    if len({price for price, _ in points}) < 2:
        return None

    q10, q50, q90 = (interpolate_price(points, p) for p in TARGET_PROBABILITIES)
    return QuantileLevels(q10=q10, q50=q50, q90=q90)
