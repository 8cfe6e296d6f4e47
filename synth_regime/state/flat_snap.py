"""Immutable per-snapshot quantile summary."""
from dataclasses import dataclass


@dataclass(frozen=True)
class FlatSnap:
    timestamp: int  # epoch milliseconds
    symbol: str
    price: float

    q10: float
    q50: float
    q90: float
