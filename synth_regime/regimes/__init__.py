"""Market regime classification."""

from .market_regime import (
    REGIME_MULTIPLIERS,
    MarketRegime,
    RegimeResult,
    classify,
)

__all__ = [
    "REGIME_MULTIPLIERS",
    "MarketRegime",
    "RegimeResult",
    "classify",
]
