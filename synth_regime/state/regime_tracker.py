"""Per-asset regime transition bookkeeping (diagnostic only)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import logging

from synth_regime.regimes.market_regime import MarketRegime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegimeRecord:
    regime: MarketRegime
    since: int  # epoch ms of the last change


@dataclass(frozen=True)
class RegimeTransition:
    timestamp: int
    symbol: str
    previous: Optional[MarketRegime]
    current: MarketRegime
    confidence: float
    elapsed_ms: Optional[int]  # time spent in the previous regime

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "symbol": self.symbol,
            "previous": self.previous.value if self.previous else None,
            "current": self.current.value,
            "confidence": self.confidence,
            "elapsed_ms": self.elapsed_ms,
        }


def _format_elapsed(elapsed_ms: int) -> str:
    minutes = elapsed_ms / 60000.0
    if minutes < 120:
        return f"{minutes:.0f}m"
    return f"{minutes / 60.0:.1f}h"


class RegimeTracker:
    """
    Remember the current regime per asset and report changes.

    Never feeds back into classification; callers get a RegimeTransition
    when the regime changes and None otherwise.
    """

    def __init__(self) -> None:
        self._current: Dict[str, RegimeRecord] = {}

    def current(self, symbol: str) -> Optional[RegimeRecord]:
        return self._current.get(symbol)

    def track_transition(
        self,
        symbol: str,
        regime: MarketRegime,
        timestamp: int,
        confidence: float = 0.0,
    ) -> Optional[RegimeTransition]:
        record = self._current.get(symbol)
        if record is not None and record.regime == regime:
            return None

        elapsed_ms = max(timestamp - record.since, 0) if record else None
        transition = RegimeTransition(
            timestamp=timestamp,
            symbol=symbol,
            previous=record.regime if record else None,
            current=regime,
            confidence=confidence,
            elapsed_ms=elapsed_ms,
        )
        self._current[symbol] = RegimeRecord(regime=regime, since=timestamp)

        if record is None:
            logger.info("%s initial regime %s (conf=%.2f)", symbol, regime.value, confidence)
        else:
            logger.info(
                "%s regime transition %s -> %s after %s (conf=%.2f)",
                symbol,
                record.regime.value,
                regime.value,
                _format_elapsed(elapsed_ms),
                confidence,
            )
        return transition

    def reset(self, symbol: Optional[str] = None) -> None:
        if symbol is None:
            self._current.clear()
        else:
            self._current.pop(symbol, None)
