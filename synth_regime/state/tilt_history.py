"""Bounded per-asset history of bias-corrected forecast tilts."""
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from synth_regime.regimes.market_regime import MarketRegime

DEFAULT_TILT_CAPACITY = 20


@dataclass(frozen=True)
class TiltEntry:
    timestamp: int  # epoch ms of the snapshot the tilt came from
    tilt: float
    regime: MarketRegime


class TiltHistory:
    """FIFO window of TiltEntry objects (oldest→newest)."""

    def __init__(self, maxlen: int = DEFAULT_TILT_CAPACITY):
        self._entries: Deque[TiltEntry] = deque(maxlen=maxlen)
        self._maxlen = maxlen

    def append(self, entry: TiltEntry) -> None:
        self._entries.append(entry)

    def entries(self) -> List[TiltEntry]:
        return list(self._entries)

    def tilts(self) -> List[float]:
        return [e.tilt for e in self._entries]

    def latest(self) -> Optional[TiltEntry]:
        return self._entries[-1] if self._entries else None

    def size(self) -> int:
        return len(self._entries)

    @property
    def maxlen(self) -> int:
        return self._maxlen

    def clear(self) -> None:
        self._entries.clear()
