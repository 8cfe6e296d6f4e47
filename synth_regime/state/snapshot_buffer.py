"""Bounded per-asset snapshot history."""
from collections import deque
from threading import Lock
from typing import Deque, Generic, List, Optional, TypeVar
import logging

import pandas as pd

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 1000


class SnapshotRingBuffer(Generic[T]):
    """
    Fixed-capacity append-only buffer (oldest→newest); evicts the oldest on overflow.

    Items must expose a ``timestamp``. Entries that do not advance the latest
    timestamp are dropped so history stays ordered.
    """

    def __init__(self, maxlen: int = DEFAULT_CAPACITY):
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self._buffer: Deque[T] = deque(maxlen=maxlen)
        self._maxlen = maxlen
        self._lock = Lock()

    def push(self, item: T) -> bool:
        """Append an item; return False if it was dropped as non-monotonic."""
        with self._lock:
            if self._buffer and item.timestamp <= self._buffer[-1].timestamp:
                logger.warning(
                    "Non-monotonic timestamp detected: new=%s last=%s, dropping entry",
                    item.timestamp,
                    self._buffer[-1].timestamp,
                )
                return False
            self._buffer.append(item)
            return True

    def latest(self) -> Optional[T]:
        """Return the most recent item (or None)."""
        with self._lock:
            return self._buffer[-1] if self._buffer else None

    def history(self, n: Optional[int] = None) -> List[T]:
        """
        Return a copy of the last n items (oldest→newest).

        Args:
            n: Number of items to return. None returns full buffer.
        """
        with self._lock:
            if not self._buffer:
                return []
            if n is None or n >= len(self._buffer):
                return list(self._buffer)
            if n <= 0:
                return []
            return list(self._buffer)[-n:]

    def to_frame(self) -> pd.DataFrame:
        """Buffer contents as a DataFrame indexed by UTC timestamp."""
        rows = [vars(item) for item in self.history()]
        if not rows:
            return pd.DataFrame()
        df = pd.DataFrame(rows).sort_values("timestamp")
        df.index = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
        return df

    def is_empty(self) -> bool:
        """True if buffer has no entries."""
        with self._lock:
            return len(self._buffer) == 0

    def size(self) -> int:
        """Current buffer length."""
        with self._lock:
            return len(self._buffer)

    @property
    def maxlen(self) -> int:
        return self._maxlen

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._buffer.clear()
