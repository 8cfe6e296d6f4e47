"""Gate deciding which signals are strong and fresh enough to wake the agent."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import logging

from .signal import Direction, Signal

logger = logging.getLogger(__name__)

DEFAULT_MIN_STRENGTH = 0.8
DEFAULT_COOLDOWN_MS = 30 * 60 * 1000


@dataclass(frozen=True)
class TriggerDecision:
    fired: bool
    asset: str
    direction: Direction
    strength: float
    reason: str
    cooldown_remaining_ms: int = 0


class SignalTrigger:
    """
    Fire on high-conviction signals, suppressing repeats of the same
    asset/direction until the cooldown has passed.
    """

    def __init__(
        self,
        min_strength: float = DEFAULT_MIN_STRENGTH,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
    ):
        self.min_strength = min_strength
        self.cooldown_ms = cooldown_ms
        self._last: Dict[str, Tuple[int, Direction]] = {}

    def last_fired(self, asset: str) -> Optional[Tuple[int, Direction]]:
        return self._last.get(asset.upper())

    def evaluate(self, asset: str, signal: Signal, timestamp: int) -> TriggerDecision:
        key = asset.upper()

        if signal.direction == Direction.NEUTRAL:
            return TriggerDecision(False, key, signal.direction, signal.strength, signal.reason)

        if signal.strength < self.min_strength:
            return TriggerDecision(
                False,
                key,
                signal.direction,
                signal.strength,
                f"strength {signal.strength:.0%} below trigger minimum {self.min_strength:.0%}",
            )

        last = self._last.get(key)
        if last is not None:
            last_ts, last_direction = last
            remaining = self.cooldown_ms - (timestamp - last_ts)
            if last_direction == signal.direction and remaining > 0:
                logger.warning(
                    "%s %s signal (%.0f%%) blocked - cooldown active (%.0fmin remaining)",
                    key,
                    signal.direction.value,
                    signal.strength * 100,
                    remaining / 60000.0,
                )
                return TriggerDecision(
                    False,
                    key,
                    signal.direction,
                    signal.strength,
                    "cooldown active",
                    cooldown_remaining_ms=int(remaining),
                )

        self._last[key] = (timestamp, signal.direction)
        logger.info(
            "%s trigger: %s %.0f%% - %s",
            key,
            signal.direction.value,
            signal.strength * 100,
            signal.reason,
        )
        return TriggerDecision(True, key, signal.direction, signal.strength, signal.reason)
