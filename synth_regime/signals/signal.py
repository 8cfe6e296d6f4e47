"""Directional trade signal value object."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class Direction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class Signal:
    direction: Direction
    strength: float
    reason: str
    metrics: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def neutral(cls, reason: str, **metrics: float) -> "Signal":
        return cls(direction=Direction.NEUTRAL, strength=0.0, reason=reason, metrics=dict(metrics))

    @property
    def is_actionable(self) -> bool:
        return self.direction != Direction.NEUTRAL and self.strength > 0

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "strength": self.strength,
            "reason": self.reason,
            "metrics": dict(self.metrics),
        }
