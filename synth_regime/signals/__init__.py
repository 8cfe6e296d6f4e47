"""Signal generation strategies."""

from .signal import Direction, Signal
from .range_band import range_band_signal
from .contrarian import contrarian_signal, compute_tilt
from .generator import dispatch_signal
from .trigger import SignalTrigger, TriggerDecision

__all__ = [
    "Direction",
    "Signal",
    "range_band_signal",
    "contrarian_signal",
    "compute_tilt",
    "dispatch_signal",
    "SignalTrigger",
    "TriggerDecision",
]
