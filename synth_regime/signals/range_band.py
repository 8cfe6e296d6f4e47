"""Range-band breakout signal for non-trending regimes."""
from synth_regime.state.flat_snap import FlatSnap
from .signal import Direction, Signal

DEAD_ZONE = 0.0005  # 0.05%
FULL_STRENGTH_PCT = 3.0


def range_band_signal(snap: FlatSnap) -> Signal:
    """
    LONG when the whole lower band sits above price, SHORT when the upper band
    sits below it; strength scales with the breach, saturating at 3%.
    """
    price = snap.price

    if snap.q10 > price * (1 + DEAD_ZONE):
        deviation_pct = (snap.q10 / price - 1) * 100
        return Signal(
            direction=Direction.LONG,
            strength=min(deviation_pct / FULL_STRENGTH_PCT, 1.0),
            reason=f"price {deviation_pct:.2f}% below q10 band ({snap.q10:.2f})",
            metrics={"q10": snap.q10, "q90": snap.q90, "deviation_pct": deviation_pct},
        )

    if snap.q90 < price * (1 - DEAD_ZONE):
        deviation_pct = (1 - snap.q90 / price) * 100
        return Signal(
            direction=Direction.SHORT,
            strength=min(deviation_pct / FULL_STRENGTH_PCT, 1.0),
            reason=f"price {deviation_pct:.2f}% above q90 band ({snap.q90:.2f})",
            metrics={"q10": snap.q10, "q90": snap.q90, "deviation_pct": deviation_pct},
        )

    return Signal.neutral("price within range bands", q10=snap.q10, q90=snap.q90)
