"""Tests for the enhanced contrarian filter chain."""
import pytest

from synth_regime.regimes.market_regime import MarketRegime, RegimeResult
from synth_regime.signals.contrarian import (
    ACCEL_DAMPEN,
    compute_tilt,
    contrarian_signal,
    tilt_acceleration,
    tilt_zscore,
)
from synth_regime.signals.signal import Direction
from synth_regime.state.flat_snap import FlatSnap
from synth_regime.state.tilt_history import TiltEntry, TiltHistory

STEP_MS = 5 * 60 * 1000


def _regime(regime=MarketRegime.TREND_DOWN, confidence=1.0) -> RegimeResult:
    return RegimeResult(
        regime=regime,
        confidence=confidence,
        vol_normalized=0.5,
        drift_mean=-0.02,
        drift_std=0.01,
    )


def _history(prior_tilts, maxlen=20) -> TiltHistory:
    history = TiltHistory(maxlen=maxlen)
    for i, tilt in enumerate(prior_tilts):
        history.append(TiltEntry(timestamp=i * STEP_MS, tilt=tilt, regime=MarketRegime.TREND_DOWN))
    return history


def _snap(ts: int, price: float, q50: float) -> FlatSnap:
    return FlatSnap(timestamp=ts, symbol="BTC", price=price, q10=q50 * 0.98, q50=q50, q90=q50 * 1.02)


def test_compute_tilt_nets_out_bias():
    snap = _snap(0, 100.0, 101.0)
    assert compute_tilt(snap, 0.0) == pytest.approx(0.01)
    assert compute_tilt(snap, 0.004) == pytest.approx(0.006)


def test_small_tilt_is_neutral_but_recorded():
    history = _history([])
    signal = contrarian_signal(_snap(0, 100.0, 100.2), 0.0, _regime(), history)

    assert signal.direction == Direction.NEUTRAL
    assert "below minimum" in signal.reason
    assert history.size() == 1
    assert history.latest().tilt == pytest.approx(0.002)


def test_requires_two_prior_tilts_of_same_sign():
    history = _history([-0.01])
    signal = contrarian_signal(_snap(STEP_MS, 100.0, 98.0), 0.0, _regime(), history)
    assert signal.reason == "insufficient persistence"

    history = _history([-0.01, 0.01])
    signal = contrarian_signal(_snap(2 * STEP_MS, 100.0, 98.0), 0.0, _regime(), history)
    assert signal.reason == "insufficient persistence"


def test_persistent_but_ordinary_tilt_fails_zscore():
    history = _history([-0.02, -0.021, -0.019])
    signal = contrarian_signal(_snap(3 * STEP_MS, 100.0, 98.0), 0.0, _regime(), history)

    assert signal.direction == Direction.NEUTRAL
    assert "z-score" in signal.reason
    assert abs(signal.metrics["z_score"]) < 2.0


def test_extreme_negative_tilt_goes_long():
    history = _history([-0.001] * 9)
    signal = contrarian_signal(_snap(9 * STEP_MS, 100.0, 98.0), 0.0, _regime(), history)

    assert signal.direction == Direction.LONG
    assert signal.metrics["z_score"] == pytest.approx(-3.0)
    assert signal.strength == pytest.approx(1.0)
    assert signal.reason.startswith("enhanced contrarian")


def test_extreme_positive_tilt_goes_short():
    history = _history([0.001] * 9)
    signal = contrarian_signal(_snap(9 * STEP_MS, 100.0, 102.0), 0.0, _regime(MarketRegime.TREND_UP), history)

    assert signal.direction == Direction.SHORT
    assert signal.metrics["z_score"] == pytest.approx(3.0)


def test_acceleration_boosts_and_deceleration_dampens():
    # Same tilt population, only the order of the last two entries differs
    accelerating = _history([-0.03] + [-0.001] * 18)
    decelerating = _history([-0.001] * 18 + [-0.03])
    snap = _snap(19 * STEP_MS, 100.0, 98.0)

    boosted = contrarian_signal(snap, 0.0, _regime(), accelerating)
    dampened = contrarian_signal(snap, 0.0, _regime(), decelerating)

    assert boosted.metrics["z_score"] == pytest.approx(dampened.metrics["z_score"])
    assert abs(boosted.metrics["z_score"]) >= 2.0
    base = abs(boosted.metrics["z_score"]) / 3.0

    assert boosted.metrics["accel_factor"] > 1.0
    assert boosted.strength == pytest.approx(base * boosted.metrics["accel_factor"])
    assert dampened.metrics["accel_factor"] == ACCEL_DAMPEN
    assert dampened.strength == pytest.approx(base * ACCEL_DAMPEN)
    assert "decelerating" in dampened.reason


def test_regime_confidence_scales_strength():
    snap = _snap(19 * STEP_MS, 100.0, 98.0)
    full = contrarian_signal(snap, 0.0, _regime(confidence=1.0), _history([-0.03] + [-0.001] * 18))
    half = contrarian_signal(snap, 0.0, _regime(confidence=0.5), _history([-0.03] + [-0.001] * 18))

    assert half.metrics["regime_factor"] == pytest.approx(0.75)
    assert half.strength == pytest.approx(full.strength * 0.75)


def test_zscore_helpers():
    assert tilt_zscore(0.01, [0.01, 0.01]) == (0.0, 0.0, 0.0)
    z, mean, std = tilt_zscore(0.02, [0.0, 0.0, 0.02, 0.02])
    assert mean == pytest.approx(0.01)
    assert std == pytest.approx(0.01)
    assert z == pytest.approx(1.0)
    assert tilt_zscore(0.01, [0.01, 0.01, 0.01])[0] == 0.0


def test_acceleration_is_zero_without_elapsed_time():
    a = TiltEntry(timestamp=1_000, tilt=-0.01, regime=MarketRegime.TREND_DOWN)
    b = TiltEntry(timestamp=1_000, tilt=-0.02, regime=MarketRegime.TREND_DOWN)
    assert tilt_acceleration(b, a) == 0.0

    c = TiltEntry(timestamp=11_000, tilt=-0.02, regime=MarketRegime.TREND_DOWN)
    assert tilt_acceleration(c, a) == pytest.approx(-0.001)


def test_small_tilt_neutral_even_when_statistically_extreme():
    history = _history([-0.0001] * 15)
    snap = _snap(15 * STEP_MS, 100.0, 99.6)  # tilt -0.4%

    # would clear both persistence and the z-score filter
    z, _, _ = tilt_zscore(compute_tilt(snap, 0.0), history.tilts() + [compute_tilt(snap, 0.0)])
    assert abs(z) > 2.0

    signal = contrarian_signal(snap, 0.0, _regime(), history)

    assert signal.direction == Direction.NEUTRAL
    assert signal.strength == 0.0
    assert "below minimum" in signal.reason
