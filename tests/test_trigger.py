import logging

from synth_regime.signals.signal import Direction, Signal
from synth_regime.signals.trigger import SignalTrigger

MINUTE_MS = 60 * 1000


def _signal(direction=Direction.LONG, strength=0.9) -> Signal:
    return Signal(direction=direction, strength=strength, reason="enhanced contrarian: test")


def test_strong_signal_fires():
    trigger = SignalTrigger()
    decision = trigger.evaluate("btc", _signal(), 0)

    assert decision.fired
    assert decision.asset == "BTC"
    assert trigger.last_fired("BTC") == (0, Direction.LONG)


def test_weak_and_neutral_signals_do_not_fire():
    trigger = SignalTrigger(min_strength=0.8)

    weak = trigger.evaluate("BTC", _signal(strength=0.5), 0)
    assert not weak.fired
    assert "below trigger minimum" in weak.reason

    neutral = trigger.evaluate("BTC", Signal.neutral("price within range bands"), 0)
    assert not neutral.fired
    assert trigger.last_fired("BTC") is None


def test_same_direction_blocked_during_cooldown(caplog):
    trigger = SignalTrigger(cooldown_ms=30 * MINUTE_MS)
    trigger.evaluate("BTC", _signal(), 0)

    with caplog.at_level(logging.WARNING, logger="synth_regime.signals.trigger"):
        blocked = trigger.evaluate("BTC", _signal(), 10 * MINUTE_MS)

    assert not blocked.fired
    assert blocked.reason == "cooldown active"
    assert blocked.cooldown_remaining_ms == 20 * MINUTE_MS
    assert "cooldown active" in caplog.text


def test_direction_flip_and_expired_cooldown_fire():
    trigger = SignalTrigger(cooldown_ms=30 * MINUTE_MS)
    trigger.evaluate("BTC", _signal(Direction.LONG), 0)

    assert trigger.evaluate("BTC", _signal(Direction.SHORT), 5 * MINUTE_MS).fired
    assert trigger.evaluate("BTC", _signal(Direction.SHORT), 35 * MINUTE_MS).fired


def test_cooldown_is_per_asset():
    trigger = SignalTrigger()
    trigger.evaluate("BTC", _signal(), 0)
    assert trigger.evaluate("ETH", _signal(), MINUTE_MS).fired
