from __future__ import annotations

from market_scanner.core.types import Signal
from market_scanner.strategies.panic_reversion import PanicReversionStrategy
from tests.fakes import candles_from_closes, make_candle


def _selloff(last_open: float, last_close: float, last_volume: float) -> list:
    # 29 falling bars then the bar under test; RSI stays at 0
    closes = [130.0 - i for i in range(29)]
    candles = candles_from_closes(closes)
    candles.append(make_candle(last_close, i=29, open_=last_open, volume=last_volume))
    return candles


def test_wait_when_not_enough_data():
    v = PanicReversionStrategy().evaluate(candles_from_closes([100.0] * 24))
    assert v.signal == Signal.WAIT
    assert v.confidence == 0.0


def test_falling_knife_is_not_bought():
    v = PanicReversionStrategy().evaluate(_selloff(last_open=101.0, last_close=100.0, last_volume=12.0))
    assert v.signal == Signal.WAIT
    assert v.confidence == 0.0
    assert "Falling knife" in v.reason


def test_liquidation_reversal_buys_on_green_candle():
    v = PanicReversionStrategy().evaluate(_selloff(last_open=99.0, last_close=100.0, last_volume=12.0))
    assert v.signal == Signal.BUY
    assert v.confidence == 0.99


def test_panic_reversal_needs_five_times_volume():
    v = PanicReversionStrategy().evaluate(_selloff(last_open=99.0, last_close=100.0, last_volume=6.0))
    assert v.signal == Signal.BUY
    assert v.confidence == 0.85

    v = PanicReversionStrategy().evaluate(_selloff(last_open=99.0, last_close=100.0, last_volume=2.0))
    assert v.signal == Signal.WAIT
    assert v.confidence == 0.5


def test_take_profit_when_rsi_recovers():
    v = PanicReversionStrategy().evaluate(candles_from_closes([100.0 + i for i in range(30)]))
    assert v.signal == Signal.SELL
    assert v.confidence == 0.6


def test_volume_multiple_with_zero_average():
    candles = candles_from_closes([100.0] * 25, volumes=[0.0] * 24 + [3.0])
    assert PanicReversionStrategy().volume_multiple(candles) == 3.0
