from __future__ import annotations

from market_scanner.core.types import Signal
from market_scanner.indicators.implementations.adx import ADX
from market_scanner.strategies.breakout_trend import BreakoutTrendStrategy
from tests.fakes import flat_candles, make_candle


def _rising(n: int) -> list:
    return [make_candle(float(10 + i), i=i, high=float(11 + i), low=float(9 + i)) for i in range(n)]


def test_wait_when_not_enough_data():
    v = BreakoutTrendStrategy().evaluate(flat_candles(49, 100.0))
    assert v.signal == Signal.WAIT
    assert v.confidence == 0.0


def test_sell_when_close_below_sma():
    candles = flat_candles(49, 100.0) + [make_candle(90.0, i=49)]
    v = BreakoutTrendStrategy().evaluate(candles)
    assert v.signal == Signal.SELL
    assert v.confidence == 0.9


def test_sell_below_sma_even_with_strong_adx():
    candles = _rising(59) + [make_candle(40.0, i=59, high=41.0, low=39.0)]
    assert ADX(period=14).compute(candles).values["adx"] >= 25.0
    v = BreakoutTrendStrategy().evaluate(candles)
    assert v.signal == Signal.SELL
    assert v.confidence == 0.9


def test_buy_on_new_high_with_strong_adx():
    v = BreakoutTrendStrategy().evaluate(_rising(60))
    assert v.signal == Signal.BUY
    assert v.confidence == 0.95


def test_breakout_with_weak_adx_is_a_fakeout():
    candles = flat_candles(59, 100.0) + [make_candle(101.0, i=59)]
    v = BreakoutTrendStrategy().evaluate(candles)
    assert v.signal == Signal.WAIT
    assert v.confidence == 0.0
    assert "ADX" in v.reason


def test_hold_inside_range():
    v = BreakoutTrendStrategy().evaluate(flat_candles(60, 100.0))
    assert v.signal == Signal.HOLD
    assert v.confidence == 0.5
