from __future__ import annotations

import pytest

from market_scanner.indicators.factory import build_indicators
from market_scanner.indicators.implementations.adx import ADX, adx_series
from market_scanner.indicators.implementations.atr import ATR, atr_series, true_ranges
from tests.fakes import flat_candles, make_candle


def _rising(n: int) -> list:
    # every bar one unit higher; range of 2 around the close
    return [make_candle(float(10 + i), i=i, high=float(11 + i), low=float(9 + i)) for i in range(n)]


def test_true_range_uses_previous_close():
    candles = [
        make_candle(10.0, i=0, high=10.0, low=10.0),
        make_candle(14.0, i=1, open_=14.0, high=15.0, low=13.0),
    ]
    # gap up: |high - prev close| = 5 beats high - low = 2
    assert true_ranges(candles) == [5.0]


def test_atr_constant_range():
    candles = flat_candles(30, 94.0, high=95.0, low=93.0)
    values = atr_series(candles, 14)
    assert len(values) == 30 - 14
    assert all(v == 2.0 for v in values)


def test_atr_not_ready_with_short_window():
    res = ATR(period=14).compute(flat_candles(14, 10.0))
    assert res.is_ready is False
    assert res.values["atr"] is None


def test_adx_needs_two_periods():
    assert adx_series(_rising(27), 14) == []
    assert ADX(period=14).compute(_rising(27)).is_ready is False


def test_adx_strong_uptrend_is_100():
    values = adx_series(_rising(40), 14)
    assert len(values) == 40 - 28 + 1
    assert values[-1] == pytest.approx(100.0)


def test_adx_flat_market_is_zero():
    values = adx_series(flat_candles(40, 50.0), 14)
    assert values
    assert all(v == 0.0 for v in values)


def test_build_indicators_from_config():
    inds = build_indicators({"sma20": {"kind": "sma", "period": 20}, "rsi": {"period": 14}, "adx": {}})
    assert set(inds) == {"sma20", "rsi", "adx"}
    res = inds["sma20"].compute(flat_candles(25, 7.0))
    assert res.name == "sma20"
    assert res.values["sma"] == 7.0


def test_build_indicators_unknown_kind():
    with pytest.raises(ValueError):
        build_indicators({"bands": {"kind": "bollinger"}})


def test_atr_and_adx_recompute_identically():
    candles = _rising(30) + [make_candle(25.0, i=30, high=41.0, low=24.0)] + _rising(45)[31:]
    atr, adx = ATR(period=14), ADX(period=14)
    assert atr.compute(candles) == atr.compute(candles)
    assert adx.compute(candles) == adx.compute(candles)
    assert atr_series(candles, 14) == atr_series(list(candles), 14)
    assert adx_series(candles, 14) == adx_series(list(candles), 14)
