from __future__ import annotations

import pytest

from market_scanner.core.types import Signal
from market_scanner.strategies.breakout_trend import BreakoutTrendStrategy
from market_scanner.strategies.decision import synthesize
from market_scanner.strategies.factory import build_strategy, build_strategy_set
from market_scanner.strategies.panic_reversion import PanicReversionStrategy


def test_panic_buy_wins():
    # panic=BUY overrides trend=SELL
    assert synthesize(trend=Signal.SELL, breakout=Signal.HOLD, panic=Signal.BUY) == Signal.BUY
    assert synthesize(Signal.SELL, Signal.WAIT, Signal.BUY) == Signal.BUY


def test_trend_and_breakout_must_agree_to_buy():
    assert synthesize(trend=Signal.BUY, breakout=Signal.BUY, panic=Signal.WAIT) == Signal.BUY
    assert synthesize(Signal.BUY, Signal.HOLD, Signal.WAIT) == Signal.HOLD


def test_trend_sell():
    assert synthesize(trend=Signal.SELL, breakout=Signal.BUY, panic=Signal.WAIT) == Signal.SELL
    assert synthesize(Signal.SELL, Signal.BUY, Signal.SELL) == Signal.SELL


def test_default_hold():
    assert synthesize(trend=Signal.HOLD, breakout=Signal.HOLD, panic=Signal.WAIT) == Signal.HOLD
    assert synthesize(Signal.HOLD, Signal.WAIT, Signal.SELL) == Signal.HOLD


def test_build_strategy_aliases_and_params():
    s = build_strategy("livermore", {"min_adx": 30})
    assert isinstance(s, BreakoutTrendStrategy)
    assert s.min_adx == 30.0
    assert isinstance(build_strategy("gcr"), PanicReversionStrategy)


def test_build_strategy_unknown():
    with pytest.raises(ValueError):
        build_strategy("martingale")


def test_build_strategy_set_roles():
    roles = build_strategy_set({"panic_reversion": {"exit_rsi": 55}})
    assert set(roles) == {"trend", "breakout", "panic"}
    assert roles["panic"].exit_rsi == 55.0
