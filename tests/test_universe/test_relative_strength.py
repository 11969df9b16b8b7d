from __future__ import annotations

import asyncio
from datetime import timedelta

from market_scanner.core.config import ExchangeConfig, UniverseConfig
from market_scanner.universe.relative_strength import period_return, rank_relative_strength
from market_scanner.universe.selector import FocusListHolder, WatchlistRanker
from tests.fakes import T0, FakeGateway, candles_from_closes

# symbol -> (24h return, 4h return)
RETURNS = {
    "KRW-A01": (0.01, 0.50),
    "KRW-A02": (0.02, 0.40),
    "KRW-A03": (0.03, 0.09),
    "KRW-A04": (0.04, 0.08),
    "KRW-A05": (0.05, 0.01),
    "KRW-A06": (0.06, 0.07),
    "KRW-A07": (0.07, 0.02),
    "KRW-A08": (0.08, 0.06),
    "KRW-A09": (0.09, 0.03),
    "KRW-A10": (0.10, 0.05),
    "KRW-A11": (0.11, 0.04),
    "KRW-A12": (0.12, 0.00),
}
EXPECTED_FOCUS = ["KRW-A03", "KRW-A04", "KRW-A06", "KRW-A08", "KRW-A10"]


def _series(r_primary: float, r_secondary: float, symbol: str = "KRW-TEST") -> list:
    last = 100.0 * (1.0 + r_primary)
    closes = [100.0] * 55 + [last / (1.0 + r_secondary)] * 4 + [last]
    return candles_from_closes(closes, symbol=symbol, timeframe="1h")


def _benchmark() -> list:
    return _series(0.0, 0.0, symbol="KRW-BTC")


def test_period_return():
    candles = candles_from_closes([100.0, 110.0, 121.0])
    assert period_return(candles, 1) == 121.0 / 110.0 - 1.0
    assert period_return(candles, 3) is None
    assert period_return(candles_from_closes([0.0, 5.0]), 1) is None


def test_two_stage_ranking():
    history = {sym: _series(*r, symbol=sym) for sym, r in RETURNS.items()}
    assert rank_relative_strength(history, _benchmark()) == EXPECTED_FOCUS


def test_short_history_is_skipped_and_missing_benchmark_yields_nothing():
    history = {sym: _series(*r, symbol=sym) for sym, r in RETURNS.items()}
    history["KRW-A10"] = history["KRW-A10"][-10:]
    focus = rank_relative_strength(history, _benchmark())
    assert "KRW-A10" not in focus
    assert len(focus) == 5

    assert rank_relative_strength(history, _benchmark()[-3:]) == []


def _gateway() -> FakeGateway:
    gw = FakeGateway()
    gw.symbols = ["KRW-BTC", "BTC-ETH", *RETURNS]
    gw.set_candles("KRW-BTC", "1h", _benchmark())
    for sym, r in RETURNS.items():
        gw.set_candles(sym, "1h", _series(*r, symbol=sym))
    return gw


def test_ranker_rebuild_filters_market_list():
    gw = _gateway()
    ranker = WatchlistRanker(UniverseConfig(), ExchangeConfig())
    assert asyncio.run(ranker.rebuild(gw)) == EXPECTED_FOCUS
    fetched = {sym for sym, _, _ in gw.candle_calls}
    assert "BTC-ETH" not in fetched


def test_refresh_replaces_focus_list_when_due():
    gw = _gateway()
    ranker = WatchlistRanker(UniverseConfig(), ExchangeConfig())
    holder = FocusListHolder(["KRW-ETH"], refresh_interval_sec=3600)

    assert asyncio.run(ranker.refresh(holder, gw, T0)) is True
    assert list(holder.snapshot()) == EXPECTED_FOCUS
    assert holder.current.built_at == T0

    # not due again within the interval
    assert asyncio.run(ranker.refresh(holder, gw, T0 + timedelta(minutes=30))) is False
    assert holder.due(T0 + timedelta(hours=1)) is True


def test_failed_rebuild_keeps_previous_focus_list():
    gw = _gateway()
    gw.fail_symbols = True
    ranker = WatchlistRanker(UniverseConfig(), ExchangeConfig())
    holder = FocusListHolder(["KRW-ETH", "KRW-XRP"])

    assert asyncio.run(ranker.refresh(holder, gw, T0)) is False
    assert holder.snapshot() == ("KRW-ETH", "KRW-XRP")
    assert holder.due(T0) is False


def test_holder_ignores_empty_replacement():
    holder = FocusListHolder(["KRW-ETH", "KRW-ETH", "KRW-SOL"])
    assert holder.snapshot() == ("KRW-ETH", "KRW-SOL")
    assert holder.replace([], T0) is False
    assert holder.snapshot() == ("KRW-ETH", "KRW-SOL")
