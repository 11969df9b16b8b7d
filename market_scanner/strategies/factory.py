from __future__ import annotations

from typing import Any

from market_scanner.strategies.base import Strategy
from market_scanner.strategies.breakout_trend import BreakoutTrendStrategy
from market_scanner.strategies.panic_reversion import PanicReversionStrategy
from market_scanner.strategies.volume_breakout import VolumeBreakoutStrategy

_ALIASES = {
    "livermore": "breakout_trend",
    "oneil": "volume_breakout",
    "gcr": "panic_reversion",
}


def build_strategy(name: str, params: dict[str, Any] | None = None) -> Strategy:
    params = params or {}
    kind = _ALIASES.get(name, name)

    if kind == "breakout_trend":
        return BreakoutTrendStrategy(
            lookback=int(params.get("lookback", 20)),
            sma_period=int(params.get("sma_period", 20)),
            adx_period=int(params.get("adx_period", 14)),
            min_adx=float(params.get("min_adx", 25.0)),
            min_candles=int(params.get("min_candles", 50)),
        )

    if kind == "volume_breakout":
        return VolumeBreakoutStrategy(
            trend_period=int(params.get("trend_period", 50)),
            volume_period=int(params.get("volume_period", 20)),
            lookback=int(params.get("lookback", 20)),
            volume_spike_mult=float(params.get("volume_spike_mult", 1.5)),
            min_candles=int(params.get("min_candles", 50)),
        )

    if kind == "panic_reversion":
        return PanicReversionStrategy(
            rsi_period=int(params.get("rsi_period", 14)),
            volume_lookback=int(params.get("volume_lookback", 20)),
            mega_panic_rsi=float(params.get("mega_panic_rsi", 20.0)),
            mega_panic_volume=float(params.get("mega_panic_volume", 10.0)),
            panic_rsi=float(params.get("panic_rsi", 25.0)),
            panic_volume=float(params.get("panic_volume", 5.0)),
            exit_rsi=float(params.get("exit_rsi", 50.0)),
            min_candles=int(params.get("min_candles", 25)),
        )

    raise ValueError(f"Unknown strategy name: {name}")


def build_strategy_set(cfg: dict[str, dict[str, Any]] | None) -> dict[str, Strategy]:
    """The three scanner strategies keyed by role: trend, breakout, panic."""
    cfg = cfg or {}
    return {
        "trend": build_strategy("breakout_trend", cfg.get("breakout_trend")),
        "breakout": build_strategy("volume_breakout", cfg.get("volume_breakout")),
        "panic": build_strategy("panic_reversion", cfg.get("panic_reversion")),
    }
