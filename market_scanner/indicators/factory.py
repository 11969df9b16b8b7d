from __future__ import annotations

from typing import Any

from market_scanner.indicators.base import Indicator
from market_scanner.indicators.implementations.adx import ADX
from market_scanner.indicators.implementations.atr import ATR
from market_scanner.indicators.implementations.ema import EMA
from market_scanner.indicators.implementations.rsi import RSI
from market_scanner.indicators.implementations.sma import SMA


def build_indicators(cfg: dict[str, Any]) -> dict[str, Indicator]:
    out: dict[str, Indicator] = {}
    for name, params in (cfg or {}).items():
        params = params or {}
        kind = str(params.get("kind", name))
        if kind == "sma":
            out[name] = SMA(period=int(params.get("period", 20)), source=str(params.get("source", "close")), name=name)
        elif kind == "ema":
            out[name] = EMA(period=int(params.get("period", 20)), name=name)
        elif kind == "rsi":
            out[name] = RSI(period=int(params.get("period", 14)), name=name)
        elif kind == "atr":
            out[name] = ATR(period=int(params.get("period", 14)), name=name)
        elif kind == "adx":
            out[name] = ADX(period=int(params.get("period", 14)), name=name)
        else:
            raise ValueError(f"Unknown indicator: {name}")
    return out
