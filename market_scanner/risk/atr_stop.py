from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle
from market_scanner.indicators.implementations.atr import atr_series


@dataclass(frozen=True)
class StopBreach:
    symbol: str
    timeframe: str
    stop_price: float
    last_close: float
    atr: float
    reason: str


@dataclass(frozen=True)
class AtrStop:
    """
    Volatility stop: entry - multiplier * ATR(period) on the timeframe's candles.
    Breached when the latest close is at or below the stop.
    """

    timeframe: str
    multiplier: float = 2.5
    period: int = 14

    def stop_price(self, entry_price: float, candles: list[Candle]) -> float | None:
        if len(candles) <= self.period:
            return None
        atr = atr_series(candles, self.period)
        if not atr:
            return None
        return entry_price - self.multiplier * atr[-1]

    def check(self, symbol: str, entry_price: float, candles: list[Candle]) -> StopBreach | None:
        stop = self.stop_price(entry_price, candles)
        if stop is None:
            return None
        last_close = candles[-1].close
        if last_close > stop:
            return None
        return StopBreach(
            symbol=symbol,
            timeframe=self.timeframe,
            stop_price=stop,
            last_close=last_close,
            atr=(entry_price - stop) / self.multiplier if self.multiplier else 0.0,
            reason=f"ATR Stop hit ({self.timeframe}, k={self.multiplier:g})",
        )
