from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, IndicatorResult
from market_scanner.indicators.base import Indicator, last_value_result


def true_ranges(candles: list[Candle]) -> list[float]:
    return [
        max(cur.high - cur.low, abs(cur.high - prev.close), abs(cur.low - prev.close))
        for prev, cur in zip(candles[:-1], candles[1:])
    ]


def atr_series(candles: list[Candle], period: int = 14) -> list[float]:
    if period <= 0 or len(candles) < period + 1:
        return []
    trs = true_ranges(candles)

    # Wilder smoothing (seed with SMA)
    atr = sum(trs[:period]) / period
    out = [atr]
    for tr in trs[period:]:
        atr = (atr * (period - 1) + tr) / period
        out.append(atr)
    return out


@dataclass(frozen=True)
class ATR(Indicator):
    period: int = 14
    name: str = "atr"

    def compute(self, candles: list[Candle]) -> IndicatorResult:
        return last_value_result(
            self.name,
            atr_series(candles, self.period),
            "atr",
            {"period": self.period, "needed": self.period + 1},
        )
