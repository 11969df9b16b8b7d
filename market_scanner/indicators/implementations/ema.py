from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, IndicatorResult
from market_scanner.indicators.base import Indicator, last_value_result


def ema_series(values: list[float], period: int) -> list[float]:
    if period <= 0 or len(values) < period:
        return []
    k = 2.0 / (period + 1.0)

    # seed with SMA of first period
    ema = sum(values[:period]) / float(period)
    out = [ema]
    for v in values[period:]:
        ema = v * k + ema * (1.0 - k)
        out.append(ema)
    return out


@dataclass(frozen=True)
class EMA(Indicator):
    period: int
    name: str = "ema"

    def compute(self, candles: list[Candle]) -> IndicatorResult:
        closes = [c.close for c in candles]
        return last_value_result(
            self.name,
            ema_series(closes, self.period),
            "ema",
            {"period": self.period, "needed": self.period},
        )
