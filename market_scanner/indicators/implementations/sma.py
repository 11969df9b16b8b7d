from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, IndicatorResult
from market_scanner.indicators.base import Indicator, last_value_result


def sma_series(values: list[float], period: int) -> list[float]:
    """Mean of every trailing window of `period` values (len = n - period + 1)."""
    if period <= 0 or len(values) < period:
        return []
    out: list[float] = []
    window_sum = sum(values[:period])
    out.append(window_sum / period)
    for i in range(period, len(values)):
        window_sum += values[i] - values[i - period]
        out.append(window_sum / period)
    return out


@dataclass(frozen=True)
class SMA(Indicator):
    period: int
    source: str = "close"  # any Candle float field, e.g. "volume"
    name: str = "sma"

    def compute(self, candles: list[Candle]) -> IndicatorResult:
        values = [float(getattr(c, self.source)) for c in candles]
        return last_value_result(
            self.name,
            sma_series(values, self.period),
            "sma",
            {"period": self.period, "source": self.source, "needed": self.period},
        )
