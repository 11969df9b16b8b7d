from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, IndicatorResult
from market_scanner.indicators.base import Indicator, last_value_result


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    if avg_gain == 0:
        return 0.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def rsi_series(values: list[float], period: int = 14) -> list[float]:
    """
    Wilder RSI. The first value uses the simple mean of the first `period` changes,
    later values the (avg * (period - 1) + x) / period recurrence.
    """
    if period <= 0 or len(values) < period + 1:
        return []

    gains: list[float] = []
    losses: list[float] = []
    for prev, cur in zip(values[:-1], values[1:]):
        d = cur - prev
        gains.append(d if d > 0 else 0.0)
        losses.append(-d if d < 0 else 0.0)

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    out = [_rsi_from_averages(avg_gain, avg_loss)]
    for g, l in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + g) / period
        avg_loss = (avg_loss * (period - 1) + l) / period
        out.append(_rsi_from_averages(avg_gain, avg_loss))
    return out


@dataclass(frozen=True)
class RSI(Indicator):
    period: int = 14
    name: str = "rsi"

    def compute(self, candles: list[Candle]) -> IndicatorResult:
        closes = [c.close for c in candles]
        return last_value_result(
            self.name,
            rsi_series(closes, self.period),
            "rsi",
            {"period": self.period, "needed": self.period + 1},
        )
