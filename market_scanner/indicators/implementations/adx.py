from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, IndicatorResult
from market_scanner.indicators.base import Indicator, last_value_result
from market_scanner.indicators.implementations.atr import true_ranges


def directional_movement(candles: list[Candle]) -> tuple[list[float], list[float]]:
    plus_dm: list[float] = []
    minus_dm: list[float] = []
    for prev, cur in zip(candles[:-1], candles[1:]):
        up_move = cur.high - prev.high
        down_move = prev.low - cur.low
        plus_dm.append(up_move if up_move > down_move and up_move > 0 else 0.0)
        minus_dm.append(down_move if down_move > up_move and down_move > 0 else 0.0)
    return plus_dm, minus_dm


def _dx(tr_n: float, pdm_n: float, mdm_n: float) -> float:
    if tr_n == 0:
        return 0.0
    di_plus = 100.0 * pdm_n / tr_n
    di_minus = 100.0 * mdm_n / tr_n
    total = di_plus + di_minus
    if total == 0:
        return 0.0
    return 100.0 * abs(di_plus - di_minus) / total


def dx_series(candles: list[Candle], period: int = 14) -> list[float]:
    """DX from Wilder running sums: smooth = smooth - smooth / period + new."""
    if period <= 0 or len(candles) < period + 1:
        return []
    trs = true_ranges(candles)
    plus_dm, minus_dm = directional_movement(candles)

    tr_n = sum(trs[:period])
    pdm_n = sum(plus_dm[:period])
    mdm_n = sum(minus_dm[:period])
    out = [_dx(tr_n, pdm_n, mdm_n)]
    for i in range(period, len(trs)):
        tr_n = tr_n - tr_n / period + trs[i]
        pdm_n = pdm_n - pdm_n / period + plus_dm[i]
        mdm_n = mdm_n - mdm_n / period + minus_dm[i]
        out.append(_dx(tr_n, pdm_n, mdm_n))
    return out


def adx_series(candles: list[Candle], period: int = 14) -> list[float]:
    if period <= 0 or len(candles) < period * 2:
        return []
    dxs = dx_series(candles, period)
    if len(dxs) < period:
        return []

    adx = sum(dxs[:period]) / period
    out = [adx]
    for dx in dxs[period:]:
        adx = (adx * (period - 1) + dx) / period
        out.append(adx)
    return out


@dataclass(frozen=True)
class ADX(Indicator):
    period: int = 14
    name: str = "adx"

    def compute(self, candles: list[Candle]) -> IndicatorResult:
        return last_value_result(
            self.name,
            adx_series(candles, self.period),
            "adx",
            {"period": self.period, "needed": self.period * 2},
        )
