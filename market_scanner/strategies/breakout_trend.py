from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, Signal, StrategyVerdict
from market_scanner.indicators.implementations.adx import ADX
from market_scanner.indicators.implementations.sma import SMA
from market_scanner.strategies.base import Strategy


@dataclass(frozen=True)
class BreakoutTrendStrategy(Strategy):
    """
    Time-series momentum breakout with an ADX trend filter (daily candles recommended).

    Rules, in priority order:
    - close < SMA(sma_period)              -> SELL (trend broken, exits come first)
    - close > highest close of the prior
      `lookback` candles and ADX >= min_adx -> BUY
    - same breakout with a weak ADX         -> WAIT (fake-out warning)
    - otherwise                             -> HOLD
    """

    lookback: int = 20
    sma_period: int = 20
    adx_period: int = 14
    min_adx: float = 25.0
    min_candles: int = 50
    name: str = "livermore"

    def evaluate(self, candles: list[Candle]) -> StrategyVerdict:
        if len(candles) < self.min_candles:
            return StrategyVerdict.wait(f"Not enough data (need {self.min_candles}+ candles)")

        price = candles[-1].close
        lookback_high = max(c.close for c in candles[-self.lookback - 1 : -1])

        sma = SMA(period=self.sma_period).compute(candles)
        adx = ADX(period=self.adx_period).compute(candles)
        sma_v = float(sma.values["sma"])
        adx_v = float(adx.values["adx"]) if adx.is_ready else 0.0

        if price < sma_v:
            return StrategyVerdict(
                signal=Signal.SELL,
                confidence=0.9,
                reason=f"EXIT: price {price} fell below SMA{self.sma_period} ({sma_v:.1f}). Trend broken.",
            )

        if price > lookback_high:
            if adx_v < self.min_adx:
                return StrategyVerdict.wait(
                    f"Fake-out warning: breakout above {lookback_high} but ADX {adx_v:.1f} < {self.min_adx:g}. Weak trend."
                )
            return StrategyVerdict(
                signal=Signal.BUY,
                confidence=0.95,
                reason=f"ENTRY: new {self.lookback}-candle high + strong ADX {adx_v:.1f}.",
            )

        return StrategyVerdict(
            signal=Signal.HOLD,
            confidence=0.5,
            reason=f"Scanning... ADX {adx_v:.1f} / resistance {lookback_high}",
        )
