from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, Signal, StrategyVerdict
from market_scanner.indicators.implementations.sma import SMA
from market_scanner.strategies.base import Strategy


@dataclass(frozen=True)
class VolumeBreakoutStrategy(Strategy):
    """Pivot breakout that only counts when volume confirms it, and only in an uptrend."""

    trend_period: int = 50
    volume_period: int = 20
    lookback: int = 20
    volume_spike_mult: float = 1.5
    min_candles: int = 50
    name: str = "oneil"

    def evaluate(self, candles: list[Candle]) -> StrategyVerdict:
        if len(candles) < self.min_candles:
            return StrategyVerdict.wait("Not enough data")

        price = candles[-1].close
        volume = candles[-1].volume

        trend = SMA(period=self.trend_period).compute(candles)
        if not trend.is_ready:
            return StrategyVerdict.wait("Not enough data")
        sma_v = float(trend.values["sma"])
        if price < sma_v:
            return StrategyVerdict.wait(
                f"Price below SMA{self.trend_period} ({sma_v:.1f}). Not in an uptrend.", confidence=0.5
            )

        avg_volume = float(SMA(period=self.volume_period, source="volume").compute(candles).values["sma"])
        volume_mult = volume / avg_volume if avg_volume > 0 else 0.0
        volume_spike = volume > avg_volume * self.volume_spike_mult

        resistance = max(c.high for c in candles[-self.lookback - 1 : -1])
        breakout = price > resistance

        if breakout and volume_spike:
            return StrategyVerdict(
                signal=Signal.BUY,
                confidence=0.95,
                reason=f"BREAKOUT: price cleared {self.lookback}-candle high {resistance} on {volume_mult:.1f}x volume.",
            )
        if breakout:
            return StrategyVerdict.wait(
                f"Breakout above {resistance} but volume is weak ({volume_mult:.1f}x avg). False breakout risk.",
                confidence=0.6,
            )
        return StrategyVerdict(
            signal=Signal.HOLD,
            confidence=0.6,
            reason=f"In uptrend above SMA{self.trend_period}, watching resistance {resistance}.",
        )
