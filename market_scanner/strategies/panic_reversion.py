from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle, Signal, StrategyVerdict
from market_scanner.indicators.implementations.rsi import rsi_series
from market_scanner.strategies.base import Strategy


@dataclass(frozen=True)
class PanicReversionStrategy(Strategy):
    """
    Buys liquidation-style panics (deeply oversold RSI on a volume blow-off), but only once
    the current candle turns green. Takes profit when RSI recovers above `exit_rsi`.

    BUY branches are checked before the take-profit branch.
    """

    rsi_period: int = 14
    volume_lookback: int = 20
    mega_panic_rsi: float = 20.0
    mega_panic_volume: float = 10.0
    panic_rsi: float = 25.0
    panic_volume: float = 5.0
    exit_rsi: float = 50.0
    min_candles: int = 25
    name: str = "gcr"

    def volume_multiple(self, candles: list[Candle]) -> float:
        prior = [c.volume for c in candles[-self.volume_lookback - 1 : -1]]
        avg = sum(prior) / len(prior) if prior else 0.0
        if avg <= 0:
            avg = 1.0
        return candles[-1].volume / avg

    def evaluate(self, candles: list[Candle]) -> StrategyVerdict:
        if len(candles) < self.min_candles:
            return StrategyVerdict.wait("Not enough data")

        rsi_values = rsi_series([c.close for c in candles], self.rsi_period)
        rsi = rsi_values[-1] if rsi_values else 50.0
        vol_mult = self.volume_multiple(candles)
        last = candles[-1]
        rebounding = last.close > last.open

        if rsi < self.mega_panic_rsi and vol_mult >= self.mega_panic_volume:
            if not rebounding:
                return StrategyVerdict.wait(
                    f"Falling knife: RSI {rsi:.1f} & volume {vol_mult:.1f}x but the candle is still red. Waiting for green."
                )
            return StrategyVerdict(
                signal=Signal.BUY,
                confidence=0.99,
                reason=f"Liquidation reversal: RSI {rsi:.1f} + volume {vol_mult:.1f}x + green candle.",
            )

        if rsi < self.panic_rsi and vol_mult >= self.panic_volume and rebounding:
            return StrategyVerdict(
                signal=Signal.BUY,
                confidence=0.85,
                reason=f"Panic reversal: volume {vol_mult:.1f}x, RSI {rsi:.1f}, price bouncing.",
            )

        if rsi > self.exit_rsi:
            return StrategyVerdict(
                signal=Signal.SELL,
                confidence=0.6,
                reason=f"Mean reversion complete (RSI {rsi:.1f} > {self.exit_rsi:g}). Take profit.",
            )

        return StrategyVerdict.wait(f"Scanning... RSI {rsi:.1f}, volume {vol_mult:.1f}x", confidence=0.5)
