from __future__ import annotations

from abc import ABC, abstractmethod

from market_scanner.core.types import Candle, StrategyVerdict


class Strategy(ABC):
    name: str
    min_candles: int

    @abstractmethod
    def evaluate(self, candles: list[Candle]) -> StrategyVerdict:
        """Verdict for the latest candle. Must return WAIT (confidence 0) below `min_candles`."""
        raise NotImplementedError
