from __future__ import annotations

from abc import ABC, abstractmethod

from market_scanner.core.types import Candle, IndicatorResult


class Indicator(ABC):
    name: str

    @abstractmethod
    def compute(self, candles: list[Candle]) -> IndicatorResult:
        raise NotImplementedError


def last_value_result(name: str, series: list[float], key: str, meta: dict) -> IndicatorResult:
    if not series:
        return IndicatorResult(name=name, is_ready=False, values={key: None}, meta=meta)
    return IndicatorResult(name=name, is_ready=True, values={key: series[-1]}, meta=meta)
