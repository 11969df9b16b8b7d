from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Signal(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    WAIT = "WAIT"


class ExitReason(str, Enum):
    HARD_STOP = "HARD_STOP"
    TRAIL_STOP = "TRAIL_STOP"
    TIME_DECAY = "TIME_DECAY"


@dataclass(frozen=True)
class Candle:
    symbol: str
    timeframe: str
    open_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


def candles_from_ohlcv(symbol: str, timeframe: str, rows: list[list[Any]]) -> list[Candle]:
    """
    Exchange OHLCV format (ccxt style):
      [
        [
          1499040000000,  // Open time (ms)
          1634.79,        // Open
          1650.00,        // High
          1575.80,        // Low
          1577.10,        // Close
          148976.11,      // Volume
        ]
      ]
    """
    out: list[Candle] = []
    for r in rows:
        out.append(
            Candle(
                symbol=symbol,
                timeframe=timeframe,
                open_time=datetime.fromtimestamp(int(r[0]) / 1000, tz=timezone.utc),
                open=float(r[1]),
                high=float(r[2]),
                low=float(r[3]),
                close=float(r[4]),
                volume=float(r[5]),
            )
        )
    return out


@dataclass(frozen=True)
class IndicatorResult:
    name: str
    is_ready: bool
    values: dict[str, Any]
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StrategyVerdict:
    signal: Signal
    confidence: float
    reason: str

    @classmethod
    def wait(cls, reason: str, confidence: float = 0.0) -> StrategyVerdict:
        return cls(signal=Signal.WAIT, confidence=confidence, reason=reason)


@dataclass(frozen=True)
class Holding:
    symbol: str
    amount: float


@dataclass
class PositionRiskState:
    entry_price: float
    high_water_mark: float
    entry_time: datetime

    @classmethod
    def open(cls, entry_price: float, entry_time: datetime) -> PositionRiskState:
        return cls(entry_price=entry_price, high_water_mark=entry_price, entry_time=entry_time)

    def observe(self, price: float) -> None:
        if price > self.high_water_mark:
            self.high_water_mark = price


@dataclass(frozen=True)
class ExitSummary:
    symbol: str
    reason: ExitReason
    pnl_pct: float
    drawdown_pct: float
    elapsed_ms: int


@dataclass(frozen=True)
class TradeDecision:
    symbol: str
    action: Signal
    reason: str
    strategy_name: str
    amount_or_price: float


@dataclass(frozen=True)
class ListingTrigger:
    symbol: str
    raw_text: str


@dataclass(frozen=True)
class AnalysisReport:
    symbol: str
    decision: Signal
    verdicts: dict[str, StrategyVerdict]
    indicators: dict[str, float | None] = field(default_factory=dict)


@dataclass(frozen=True)
class FocusList:
    symbols: tuple[str, ...]
    built_at: datetime | None = None
