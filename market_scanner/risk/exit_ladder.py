from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from market_scanner.core.types import ExitReason, ExitSummary, PositionRiskState


@dataclass(frozen=True)
class ExitLadder:
    """
    Composite exit for opportunistic entries. Checked on every tick, first hit wins:

    HARD_STOP   pnl% <= hard_stop_pct
    TRAIL_STOP  drawdown from the high-water mark <= trail_stop_pct
    TIME_DECAY  held >= time_decay_sec and pnl% < time_decay_min_profit_pct
    """

    hard_stop_pct: float = -5.0
    trail_stop_pct: float = -3.0
    time_decay_sec: float = 180.0
    time_decay_min_profit_pct: float = 1.0

    def evaluate(self, symbol: str, state: PositionRiskState, price: float, now: datetime) -> ExitSummary | None:
        state.observe(price)

        pnl_pct = (price - state.entry_price) / state.entry_price * 100.0
        drawdown_pct = (price - state.high_water_mark) / state.high_water_mark * 100.0
        elapsed_ms = int((now - state.entry_time).total_seconds() * 1000)

        if pnl_pct <= self.hard_stop_pct:
            reason = ExitReason.HARD_STOP
        elif drawdown_pct <= self.trail_stop_pct:
            reason = ExitReason.TRAIL_STOP
        elif elapsed_ms >= self.time_decay_sec * 1000 and pnl_pct < self.time_decay_min_profit_pct:
            reason = ExitReason.TIME_DECAY
        else:
            return None

        return ExitSummary(
            symbol=symbol,
            reason=reason,
            pnl_pct=pnl_pct,
            drawdown_pct=drawdown_pct,
            elapsed_ms=elapsed_ms,
        )
