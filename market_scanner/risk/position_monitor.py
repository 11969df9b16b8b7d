from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Callable

from market_scanner.core.events import EventBus, position_exit_event, trade_decision_event
from market_scanner.core.types import ExitSummary, PositionRiskState, Signal, TradeDecision
from market_scanner.exchange.base import MarketGateway, held_amount, holdings_by_symbol
from market_scanner.monitoring.logger import get_logger
from market_scanner.risk.exit_ladder import ExitLadder

log = get_logger("monitor")

EXIT_STRATEGY_NAME = "Listing Exit Ladder"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PositionMonitor:
    """
    One polling task per open opportunistic position, driven by an ExitLadder.

    At most one task exists per symbol. A symbol leaves the active set on every exit
    path (ladder exit, missing entry price, error, cancellation).
    """

    def __init__(
        self,
        gateway: MarketGateway,
        ladder: ExitLadder,
        bus: EventBus,
        *,
        poll_interval_sec: float = 1.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._gateway = gateway
        self._ladder = ladder
        self._bus = bus
        self._poll = float(poll_interval_sec)
        self._clock = clock
        self._tasks: dict[str, asyncio.Task[ExitSummary | None]] = {}

    def active(self) -> set[str]:
        return set(self._tasks)

    def is_active(self, symbol: str) -> bool:
        return symbol in self._tasks

    def start(self, symbol: str) -> bool:
        if symbol in self._tasks:
            log.info("Exit monitor already running for %s", symbol)
            return False
        self._tasks[symbol] = asyncio.create_task(self._run(symbol), name=f"exit-monitor-{symbol}")
        return True

    async def stop(self, symbol: str) -> None:
        task = self._tasks.pop(symbol, None)
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def stop_all(self) -> None:
        for symbol in list(self._tasks):
            await self.stop(symbol)

    async def wait(self, symbol: str) -> ExitSummary | None:
        task = self._tasks.get(symbol)
        if task is None:
            return None
        return await task

    def _deregister(self, symbol: str) -> None:
        if self._tasks.get(symbol) is asyncio.current_task():
            del self._tasks[symbol]

    async def _run(self, symbol: str) -> ExitSummary | None:
        try:
            entry_price = await self._gateway.fetch_latest_price(symbol)
            if not entry_price:
                log.warning("Exit monitor for %s aborted: no entry price", symbol)
                return None

            state = PositionRiskState.open(float(entry_price), self._clock())
            log.info("Exit monitor started for %s entry=%s", symbol, entry_price)
            while True:
                await asyncio.sleep(self._poll)
                price = await self._gateway.fetch_latest_price(symbol)
                if not price:
                    continue
                summary = self._ladder.evaluate(symbol, state, float(price), self._clock())
                if summary is not None:
                    await self._exit(summary)
                    return summary
        except asyncio.CancelledError:
            log.info("Exit monitor for %s stopped", symbol)
            raise
        except Exception as e:
            log.error("Exit monitor for %s failed: %s", symbol, e)
            return None
        finally:
            self._deregister(symbol)

    async def _exit(self, summary: ExitSummary) -> None:
        symbol = summary.symbol
        log.info(
            "EXIT %s (%s) PnL %.2f%% DD %.2f%%",
            symbol,
            summary.reason.value,
            summary.pnl_pct,
            summary.drawdown_pct,
        )
        await self._bus.publish(position_exit_event(summary))

        holdings = holdings_by_symbol(await self._gateway.fetch_holdings())
        amount = held_amount(holdings, symbol)
        if amount <= 0:
            log.warning("Exit for %s skipped: nothing held", symbol)
            return
        order_id = await self._gateway.place_market_sell(symbol, amount)
        if order_id is None:
            log.warning("Exit sell for %s was not accepted", symbol)
            return
        await self._bus.publish(
            trade_decision_event(
                TradeDecision(
                    symbol=symbol,
                    action=Signal.SELL,
                    reason=summary.reason.value,
                    strategy_name=EXIT_STRATEGY_NAME,
                    amount_or_price=amount,
                )
            )
        )
