from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Callable

from market_scanner.core.config import ScannerConfig
from market_scanner.core.events import EventBus, cycle_skipped_event, trade_decision_event, watchlist_updated_event
from market_scanner.core.types import Candle, Signal, TradeDecision
from market_scanner.exchange.base import MarketGateway, held_amount, holdings_by_symbol
from market_scanner.monitoring.logger import get_logger
from market_scanner.monitoring.metrics import Metrics
from market_scanner.risk.atr_stop import AtrStop
from market_scanner.risk.entry_book import EntryBook
from market_scanner.strategies.base import Strategy
from market_scanner.universe.selector import FocusListHolder, WatchlistRanker

log = get_logger("scanner")

PANIC_LABEL = "Panic Reversion"
TREND_LABEL = "Trend Breakout"
PANIC_STOP_LABEL = "Panic ATR Stop"
TREND_STOP_LABEL = "Trend ATR Stop"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanOrchestrator:
    """
    Single-flight scan cycle over the focus list.

    Per instrument: short-timeframe ATR stop, panic strategy on the short timeframe and,
    on hourly cycles, the long-timeframe ATR stop plus the trend strategy on daily candles.
    Instruments are evaluated concurrently; each one's failure is contained.
    """

    def __init__(
        self,
        gateway: MarketGateway,
        *,
        panic: Strategy,
        trend: Strategy,
        entries: EntryBook,
        focus: FocusListHolder,
        bus: EventBus,
        cfg: ScannerConfig,
        ranker: WatchlistRanker | None = None,
        metrics: Metrics | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._gateway = gateway
        self._panic = panic
        self._trend = trend
        self._entries = entries
        self._focus = focus
        self._bus = bus
        self._cfg = cfg
        self._ranker = ranker
        self._metrics = metrics or Metrics()
        self._clock = clock

        self._cycle_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max(1, cfg.max_concurrency))
        self._last_hourly: datetime | None = None
        self._short_stop = AtrStop(cfg.short_stop_timeframe, multiplier=cfg.short_atr_mult, period=cfg.atr_period)
        self._long_stop = AtrStop(cfg.long_stop_timeframe, multiplier=cfg.long_atr_mult, period=cfg.atr_period)

    @property
    def busy(self) -> bool:
        return self._cycle_lock.locked()

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    async def run_cycle(self) -> bool:
        """Run one cycle. Returns False, doing nothing, when a cycle is already in flight."""
        if self._cycle_lock.locked():
            log.warning("Previous scan still running. Skipping this cycle.")
            self._metrics.inc("cycles_skipped")
            await self._bus.publish(cycle_skipped_event())
            return False
        async with self._cycle_lock:
            await self._run_cycle_locked()
        return True

    async def run_forever(self, stop: asyncio.Event) -> None:
        # the interval is a rest period after each cycle, not a fixed-phase clock
        while not stop.is_set():
            await self.run_cycle()
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop.wait(), timeout=self._cfg.interval_sec)
        log.info("Scanner stopped.")

    def _hourly_due(self, now: datetime) -> bool:
        if self._last_hourly is None:
            return True
        return (now - self._last_hourly).total_seconds() >= self._cfg.hourly_interval_sec

    async def _run_cycle_locked(self) -> None:
        now = self._clock()
        is_hourly = self._hourly_due(now)
        if is_hourly:
            log.info("Running hourly checks.")
            self._last_hourly = now

        if self._ranker is not None and await self._ranker.refresh(self._focus, self._gateway, now):
            await self._bus.publish(watchlist_updated_event(list(self._focus.snapshot())))

        holdings = await self._load_holdings()
        symbols = self._focus.snapshot()
        self._metrics.set("focus_size", len(symbols))
        log.info("Scanning %s assets concurrently...", len(symbols))

        await asyncio.gather(*(self._scan_isolated(sym, holdings, is_hourly) for sym in symbols))

        self._metrics.inc("cycles_run")
        log.debug("Cycle done: %s", self._metrics.snapshot())

    async def _load_holdings(self) -> dict[str, float]:
        try:
            return holdings_by_symbol(await self._gateway.fetch_holdings())
        except Exception as e:
            log.error("Failed to fetch holdings, continuing with signal checks only: %s", e)
            return {}

    async def _scan_isolated(self, symbol: str, holdings: dict[str, float], is_hourly: bool) -> None:
        async with self._slots:
            try:
                await self.scan_instrument(symbol, holdings, is_hourly=is_hourly)
            except Exception as e:
                self._metrics.inc("instrument_errors")
                log.warning("Scan failed for %s: %s", symbol, e)

    async def scan_instrument(self, symbol: str, holdings: dict[str, float], *, is_hourly: bool) -> None:
        cfg = self._cfg
        held = held_amount(holdings, symbol) > 0
        entry = self._entries.get(symbol)

        if held and entry and await self._check_stop(self._short_stop, symbol, entry, holdings, cfg.short_stop_limit, PANIC_STOP_LABEL):
            return

        candles = await self._gateway.fetch_candles(symbol, cfg.panic_timeframe, cfg.panic_limit)
        if len(candles) > cfg.panic_min_candles:
            verdict = self._panic.evaluate(candles)
            if verdict.signal == Signal.SELL:
                await self._sell(symbol, verdict.reason, PANIC_LABEL, holdings)
                return
            if verdict.signal == Signal.BUY and not held:
                await self._buy(symbol, verdict.reason, PANIC_LABEL, candles)
                return

        if not is_hourly:
            return

        if held and entry and await self._check_stop(self._long_stop, symbol, entry, holdings, cfg.long_stop_limit, TREND_STOP_LABEL):
            return

        daily = await self._gateway.fetch_candles(symbol, cfg.trend_timeframe, cfg.trend_limit)
        if len(daily) > cfg.trend_min_candles:
            verdict = self._trend.evaluate(daily)
            if verdict.signal == Signal.SELL:
                await self._sell(symbol, verdict.reason, TREND_LABEL, holdings)
            elif verdict.signal == Signal.BUY and not held:
                await self._buy(symbol, verdict.reason, TREND_LABEL, daily)

    async def _check_stop(
        self,
        stop: AtrStop,
        symbol: str,
        entry: float,
        holdings: dict[str, float],
        limit: int,
        label: str,
    ) -> bool:
        candles = await self._gateway.fetch_candles(symbol, stop.timeframe, limit)
        breach = stop.check(symbol, entry, candles)
        if breach is None:
            return False
        self._metrics.inc("atr_stops")
        log.info(
            "%s for %s: close %.4f <= stop %.4f (entry %.4f)",
            breach.reason,
            symbol,
            breach.last_close,
            breach.stop_price,
            entry,
        )
        await self._sell(symbol, breach.reason, label, holdings)
        return True

    async def _buy(self, symbol: str, reason: str, label: str, candles: list[Candle]) -> bool:
        cost = self._cfg.order_cost
        log.info("BUY SIGNAL [%s]: %s | %s", label, symbol, reason)
        order_id = await self._gateway.place_market_buy(symbol, cost)
        if order_id is None:
            log.warning("Buy for %s was not accepted", symbol)
            return False
        self._entries.record(symbol, candles[-1].close)
        self._metrics.inc("orders_buy")
        await self._publish(symbol, Signal.BUY, reason, label, cost)
        return True

    async def _sell(self, symbol: str, reason: str, label: str, holdings: dict[str, float]) -> bool:
        self._entries.clear(symbol)
        amount = held_amount(holdings, symbol)
        if amount <= 0:
            return False
        log.info("SELL SIGNAL [%s]: %s | %s", label, symbol, reason)
        order_id = await self._gateway.place_market_sell(symbol, amount)
        if order_id is None:
            log.warning("Sell for %s was not accepted", symbol)
            return False
        self._metrics.inc("orders_sell")
        await self._publish(symbol, Signal.SELL, reason, label, amount)
        return True

    async def _publish(self, symbol: str, action: Signal, reason: str, label: str, amount: float) -> None:
        await self._bus.publish(
            trade_decision_event(
                TradeDecision(
                    symbol=symbol,
                    action=action,
                    reason=reason,
                    strategy_name=label,
                    amount_or_price=amount,
                )
            )
        )
