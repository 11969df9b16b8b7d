from __future__ import annotations

import asyncio
import re
from typing import Iterable

from market_scanner.core.config import ExchangeConfig, ExitLadderConfig
from market_scanner.core.events import EventBus, trade_decision_event
from market_scanner.core.types import ListingTrigger, Signal, TradeDecision
from market_scanner.exchange.base import MarketGateway, holding_currency
from market_scanner.monitoring.logger import get_logger
from market_scanner.risk.position_monitor import PositionMonitor

log = get_logger("triggers")

TRIGGER_LABEL = "Listing Sniper"

_NON_WORD = re.compile(r"[^a-zA-Z0-9\s]")


def extract_symbol(text: str, valid: Iterable[str], ignored: Iterable[str]) -> str | None:
    """First 2-6 character word of `text` that is a tradable ticker and not ignored."""
    valid = set(valid)
    ignored = set(ignored)
    for word in _NON_WORD.sub(" ", text).split():
        ticker = word.upper()
        if 2 <= len(ticker) <= 6 and ticker not in ignored and ticker in valid:
            return ticker
    return None


class ListingTriggerHandler:
    """
    Turns inbound listing triggers into an opportunistic buy plus an exit-ladder monitor.

    Tickers are checked against the cached tradable set; with no cached markets every
    trigger is rejected.
    """

    def __init__(
        self,
        gateway: MarketGateway,
        monitor: PositionMonitor,
        bus: EventBus,
        cfg: ExitLadderConfig,
        exchange: ExchangeConfig,
    ) -> None:
        self._gateway = gateway
        self._monitor = monitor
        self._bus = bus
        self._cfg = cfg
        self._quote_prefix = exchange.quote_prefix
        self._ignored = {t.upper() for t in cfg.ignored_tickers}
        self._valid: set[str] = set()

    @property
    def tickers(self) -> frozenset[str]:
        return frozenset(self._valid)

    async def load_markets(self) -> int:
        try:
            symbols = await self._gateway.fetch_all_tradable_symbols()
        except Exception as e:
            log.error("Failed to load tradable markets: %s", e)
            return len(self._valid)
        self._valid = {holding_currency(s) for s in symbols if s.startswith(self._quote_prefix)}
        log.info("Loaded %s tradable tickers", len(self._valid))
        return len(self._valid)

    def resolve(self, trigger: ListingTrigger) -> str | None:
        """Market symbol (e.g. KRW-ABC) for a trigger, or None when it must be ignored."""
        raw = trigger.symbol.strip().upper()
        ticker = holding_currency(raw) if raw else ""
        if not ticker:
            ticker = extract_symbol(trigger.raw_text, self._valid, self._ignored) or ""
        if not ticker or ticker in self._ignored or ticker not in self._valid:
            return None
        return f"{self._quote_prefix}{ticker}"

    async def handle(self, trigger: ListingTrigger) -> bool:
        symbol = self.resolve(trigger)
        if symbol is None:
            log.info("Ignoring trigger %r: no tradable symbol", trigger.symbol or trigger.raw_text[:60])
            return False
        if self._monitor.is_active(symbol):
            log.info("Trigger for %s ignored: position already monitored", symbol)
            return False

        cost = self._cfg.trigger_order_cost
        log.info("SNIPER BUY %s for %s", symbol, cost)
        order_id = await self._gateway.place_market_buy(symbol, cost)
        if order_id is None:
            log.warning("Sniper buy for %s was not accepted", symbol)
            return False

        await self._bus.publish(
            trade_decision_event(
                TradeDecision(
                    symbol=symbol,
                    action=Signal.BUY,
                    reason=trigger.raw_text[:200],
                    strategy_name=TRIGGER_LABEL,
                    amount_or_price=cost,
                )
            )
        )
        self._monitor.start(symbol)
        return True

    async def consume(self, queue: asyncio.Queue[ListingTrigger]) -> None:
        while True:
            trigger = await queue.get()
            try:
                await self.handle(trigger)
            except Exception as e:
                log.error("Trigger handling failed for %r: %s", trigger.symbol, e)
            finally:
                queue.task_done()
