from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from market_scanner.core.types import ExitSummary, TradeDecision
from market_scanner.monitoring.logger import get_logger

log = get_logger("events")

TRADE_DECISION = "TradeDecision"
POSITION_EXIT = "PositionExit"
WATCHLIST_UPDATED = "WatchlistUpdated"
CYCLE_SKIPPED = "CycleSkipped"


@dataclass(frozen=True)
class Event:
    name: str
    time: datetime
    payload: dict[str, Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def trade_decision_event(decision: TradeDecision) -> Event:
    return Event(name=TRADE_DECISION, time=_now(), payload={"decision": decision})


def position_exit_event(summary: ExitSummary) -> Event:
    return Event(name=POSITION_EXIT, time=_now(), payload={"summary": summary})


def watchlist_updated_event(symbols: list[str]) -> Event:
    return Event(name=WATCHLIST_UPDATED, time=_now(), payload={"symbols": list(symbols)})


def cycle_skipped_event() -> Event:
    return Event(name=CYCLE_SKIPPED, time=_now(), payload={})


Handler = Callable[[Event], Awaitable[None]]


class EventBus:
    def __init__(self) -> None:
        self._subs: defaultdict[str, list[Handler]] = defaultdict(list)
        self._queue: asyncio.Queue[Event] = asyncio.Queue()

    def subscribe(self, event_name: str, handler: Handler) -> None:
        self._subs[event_name].append(handler)

    async def publish(self, event: Event) -> None:
        await self._queue.put(event)

    def pending(self) -> list[Event]:
        """Drain queued events without dispatching them."""
        out: list[Event] = []
        while not self._queue.empty():
            out.append(self._queue.get_nowait())
            self._queue.task_done()
        return out

    async def join(self) -> None:
        """Wait until every published event has been dispatched."""
        await self._queue.join()

    async def pump(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                for h in list(self._subs.get(event.name, [])):
                    try:
                        await h(event)
                    except Exception as e:
                        log.error("Handler for %s failed: %s", event.name, e)
            finally:
                self._queue.task_done()
