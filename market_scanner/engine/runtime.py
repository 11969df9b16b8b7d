from __future__ import annotations

import asyncio
import contextlib

from market_scanner.core.events import EventBus
from market_scanner.core.types import ListingTrigger
from market_scanner.engine.brain import Brain
from market_scanner.engine.scanner import ScanOrchestrator
from market_scanner.engine.triggers import ListingTriggerHandler
from market_scanner.exchange.base import MarketGateway
from market_scanner.monitoring.logger import get_logger
from market_scanner.monitoring.notifier import DashboardNotifier
from market_scanner.risk.position_monitor import PositionMonitor

log = get_logger("runtime")

FLUSH_TIMEOUT_SEC = 5.0


async def _cancel(task: asyncio.Task[None]) -> None:
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


class Runtime:
    """Owns the long-lived tasks: event pump, scan loop, trigger consumer and exit monitors."""

    def __init__(
        self,
        bus: EventBus,
        gateway: MarketGateway,
        scanner: ScanOrchestrator,
        triggers: ListingTriggerHandler,
        monitor: PositionMonitor,
        brain: Brain,
        notifier: DashboardNotifier | None = None,
    ) -> None:
        self._bus = bus
        self._gateway = gateway
        self._scanner = scanner
        self._triggers = triggers
        self._monitor = monitor
        self._notifier = notifier
        self.brain = brain
        self.trigger_queue: asyncio.Queue[ListingTrigger] = asyncio.Queue()

    def submit_trigger(self, trigger: ListingTrigger) -> None:
        self.trigger_queue.put_nowait(trigger)

    async def run(self, stop: asyncio.Event | None = None) -> None:
        stop = stop or asyncio.Event()
        pump_task = asyncio.create_task(self._bus.pump())
        trigger_task: asyncio.Task[None] | None = None
        try:
            # triggers are validated against the market list, so it must be loaded first
            await self._triggers.load_markets()
            trigger_task = asyncio.create_task(self._triggers.consume(self.trigger_queue))
            await self._scanner.run_forever(stop)
        finally:
            if trigger_task is not None:
                await _cancel(trigger_task)
            await self._monitor.stop_all()
            await self.close(pump_task)

    async def analyze(self, symbol: str):
        pump_task = asyncio.create_task(self._bus.pump())
        try:
            return await self.brain.analyze(symbol)
        finally:
            await self.close(pump_task)

    async def close(self, pump_task: asyncio.Task[None]) -> None:
        # let queued notifications go out before the pump stops
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._bus.join(), timeout=FLUSH_TIMEOUT_SEC)
        await _cancel(pump_task)
        if self._notifier is not None:
            await self._notifier.close()
        await self._gateway.close()
        log.info("Runtime stopped.")
