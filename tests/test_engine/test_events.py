from __future__ import annotations

import asyncio

from market_scanner.core.events import CYCLE_SKIPPED, EventBus, cycle_skipped_event


def test_failing_handler_does_not_stop_the_pump():
    async def _run():
        bus = EventBus()
        seen: list[str] = []

        async def broken(event):
            raise ValueError("bad dashboard url")

        async def record(event):
            seen.append(event.name)

        bus.subscribe(CYCLE_SKIPPED, broken)
        bus.subscribe(CYCLE_SKIPPED, record)
        pump = asyncio.create_task(bus.pump())
        await bus.publish(cycle_skipped_event())
        await bus.publish(cycle_skipped_event())
        await asyncio.wait_for(bus.join(), timeout=1)
        alive = not pump.done()
        pump.cancel()
        return seen, alive

    seen, alive = asyncio.run(_run())
    assert seen == [CYCLE_SKIPPED, CYCLE_SKIPPED]
    assert alive is True


def test_pending_drains_without_dispatch():
    async def _run():
        bus = EventBus()
        await bus.publish(cycle_skipped_event())
        drained = bus.pending()
        await asyncio.wait_for(bus.join(), timeout=1)
        return drained

    assert [e.name for e in asyncio.run(_run())] == [CYCLE_SKIPPED]
