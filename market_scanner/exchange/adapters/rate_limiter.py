from __future__ import annotations

import asyncio
import time
from collections import deque


class SimpleRateLimiter:
    """
    Sliding one-second window shared by every caller of a gateway.

    Exchange REST limits are per second; bursts from the concurrent scan fan-out
    queue here instead of tripping the exchange.
    """

    def __init__(self, max_per_sec: int = 8) -> None:
        self._max_per_sec = max(1, int(max_per_sec))
        self._lock = asyncio.Lock()
        self._stamps: deque[float] = deque()

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = time.monotonic()
                while self._stamps and now - self._stamps[0] >= 1.0:
                    self._stamps.popleft()
                if len(self._stamps) < self._max_per_sec:
                    self._stamps.append(now)
                    return
                await asyncio.sleep(1.0 - (now - self._stamps[0]))
