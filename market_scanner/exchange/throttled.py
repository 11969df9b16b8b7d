from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from market_scanner.core.types import Candle, Holding
from market_scanner.exchange.adapters.rate_limiter import SimpleRateLimiter
from market_scanner.exchange.base import GatewayError, MarketGateway
from market_scanner.monitoring.logger import get_logger

T = TypeVar("T")

log = get_logger("gateway")


class ThrottledGateway(MarketGateway):
    """
    Wraps a gateway with a shared rate limiter and per-call timeouts.

    Data and order calls fail closed (empty list / None) so one slow or broken call never
    escapes into the scan loop. Holdings and the market list raise GatewayError instead:
    callers must tell "nothing" apart from "unknown".
    """

    def __init__(self, inner: MarketGateway, *, limiter: SimpleRateLimiter, timeout_sec: float = 10.0) -> None:
        self._inner = inner
        self._limiter = limiter
        self._timeout = float(timeout_sec)

    async def _call(self, coro: Awaitable[T]) -> T:
        await self._limiter.acquire()
        return await asyncio.wait_for(coro, timeout=self._timeout)

    async def fetch_candles(self, symbol: str, timeframe: str, limit: int) -> list[Candle]:
        try:
            return list(await self._call(self._inner.fetch_candles(symbol, timeframe, limit)) or [])
        except Exception as e:
            log.warning("fetch_candles failed for %s %s: %s", symbol, timeframe, e)
            return []

    async def fetch_holdings(self) -> list[Holding]:
        try:
            return list(await self._call(self._inner.fetch_holdings()) or [])
        except Exception as e:
            raise GatewayError(f"fetch_holdings failed: {e}") from e

    async def place_market_buy(self, symbol: str, cost: float) -> str | None:
        try:
            return await self._call(self._inner.place_market_buy(symbol, cost))
        except Exception as e:
            log.warning("Market buy failed for %s cost=%s: %s", symbol, cost, e)
            return None

    async def place_market_sell(self, symbol: str, amount: float) -> str | None:
        try:
            return await self._call(self._inner.place_market_sell(symbol, amount))
        except Exception as e:
            log.warning("Market sell failed for %s amount=%s: %s", symbol, amount, e)
            return None

    async def fetch_all_tradable_symbols(self) -> list[str]:
        try:
            return list(await self._call(self._inner.fetch_all_tradable_symbols()) or [])
        except Exception as e:
            raise GatewayError(f"fetch_all_tradable_symbols failed: {e}") from e

    async def fetch_latest_price(self, symbol: str) -> float | None:
        try:
            price = await self._call(self._inner.fetch_latest_price(symbol))
        except Exception as e:
            log.warning("fetch_latest_price failed for %s: %s", symbol, e)
            return None
        return float(price) if price else None

    async def close(self) -> None:
        await self._inner.close()
