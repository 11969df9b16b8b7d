from __future__ import annotations

from abc import ABC, abstractmethod

from market_scanner.core.types import Candle, Holding


class GatewayError(RuntimeError):
    pass


class MarketGateway(ABC):
    """
    Market-data / order-execution gateway consumed by the scanner.

    Implementations talk to the exchange; the scanner only relies on this surface.
    """

    @abstractmethod
    async def fetch_candles(self, symbol: str, timeframe: str, limit: int) -> list[Candle]:
        """Oldest first. May return [] on failure."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_holdings(self) -> list[Holding]:
        raise NotImplementedError

    @abstractmethod
    async def place_market_buy(self, symbol: str, cost: float) -> str | None:
        """Spend `cost` quote currency. Return the order id, or None when rejected."""
        raise NotImplementedError

    @abstractmethod
    async def place_market_sell(self, symbol: str, amount: float) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def fetch_all_tradable_symbols(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_latest_price(self, symbol: str) -> float | None:
        raise NotImplementedError

    async def close(self) -> None:
        return None


def holding_currency(symbol: str) -> str:
    """'KRW-BTC' -> 'BTC', 'BTC/KRW' -> 'BTC'; anything else is returned unchanged."""
    if "-" in symbol:
        return symbol.split("-", 1)[1]
    if "/" in symbol:
        return symbol.split("/", 1)[0]
    return symbol


def holdings_by_symbol(holdings: list[Holding]) -> dict[str, float]:
    out: dict[str, float] = {}
    for h in holdings:
        if h.amount > 0:
            out[h.symbol] = out.get(h.symbol, 0.0) + float(h.amount)
    return out


def held_amount(holdings: dict[str, float], symbol: str) -> float:
    if symbol in holdings:
        return holdings[symbol]
    return holdings.get(holding_currency(symbol), 0.0)
