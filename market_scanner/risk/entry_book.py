from __future__ import annotations


class EntryBook:
    """
    Entry prices of scanner-opened positions, used for ATR stop tracking.

    All mutations are synchronous, so a record/clear is atomic with respect to the
    other instrument tasks running on the same event loop.
    """

    def __init__(self) -> None:
        self._prices: dict[str, float] = {}

    def get(self, symbol: str) -> float | None:
        return self._prices.get(symbol)

    def record(self, symbol: str, price: float) -> bool:
        if price <= 0:
            return False
        self._prices[symbol] = float(price)
        return True

    def clear(self, symbol: str) -> float | None:
        return self._prices.pop(symbol, None)

    def snapshot(self) -> dict[str, float]:
        return dict(self._prices)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._prices

    def __len__(self) -> int:
        return len(self._prices)
