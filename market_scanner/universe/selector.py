from __future__ import annotations

from datetime import datetime

from market_scanner.core.config import ExchangeConfig, UniverseConfig
from market_scanner.core.types import Candle, FocusList
from market_scanner.exchange.base import MarketGateway
from market_scanner.monitoring.logger import get_logger
from market_scanner.universe.relative_strength import rank_relative_strength

log = get_logger("ranker")


class FocusListHolder:
    """Current focus list. Replaced wholesale; readers take an immutable snapshot."""

    def __init__(self, initial: list[str], *, refresh_interval_sec: float = 3600.0) -> None:
        self._current = FocusList(symbols=tuple(dict.fromkeys(initial)))
        self._refresh_interval = float(refresh_interval_sec)
        self._last_attempt: datetime | None = None

    @property
    def current(self) -> FocusList:
        return self._current

    def snapshot(self) -> tuple[str, ...]:
        return self._current.symbols

    def replace(self, symbols: list[str], now: datetime) -> bool:
        if not symbols:
            return False
        self._current = FocusList(symbols=tuple(dict.fromkeys(symbols)), built_at=now)
        return True

    def due(self, now: datetime) -> bool:
        if self._last_attempt is None:
            return True
        return (now - self._last_attempt).total_seconds() >= self._refresh_interval

    def mark_attempt(self, now: datetime) -> None:
        self._last_attempt = now


class WatchlistRanker:
    def __init__(self, cfg: UniverseConfig, exchange: ExchangeConfig) -> None:
        self._cfg = cfg
        self._quote_prefix = exchange.quote_prefix
        self._benchmark = exchange.benchmark

    def candidates(self, symbols: list[str]) -> list[str]:
        exclude = set(self._cfg.exclude) | {self._benchmark}
        out: list[str] = []
        for s in symbols:
            if not s.startswith(self._quote_prefix) or s in exclude or s in out:
                continue
            out.append(s)
        return out

    async def _candles(self, gateway: MarketGateway, symbol: str) -> list[Candle]:
        return await gateway.fetch_candles(symbol, self._cfg.timeframe, self._cfg.candle_limit)

    async def rebuild(self, gateway: MarketGateway) -> list[str]:
        """New focus list, or [] when it could not be computed."""
        try:
            symbols = self.candidates(await gateway.fetch_all_tradable_symbols())
            benchmark = await self._candles(gateway, self._benchmark)
            history: dict[str, list[Candle]] = {}
            for sym in symbols:
                history[sym] = await self._candles(gateway, sym)
            return rank_relative_strength(
                history,
                benchmark,
                primary=self._cfg.primary_lookback,
                secondary=self._cfg.secondary_lookback,
                top_n=self._cfg.top_n,
                focus_n=self._cfg.focus_n,
            )
        except Exception as e:
            log.error("Relative strength rebuild failed, keeping previous focus list: %s", e)
            return []

    async def refresh(self, holder: FocusListHolder, gateway: MarketGateway, now: datetime) -> bool:
        """Rebuild when due. Returns True only when the focus list was replaced."""
        if not holder.due(now):
            return False
        holder.mark_attempt(now)
        symbols = await self.rebuild(gateway)
        if not holder.replace(symbols, now):
            log.warning("Relative strength produced no symbols; focus list unchanged: %s", list(holder.snapshot()))
            return False
        log.info("Focus list updated: %s", ", ".join(symbols))
        return True
