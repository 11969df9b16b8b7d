from __future__ import annotations

from typing import Any

import httpx

from market_scanner.core.config import NotifierConfig
from market_scanner.core.events import POSITION_EXIT, TRADE_DECISION, Event, EventBus
from market_scanner.core.types import ExitSummary, TradeDecision
from market_scanner.exchange.adapters.retry_policy import delivery_retry
from market_scanner.exchange.base import holding_currency
from market_scanner.monitoring.logger import get_logger

log = get_logger("notifier")


def decision_payloads(d: TradeDecision) -> tuple[dict[str, Any], dict[str, Any]]:
    news = {
        "text": f"[{d.strategy_name}] {d.symbol} {d.action.value} signal. {d.reason}",
        "symbol": holding_currency(d.symbol),
        "isImportant": True,
    }
    trade = {"symbol": d.symbol, "action": d.action.value, "amount": d.amount_or_price, "price": 0}
    return news, trade


def exit_payload(s: ExitSummary) -> dict[str, Any]:
    return {
        "text": (
            f"EXIT {s.symbol} ({s.reason.value}) PnL {s.pnl_pct:.2f}% "
            f"DD {s.drawdown_pct:.2f}% after {s.elapsed_ms / 1000.0:.0f}s"
        ),
        "symbol": holding_currency(s.symbol),
        "isImportant": True,
        "exit": {
            "reason": s.reason.value,
            "pnlPercent": s.pnl_pct,
            "drawdownPercent": s.drawdown_pct,
            "elapsedMs": s.elapsed_ms,
        },
    }


class DashboardNotifier:
    """Forwards trade decisions and exit summaries to the dashboard. Delivery is best effort."""

    def __init__(self, cfg: NotifierConfig, client: httpx.AsyncClient | None = None) -> None:
        self._cfg = cfg
        self._client = client or httpx.AsyncClient(base_url=cfg.dashboard_url, timeout=cfg.timeout_sec)
        self._post_with_retry = delivery_retry(cfg.retries)(self._post_once)

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe(TRADE_DECISION, self.on_trade_decision)
        bus.subscribe(POSITION_EXIT, self.on_position_exit)

    async def _post_once(self, path: str, payload: dict[str, Any]) -> None:
        r = await self._client.post(path, json=payload)
        r.raise_for_status()

    async def post(self, path: str, payload: dict[str, Any]) -> bool:
        if not self._cfg.enabled:
            return False
        try:
            await self._post_with_retry(path, payload)
            return True
        except (httpx.HTTPError, TimeoutError) as e:
            log.warning("Dashboard post %s failed: %s", path, e)
            return False

    async def on_trade_decision(self, event: Event) -> None:
        news, trade = decision_payloads(event.payload["decision"])
        await self.post("/api/news", news)
        await self.post("/api/trade", trade)

    async def on_position_exit(self, event: Event) -> None:
        await self.post("/api/news", exit_payload(event.payload["summary"]))

    async def close(self) -> None:
        await self._client.aclose()
