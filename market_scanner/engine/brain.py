from __future__ import annotations

from market_scanner.core.config import BrainConfig
from market_scanner.core.events import EventBus, trade_decision_event
from market_scanner.core.types import AnalysisReport, Candle, Signal, TradeDecision
from market_scanner.exchange.base import MarketGateway
from market_scanner.indicators.factory import build_indicators
from market_scanner.monitoring.logger import get_logger
from market_scanner.strategies.base import Strategy
from market_scanner.strategies.decision import synthesize

log = get_logger("brain")

BRAIN_LABEL = "Brain"


class Brain:
    """On-demand analysis of one instrument: all three strategies on one candle window, then synthesis."""

    def __init__(self, gateway: MarketGateway, strategies: dict[str, Strategy], bus: EventBus, cfg: BrainConfig) -> None:
        self._gateway = gateway
        self._strategies = strategies
        self._bus = bus
        self._cfg = cfg
        self._indicators = build_indicators(cfg.indicators)

    def _snapshot(self, candles: list[Candle]) -> dict[str, float | None]:
        out: dict[str, float | None] = {}
        for name, ind in self._indicators.items():
            res = ind.compute(candles)
            value = next(iter(res.values.values()), None) if res.is_ready else None
            out[name] = None if value is None else float(value)
        return out

    async def analyze(self, symbol: str) -> AnalysisReport | None:
        candles = await self._gateway.fetch_candles(symbol, self._cfg.timeframe, self._cfg.candle_limit)
        if len(candles) < self._cfg.min_candles:
            log.warning("Not enough data to analyze %s (%s candles)", symbol, len(candles))
            return None

        log.info("Analyzing %s...", symbol)
        verdicts = {role: strategy.evaluate(candles) for role, strategy in self._strategies.items()}
        for role, v in verdicts.items():
            log.info("  %s: %s (%.2f) - %s", role, v.signal.value, v.confidence, v.reason)

        decision = synthesize(
            verdicts["trend"].signal,
            verdicts["breakout"].signal,
            verdicts["panic"].signal,
        )
        log.info("FINAL DECISION for %s: %s", symbol, decision.value)

        if decision in (Signal.BUY, Signal.SELL):
            reason = "; ".join(f"{role}={v.signal.value}: {v.reason}" for role, v in verdicts.items())
            await self._bus.publish(
                trade_decision_event(
                    TradeDecision(
                        symbol=symbol,
                        action=decision,
                        reason=reason,
                        strategy_name=BRAIN_LABEL,
                        amount_or_price=candles[-1].close,
                    )
                )
            )

        return AnalysisReport(symbol=symbol, decision=decision, verdicts=verdicts, indicators=self._snapshot(candles))
