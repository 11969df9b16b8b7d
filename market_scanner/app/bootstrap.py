from __future__ import annotations

import importlib
from typing import Callable

from market_scanner.core.config import AppConfig, GatewayConfig
from market_scanner.core.events import EventBus
from market_scanner.engine.brain import Brain
from market_scanner.engine.runtime import Runtime
from market_scanner.engine.scanner import ScanOrchestrator
from market_scanner.engine.triggers import ListingTriggerHandler
from market_scanner.exchange.adapters.rate_limiter import SimpleRateLimiter
from market_scanner.exchange.base import MarketGateway
from market_scanner.exchange.throttled import ThrottledGateway
from market_scanner.monitoring.metrics import Metrics
from market_scanner.monitoring.notifier import DashboardNotifier
from market_scanner.risk.entry_book import EntryBook
from market_scanner.risk.exit_ladder import ExitLadder
from market_scanner.risk.position_monitor import PositionMonitor
from market_scanner.strategies.factory import build_strategy_set
from market_scanner.universe.selector import FocusListHolder, WatchlistRanker


def load_gateway(cfg: GatewayConfig) -> MarketGateway:
    """Instantiate the exchange gateway from a "package.module:callable" path."""
    if not cfg.factory:
        raise ValueError("gateway.factory is not configured")
    module_name, sep, attr = cfg.factory.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"gateway.factory must look like 'module:callable', got {cfg.factory!r}")
    factory: Callable[..., MarketGateway] = getattr(importlib.import_module(module_name), attr)
    gateway = factory(**cfg.options)
    if not isinstance(gateway, MarketGateway):
        raise ValueError(f"{cfg.factory} did not return a MarketGateway")
    return gateway


def build_runtime(cfg: AppConfig, gateway: MarketGateway | None = None) -> Runtime:
    inner = gateway or load_gateway(cfg.gateway)
    gw = ThrottledGateway(
        inner,
        limiter=SimpleRateLimiter(cfg.exchange.max_requests_per_sec),
        timeout_sec=cfg.exchange.call_timeout_sec,
    )

    bus = EventBus()
    notifier: DashboardNotifier | None = None
    if cfg.notifier.enabled:
        notifier = DashboardNotifier(cfg.notifier)
        notifier.subscribe(bus)

    strategies = build_strategy_set(cfg.strategies)
    focus = FocusListHolder(cfg.universe.watchlist, refresh_interval_sec=cfg.universe.refresh_interval_sec)
    scanner = ScanOrchestrator(
        gw,
        panic=strategies["panic"],
        trend=strategies["trend"],
        entries=EntryBook(),
        focus=focus,
        bus=bus,
        cfg=cfg.scanner,
        ranker=WatchlistRanker(cfg.universe, cfg.exchange),
        metrics=Metrics(),
    )

    ladder_cfg = cfg.exit_ladder
    ladder = ExitLadder(
        hard_stop_pct=ladder_cfg.hard_stop_pct,
        trail_stop_pct=ladder_cfg.trail_stop_pct,
        time_decay_sec=ladder_cfg.time_decay_sec,
        time_decay_min_profit_pct=ladder_cfg.time_decay_min_profit_pct,
    )
    monitor = PositionMonitor(gw, ladder, bus, poll_interval_sec=ladder_cfg.poll_interval_sec)
    triggers = ListingTriggerHandler(gw, monitor, bus, ladder_cfg, cfg.exchange)
    brain = Brain(gw, strategies, bus, cfg.brain)

    return Runtime(
        bus=bus,
        gateway=gw,
        scanner=scanner,
        triggers=triggers,
        monitor=monitor,
        brain=brain,
        notifier=notifier,
    )
