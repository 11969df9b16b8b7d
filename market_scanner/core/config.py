from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    level: str = "INFO"


class ExchangeConfig(BaseModel):
    quote_prefix: str = "KRW-"
    benchmark: str = "KRW-BTC"
    max_requests_per_sec: int = 8
    call_timeout_sec: float = 10.0


class GatewayConfig(BaseModel):
    # "package.module:callable" returning a MarketGateway
    factory: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class ScannerConfig(BaseModel):
    interval_sec: float = 60.0
    hourly_interval_sec: float = 3600.0
    order_cost: float = 10000.0
    max_concurrency: int = 10
    atr_period: int = 14
    short_atr_mult: float = 2.5
    long_atr_mult: float = 2.5
    short_stop_timeframe: str = "5m"
    short_stop_limit: int = 60
    long_stop_timeframe: str = "1h"
    long_stop_limit: int = 120
    panic_timeframe: str = "1m"
    panic_limit: int = 30
    panic_min_candles: int = 20
    trend_timeframe: str = "1d"
    trend_limit: int = 60
    trend_min_candles: int = 50


class UniverseConfig(BaseModel):
    watchlist: list[str] = Field(
        default_factory=lambda: [
            "KRW-BTC",
            "KRW-ETH",
            "KRW-XRP",
            "KRW-SOL",
            "KRW-DOGE",
            "KRW-SUI",
            "KRW-SEI",
            "KRW-NEAR",
            "KRW-AVAX",
            "KRW-ETC",
        ]
    )
    refresh_interval_sec: float = 3600.0
    timeframe: str = "1h"
    candle_limit: int = 60
    primary_lookback: int = 24
    secondary_lookback: int = 4
    top_n: int = 10
    focus_n: int = 5
    exclude: list[str] = Field(default_factory=list)


class ExitLadderConfig(BaseModel):
    hard_stop_pct: float = -5.0
    trail_stop_pct: float = -3.0
    time_decay_sec: float = 180.0
    time_decay_min_profit_pct: float = 1.0
    poll_interval_sec: float = 1.0
    trigger_order_cost: float = 50000.0
    ignored_tickers: list[str] = Field(default_factory=lambda: ["BTC", "ETH", "USDT", "KRW", "USDC", "BUSD"])


class BrainConfig(BaseModel):
    timeframe: str = "1h"
    candle_limit: int = 100
    min_candles: int = 50
    indicators: dict[str, dict[str, Any]] = Field(
        default_factory=lambda: {
            "sma20": {"kind": "sma", "period": 20},
            "rsi": {"period": 14},
            "atr": {"period": 14},
            "adx": {"period": 14},
        }
    )


class NotifierConfig(BaseModel):
    enabled: bool = True
    dashboard_url: str = "http://localhost:4000"
    timeout_sec: float = 3.0
    retries: int = 3


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    universe: UniverseConfig = Field(default_factory=UniverseConfig)
    exit_ladder: ExitLadderConfig = Field(default_factory=ExitLadderConfig)
    brain: BrainConfig = Field(default_factory=BrainConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    strategies: dict[str, dict[str, Any]] = Field(default_factory=dict)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: str) -> AppConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    data = yaml.safe_load(p.read_text()) or {}

    # local, uncommitted tweaks live next to the main file
    overlay = p.parent / "overrides.yaml"
    if overlay.exists():
        data = _deep_merge(data, yaml.safe_load(overlay.read_text()) or {})

    cfg = AppConfig.model_validate(data)
    dashboard_url = os.environ.get("DASHBOARD_URL", "").strip()
    if dashboard_url:
        cfg.notifier.dashboard_url = dashboard_url
    return cfg
