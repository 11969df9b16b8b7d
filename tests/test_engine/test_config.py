from __future__ import annotations

import os
from pathlib import Path

import pytest

from market_scanner.core.config import load_config
from market_scanner.core.env import load_dotenv

DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


def test_default_config_loads():
    cfg = load_config(str(DEFAULT_CONFIG))
    assert cfg.scanner.order_cost == 10000.0
    assert cfg.exit_ladder.trigger_order_cost == 50000.0
    assert cfg.universe.focus_n == 5
    assert "KRW-BTC" in cfg.universe.watchlist


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_overrides_and_env(tmp_path, monkeypatch):
    (tmp_path / "cfg.yaml").write_text("scanner:\n  interval_sec: 30\n  order_cost: 5000\n")
    (tmp_path / "overrides.yaml").write_text("scanner:\n  order_cost: 7000\n")
    monkeypatch.setenv("DASHBOARD_URL", "http://dash.local:9000")

    cfg = load_config(str(tmp_path / "cfg.yaml"))
    assert cfg.scanner.interval_sec == 30.0
    assert cfg.scanner.order_cost == 7000.0
    assert cfg.scanner.panic_timeframe == "1m"
    assert cfg.notifier.dashboard_url == "http://dash.local:9000"


def test_dotenv_does_not_override_existing(tmp_path, monkeypatch):
    monkeypatch.setenv("MS_EXISTING", "keep")
    monkeypatch.delenv("MS_NEW", raising=False)
    env = tmp_path / ".env"
    env.write_text("# comment\nexport MS_NEW='fresh'\nMS_EXISTING=replaced\n")

    applied = load_dotenv(str(env))
    assert applied == {"MS_NEW": "fresh"}
    assert os.environ["MS_NEW"] == "fresh"
    assert os.environ["MS_EXISTING"] == "keep"
    monkeypatch.delenv("MS_NEW")
