from __future__ import annotations

from datetime import timedelta

import pytest

from market_scanner.core.types import ExitReason, PositionRiskState
from market_scanner.risk.exit_ladder import ExitLadder
from tests.fakes import T0


def _state() -> PositionRiskState:
    return PositionRiskState.open(100.0, T0)


def test_hard_stop():
    s = ExitLadder().evaluate("KRW-ABC", _state(), 94.0, T0 + timedelta(seconds=5))
    assert s is not None
    assert s.reason == ExitReason.HARD_STOP
    assert s.pnl_pct == pytest.approx(-6.0)
    assert s.elapsed_ms == 5000


def test_trailing_stop_from_high_water_mark():
    ladder = ExitLadder()
    state = _state()
    assert ladder.evaluate("KRW-ABC", state, 110.0, T0 + timedelta(seconds=1)) is None
    s = ladder.evaluate("KRW-ABC", state, 106.0, T0 + timedelta(seconds=2))
    assert s is not None
    assert s.reason == ExitReason.TRAIL_STOP
    assert s.pnl_pct == pytest.approx(6.0)
    assert s.drawdown_pct == pytest.approx(-3.6363636)
    assert state.high_water_mark == 110.0


def test_hard_stop_checked_before_trailing_stop():
    ladder = ExitLadder()
    state = _state()
    ladder.evaluate("KRW-ABC", state, 110.0, T0)
    s = ladder.evaluate("KRW-ABC", state, 94.0, T0 + timedelta(seconds=1))
    assert s is not None
    assert s.reason == ExitReason.HARD_STOP


def test_time_decay_only_without_profit():
    ladder = ExitLadder()
    late = T0 + timedelta(seconds=181)

    s = ladder.evaluate("KRW-ABC", _state(), 100.5, late)
    assert s is not None
    assert s.reason == ExitReason.TIME_DECAY

    assert ladder.evaluate("KRW-ABC", _state(), 102.0, late) is None
    assert ladder.evaluate("KRW-ABC", _state(), 99.0, T0 + timedelta(seconds=10)) is None


def test_high_water_mark_never_decreases():
    state = _state()
    for p in (101.0, 104.0, 102.0, 103.0):
        state.observe(p)
    assert state.high_water_mark == 104.0
