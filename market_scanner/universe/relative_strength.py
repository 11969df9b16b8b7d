from __future__ import annotations

from dataclasses import dataclass

from market_scanner.core.types import Candle


@dataclass(frozen=True)
class RsScore:
    symbol: str
    rs_primary: float
    rs_secondary: float


def period_return(candles: list[Candle], lookback: int) -> float | None:
    """Fractional return of the last close versus the close `lookback` bars earlier."""
    if lookback <= 0 or len(candles) <= lookback:
        return None
    last = candles[-1].close
    prev = candles[-1 - lookback].close
    if prev <= 0:
        return None
    return last / prev - 1.0


def score_relative_strength(
    candidates: dict[str, list[Candle]],
    benchmark: list[Candle],
    *,
    primary: int = 24,
    secondary: int = 4,
) -> list[RsScore]:
    bench_primary = period_return(benchmark, primary)
    bench_secondary = period_return(benchmark, secondary)
    if bench_primary is None or bench_secondary is None:
        return []

    scores: list[RsScore] = []
    for symbol, candles in candidates.items():
        r_primary = period_return(candles, primary)
        r_secondary = period_return(candles, secondary)
        if r_primary is None or r_secondary is None:
            continue
        scores.append(
            RsScore(
                symbol=symbol,
                rs_primary=r_primary - bench_primary,
                rs_secondary=r_secondary - bench_secondary,
            )
        )
    return scores


def rank_relative_strength(
    candidates: dict[str, list[Candle]],
    benchmark: list[Candle],
    *,
    primary: int = 24,
    secondary: int = 4,
    top_n: int = 10,
    focus_n: int = 5,
) -> list[str]:
    """
    Top `top_n` by primary-window relative strength, re-ranked by the secondary window,
    keeping `focus_n`. Both sorts are stable, so ties keep candidate order.
    """
    scores = score_relative_strength(candidates, benchmark, primary=primary, secondary=secondary)
    leaders = sorted(scores, key=lambda s: s.rs_primary, reverse=True)[:top_n]
    focus = sorted(leaders, key=lambda s: s.rs_secondary, reverse=True)[:focus_n]
    return [s.symbol for s in focus]
