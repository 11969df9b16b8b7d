from __future__ import annotations

from market_scanner.core.types import Signal


def synthesize(trend: Signal, breakout: Signal, panic: Signal) -> Signal:
    """
    Reconcile the three verdicts for one instrument. First match wins:

    1. panic strategy BUY               -> BUY
    2. trend and breakout both BUY      -> BUY
    3. trend strategy SELL              -> SELL
    4. anything else                    -> HOLD
    """
    if panic == Signal.BUY:
        return Signal.BUY
    if trend == Signal.BUY and breakout == Signal.BUY:
        return Signal.BUY
    if trend == Signal.SELL:
        return Signal.SELL
    return Signal.HOLD
