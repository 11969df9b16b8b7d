from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Metrics:
    """
    In-process counters and gauges for the scan loop.

    Counters: cycles_run, cycles_skipped, instrument_errors, orders_buy, orders_sell, atr_stops.
    Gauges: focus_size.
    """

    counters: dict[str, int] = field(default_factory=dict)
    gauges: dict[str, float] = field(default_factory=dict)

    def inc(self, key: str, n: int = 1) -> None:
        self.counters[key] = int(self.counters.get(key, 0)) + int(n)

    def set(self, key: str, v: float) -> None:
        self.gauges[key] = float(v)

    def get(self, key: str) -> int:
        return int(self.counters.get(key, 0))

    def snapshot(self) -> dict[str, float]:
        out: dict[str, float] = {k: float(v) for k, v in self.counters.items()}
        out.update(self.gauges)
        return out
