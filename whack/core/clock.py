from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:  # pragma: no cover
        ...


class MonotonicClock:
    """Real time, in seconds, from `time.monotonic`."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Virtual time that only moves when told to.

    Used by tests and headless simulations to make timer races deterministic.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def set(self, t: float) -> None:
        if t < self._now:
            raise ValueError(f"Clock cannot go backwards ({t} < {self._now})")
        self._now = t

    def advance(self, dt: float) -> float:
        self.set(self._now + dt)
        return self._now
