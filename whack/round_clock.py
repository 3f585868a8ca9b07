from __future__ import annotations

from collections.abc import Callable

from whack.core.scheduler import EventQueue, TimerHandle
from whack.errors import PreconditionError


class RoundClock:
    """Countdown that ticks once per `tick_interval` while a round runs.

    Each tick decrements `time_remaining` and reports it; the tick that
    reaches zero reports round expiry and does not reschedule.
    """

    def __init__(
        self,
        *,
        queue: EventQueue,
        tick_interval: float,
        on_tick: Callable[[int, float], None],
        on_expired: Callable[[float], None],
    ) -> None:
        self._queue = queue
        self.tick_interval = tick_interval
        self._on_tick = on_tick
        self._on_expired = on_expired
        self._handle: TimerHandle | None = None
        self._started_at = 0.0
        self._ticks = 0
        self.time_remaining = 0

    @property
    def running(self) -> bool:
        return self._queue.is_live(self._handle)

    def start(self, duration: int, now: float) -> None:
        if self.running:
            raise PreconditionError("Round clock is already running")
        if duration < 1:
            raise ValueError("duration must be at least one tick")
        self.time_remaining = duration
        self._started_at = now
        self._ticks = 0
        self._schedule()

    def stop(self) -> None:
        self._queue.cancel(self._handle)
        self._handle = None

    def _schedule(self) -> None:
        # Tick k falls at start + k * tick_interval.
        deadline = self._started_at + (self._ticks + 1) * self.tick_interval
        self._handle = self._queue.schedule(kind="round_tick", deadline=deadline, callback=self._tick)

    def _tick(self, at: float) -> None:
        self._handle = None
        self._ticks += 1
        self.time_remaining -= 1
        self._on_tick(self.time_remaining, at)
        if self.time_remaining <= 0:
            self._on_expired(at)
            return
        self._schedule()
