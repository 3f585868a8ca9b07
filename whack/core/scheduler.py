from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

TimerKind = Literal["round_tick", "spawn_tick", "auto_hide", "penalty_expired"]

# Called with the event's own deadline, so handlers work in event time.
TimerCallback = Callable[[float], None]


@dataclass(frozen=True, slots=True)
class TimerHandle:
    timer_id: int
    kind: TimerKind
    deadline: float
    epoch: int


@dataclass(frozen=True, slots=True)
class _Scheduled:
    handle: TimerHandle
    callback: TimerCallback


class EventQueue:
    """The single ordered event stream every timer is delivered through.

    Events run one at a time in (deadline, registration order). Handlers may
    schedule further events; those are picked up by the same `run_until`
    call if they are already due.

    A timer stays live until it fires or is cancelled. Cancelled timers are
    never delivered, even if still sitting in the heap; `invalidate_all`
    starts a new epoch so handles from before it can be told apart.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, int]] = []
        self._live: dict[int, _Scheduled] = {}
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        self.epoch = 0
        self.stale_dropped = 0

    def __len__(self) -> int:
        return len(self._live)

    def schedule(self, *, kind: TimerKind, deadline: float, callback: TimerCallback) -> TimerHandle:
        handle = TimerHandle(timer_id=next(self._ids), kind=kind, deadline=deadline, epoch=self.epoch)
        self._live[handle.timer_id] = _Scheduled(handle=handle, callback=callback)
        heapq.heappush(self._heap, (deadline, next(self._seq), handle.timer_id))
        logger.debug("timer-set id=%s kind=%s deadline=%.3f", handle.timer_id, kind, deadline)
        return handle

    def cancel(self, handle: TimerHandle | None) -> bool:
        """Cancel a pending timer. Returns False if it was not live (no-op)."""

        if handle is None or handle.epoch != self.epoch:
            return False
        removed = self._live.pop(handle.timer_id, None)
        if removed is not None:
            logger.debug("timer-cancel id=%s kind=%s", handle.timer_id, handle.kind)
        return removed is not None

    def is_live(self, handle: TimerHandle | None) -> bool:
        return handle is not None and handle.epoch == self.epoch and handle.timer_id in self._live

    def live_handles(self, kind: TimerKind | None = None) -> list[TimerHandle]:
        return [s.handle for s in self._live.values() if kind is None or s.handle.kind == kind]

    def invalidate_all(self) -> int:
        """Drop every pending timer and start a new epoch. Returns how many were dropped."""

        dropped = len(self._live)
        self._live.clear()
        self._heap.clear()
        self.epoch += 1
        logger.debug("timer-invalidate dropped=%s epoch=%s", dropped, self.epoch)
        return dropped

    def next_deadline(self) -> float | None:
        self._discard_dead_head()
        if not self._heap:
            return None
        return self._heap[0][0]

    def run_until(self, now: float) -> int:
        """Deliver every live event with deadline <= now. Returns the number delivered."""

        delivered = 0
        while True:
            self._discard_dead_head()
            if not self._heap or self._heap[0][0] > now:
                return delivered

            _, _, timer_id = heapq.heappop(self._heap)
            scheduled = self._live.pop(timer_id)
            logger.debug("timer-fire id=%s kind=%s at=%.3f", timer_id, scheduled.handle.kind, scheduled.handle.deadline)
            scheduled.callback(scheduled.handle.deadline)
            delivered += 1

    def _discard_dead_head(self) -> None:
        while self._heap and self._heap[0][2] not in self._live:
            heapq.heappop(self._heap)
            self.stale_dropped += 1
