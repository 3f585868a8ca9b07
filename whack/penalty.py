from __future__ import annotations

import logging
from collections.abc import Callable

from whack.core.scheduler import EventQueue, TimerHandle

logger = logging.getLogger(__name__)


class PenaltyController:
    """Transient "input suspended" window opened by hitting a hazard.

    Only hit processing is gated. Auto-hide timers and spawning carry on.
    A new trigger replaces the current deadline; windows do not stack.
    """

    def __init__(
        self,
        *,
        queue: EventQueue,
        on_started: Callable[[float, float], None],
        on_ended: Callable[[float], None],
    ) -> None:
        self._queue = queue
        self._on_started = on_started
        self._on_ended = on_ended
        self._handle: TimerHandle | None = None
        self.suspended_until: float | None = None

    def trigger(self, duration: float, now: float) -> None:
        self._queue.cancel(self._handle)
        self.suspended_until = now + duration
        self._handle = self._queue.schedule(kind="penalty_expired", deadline=self.suspended_until, callback=self._on_expire)
        logger.debug("penalty-start at=%.3f until=%.3f", now, self.suspended_until)
        self._on_started(duration, now)

    def is_suspended(self, now: float) -> bool:
        return self.suspended_until is not None and now < self.suspended_until

    def cancel(self, now: float) -> bool:
        """Close an open window early (round end). Returns False if none was open."""

        if self.suspended_until is None:
            return False
        self._queue.cancel(self._handle)
        self._close(now)
        return True

    def _on_expire(self, at: float) -> None:
        self._close(at)

    def _close(self, at: float) -> None:
        self._handle = None
        self.suspended_until = None
        logger.debug("penalty-end at=%.3f", at)
        self._on_ended(at)
