from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from whack.controller import GameController
from whack.errors import PreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    # Upper bound on one sleep, so a stop requested from another task is noticed promptly.
    max_sleep_s: float = 0.05
    # Start a round on entry if the controller is not already running one.
    auto_start: bool = True


class RealtimeRunner:
    """Drives a controller's event queue from an asyncio loop in real time.

    Everything runs on the loop's thread: the runner sleeps until the next
    deadline and pumps the controller, while UI callbacks call
    `controller.hit()` directly between pumps.
    """

    def __init__(self, controller: GameController, config: RunnerConfig | None = None) -> None:
        self.controller = controller
        self.config = config if config is not None else RunnerConfig()
        self._stop_requested = False

    def request_stop(self) -> None:
        self._stop_requested = True

    def _sleep_for(self) -> float:
        deadline = self.controller.next_deadline()
        if deadline is None:
            return self.config.max_sleep_s
        delay = deadline - self.controller.clock.now()
        return min(max(delay, 0.0), self.config.max_sleep_s)

    async def run_once(self) -> int:
        """Sleep until the next event is due (bounded), then deliver due events."""

        await asyncio.sleep(self._sleep_for())
        return self.controller.pump()

    async def run_round(self) -> int:
        """Run until the current round ends. Returns the final score."""

        self._stop_requested = False
        if self.config.auto_start and not self.controller.running:
            self.controller.start()

        while self.controller.running:
            if self._stop_requested:
                try:
                    self.controller.stop()
                except PreconditionError:
                    # stop() delivers due events first; the round may have expired there.
                    if self.controller.running:
                        raise
                    logger.debug("runner-stop round=%s already ended", self.controller.round_id)
                break
            await self.run_once()

        logger.info("runner-done round=%s score=%s", self.controller.round_id, self.controller.score)
        return self.controller.score
