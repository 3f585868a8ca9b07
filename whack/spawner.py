from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from whack.core.scheduler import EventQueue, TimerHandle
from whack.items import ItemTable, ItemType, choose_item_type
from whack.rng import RandomSource
from whack.slots import ItemLifecycle, SlotPool

logger = logging.getLogger(__name__)


class ItemSpawner:
    """Populates free slots on an irregular cadence.

    The delay to the next tick is `base_interval * Uniform(jitter_min, jitter_max)`,
    redrawn after every tick. A tick that finds no free slot is skipped; the
    next one is scheduled as usual.
    """

    def __init__(
        self,
        *,
        queue: EventQueue,
        pool: SlotPool,
        lifecycles: Sequence[ItemLifecycle],
        rng: RandomSource,
        table: ItemTable,
        base_interval: float,
        jitter_min: float,
        jitter_max: float,
    ) -> None:
        self._queue = queue
        self._pool = pool
        self._lifecycles = lifecycles
        self._rng = rng
        self._table = table
        self.base_interval = base_interval
        self.jitter_min = jitter_min
        self.jitter_max = jitter_max
        self._handle: TimerHandle | None = None

        self.spawned: Counter[ItemType] = Counter()
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._queue.is_live(self._handle)

    def start(self, now: float) -> None:
        self.stop()
        self._schedule_next(now)

    def stop(self) -> None:
        self._queue.cancel(self._handle)
        self._handle = None

    def reset_counters(self) -> None:
        self.spawned.clear()
        self.skipped = 0

    def next_delay(self) -> float:
        return self.base_interval * self._rng.uniform(self.jitter_min, self.jitter_max)

    def draw_item_type(self) -> ItemType:
        return choose_item_type(self._rng.random(), self._table)

    def spawn_once(self, now: float) -> tuple[int, ItemType] | None:
        slot_id = self._pool.acquire_free_slot(self._rng)
        if slot_id is None:
            self.skipped += 1
            logger.debug("spawn-skip at=%.3f (no free slot)", now)
            return None

        item_type = self.draw_item_type()
        self._lifecycles[slot_id].show(item_type, now)
        self.spawned[item_type] += 1
        return slot_id, item_type

    def _schedule_next(self, now: float) -> None:
        self._handle = self._queue.schedule(kind="spawn_tick", deadline=now + self.next_delay(), callback=self._on_tick)

    def _on_tick(self, at: float) -> None:
        self._handle = None
        self.spawn_once(at)
        self._schedule_next(at)
