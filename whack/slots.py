from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Literal

from whack.core.scheduler import EventQueue, TimerHandle
from whack.errors import InvalidSlotError
from whack.items import ItemType
from whack.rng import RandomSource

logger = logging.getLogger(__name__)

ChangeReason = Literal["spawn", "hit", "timeout", "clear"]


def check_slot_id(slot_id: object, grid_size: int) -> int:
    # bool is an int subclass; True is not a slot.
    if isinstance(slot_id, bool) or not isinstance(slot_id, int) or not 0 <= slot_id < grid_size:
        raise InvalidSlotError(slot_id, grid_size)
    return slot_id


@dataclass(slots=True)
class Slot:
    slot_id: int
    occupant: ItemType | None = None
    appeared_at: float | None = None
    hide_deadline: float | None = None

    @property
    def occupied(self) -> bool:
        return self.occupant is not None


class SlotPool:
    """Fixed set of slots and their occupancy. No timing logic lives here."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("SlotPool needs at least one slot")
        self._slots = [Slot(slot_id=i) for i in range(size)]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def get(self, slot_id: int) -> Slot:
        return self._slots[check_slot_id(slot_id, len(self._slots))]

    def free_slot_ids(self) -> list[int]:
        return [s.slot_id for s in self._slots if not s.occupied]

    def occupied_slot_ids(self) -> list[int]:
        return [s.slot_id for s in self._slots if s.occupied]

    def acquire_free_slot(self, rng: RandomSource) -> int | None:
        free = self.free_slot_ids()
        if not free:
            return None
        return rng.choice(free)

    def occupy(self, slot_id: int, item_type: ItemType, *, now: float, hide_deadline: float) -> None:
        slot = self.get(slot_id)
        assert not slot.occupied, f"slot {slot_id} is already occupied"
        slot.occupant = item_type
        slot.appeared_at = now
        slot.hide_deadline = hide_deadline

    def release(self, slot_id: int) -> ItemType | None:
        """Empty a slot. Releasing a free slot is a no-op; returns the previous occupant."""

        slot = self.get(slot_id)
        previous = slot.occupant
        slot.occupant = None
        slot.appeared_at = None
        slot.hide_deadline = None
        return previous


@dataclass(frozen=True, slots=True)
class SlotChange:
    slot_id: int
    item_type: ItemType | None
    previous: ItemType | None
    at: float
    reason: ChangeReason


SlotObserver = Callable[[SlotChange], None]


class ItemLifecycle:
    """Empty -> Occupied -> Empty for one slot.

    Owns the slot's auto-hide timer. The slot is occupied exactly while that
    timer is armed: showing arms it, a hit cancels it, and when it fires the
    slot is released with no score effect.
    """

    def __init__(
        self,
        *,
        slot_id: int,
        pool: SlotPool,
        queue: EventQueue,
        rng: RandomSource,
        min_up_time: float,
        max_up_time: float,
        observer: SlotObserver,
    ) -> None:
        self.slot_id = slot_id
        self._pool = pool
        self._queue = queue
        self._rng = rng
        self._min_up_time = min_up_time
        self._max_up_time = max_up_time
        self._observer = observer
        self._handle: TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._queue.is_live(self._handle)

    def show(self, item_type: ItemType, now: float) -> float | None:
        """Occupy the slot and arm auto-hide. Returns the drawn up-time."""

        assert not self.armed, f"slot {self.slot_id} armed twice"
        if self.armed:
            # Only reachable under `python -O`.
            return None

        up_time = self._rng.uniform(self._min_up_time, self._max_up_time)
        deadline = now + up_time
        self._pool.occupy(self.slot_id, item_type, now=now, hide_deadline=deadline)
        self._handle = self._queue.schedule(kind="auto_hide", deadline=deadline, callback=self._on_expire)
        logger.debug("show slot=%s item=%s up_time=%.3f", self.slot_id, item_type.value, up_time)
        self._observer(SlotChange(self.slot_id, item_type, None, now, "spawn"))
        return up_time

    def hit(self, now: float) -> ItemType | None:
        """Cancel auto-hide and empty the slot. Returns None if nothing was there."""

        if not self._pool.get(self.slot_id).occupied:
            return None
        return self._release(now, "hit")

    def clear(self, now: float) -> ItemType | None:
        if not self._pool.get(self.slot_id).occupied:
            self.cancel()
            return None
        return self._release(now, "clear")

    def cancel(self) -> bool:
        cancelled = self._queue.cancel(self._handle)
        self._handle = None
        return cancelled

    def _release(self, now: float, reason: ChangeReason) -> ItemType | None:
        self.cancel()
        previous = self._pool.release(self.slot_id)
        self._observer(SlotChange(self.slot_id, None, previous, now, reason))
        return previous

    def _on_expire(self, at: float) -> None:
        self._handle = None
        previous = self._pool.release(self.slot_id)
        if previous is None:
            return
        logger.debug("auto-hide slot=%s item=%s", self.slot_id, previous.value)
        self._observer(SlotChange(self.slot_id, None, previous, at, "timeout"))
