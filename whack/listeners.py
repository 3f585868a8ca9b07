from __future__ import annotations

import logging
from typing import Any

from whack.core.events import EventType, GameEvent
from whack.items import ItemType

logger = logging.getLogger(__name__)


class GameListener:
    """Outbound notifications, delivered as state actually changes.

    Subclass and override what you need; every method defaults to a no-op.
    Callbacks run inside the engine's event processing and must not call
    back into the controller.
    """

    def on_round_started(self, round_id: int) -> None:
        pass

    def on_slot_changed(self, slot_id: int, item_type: ItemType | None) -> None:
        pass

    def on_score_changed(self, total: int) -> None:
        pass

    def on_time_changed(self, seconds_remaining: int) -> None:
        pass

    def on_penalty_started(self, duration: float) -> None:
        pass

    def on_penalty_ended(self) -> None:
        pass

    def on_round_ended(self, final_score: int) -> None:
        pass


class EventJournal:
    """Append-only record of every notification the engine emitted."""

    def __init__(self) -> None:
        self.events: list[GameEvent] = []

    def record(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, type: EventType) -> list[GameEvent]:
        return [e for e in self.events if e.type == type]

    def clear(self) -> None:
        self.events.clear()


class ListenerHub:
    """In-process fan-out of engine notifications.

    Contract:
      - attach with `add(listener)`, detach with `remove(listener)`.
      - every notification is journaled first, then delivered to listeners
        in attach order.

    A listener that raises is logged and detached; the engine transition
    that produced the notification is not rolled back.
    """

    def __init__(self, journal: EventJournal | None = None) -> None:
        self.journal = journal if journal is not None else EventJournal()
        self._listeners: list[GameListener] = []

    def add(self, listener: GameListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove(self, listener: GameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self._listeners)

    def round_started(self, *, round_id: int, at: float) -> None:
        self._emit("ROUND_STARTED", round_id, at, {}, "on_round_started", round_id)

    def slot_changed(self, *, round_id: int, at: float, slot_id: int, item_type: ItemType | None) -> None:
        payload = {"slot_id": slot_id, "item_type": item_type.value if item_type else None}
        self._emit("SLOT_CHANGED", round_id, at, payload, "on_slot_changed", slot_id, item_type)

    def score_changed(self, *, round_id: int, at: float, total: int) -> None:
        self._emit("SCORE_CHANGED", round_id, at, {"total": total}, "on_score_changed", total)

    def time_changed(self, *, round_id: int, at: float, seconds_remaining: int) -> None:
        payload = {"seconds_remaining": seconds_remaining}
        self._emit("TIME_CHANGED", round_id, at, payload, "on_time_changed", seconds_remaining)

    def penalty_started(self, *, round_id: int, at: float, duration: float) -> None:
        self._emit("PENALTY_STARTED", round_id, at, {"duration": duration}, "on_penalty_started", duration)

    def penalty_ended(self, *, round_id: int, at: float) -> None:
        self._emit("PENALTY_ENDED", round_id, at, {}, "on_penalty_ended")

    def round_ended(self, *, round_id: int, at: float, final_score: int) -> None:
        self._emit("ROUND_ENDED", round_id, at, {"final_score": final_score}, "on_round_ended", final_score)

    def _emit(self, type: EventType, round_id: int, at: float, payload: dict[str, Any], method: str, *args: Any) -> None:
        self.journal.record(GameEvent.now(type=type, round_id=round_id, at=at, payload=payload))

        dead: list[GameListener] = []
        for listener in list(self._listeners):
            try:
                getattr(listener, method)(*args)
            except Exception:
                logger.exception("listener %r failed in %s; detaching", listener, method)
                dead.append(listener)

        for listener in dead:
            self.remove(listener)
