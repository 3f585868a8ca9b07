from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "ROUND_STARTED",
    "SLOT_CHANGED",
    "SCORE_CHANGED",
    "TIME_CHANGED",
    "PENALTY_STARTED",
    "PENALTY_ENDED",
    "ROUND_ENDED",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    """One outbound notification, as recorded by the event journal.

    `at` is engine time (the controller's clock); `ts` is wall-clock time.
    """

    type: EventType
    round_id: int
    at: float
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, round_id: int, at: float, payload: dict[str, Any]) -> "GameEvent":
        return GameEvent(type=type, round_id=round_id, at=at, payload=payload, ts=datetime.now(timezone.utc))
