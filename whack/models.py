from __future__ import annotations

from pydantic import BaseModel, Field

from whack.fsm import RoundPhase
from whack.items import ItemType


class Diagnostics(BaseModel):
    """Counters for the current round. `start()` resets them all."""

    hits_scored: int = 0
    # A hit that lost the race against auto-hide, or landed on a slot that was never filled.
    hits_on_empty: int = 0
    hits_suppressed: int = 0
    timeouts: int = 0
    spawn_ticks_skipped: int = 0
    stale_timer_events: int = 0
    spawned: dict[ItemType, int] = Field(default_factory=dict)
    hits: dict[ItemType, int] = Field(default_factory=dict)
    timed_out: dict[ItemType, int] = Field(default_factory=dict)


class SlotView(BaseModel):
    slot_id: int
    occupant: ItemType | None = None
    appeared_at: float | None = None
    hide_deadline: float | None = None


class RoundSnapshot(BaseModel):
    """Read-only view of the engine for a UI shell to render."""

    round_id: int
    phase: RoundPhase
    taken_at: float
    score: int
    time_remaining: int
    penalty_until: float | None = None
    slots: list[SlotView] = Field(default_factory=list)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)
