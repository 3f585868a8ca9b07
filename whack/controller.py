from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from whack.config import EngineConfig
from whack.core.clock import Clock, MonotonicClock
from whack.core.scheduler import EventQueue
from whack.fsm import RoundFSM, RoundPhase
from whack.items import ItemTable, ItemType
from whack.listeners import GameListener, ListenerHub
from whack.models import Diagnostics, RoundSnapshot, SlotView
from whack.penalty import PenaltyController
from whack.rng import RandomSource
from whack.round_clock import RoundClock
from whack.scoring import ScoreLedger
from whack.slots import ItemLifecycle, SlotChange, SlotPool
from whack.spawner import ItemSpawner
from whack.validation import ValidationContext, pipeline_for_action

logger = logging.getLogger(__name__)


class HitOutcome(StrEnum):
    scored = "scored"
    empty = "empty"
    suppressed = "suppressed"


@dataclass(frozen=True, slots=True)
class HitResult:
    """What a hit did.

    `empty` and `suppressed` are benign discards, not errors: the first is a
    hit that lost the race against auto-hide, the second landed inside a
    penalty window.
    """

    outcome: HitOutcome
    slot_id: int
    total: int
    item_type: ItemType | None = None
    score_delta: int = 0

    @property
    def scored(self) -> bool:
        return self.outcome == HitOutcome.scored


class GameController:
    """Top-level round state machine and the single ingress point for input.

    Every timer (round ticks, spawn ticks, per-slot auto-hide, penalty
    expiry) is an event on one `EventQueue`. Inbound calls first deliver
    whatever is already due on the clock, then act, so a hit and an
    auto-hide for the same slot are always totally ordered.

    Not thread-safe: drive it from one thread (or one asyncio loop).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
        hub: ListenerHub | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.rng = rng if rng is not None else RandomSource()
        self.clock = clock if clock is not None else MonotonicClock()
        self.hub = hub if hub is not None else ListenerHub()

        self.table = ItemTable.from_config(self.config)
        self.queue = EventQueue()
        self.fsm = RoundFSM()
        self.pool = SlotPool(self.config.grid_size)
        self.lifecycles = [
            ItemLifecycle(
                slot_id=slot_id,
                pool=self.pool,
                queue=self.queue,
                rng=self.rng,
                min_up_time=self.config.min_up_time_s,
                max_up_time=self.config.max_up_time_s,
                observer=self._on_slot_change,
            )
            for slot_id in range(self.config.grid_size)
        ]
        self.spawner = ItemSpawner(
            queue=self.queue,
            pool=self.pool,
            lifecycles=self.lifecycles,
            rng=self.rng,
            table=self.table,
            base_interval=self.config.base_spawn_interval_s,
            jitter_min=self.config.spawn_jitter_min,
            jitter_max=self.config.spawn_jitter_max,
        )
        self.ledger = ScoreLedger(self.table)
        self.penalty = PenaltyController(
            queue=self.queue,
            on_started=self._on_penalty_started,
            on_ended=self._on_penalty_ended,
        )
        self.round_clock = RoundClock(
            queue=self.queue,
            tick_interval=self.config.tick_interval_s,
            on_tick=self._on_clock_tick,
            on_expired=self._on_round_expired,
        )

        self.round_id = 0
        self.diagnostics = Diagnostics()
        self._stale_baseline = 0

    @property
    def phase(self) -> RoundPhase:
        return self.fsm.phase

    @property
    def running(self) -> bool:
        return self.phase == RoundPhase.running

    @property
    def score(self) -> int:
        return self.ledger.total

    @property
    def time_remaining(self) -> int:
        return self.round_clock.time_remaining

    def add_listener(self, listener: GameListener) -> None:
        self.hub.add(listener)

    def remove_listener(self, listener: GameListener) -> None:
        self.hub.remove(listener)

    # Inbound actions

    def start(self) -> None:
        """Begin a fresh round. Allowed from idle or ended."""

        now = self.clock.now()
        self.advance_to(now)
        self._validate("start")

        self.queue.invalidate_all()
        self.round_id += 1
        self._clear_slots(now)
        self.ledger.reset()
        self.spawner.reset_counters()
        self.diagnostics = Diagnostics()
        self._stale_baseline = self.queue.stale_dropped
        self.fsm.begin()

        logger.info("round-start round=%s at=%.3f duration=%ss seed=%s", self.round_id, now, self.config.round_duration_s, self.rng.seed)
        self.hub.round_started(round_id=self.round_id, at=now)
        self.hub.score_changed(round_id=self.round_id, at=now, total=self.ledger.total)

        self.round_clock.start(self.config.round_duration_s, now)
        self.hub.time_changed(round_id=self.round_id, at=now, seconds_remaining=self.round_clock.time_remaining)
        self.spawner.start(now)

    def stop(self) -> None:
        """End the running round early. Rejected unless running."""

        now = self.clock.now()
        self.advance_to(now)
        self._validate("stop")
        self._end_round(now)

    def hit(self, slot_id: int) -> HitResult:
        """Hit a slot at the current clock time."""

        now = self.clock.now()
        self.advance_to(now)
        self._validate("hit", slot_id=slot_id)

        if self.penalty.is_suspended(now):
            self.diagnostics.hits_suppressed += 1
            logger.debug("hit-suppressed slot=%s at=%.3f until=%.3f", slot_id, now, self.penalty.suspended_until)
            return HitResult(outcome=HitOutcome.suppressed, slot_id=slot_id, total=self.ledger.total)

        item_type = self.lifecycles[slot_id].hit(now)
        if item_type is None:
            self.diagnostics.hits_on_empty += 1
            logger.debug("hit-empty slot=%s at=%.3f", slot_id, now)
            return HitResult(outcome=HitOutcome.empty, slot_id=slot_id, total=self.ledger.total)

        total = self.ledger.apply(item_type)
        self.diagnostics.hits_scored += 1
        self.hub.score_changed(round_id=self.round_id, at=now, total=total)

        if item_type == ItemType.hazard:
            self.penalty.trigger(self.config.penalty_duration_s, now)

        return HitResult(
            outcome=HitOutcome.scored,
            slot_id=slot_id,
            total=total,
            item_type=item_type,
            score_delta=self.table.delta(item_type),
        )

    # Event delivery

    def advance_to(self, t: float) -> int:
        """Deliver every queued event due at or before `t`. Returns how many ran."""

        return self.queue.run_until(t)

    def pump(self) -> int:
        return self.advance_to(self.clock.now())

    def next_deadline(self) -> float | None:
        return self.queue.next_deadline()

    def snapshot(self) -> RoundSnapshot:
        diagnostics = self.diagnostics.model_copy(
            deep=True,
            update={
                "spawn_ticks_skipped": self.spawner.skipped,
                "stale_timer_events": self.queue.stale_dropped - self._stale_baseline,
                "spawned": dict(self.spawner.spawned),
                "hits": dict(self.ledger.hits),
            }
        )
        return RoundSnapshot(
            round_id=self.round_id,
            phase=self.phase,
            taken_at=self.clock.now(),
            score=self.ledger.total,
            time_remaining=self.round_clock.time_remaining,
            penalty_until=self.penalty.suspended_until,
            slots=[
                SlotView(
                    slot_id=s.slot_id,
                    occupant=s.occupant,
                    appeared_at=s.appeared_at,
                    hide_deadline=s.hide_deadline,
                )
                for s in self.pool
            ],
            diagnostics=diagnostics,
        )

    # Internals

    def _validate(self, action: str, *, slot_id: object = None) -> None:
        ctx = ValidationContext(action=action, phase=self.phase, grid_size=self.config.grid_size, slot_id=slot_id)
        pipeline_for_action(action).validate(ctx=ctx)

    def _end_round(self, at: float) -> None:
        self.round_clock.stop()
        self.spawner.stop()
        self.penalty.cancel(at)
        self.queue.invalidate_all()
        self._clear_slots(at)
        self.fsm.finish()

        logger.info("round-end round=%s at=%.3f score=%s", self.round_id, at, self.ledger.total)
        self.hub.round_ended(round_id=self.round_id, at=at, final_score=self.ledger.total)

    def _clear_slots(self, at: float) -> None:
        for lifecycle in self.lifecycles:
            lifecycle.clear(at)

    def _on_slot_change(self, change: SlotChange) -> None:
        if change.reason == "timeout" and change.previous is not None:
            self.diagnostics.timeouts += 1
            timed_out = self.diagnostics.timed_out
            timed_out[change.previous] = timed_out.get(change.previous, 0) + 1
        self.hub.slot_changed(round_id=self.round_id, at=change.at, slot_id=change.slot_id, item_type=change.item_type)

    def _on_clock_tick(self, seconds_remaining: int, at: float) -> None:
        self.hub.time_changed(round_id=self.round_id, at=at, seconds_remaining=seconds_remaining)

    def _on_round_expired(self, at: float) -> None:
        self._end_round(at)

    def _on_penalty_started(self, duration: float, at: float) -> None:
        self.hub.penalty_started(round_id=self.round_id, at=at, duration=duration)

    def _on_penalty_ended(self, at: float) -> None:
        self.hub.penalty_ended(round_id=self.round_id, at=at)
