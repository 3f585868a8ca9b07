from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import pytest

from whack.config import EngineConfig
from whack.controller import GameController
from whack.core.clock import ManualClock
from whack.items import ItemType
from whack.listeners import GameListener, ListenerHub
from whack.rng import RandomSource

T = TypeVar("T")


class ScriptedRandom(RandomSource):
    """RandomSource that replays scripted draws, then falls back to its seed.

    `uniforms` are returned verbatim (they must lie in the requested range),
    `choices` must be members of the sequence offered.
    """

    def __init__(
        self,
        *,
        choices: Sequence[Any] = (),
        randoms: Sequence[float] = (),
        uniforms: Sequence[float] = (),
        seed: int = 1234,
    ) -> None:
        super().__init__(seed=seed)
        self._choices = list(choices)
        self._randoms = list(randoms)
        self._uniforms = list(uniforms)

    def random(self) -> float:
        if self._randoms:
            return self._randoms.pop(0)
        return super().random()

    def uniform(self, a: float, b: float) -> float:
        if self._uniforms:
            value = self._uniforms.pop(0)
            assert a <= value <= b, f"scripted uniform {value} outside [{a}, {b}]"
            return value
        return super().uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        if self._choices:
            wanted = self._choices.pop(0)
            assert wanted in seq, f"scripted choice {wanted!r} not offered in {list(seq)!r}"
            return wanted
        return super().choice(seq)


class RecordingListener(GameListener):
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def on_round_started(self, round_id: int) -> None:
        self.calls.append(("round_started", round_id))

    def on_slot_changed(self, slot_id: int, item_type: ItemType | None) -> None:
        self.calls.append(("slot_changed", slot_id, item_type))

    def on_score_changed(self, total: int) -> None:
        self.calls.append(("score_changed", total))

    def on_time_changed(self, seconds_remaining: int) -> None:
        self.calls.append(("time_changed", seconds_remaining))

    def on_penalty_started(self, duration: float) -> None:
        self.calls.append(("penalty_started", duration))

    def on_penalty_ended(self) -> None:
        self.calls.append(("penalty_ended",))

    def on_round_ended(self, final_score: int) -> None:
        self.calls.append(("round_ended", final_score))

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture()
def make_controller(clock: ManualClock, recorder: RecordingListener) -> Callable[..., GameController]:
    """Factory for a controller on virtual time with the recorder attached."""

    def _make(*, config: EngineConfig | None = None, rng: RandomSource | None = None) -> GameController:
        controller = GameController(
            config if config is not None else EngineConfig(),
            rng=rng if rng is not None else RandomSource(seed=42),
            clock=clock,
            hub=ListenerHub(),
        )
        controller.add_listener(recorder)
        return controller

    return _make


def advance(controller: GameController, clock: ManualClock, t: float) -> int:
    clock.set(t)
    return controller.pump()
