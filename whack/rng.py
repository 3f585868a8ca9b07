from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class RandomSource:
    """Single sequential generator for every probabilistic decision.

    Draw order matters for reproducibility: the spawner picks a slot, then an
    item type, then the item's up-time, then the next spawn delay.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().randint(1, 2**31 - 1)
        # Kept for reproducibility/debugging.
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("Cannot choose from an empty sequence")
        return self._rng.choice(seq)
