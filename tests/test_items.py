from __future__ import annotations

from collections import Counter

import pytest

from whack.config import EngineConfig
from whack.items import ItemTable, ItemType, choose_item_type
from whack.rng import RandomSource
from whack.scoring import ScoreLedger


def test_reference_table() -> None:
    table = ItemTable.from_config(EngineConfig())

    assert table.delta(ItemType.target) == 10
    assert table.delta(ItemType.hazard) == -25
    assert table.delta(ItemType.bonus) == 50
    assert table.probability(ItemType.target) == pytest.approx(0.80)


@pytest.mark.parametrize(
    ("u", "expected"),
    [
        (0.0, ItemType.hazard),
        (0.1499, ItemType.hazard),
        (0.15, ItemType.bonus),
        (0.1999, ItemType.bonus),
        (0.21, ItemType.target),
        (0.9999, ItemType.target),
    ],
)
def test_cumulative_bands(u: float, expected: ItemType) -> None:
    table = ItemTable.from_config(EngineConfig())
    assert choose_item_type(u, table) == expected


def test_zero_weight_types_never_drawn() -> None:
    table = ItemTable.from_config(EngineConfig(hazard_probability=0.0, bonus_probability=0.0))
    assert choose_item_type(0.0, table) == ItemType.target


def test_distribution_converges_to_configured_weights() -> None:
    table = ItemTable.from_config(EngineConfig())
    rng = RandomSource(seed=20240501)
    n = 100_000

    counts = Counter(choose_item_type(rng.random(), table) for _ in range(n))

    assert counts[ItemType.hazard] / n == pytest.approx(0.15, abs=0.01)
    assert counts[ItemType.bonus] / n == pytest.approx(0.05, abs=0.01)
    assert counts[ItemType.target] / n == pytest.approx(0.80, abs=0.01)


def test_random_source_is_reproducible() -> None:
    a = RandomSource(seed=7)
    b = RandomSource(seed=7)

    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]
    assert a.choice([1, 2, 3]) == b.choice([1, 2, 3])


def test_random_source_draws_its_own_seed() -> None:
    rng = RandomSource()
    assert 1 <= rng.seed < 2**31


def test_choice_from_empty_sequence_raises() -> None:
    with pytest.raises(ValueError):
        RandomSource(seed=1).choice([])


def test_ledger_is_signed_and_unclamped() -> None:
    ledger = ScoreLedger(ItemTable.from_config(EngineConfig()))

    assert ledger.apply(ItemType.hazard) == -25
    assert ledger.apply(ItemType.target) == -15
    assert ledger.apply(ItemType.bonus) == 35
    assert ledger.hits == Counter({ItemType.hazard: 1, ItemType.target: 1, ItemType.bonus: 1})

    ledger.reset()
    assert ledger.total == 0
    assert not ledger.hits
