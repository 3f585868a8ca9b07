from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from whack.config import EngineConfig


class ItemType(StrEnum):
    target = "target"
    hazard = "hazard"
    bonus = "bonus"


@dataclass(frozen=True, slots=True)
class ItemSpec:
    score_delta: int
    probability: float


@dataclass(frozen=True, slots=True)
class ItemTable:
    """Score delta and spawn probability for every item type."""

    specs: dict[ItemType, ItemSpec]

    @staticmethod
    def from_config(config: EngineConfig) -> "ItemTable":
        return ItemTable(
            specs={
                ItemType.target: ItemSpec(score_delta=config.target_score, probability=config.target_probability),
                ItemType.hazard: ItemSpec(score_delta=config.hazard_score, probability=config.hazard_probability),
                ItemType.bonus: ItemSpec(score_delta=config.bonus_score, probability=config.bonus_probability),
            }
        )

    def delta(self, item_type: ItemType) -> int:
        return self.specs[item_type].score_delta

    def probability(self, item_type: ItemType) -> float:
        return self.specs[item_type].probability


def choose_item_type(u: float, table: ItemTable) -> ItemType:
    """Map a uniform draw `u` in [0, 1) onto an item type.

    Cumulative bands: hazard first, then bonus, target takes the rest.
    """

    hazard = table.probability(ItemType.hazard)
    if u < hazard:
        return ItemType.hazard
    if u < hazard + table.probability(ItemType.bonus):
        return ItemType.bonus
    return ItemType.target
