from __future__ import annotations

from collections import Counter

from whack.items import ItemTable, ItemType


class ScoreLedger:
    """Running round score. No floor or ceiling: hazards can push it negative."""

    def __init__(self, table: ItemTable) -> None:
        self._table = table
        self.total = 0
        self.hits: Counter[ItemType] = Counter()

    def apply(self, item_type: ItemType) -> int:
        self.total += self._table.delta(item_type)
        self.hits[item_type] += 1
        return self.total

    def reset(self) -> None:
        self.total = 0
        self.hits.clear()
