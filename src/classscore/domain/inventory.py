"""Item stock ledger shared with the rest of the planner."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class ItemStock:
    """Stock counter for a single item."""

    stock: int = 0


@dataclass(slots=True)
class InventoryStatus:
    """Item id to stock counter mapping.

    Counters may go negative: the ledger records what unlocks consumed,
    it does not refuse them.
    """

    items: Dict[str, ItemStock] = field(default_factory=dict)

    @classmethod
    def from_counts(cls, counts: Dict[str, int]) -> "InventoryStatus":
        return cls(items={item_id: ItemStock(stock=amount) for item_id, amount in counts.items()})

    def stock_of(self, item_id: str) -> int:
        entry = self.items.get(item_id)
        return entry.stock if entry is not None else 0

    def adjust_stock(self, item_id: str, delta: int) -> int:
        """Apply ``delta`` to the item's counter and return the new stock."""
        entry = self.items.get(item_id)
        if entry is None:
            entry = ItemStock()
            self.items[item_id] = entry
        entry.stock += delta
        return entry.stock

    def snapshot(self) -> Dict[str, int]:
        return {item_id: entry.stock for item_id, entry in self.items.items()}
