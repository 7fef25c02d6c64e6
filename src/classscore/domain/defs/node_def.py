"""Class score node definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class NodeEffectDef:
    """Bonus granted by unlocking a node.

    ``value`` holds one ``NN%`` token per effect level, joined by newlines.
    """

    condition: str
    text: str
    value: str


@dataclass(slots=True)
class ClassScoreNodeDef:
    """Immutable catalog entry for a single unlock step."""

    id: int
    class_id: str
    node_name: str
    prev_node_name: str = ""
    items: Dict[str, int] = field(default_factory=dict)
    effect: NodeEffectDef = field(default_factory=lambda: NodeEffectDef("", "", ""))

    @property
    def is_root(self) -> bool:
        return not self.prev_node_name

    def amount_of(self, item_id: str | None) -> int:
        if item_id is None:
            return 0
        return self.items.get(item_id, 0)
