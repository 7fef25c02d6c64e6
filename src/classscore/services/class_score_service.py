"""Toggle handling for planned/unlocked flags with path cascade and inventory upkeep."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from classscore.core.types import SCORE_FIELDS, ScoreField
from classscore.data.repositories import ClassScoreNodesRepository
from classscore.domain.inventory import InventoryStatus
from classscore.domain.score_state import ScoreEntry, ScoreSet, build_score_set
from classscore.services.dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScoreEvent:
    """Base class for toggle outcome events."""


@dataclass(slots=True)
class NodeStateChangedEvent(ScoreEvent):
    node_id: int
    node_name: str
    score_field: ScoreField
    old_value: bool
    new_value: bool
    cascaded: bool


@dataclass(slots=True)
class InventoryAdjustedEvent(ScoreEvent):
    node_id: int
    item_id: str
    delta: int
    stock: int


@dataclass(slots=True)
class ToggleResult:
    affected_ids: List[int] = field(default_factory=list)
    changed_ids: List[int] = field(default_factory=list)
    inventory_delta: Dict[str, int] = field(default_factory=dict)
    events: List[ScoreEvent] = field(default_factory=list)

    @property
    def inventory_updated(self) -> bool:
        return any(isinstance(event, InventoryAdjustedEvent) for event in self.events)


class ClassScoreService:
    """Applies flag toggles to a score set in place."""

    def __init__(self, nodes_repo: ClassScoreNodesRepository | None = None) -> None:
        self._nodes_repo = nodes_repo

    def new_score_set(self) -> ScoreSet:
        """Return a cleared score set for the whole catalog."""
        if self._nodes_repo is None:
            raise RuntimeError("ClassScoreService was created without a node catalog.")
        return build_score_set(self._nodes_repo.all())

    def select_affected(
        self,
        entries: Sequence[ScoreEntry],
        node_id: int,
        field_name: ScoreField,
        new_value: bool,
        *,
        cascade: bool,
        graph: DependencyGraph | None = None,
    ) -> List[ScoreEntry]:
        """Return the target followed by the nodes a toggle cascades to.

        Unlocking a node unlocks its whole prerequisite path; locking a
        node locks everything built on it. Only the unlocked flag cascades.
        """
        graph = graph or DependencyGraph(entries)
        target = graph.entry(node_id)
        affected = [target]
        if cascade and field_name == "acquired":
            if new_value:
                affected.extend(graph.ancestor_path(node_id))
            else:
                affected.extend(graph.descendants(node_id))
        return affected

    def apply_toggle(
        self,
        entries: Sequence[ScoreEntry],
        node_id: int,
        field_name: ScoreField,
        new_value: bool,
        *,
        cascade: bool = True,
        reconcile_inventory: bool = False,
        inventory: InventoryStatus | None = None,
    ) -> ToggleResult:
        """Set ``field_name`` to ``new_value`` on the target and its cascade.

        With ``reconcile_inventory`` every node whose unlocked flag flips
        returns its items to stock (unlocked -> locked) or consumes them
        (locked -> unlocked), exactly once per flip.
        """
        if field_name not in SCORE_FIELDS:
            raise ValueError(f"Unknown score field '{field_name}'.")
        reconciling = field_name == "acquired" and reconcile_inventory
        if reconciling and inventory is None:
            raise ValueError("Inventory reconciliation requested without an inventory.")

        affected = self.select_affected(entries, node_id, field_name, new_value, cascade=cascade)
        result = ToggleResult(affected_ids=[entry.id for entry in affected])

        for position, entry in enumerate(affected):
            old_value = entry.get_flag(field_name)
            if old_value == new_value:
                continue
            if reconciling:
                assert inventory is not None
                self._reconcile_entry(entry, inventory, result)
            result.changed_ids.append(entry.id)
            result.events.append(
                NodeStateChangedEvent(
                    node_id=entry.id,
                    node_name=entry.node_name,
                    score_field=field_name,
                    old_value=old_value,
                    new_value=new_value,
                    cascaded=position > 0,
                )
            )

        for entry in affected:
            entry.set_flag(field_name, new_value)

        logger.debug(
            "%s=%s on node %s: %d affected, %d changed, inventory delta %s",
            field_name,
            new_value,
            node_id,
            len(result.affected_ids),
            len(result.changed_ids),
            result.inventory_delta,
        )
        return result

    @staticmethod
    def _reconcile_entry(entry: ScoreEntry, inventory: InventoryStatus, result: ToggleResult) -> None:
        # Direction comes from the flag before it is overwritten.
        sign = 1 if entry.acquired else -1
        for item_id, amount in entry.spec.items.items():
            delta = sign * amount
            stock = inventory.adjust_stock(item_id, delta)
            result.inventory_delta[item_id] = result.inventory_delta.get(item_id, 0) + delta
            result.events.append(
                InventoryAdjustedEvent(node_id=entry.id, item_id=item_id, delta=delta, stock=stock)
            )
