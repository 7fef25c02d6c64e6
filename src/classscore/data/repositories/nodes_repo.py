"""Class score node catalog with reference and integrity validation."""
from __future__ import annotations

import logging
from typing import Dict

from classscore.data.errors import DataReferenceError, DataValidationError
from classscore.data.repositories.base import RepositoryBase
from classscore.data.repositories.classes_repo import ClassesRepository
from classscore.data.repositories.items_repo import ItemsRepository
from classscore.domain.defs import ClassScoreNodeDef, NodeEffectDef

logger = logging.getLogger(__name__)


class ClassScoreNodesRepository(RepositoryBase[ClassScoreNodeDef]):
    """Loads unlock nodes keyed by their ordinal id.

    A malformed catalog (unknown references, duplicate node names or a
    predecessor cycle) fails the whole load.
    """

    def __init__(
        self,
        classes_repo: ClassesRepository | None = None,
        items_repo: ItemsRepository | None = None,
        base_path=None,
    ) -> None:
        super().__init__("class_score_nodes.json", base_path)
        self._classes_repo = classes_repo or ClassesRepository(base_path=base_path)
        self._items_repo = items_repo or ItemsRepository(base_path=base_path)

    def _build(self, raw: dict[str, object]) -> Dict[int, ClassScoreNodeDef]:
        class_ids = {class_def.id for class_def in self._classes_repo.all()}
        item_ids = {item.id for item in self._items_repo.all()}

        nodes: Dict[int, ClassScoreNodeDef] = {}
        for raw_id, payload in raw.items():
            context = f"node '{raw_id}'"
            if not raw_id.isdigit():
                raise DataValidationError(f"{context} id must be a non-negative integer string.")
            node_data = self._require_mapping(payload, context)
            self._assert_exact_fields(
                node_data,
                {"class", "node_name", "items", "effect"},
                context,
                optional_fields={"prev_node_name"},
            )
            class_id = self._require_str(node_data["class"], f"{context} class")
            if class_id not in class_ids:
                raise DataReferenceError(f"{context} references missing class '{class_id}'.")
            node_name = self._require_str(node_data["node_name"], f"{context} node_name")
            if not node_name:
                raise DataValidationError(f"{context} node_name must not be empty.")
            prev_node_name = self._require_str(
                node_data.get("prev_node_name", ""), f"{context} prev_node_name"
            )
            items = self._parse_items(node_data["items"], context, item_ids)
            effect = self._parse_effect(node_data["effect"], context)
            nodes[int(raw_id)] = ClassScoreNodeDef(
                id=int(raw_id),
                class_id=class_id,
                node_name=node_name,
                prev_node_name=prev_node_name,
                items=items,
                effect=effect,
            )

        self._validate_node_names(nodes)
        self._validate_predecessors(nodes)
        return nodes

    def _parse_items(self, raw_items: object, context: str, item_ids: set[str]) -> Dict[str, int]:
        items_data = self._require_mapping(raw_items, f"{context} items")
        items: Dict[str, int] = {}
        for item_id, amount in items_data.items():
            if item_id not in item_ids:
                raise DataReferenceError(f"{context} references missing item '{item_id}'.")
            value = self._require_int(amount, f"{context} items['{item_id}']")
            if value <= 0:
                raise DataValidationError(f"{context} items['{item_id}'] must be positive.")
            items[item_id] = value
        return items

    def _parse_effect(self, raw_effect: object, context: str) -> NodeEffectDef:
        effect_context = f"{context} effect"
        effect_data = self._require_mapping(raw_effect, effect_context)
        self._assert_exact_fields(effect_data, {"condition", "text", "value"}, effect_context)
        return NodeEffectDef(
            condition=self._require_str(effect_data["condition"], f"{effect_context} condition"),
            text=self._require_str(effect_data["text"], f"{effect_context} text"),
            value=self._require_str(effect_data["value"], f"{effect_context} value"),
        )

    @staticmethod
    def _validate_node_names(nodes: Dict[int, ClassScoreNodeDef]) -> None:
        seen: Dict[str, int] = {}
        for node_id in sorted(nodes):
            node = nodes[node_id]
            if node.node_name in seen:
                raise DataValidationError(
                    f"node '{node_id}' reuses node_name '{node.node_name}' "
                    f"already taken by node '{seen[node.node_name]}'."
                )
            seen[node.node_name] = node_id

    @staticmethod
    def _validate_predecessors(nodes: Dict[int, ClassScoreNodeDef]) -> None:
        by_name = {node.node_name: node for node in nodes.values()}
        for node in nodes.values():
            if node.prev_node_name and node.prev_node_name not in by_name:
                logger.warning(
                    "node %s (%s) names unknown predecessor %r; treating it as a root",
                    node.id,
                    node.node_name,
                    node.prev_node_name,
                )

        # Every node has at most one predecessor, so a cycle shows up as a
        # revisit while following prev_node_name links from any start node.
        cleared: set[str] = set()
        for start in sorted(nodes.values(), key=lambda node: node.id):
            trail: list[str] = []
            on_trail: set[str] = set()
            current = start
            while current is not None and current.node_name not in cleared:
                if current.node_name in on_trail:
                    cycle = trail[trail.index(current.node_name) :] + [current.node_name]
                    raise DataReferenceError(
                        f"Predecessor cycle detected: {' -> '.join(cycle)}."
                    )
                trail.append(current.node_name)
                on_trail.add(current.node_name)
                current = by_name.get(current.prev_node_name) if current.prev_node_name else None
            cleared.update(trail)
