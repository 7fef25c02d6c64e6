"""Serialization of score progress and inventory stock."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Sequence

from classscore.data.repositories import ClassScoreNodesRepository
from classscore.domain.inventory import InventoryStatus
from classscore.domain.score_state import ScoreEntry, ScoreSet, build_score_set
from classscore.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]


@dataclass(slots=True)
class LoadedScores:
    entries: ScoreSet
    inventory: InventoryStatus


class ScoreSaveService:
    """Converts score progress to/from a versioned payload merged against the catalog."""

    SAVE_VERSION = 1

    def __init__(self, nodes_repo: ClassScoreNodesRepository) -> None:
        self._nodes_repo = nodes_repo

    def serialize(self, entries: Sequence[ScoreEntry], inventory: InventoryStatus | None = None) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "saved_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                "nodes": len(entries),
                "acquired": sum(1 for entry in entries if entry.acquired),
            },
            "scores": {
                str(entry.id): {"reserved": entry.reserved, "acquired": entry.acquired}
                for entry in entries
            },
            "inventory": dict(sorted((inventory or InventoryStatus()).snapshot().items())),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> LoadedScores:
        """Rebuild the score set from the catalog and apply saved flags.

        Catalog nodes missing from the save start cleared; saved ids the
        catalog no longer knows are dropped.
        """
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError(
                f"Unsupported save version {payload.get('save_version')!r}; expected {self.SAVE_VERSION}."
            )
        scores = self._require_dict(payload.get("scores", {}), "scores")
        entries = build_score_set(self._nodes_repo.all())
        by_id = {str(entry.id): entry for entry in entries}
        for raw_id, flags in scores.items():
            entry = by_id.get(raw_id)
            if entry is None:
                logger.warning("dropping saved state for unknown node %s", raw_id)
                continue
            flag_data = self._require_dict(flags, f"scores.{raw_id}")
            entry.reserved = self._require_bool(flag_data.get("reserved", False), f"scores.{raw_id}.reserved")
            entry.acquired = self._require_bool(flag_data.get("acquired", False), f"scores.{raw_id}.acquired")
        inventory = self._coerce_inventory(payload.get("inventory", {}))
        return LoadedScores(entries=entries, inventory=inventory)

    def _coerce_inventory(self, value: Any) -> InventoryStatus:
        counts = self._require_dict(value, "inventory")
        stock: Dict[str, int] = {}
        for item_id, amount in counts.items():
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise SaveLoadError(f"inventory.{item_id} must be an integer.")
            stock[str(item_id)] = amount
        return InventoryStatus.from_counts(stock)

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value
