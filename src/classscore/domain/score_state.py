"""Mutable per-node progress layered over catalog definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from classscore.core.types import SCORE_FIELDS, ScoreField
from classscore.domain.defs import ClassScoreNodeDef


@dataclass(slots=True)
class ScoreEntry:
    """Planned/unlocked flags for one catalog node.

    ``acquired`` means the node's resources have been debited from inventory.
    """

    spec: ClassScoreNodeDef
    reserved: bool = False
    acquired: bool = False

    @property
    def id(self) -> int:
        return self.spec.id

    @property
    def node_name(self) -> str:
        return self.spec.node_name

    @property
    def prev_node_name(self) -> str:
        return self.spec.prev_node_name

    def get_flag(self, field_name: ScoreField) -> bool:
        _check_field(field_name)
        return self.reserved if field_name == "reserved" else self.acquired

    def set_flag(self, field_name: ScoreField, value: bool) -> None:
        _check_field(field_name)
        if field_name == "reserved":
            self.reserved = value
        else:
            self.acquired = value


ScoreSet = List[ScoreEntry]


def build_score_set(specs: Iterable[ClassScoreNodeDef]) -> ScoreSet:
    """Return fresh, cleared entries ordered by node id."""
    return [ScoreEntry(spec=spec) for spec in sorted(specs, key=lambda spec: spec.id)]


def _check_field(field_name: str) -> None:
    if field_name not in SCORE_FIELDS:
        raise ValueError(f"Unknown score field '{field_name}'.")
