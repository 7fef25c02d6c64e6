"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from classscore.core.types import ItemRole


@dataclass(slots=True)
class ItemDef:
    """A consumable resource that node unlocks cost."""

    id: str
    name: str
    role: ItemRole = "material"


@dataclass(frozen=True, slots=True)
class ResourceKeys:
    """Item ids of the resource categories tracked along prerequisite paths."""

    sands_id: str
    torch_ids: tuple[str, ...] = ()
    qp_id: str | None = None

    @property
    def torch_count(self) -> int:
        return len(self.torch_ids)
