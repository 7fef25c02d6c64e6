"""Items repository and designated resource lookup."""
from __future__ import annotations

from typing import Dict, get_args

from classscore.core.types import ItemRole
from classscore.data.errors import DataValidationError
from classscore.data.repositories.base import RepositoryBase
from classscore.domain.defs import ItemDef, ResourceKeys

_ITEM_ROLES = set(get_args(ItemRole))


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads item definitions and resolves the sands/torch/QP items."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)
        self._resource_keys: ResourceKeys | None = None

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            item_data = self._require_mapping(payload, f"item '{raw_id}'")
            self._assert_exact_fields(
                item_data, {"name"}, f"item '{raw_id}'", optional_fields={"role"}
            )
            name = self._require_str(item_data["name"], f"item '{raw_id}' name")
            role = self._require_str(item_data.get("role", "material"), f"item '{raw_id}' role")
            if role not in _ITEM_ROLES:
                raise DataValidationError(
                    f"item '{raw_id}' role must be one of {sorted(_ITEM_ROLES)}, got '{role}'."
                )
            items[raw_id] = ItemDef(id=raw_id, name=name, role=role)
        return items

    def name_of(self, item_id: str) -> str:
        if self.has(item_id):
            return self.get(item_id).name
        return item_id

    def resource_keys(self) -> ResourceKeys:
        """Return the item ids designated as sands, torches and QP."""
        if self._resource_keys is None:
            self._resource_keys = self._resolve_resource_keys()
        return self._resource_keys

    def _resolve_resource_keys(self) -> ResourceKeys:
        by_role: Dict[str, list[str]] = {}
        for item in self.all():
            by_role.setdefault(item.role, []).append(item.id)
        sands = by_role.get("sands", [])
        if len(sands) != 1:
            raise DataValidationError(
                f"items.json must designate exactly one 'sands' item, found {len(sands)}."
            )
        qp = by_role.get("qp", [])
        if len(qp) > 1:
            raise DataValidationError(f"items.json designates {len(qp)} 'qp' items; at most one allowed.")
        torch_ids = tuple(sorted(by_role.get("torch", []), key=_item_sort_key))
        return ResourceKeys(sands_id=sands[0], torch_ids=torch_ids, qp_id=qp[0] if qp else None)


def _item_sort_key(item_id: str) -> tuple[int, int, str]:
    if item_id.isdigit():
        return (0, int(item_id), item_id)
    return (1, 0, item_id)
