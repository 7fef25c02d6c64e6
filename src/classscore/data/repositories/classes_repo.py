"""Classes repository."""
from __future__ import annotations

from typing import Dict

from classscore.data.errors import DataValidationError
from classscore.data.repositories.base import RepositoryBase
from classscore.domain.defs import ClassDef


class ClassesRepository(RepositoryBase[ClassDef]):
    """Loads the character classes that own class score trees."""

    def __init__(self, base_path=None) -> None:
        super().__init__("classes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ClassDef]:
        classes: Dict[str, ClassDef] = {}
        names: set[str] = set()
        for raw_id, payload in raw.items():
            class_data = self._require_mapping(payload, f"class '{raw_id}'")
            self._assert_exact_fields(class_data, {"name"}, f"class '{raw_id}'")
            name = self._require_str(class_data["name"], f"class '{raw_id}' name")
            if name in names:
                raise DataValidationError(f"class '{raw_id}' reuses the name '{name}'.")
            names.add(name)
            classes[raw_id] = ClassDef(id=raw_id, name=name)
        return classes

    def name_of(self, class_id: str) -> str:
        """Return the display name for a class, falling back to its id."""
        if self.has(class_id):
            return self.get(class_id).name
        return class_id
