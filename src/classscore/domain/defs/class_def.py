"""Character class definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ClassDef:
    """A character class owning one or more class score trees."""

    id: str
    name: str
