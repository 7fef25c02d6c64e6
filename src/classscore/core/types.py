"""Shared type aliases for the core and domain layers."""
from typing import Literal

ScoreField = Literal["reserved", "acquired"]
SortDirection = Literal[1, -1]
ItemRole = Literal["material", "sands", "torch", "qp"]

SCORE_FIELDS: tuple[ScoreField, ...] = ("reserved", "acquired")

__all__ = ["ItemRole", "SCORE_FIELDS", "ScoreField", "SortDirection"]
