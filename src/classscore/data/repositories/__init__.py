"""Repository exports."""

from .classes_repo import ClassesRepository
from .items_repo import ItemsRepository
from .nodes_repo import ClassScoreNodesRepository

__all__ = [
    "ClassesRepository",
    "ClassScoreNodesRepository",
    "ItemsRepository",
]
