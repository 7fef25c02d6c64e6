"""Domain definition exports."""

from .class_def import ClassDef
from .item_def import ItemDef, ResourceKeys
from .node_def import ClassScoreNodeDef, NodeEffectDef

__all__ = [
    "ClassDef",
    "ClassScoreNodeDef",
    "ItemDef",
    "NodeEffectDef",
    "ResourceKeys",
]
