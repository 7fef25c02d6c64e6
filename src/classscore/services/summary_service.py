"""Totals and per-class merged effects for a score set."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from classscore.domain.defs import ResourceKeys
from classscore.domain.effect_values import EffectValue, merge_effect_values, parse_effect_value
from classscore.domain.score_state import ScoreEntry


@dataclass(slots=True)
class SandsTotals:
    all: int = 0
    reserved: int = 0
    acquired: int = 0


@dataclass(slots=True)
class ClassEffectSummary:
    """Unlock points and summed effect values for one class."""

    point: int = 0
    values: Dict[str, Optional[EffectValue]] = field(default_factory=dict)


@dataclass(slots=True)
class ScoreSummary:
    total: int = 0
    reserved: int = 0
    acquired: int = 0
    sands: SandsTotals = field(default_factory=SandsTotals)
    effects: Dict[str, ClassEffectSummary] = field(default_factory=dict)


def summarize(entries: Sequence[ScoreEntry], resource_keys: ResourceKeys) -> ScoreSummary:
    """Count nodes and sands by status and merge unlocked effects per class.

    Reserved counts only nodes that are planned but not yet unlocked. A
    class earns a point for each unlocked node costing more than one kind
    of item. Raises ``EffectValueMismatchError`` when two unlocked nodes
    share a class and effect text but differ in level count.
    """
    summary = ScoreSummary()
    for entry in entries:
        sands = entry.spec.amount_of(resource_keys.sands_id)
        summary.total += 1
        summary.sands.all += sands
        if entry.reserved and not entry.acquired:
            summary.reserved += 1
            summary.sands.reserved += sands
        if not entry.acquired:
            continue
        summary.acquired += 1
        summary.sands.acquired += sands

        class_summary = summary.effects.setdefault(entry.spec.class_id, ClassEffectSummary())
        if len(entry.spec.items) > 1:
            class_summary.point += 1
        effect = entry.spec.effect
        class_summary.values[effect.text] = merge_effect_values(
            class_summary.values.get(effect.text), parse_effect_value(effect.value)
        )
    return summary
