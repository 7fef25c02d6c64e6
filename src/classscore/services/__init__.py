"""Service layer exports."""

from .class_score_service import (
    ClassScoreService,
    InventoryAdjustedEvent,
    NodeStateChangedEvent,
    ScoreEvent,
    ToggleResult,
)
from .dependency_graph import DependencyGraph
from .errors import DuplicateNodeError, NodeCycleError, SaveLoadError, ScoreGraphError, UnknownNodeError
from .path_aggregator import PathAggregate, compute_path_aggregates
from .save_service import LoadedScores, ScoreSaveService
from .summary_service import ClassEffectSummary, SandsTotals, ScoreSummary, summarize
from .table_service import TableRow, build_rows, filter_and_sort

__all__ = [
    "ClassEffectSummary",
    "ClassScoreService",
    "DependencyGraph",
    "DuplicateNodeError",
    "InventoryAdjustedEvent",
    "LoadedScores",
    "NodeCycleError",
    "NodeStateChangedEvent",
    "PathAggregate",
    "SandsTotals",
    "SaveLoadError",
    "ScoreEvent",
    "ScoreGraphError",
    "ScoreSaveService",
    "ScoreSummary",
    "TableRow",
    "ToggleResult",
    "UnknownNodeError",
    "build_rows",
    "compute_path_aggregates",
    "filter_and_sort",
    "summarize",
]
