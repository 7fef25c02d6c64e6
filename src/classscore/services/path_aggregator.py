"""Cumulative resource cost along each node's prerequisite path."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from classscore.domain.defs import ResourceKeys
from classscore.domain.score_state import ScoreEntry
from classscore.services.dependency_graph import DependencyGraph
from classscore.services.errors import NodeCycleError


@dataclass(frozen=True, slots=True)
class PathAggregate:
    """Cost of every strict ancestor of a node, in total and already spent."""

    sands: int = 0
    acquired_sands: int = 0
    torches: tuple[int, ...] = ()
    acquired_torches: tuple[int, ...] = ()

    @property
    def sands_left(self) -> int:
        return self.sands - self.acquired_sands

    @property
    def torches_left(self) -> tuple[int, ...]:
        return tuple(total - spent for total, spent in zip(self.torches, self.acquired_torches))


def compute_path_aggregates(
    entries: Sequence[ScoreEntry],
    resource_keys: ResourceKeys,
    graph: DependencyGraph | None = None,
) -> Dict[int, PathAggregate]:
    """Return a ``PathAggregate`` per node id.

    Aggregates are memoized by node name, so predecessors may appear
    anywhere in ``entries``.
    """
    graph = graph or DependencyGraph(entries)
    zero_torches = (0,) * resource_keys.torch_count
    root = PathAggregate(torches=zero_torches, acquired_torches=zero_torches)
    computed: Dict[str, PathAggregate] = {}
    in_progress: set[str] = set()

    def aggregate_for(entry: ScoreEntry) -> PathAggregate:
        cached = computed.get(entry.node_name)
        if cached is not None:
            return cached
        if entry.node_name in in_progress:
            raise NodeCycleError(f"Predecessor cycle through '{entry.node_name}'.")
        prev = graph.predecessor(entry)
        if prev is None:
            result = root
        else:
            in_progress.add(entry.node_name)
            try:
                result = _extend(aggregate_for(prev), prev, resource_keys)
            finally:
                in_progress.discard(entry.node_name)
        computed[entry.node_name] = result
        return result

    return {entry.id: aggregate_for(entry) for entry in entries}


def _extend(base: PathAggregate, prev: ScoreEntry, resource_keys: ResourceKeys) -> PathAggregate:
    spec = prev.spec
    sands = spec.amount_of(resource_keys.sands_id)
    torches = tuple(spec.amount_of(torch_id) for torch_id in resource_keys.torch_ids)
    spent = 1 if prev.acquired else 0
    return PathAggregate(
        sands=base.sands + sands,
        acquired_sands=base.acquired_sands + sands * spent,
        torches=tuple(a + b for a, b in zip(base.torches, torches)),
        acquired_torches=tuple(a + b * spent for a, b in zip(base.acquired_torches, torches)),
    )
