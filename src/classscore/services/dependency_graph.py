"""Prerequisite graph over a score set.

Each node names at most one predecessor, so the catalog is a forest of
chains and branches. Predecessor names that match nothing are treated as
roots. Walks are iterative and carry a visited set, so a malformed
catalog raises ``NodeCycleError`` instead of looping.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from classscore.domain.score_state import ScoreEntry
from classscore.services.errors import DuplicateNodeError, NodeCycleError, UnknownNodeError


class DependencyGraph:
    """Name and id indexes plus ancestor/descendant walks."""

    def __init__(self, entries: Sequence[ScoreEntry]) -> None:
        self._by_id: Dict[int, ScoreEntry] = {}
        self._by_name: Dict[str, ScoreEntry] = {}
        self._children: Dict[str, List[ScoreEntry]] = {}
        for entry in entries:
            existing = self._by_name.get(entry.node_name)
            if existing is not None:
                raise DuplicateNodeError(
                    f"Node name '{entry.node_name}' is used by both node {existing.id} and node {entry.id}."
                )
            self._by_name[entry.node_name] = entry
            self._by_id[entry.id] = entry
        for entry in entries:
            if entry.prev_node_name:
                self._children.setdefault(entry.prev_node_name, []).append(entry)

    def entry(self, node_id: int) -> ScoreEntry:
        try:
            return self._by_id[node_id]
        except KeyError as exc:
            raise UnknownNodeError(f"Node {node_id} is not part of the score set.") from exc

    def predecessor(self, entry: ScoreEntry) -> ScoreEntry | None:
        if not entry.prev_node_name:
            return None
        return self._by_name.get(entry.prev_node_name)

    def children(self, entry: ScoreEntry) -> List[ScoreEntry]:
        return list(self._children.get(entry.node_name, []))

    def ancestor_path(self, node_id: int) -> List[ScoreEntry]:
        """Return the strict ancestors of a node, root first."""
        start = self.entry(node_id)
        path: List[ScoreEntry] = []
        seen = {start.node_name}
        current = self.predecessor(start)
        while current is not None:
            if current.node_name in seen:
                raise NodeCycleError(
                    f"Predecessor cycle through '{current.node_name}' while walking up from '{start.node_name}'."
                )
            seen.add(current.node_name)
            path.append(current)
            current = self.predecessor(current)
        path.reverse()
        return path

    def descendants(self, node_id: int) -> List[ScoreEntry]:
        """Return every direct and transitive dependent of a node.

        Order is depth-first, children in score-set order.
        """
        start = self.entry(node_id)
        result: List[ScoreEntry] = []
        visited = {start.node_name}
        stack = list(reversed(self.children(start)))
        while stack:
            current = stack.pop()
            if current.node_name in visited:
                raise NodeCycleError(
                    f"Node '{current.node_name}' was reached twice while walking down from '{start.node_name}'."
                )
            visited.add(current.node_name)
            result.append(current)
            stack.extend(reversed(self.children(current)))
        return result
