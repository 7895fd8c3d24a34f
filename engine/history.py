"""
history.py — Edit History (Undo / Redo)
========================================
Linear snapshot history of the graph's STRUCTURE: nodes, edges,
directedness, start and goal.  Playback highlights live in the overlay
and are never snapshotted.

    history = EditHistory(graph, capacity=50)
    graph.add_node(10, 10)      # recorded automatically
    history.undo()
    history.redo()

Model:
  - `_entries` is a list of frozen HistorySnapshots, `_cursor` the index
    of the one that matches the live graph.
  - record() drops every entry after the cursor (the redo future), then
    appends.  Past capacity the oldest entry is evicted and the cursor
    shifts down with it.
  - On attach the current state is recorded as the base entry, so the
    very first edit can be undone.
  - The history listens to Graph change notifications, so a successful
    mutation records exactly once and a failed one (it raised before
    notifying) never does.  Restores replace the structure silently and
    therefore never record themselves.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from graph import Edge, Graph, Node

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class HistorySnapshot:
    """Deep, independent copy of one structural state."""

    nodes:    Tuple[Node, ...]
    edges:    Tuple[Edge, ...]
    directed: bool
    start:    Optional[int]
    goal:     Optional[int]
    action:   str = ""

    @classmethod
    def capture(cls, graph: Graph, action: str = "") -> "HistorySnapshot":
        return cls(
            nodes=tuple(n.copy() for n in graph.nodes.values()),
            edges=tuple(e.copy() for e in graph.edges.values()),
            directed=graph.directed,
            start=graph.start,
            goal=graph.goal,
            action=action,
        )


# ---------------------------------------------------------------------------
# EditHistory
# ---------------------------------------------------------------------------
class EditHistory:

    def __init__(self, graph: Graph, capacity: int = 50):
        if capacity < 1:
            raise ValueError(f"history capacity must be at least 1, got {capacity}")
        self.graph:    Graph                 = graph
        self.capacity: int                   = capacity
        self._entries: List[HistorySnapshot] = []
        self._cursor:  int                   = -1

        self.record("initial")
        graph.subscribe(self._on_change)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record(self, action: str = "") -> HistorySnapshot:
        snapshot = HistorySnapshot.capture(self.graph, action)
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        self._cursor = len(self._entries) - 1
        if len(self._entries) > self.capacity:
            self._entries.pop(0)
            self._cursor -= 1
        return snapshot

    def _on_change(self, graph: Graph, action: str) -> None:
        self.record(action)

    # ------------------------------------------------------------------
    # Undo / Redo
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        if not self.can_undo:
            return False
        undone = self._entries[self._cursor].action
        self._cursor -= 1
        self.restore(self._entries[self._cursor])
        logger.info("undo: %s", undone)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._cursor += 1
        self.restore(self._entries[self._cursor])
        logger.info("redo: %s", self._entries[self._cursor].action)
        return True

    def restore(self, snapshot: HistorySnapshot) -> None:
        """Put the graph back into `snapshot` without recording anything."""
        self.graph.replace(
            snapshot.nodes, snapshot.edges, snapshot.directed, snapshot.start, snapshot.goal,
        )

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    @property
    def depth(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    def to_dict(self) -> dict:
        return {
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "depth":    self.depth,
            "cursor":   self._cursor,
        }
