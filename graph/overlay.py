"""
overlay.py — Transient Highlight Overlay
=========================================
Sparse id → tag mapping the renderer reads to colour nodes and edges.

Nothing in here is structural: the Edit History never snapshots it,
and the Playback Controller is the only writer of the trace layer.

Layers (independent, cleared independently):
  • trace        – visiting / visited / path, rewritten on every projection
  • active edges – edges on the projected path / tree
  • selected     – multi-select set (editor)
  • search hits  – result of the last label search

Start / goal are NOT stored here: they are derived from the store's
start / goal ids at read time and always win, so a projection can never
paint over them.
"""

from enum import Enum
from typing import Dict, Iterable, Optional, Set

from graph.edge import EdgeRef


# ---------------------------------------------------------------------------
# Tag enums — visual encoding palette
# ---------------------------------------------------------------------------
class NodeTag(Enum):
    NONE       = "none"
    START      = "start"        # green
    GOAL       = "goal"         # red
    VISITING   = "visiting"     # amber — in the frontier right now
    VISITED    = "visited"      # blue — fully processed
    PATH       = "path"         # purple — on the reconstructed path
    SELECTED   = "selected"     # pink — multi-select
    SEARCH_HIT = "search-hit"   # orange — matched the search box


class EdgeTag(Enum):
    NONE   = "none"
    ACTIVE = "active"           # on the projected path / tree


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------
class HighlightOverlay:

    def __init__(self):
        self._trace:        Dict[int, NodeTag] = {}
        self._active_edges: Set[EdgeRef]       = set()
        self.selected:      Set[int]           = set()
        self.search_hits:   Set[int]           = set()

    # ------------------------------------------------------------------
    # Trace layer (Playback Controller)
    # ------------------------------------------------------------------
    def clear_trace(self) -> None:
        self._trace.clear()
        self._active_edges.clear()

    def tag_node(self, node_id: int, tag: NodeTag) -> None:
        self._trace[node_id] = tag

    def activate_edge(self, ref: EdgeRef) -> None:
        self._active_edges.add(ref)

    # ------------------------------------------------------------------
    # Editor layers
    # ------------------------------------------------------------------
    def toggle_selected(self, node_id: int) -> bool:
        """Flip selection for node_id; returns the new selected flag."""
        if node_id in self.selected:
            self.selected.discard(node_id)
            return False
        self.selected.add(node_id)
        return True

    def set_search_hits(self, node_ids: Iterable[int]) -> None:
        self.search_hits = set(node_ids)

    def retain(self, node_ids: Iterable[int]) -> None:
        """Drop every tag that refers to a node no longer in the store."""
        alive = set(node_ids)
        self._trace = {n: t for n, t in self._trace.items() if n in alive}
        self._active_edges = {
            (a, b) for a, b in self._active_edges if a in alive and b in alive
        }
        self.selected &= alive
        self.search_hits &= alive

    def clear(self) -> None:
        self.clear_trace()
        self.selected.clear()
        self.search_hits.clear()

    # ------------------------------------------------------------------
    # Read side (renderer)
    # ------------------------------------------------------------------
    def node_tag(
        self,
        node_id: int,
        start: Optional[int] = None,
        goal: Optional[int] = None,
    ) -> NodeTag:
        if node_id == start:
            return NodeTag.START
        if node_id == goal:
            return NodeTag.GOAL
        if node_id in self._trace:
            return self._trace[node_id]
        if node_id in self.search_hits:
            return NodeTag.SEARCH_HIT
        if node_id in self.selected:
            return NodeTag.SELECTED
        return NodeTag.NONE

    def edge_tag(self, ref: EdgeRef) -> EdgeTag:
        return EdgeTag.ACTIVE if ref in self._active_edges else EdgeTag.NONE

    def trace_tags(self) -> Dict[int, NodeTag]:
        return dict(self._trace)

    def active_edges(self) -> Set[EdgeRef]:
        return set(self._active_edges)

    def __repr__(self) -> str:
        return (
            f"HighlightOverlay(trace={len(self._trace)}, edges={len(self._active_edges)}, "
            f"selected={len(self.selected)}, hits={len(self.search_hits)})"
        )
