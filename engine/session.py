"""
session.py — One User's Visualizer State
=========================================
Bundles everything a single user edits and watches:

    graph     – Graph store
    overlay   – HighlightOverlay (trace, selection and search layers)
    history   – EditHistory attached to the graph
    scheduler – Scheduler that drives auto-play
    player    – Player walking the current trace

The HTTP layer keeps one Session per browser session and calls the
methods here; nothing below this object knows about HTTP.
"""

import logging
from typing import List, Optional

from graph import Graph, HighlightOverlay, UnknownNode
from engine.history import EditHistory
from engine.player import Player
from engine.scheduler import Clock, Scheduler

logger = logging.getLogger(__name__)


class Session:

    def __init__(self, settings, clock: Optional[Clock] = None):
        self.settings  = settings
        self.graph     = Graph()
        self.overlay   = HighlightOverlay()
        self.history   = EditHistory(self.graph, capacity=settings.history_capacity)
        self.scheduler = Scheduler(clock)
        self.player    = Player(
            self.overlay,
            self.scheduler,
            interval_ms=settings.default_interval_ms,
            min_interval_ms=settings.min_interval_ms,
            heuristic_scale=settings.heuristic_scale,
        )
        self.graph.subscribe(self._on_graph_change)

    # ------------------------------------------------------------------
    # Event loop hook
    # ------------------------------------------------------------------
    def tick(self) -> int:
        """Fire any due playback timers."""
        return self.scheduler.tick()

    # ------------------------------------------------------------------
    # Editor operations that touch more than the store
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        moved = self.history.undo()
        self.overlay.retain(self.graph.nodes)
        return moved

    def redo(self) -> bool:
        moved = self.history.redo()
        self.overlay.retain(self.graph.nodes)
        return moved

    def clear(self) -> None:
        """Empty canvas: graph, trace, selection and search all go."""
        self.player.reset()
        self.overlay.clear()
        self.graph.clear()

    def generate(
        self,
        num_nodes: int = 8,
        edge_probability: float = 0.3,
        random_weights: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        num_nodes = max(1, min(int(num_nodes), self.settings.max_random_nodes))
        edge_probability = max(0.0, min(float(edge_probability), 0.9))
        self.player.reset()
        self.overlay.clear()
        self.graph.generate_random(
            num_nodes=num_nodes,
            edge_probability=edge_probability,
            random_weights=random_weights,
            weight_range=self.settings.random_weight_range,
            seed=seed,
        )
        logger.info(
            "generated random graph: %d nodes, %d edges", num_nodes, self.graph.edge_count(),
        )

    def load(self, document: dict) -> None:
        """Import an exchange document; on failure nothing changes."""
        self.graph.load(document)
        self.player.reset()
        self.overlay.clear()

    def select(self, node_id: int) -> bool:
        if self.graph.get_node(node_id) is None:
            raise UnknownNode(f"No node with id {node_id}", node=node_id)
        return self.overlay.toggle_selected(node_id)

    def search(self, query: str) -> List[int]:
        hits = self.graph.search(query)
        self.overlay.set_search_hits(hits)
        return hits

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    def run(self, algorithm: str) -> None:
        self.player.run(algorithm, self.graph, self.graph.start, self.graph.goal)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def view(self) -> dict:
        """Everything a renderer needs, as plain JSON-friendly data."""
        g, ov = self.graph, self.overlay
        return {
            "nodes": [
                dict(node.to_dict(), tag=ov.node_tag(nid, g.start, g.goal).value)
                for nid, node in g.nodes.items()
            ],
            "edges": [
                dict(edge.to_dict(), tag=ov.edge_tag(ref).value)
                for ref, edge in g.edges.items()
            ],
            "adjacency": {
                str(nid): [[nbr, w] for nbr, w in entries]
                for nid, entries in g.adjacency.items()
            },
            "directed":  g.directed,
            "start":     g.start,
            "goal":      g.goal,
            "selected":  sorted(ov.selected),
            "stats":     g.stats(),
            "playback":  self.player.to_dict(),
            "history":   self.history.to_dict(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_graph_change(self, graph: Graph, action: str) -> None:
        self.overlay.retain(graph.nodes)
