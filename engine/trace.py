"""
trace.py — Materialised Run & Run Metrics
==========================================
A Trace is the complete, immutable Step sequence of one algorithm run.
It is replaced wholesale on every run; the cursor into it belongs to the
Player, never to the Trace.

RunMetrics is the status-panel summary of a finished trace.  Weights are
read from the graph passed in, so the Player computes them once, right
after generation, and keeps that copy.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from graph import Graph
from algorithms import get_algorithm
from algorithms.step import Step, path_cost


# ---------------------------------------------------------------------------
# Metrics dataclass — what the status panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str  = ""
    algo_label:    str  = ""
    start:         Optional[int] = None
    goal:          Optional[int] = None
    total_steps:   int  = 0          # number of Steps in the trace
    nodes_visited: int  = 0          # visited set of the final Step
    path_length:   int  = 0          # number of edges on the final path
    path_cost:     int  = 0          # total weight of the final path
    tree_weight:   int  = 0          # total weight of highlighted tree edges
    path_found:    bool = False

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Trace
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Trace:
    algorithm: str
    steps:     Tuple[Step, ...]
    start:     Optional[int] = None
    goal:      Optional[int] = None

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def final(self) -> Optional[Step]:
        return self.steps[-1] if self.steps else None

    def metrics(self, graph: Graph) -> RunMetrics:
        """Summarise against the graph the trace was generated from."""
        info = get_algorithm(self.algorithm)
        last = self.final
        path = list(last.path) if last else []

        tree_weight = 0
        if last:
            for a, b in last.edges:
                edge = graph.get_edge_between(a, b)
                if edge is not None:
                    tree_weight += edge.weight

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            start=self.start,
            goal=self.goal,
            total_steps=len(self.steps),
            nodes_visited=len(last.visited) if last else 0,
            path_length=len(path) - 1 if len(path) > 1 else 0,
            path_cost=path_cost(graph, path),
            tree_weight=tree_weight,
            path_found=bool(path),
        )
