"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, generate

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, fn, pseudocode, requires_start, …),
        …
    }

Every generator shares one signature, fn(graph, start, goal) → Iterator[Step],
so the Player never special-cases an algorithm.  Adding one is: write the
generator, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from graph import Graph
from algorithms.errors import (
    AlgorithmError, MissingGoal, MissingStart, UnknownAlgorithm,
    require_goal, require_start,
)
from algorithms.step import INF, AuxKind, Step, StepBuilder

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.bfs            import bfs                  as _bfs,        PSEUDOCODE as _bfs_pc
from algorithms.dfs            import dfs                  as _dfs,        PSEUDOCODE as _dfs_pc
from algorithms.dijkstra       import dijkstra             as _dijkstra,   PSEUDOCODE as _dij_pc
from algorithms.astar          import astar                as _astar,      PSEUDOCODE as _ast_pc
from algorithms.astar          import HEURISTIC_SCALE
from algorithms.kruskal        import kruskal              as _kruskal,    PSEUDOCODE as _kru_pc
from algorithms.prim           import prim                 as _prim,       PSEUDOCODE as _prim_pc
from algorithms.floyd_warshall import floyd_warshall       as _fw,         PSEUDOCODE as _fw_pc
from algorithms.topological    import topological_sort     as _topo,       PSEUDOCODE as _topo_pc
from algorithms.components     import connected_components as _cc,         PSEUDOCODE as _cc_pc
from algorithms.bellman_ford   import bellman_ford         as _bf,         PSEUDOCODE as _bf_pc


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bfs"
    label:            str                    # human label, e.g. "Breadth-First Search"
    fn:               Callable               # the generator function
    pseudocode:       List[str]              # lines for the side-panel
    requires_start:   bool      = True
    requires_goal:    bool      = False
    has_heuristic:    bool      = False      # A*: accepts heuristic_scale
    tags:             List[str] = field(default_factory=list)
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "pseudocode":       list(self.pseudocode),
            "requires_start":   self.requires_start,
            "requires_goal":    self.requires_goal,
            "has_heuristic":    self.has_heuristic,
            "tags":             list(self.tags),
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=_bfs, pseudocode=_bfs_pc,
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer from the start node.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=_dfs, pseudocode=_dfs_pc,
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=_dijkstra, pseudocode=_dij_pc,
        requires_goal=True,
        tags=["weighted", "shortest-path"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Greedily expands the closest node. Optimal for positive weights.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", fn=_astar, pseudocode=_ast_pc,
        requires_goal=True, has_heuristic=True,
        tags=["weighted", "shortest-path", "heuristic"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Dijkstra guided by straight-line distance to the goal.",
    ),

    "kruskal": AlgoInfo(
        key="kruskal", label="Kruskal's MST", fn=_kruskal, pseudocode=_kru_pc,
        requires_start=False,
        tags=["weighted", "mst"],
        complexity_time="O(E log E)", complexity_space="O(V)",
        description="Adds the cheapest edge that does not close a cycle.",
    ),

    "prim": AlgoInfo(
        key="prim", label="Prim's MST", fn=_prim, pseudocode=_prim_pc,
        tags=["weighted", "mst"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Grows one tree from the start node by its cheapest outgoing edge.",
    ),

    "floyd_warshall": AlgoInfo(
        key="floyd_warshall", label="Floyd–Warshall", fn=_fw, pseudocode=_fw_pc,
        requires_start=False,
        tags=["weighted", "all-pairs"],
        complexity_time="O(V³)", complexity_space="O(V²)",
        description="All-pairs shortest paths via dynamic programming.",
    ),

    "topological": AlgoInfo(
        key="topological", label="Topological Sort", fn=_topo, pseudocode=_topo_pc,
        requires_start=False,
        tags=["directed", "ordering"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Kahn's algorithm: peel off nodes with no incoming edges.",
    ),

    "components": AlgoInfo(
        key="components", label="Connected Components", fn=_cc, pseudocode=_cc_pc,
        requires_start=False,
        tags=["traversal", "connectivity"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Labels every node with the component it belongs to.",
    ),

    "bellman_ford": AlgoInfo(
        key="bellman_ford", label="Bellman–Ford", fn=_bf, pseudocode=_bf_pc,
        requires_goal=True,
        tags=["weighted", "shortest-path"],
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Relaxes every edge V-1 times, stopping early when nothing changes.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> AlgoInfo:
    """Return AlgoInfo by key; UnknownAlgorithm if it isn't registered."""
    info = REGISTRY.get(key)
    if info is None:
        raise UnknownAlgorithm(f"Unknown algorithm '{key}'")
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def generate(
    key: str,
    graph: Graph,
    start: Optional[int] = None,
    goal: Optional[int] = None,
    heuristic_scale: float = HEURISTIC_SCALE,
) -> Tuple[Step, ...]:
    """
    Materialise the full trace for `key`.

    Preconditions are checked up front so a failing run raises before any
    Step exists; the generator is then drained into an immutable tuple.
    """
    info = get_algorithm(key)
    if info.requires_start:
        require_start(graph, start)
    if info.requires_goal:
        require_goal(graph, goal)
    if info.has_heuristic:
        steps = info.fn(graph, start, goal, heuristic_scale=heuristic_scale)
    else:
        steps = info.fn(graph, start, goal)
    return tuple(steps)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "HEURISTIC_SCALE",
    "INF",
    "AuxKind",
    "Step",
    "StepBuilder",
    "AlgorithmError",
    "MissingStart",
    "MissingGoal",
    "UnknownAlgorithm",
    "get_algorithm",
    "list_algorithms",
    "generate",
]
