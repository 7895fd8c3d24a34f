"""
astar.py — A* Search
=====================
Generator-based heuristic best-first search.

Heuristic: straight-line (Euclidean) distance from a node's canvas
position to the goal's position, divided by HEURISTIC_SCALE.  This is a
design constant, not a property of the graph: canvas distance has no
relation to edge weights, so h only approximates the remaining cost and
is not guaranteed admissible.  Because of that, a node whose g-score
improves after expansion is re-opened rather than ignored.

The overlay exposes g, h, f for every node that has been touched,
which the score panel uses.

Selection: linear scan of the open set in insertion order with a strict
`<` on f, so equal scores resolve to the first-encountered id.
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph, Node
from algorithms.errors import require_goal, require_start
from algorithms.step import (
    INF, AuxKind, Step, StepBuilder, fmt, label, reconstruct_path,
)


HEURISTIC_SCALE: float = 50.0


def euclidean(a: Node, b: Node, scale: float = HEURISTIC_SCALE) -> float:
    return a.distance_to(b) / scale


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(graph, source, goal, h):",          # 0
    "    g[source] ← 0",                           # 1
    "    f[source] ← h(source)",                   # 2
    "    open_set ← [source]",                     # 3
    "    while open_set:",                         # 4
    "        node ← argmin f over open_set",       # 5
    "        if node == goal: return path",        # 6
    "        open_set.remove(node)",               # 7
    "        for (nbr, w) in adj(node):",          # 8
    "            tentative_g ← g[node] + w",       # 9
    "            if tentative_g < g[nbr]:",        # 10
    "                parent[nbr] ← node",          # 11
    "                g[nbr] ← tentative_g",        # 12
    "                f[nbr] ← g[nbr] + h(nbr)",    # 13
    "                open_set.add(nbr)",           # 14
    "    return NOT FOUND",                        # 15
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def astar(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
    heuristic_scale: float = HEURISTIC_SCALE,
) -> Iterator[Step]:
    """
    Args:
        graph           : The graph.
        start           : Start node id.
        goal            : Goal node id (required).
        heuristic_scale : Canvas-distance divisor for h.
    """
    source = require_start(graph, start)
    target = require_goal(graph, goal)
    goal_node = graph.nodes[target]

    g_score: Dict[int, float]         = {nid: INF for nid in graph.nodes}
    f_score: Dict[int, float]         = {nid: INF for nid in graph.nodes}
    h_cache: Dict[int, float]         = {}
    parent:  Dict[int, Optional[int]] = {source: None}

    def h(nid: int) -> float:
        if nid not in h_cache:
            h_cache[nid] = euclidean(graph.nodes[nid], goal_node, heuristic_scale)
        return h_cache[nid]

    g_score[source] = 0
    f_score[source] = h(source)
    open_set: List[int] = [source]

    sb = StepBuilder(AuxKind.SCORES)
    sb.aux.update({"g": g_score, "h": h_cache, "f": f_score})
    sb.set_frontier(open_set)
    yield sb.build(
        f"Starting A* search from node {label(graph, source)} "
        f"(h = straight-line distance / {fmt(heuristic_scale)})",
        line=2,
    )

    while open_set:
        node = open_set[0]
        for cand in open_set:
            if f_score[cand] < f_score[node]:
                node = cand

        if node == target:
            path = reconstruct_path(parent, target)
            sb.path = path
            sb.current = None
            yield sb.build(
                f"Found path to goal {label(graph, target)} with cost {fmt(g_score[target])}: "
                f"{' → '.join(label(graph, n) for n in path)}",
                line=6,
                is_final=True,
            )
            return

        open_set.remove(node)
        sb.visit(node)
        sb.current = node
        sb.set_frontier(open_set)
        yield sb.build(
            f"Visiting node {label(graph, node)} with fScore {fmt(f_score[node])} "
            f"(g={fmt(g_score[node])}, h={fmt(h(node))})",
            line=7,
        )

        for nbr, weight in graph.neighbours(node):
            tentative = g_score[node] + weight
            if tentative >= g_score[nbr]:
                continue
            parent[nbr]  = node
            g_score[nbr] = tentative
            f_score[nbr] = tentative + h(nbr)
            if nbr not in open_set:
                open_set.append(nbr)
            sb.visited.discard(nbr)
            sb.set_frontier(open_set)
            yield sb.build(
                f"Updated scores for node {label(graph, nbr)}: "
                f"g={fmt(g_score[nbr])}, f={fmt(f_score[nbr])}",
                line=13,
            )

    sb.current = None
    sb.set_frontier([])
    yield sb.build(
        f"A* search completed, no path to goal {label(graph, target)}",
        line=15,
        is_final=True,
    )
