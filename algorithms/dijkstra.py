"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Generator-based Dijkstra over the set of unvisited nodes.

Yields a Step at:
  1. Initialise distances (source = 0, everything else = ∞)
  2. Pick the unvisited node with the smallest tentative distance → VISITED
  3. Each successful relaxation → distance updated, predecessor recorded
  4. Goal picked → path reconstructed (early exit)
  5. Nothing reachable left → completed, no path

Selection is a linear scan in node insertion order with a strict `<`,
so on equal distances the first-encountered id wins.  That keeps the
trace deterministic, which a heap with (dist, id) tuples would not
express as directly.

Correctness note: Dijkstra requires non-negative weights.  The store
only accepts positive integers, so the guarantee always holds here.
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.errors import require_goal, require_start
from algorithms.step import (
    INF, AuxKind, Step, StepBuilder, fmt, label, reconstruct_path,
)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, source, goal):",          # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    unvisited ← V",                           # 3
    "    while unvisited is not empty:",           # 4
    "        node ← argmin dist over unvisited",   # 5
    "        if dist[node] = ∞: break",            # 6
    "        if node == goal: return path",        # 7
    "        for (neighbour, w) in adj(node):",    # 8
    "            alt ← dist[node] + w",            # 9
    "            if alt < dist[neighbour]:",       # 10
    "                dist[neighbour] ← alt",       # 11
    "                prev[neighbour] ← node",      # 12
    "    return NOT FOUND",                        # 13
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
) -> Iterator[Step]:
    source = require_start(graph, start)
    target = require_goal(graph, goal)

    dist:   Dict[int, float]         = {nid: INF for nid in graph.nodes}
    parent: Dict[int, Optional[int]] = {source: None}
    dist[source] = 0
    unvisited = list(graph.nodes)

    sb = StepBuilder(AuxKind.DISTANCES)
    sb.aux["dist"] = dist

    def discovered() -> List[int]:
        return [n for n in unvisited if dist[n] < INF]

    sb.set_frontier(discovered())
    yield sb.build(f"Starting Dijkstra's algorithm from node {label(graph, source)}", line=2)

    while unvisited:
        node = unvisited[0]
        for cand in unvisited:
            if dist[cand] < dist[node]:
                node = cand

        if dist[node] == INF:
            break

        unvisited.remove(node)
        sb.visit(node)
        sb.current = node
        sb.set_frontier(discovered())
        yield sb.build(
            f"Visiting node {label(graph, node)} with distance {fmt(dist[node])}", line=5,
        )

        if node == target:
            path = reconstruct_path(parent, target)
            sb.path = path
            sb.current = None
            yield sb.build(
                f"Found shortest path to goal {label(graph, target)} with distance "
                f"{fmt(dist[target])}: {' → '.join(label(graph, n) for n in path)}",
                line=7,
                is_final=True,
            )
            return

        for nbr, weight in graph.neighbours(node):
            if nbr in sb.visited:
                continue
            alt = dist[node] + weight
            if alt < dist[nbr]:
                old = dist[nbr]
                dist[nbr] = alt
                parent[nbr] = node
                sb.set_frontier(discovered())
                yield sb.build(
                    f"Updated distance to node {label(graph, nbr)}: {fmt(old)} → {fmt(alt)} "
                    f"(via {label(graph, node)})",
                    line=11,
                )

    sb.current = None
    sb.set_frontier([])
    yield sb.build(
        f"Dijkstra's algorithm completed, no path to goal {label(graph, target)}",
        line=13,
        is_final=True,
    )
