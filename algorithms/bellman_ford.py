"""
bellman_ford.py — Bellman–Ford Algorithm
=========================================
Single-source shortest paths by repeated edge relaxation.

Structure:
  • Up to |V|-1 rounds of relaxing every edge in the graph.
  • Early exit once a full round changes nothing.

The store only accepts positive weights, so the negative-cycle detector
round the textbook version ends with can never fire and is left out.

Yields a Step for:
  1. Initialisation
  2. Each successful relaxation (dist improved)
  3. End-of-round summary
  4. Final path reconstruction, or "no path"

Edges are relaxed in edge insertion order (both directions when the
graph is undirected), which keeps the trace deterministic.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from graph import Graph
from algorithms.errors import require_goal, require_start
from algorithms.step import (
    INF, AuxKind, Step, StepBuilder, fmt, label, reconstruct_path,
)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BellmanFord(graph, source, goal):",       # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    for i in 1 … |V|-1:",                     # 3
    "        changed ← false",                     # 4
    "        for each edge (u, v, w):",            # 5
    "            if dist[u] + w < dist[v]:",       # 6
    "                dist[v] ← dist[u] + w",       # 7
    "                parent[v] ← u",               # 8
    "        if not changed: break",               # 9
    "    return path(goal)",                       # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bellman_ford(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
) -> Iterator[Step]:
    source = require_start(graph, start)
    target = require_goal(graph, goal)

    dist:   Dict[int, float]         = {nid: INF for nid in graph.nodes}
    parent: Dict[int, Optional[int]] = {source: None}
    dist[source] = 0

    # collect all edges as (u, v, w) — include reverse for undirected
    all_edges: List[Tuple[int, int, int]] = []
    for edge in graph.edges.values():
        all_edges.append((edge.source, edge.target, edge.weight))
        if not graph.directed:
            all_edges.append((edge.target, edge.source, edge.weight))

    sb = StepBuilder(AuxKind.DISTANCES)
    sb.aux["dist"] = dist
    sb.visit(source)
    sb.set_frontier([source])
    yield sb.build(
        f"Starting Bellman-Ford from node {label(graph, source)}: "
        f"up to {max(len(graph.nodes) - 1, 0)} round(s) over {len(all_edges)} edge direction(s)",
        line=2,
    )

    for rnd in range(1, len(graph.nodes)):
        updated: List[int] = []
        for u, v, w in all_edges:
            if dist[u] == INF or dist[u] + w >= dist[v]:
                continue
            old = dist[v]
            dist[v] = dist[u] + w
            parent[v] = u
            if v not in updated:
                updated.append(v)
            sb.visit(v)
            sb.current = v
            sb.set_frontier(updated)
            yield sb.build(
                f"Round {rnd}: relaxed edge {label(graph, u)}→{label(graph, v)}, "
                f"distance to node {label(graph, v)}: {fmt(old)} → {fmt(dist[v])}",
                line=7,
            )

        sb.current = None
        sb.set_frontier([])
        if not updated:
            yield sb.build(f"Round {rnd}: no distance changed, stopping early", line=9)
            break
        yield sb.build(f"Round {rnd} complete: {len(updated)} node(s) improved", line=3)

    if dist[target] == INF:
        yield sb.build(
            f"Bellman-Ford completed, no path to goal {label(graph, target)}",
            line=10,
            is_final=True,
        )
        return

    path = reconstruct_path(parent, target)
    sb.path = path
    yield sb.build(
        f"Found shortest path to goal {label(graph, target)} with distance "
        f"{fmt(dist[target])}: {' → '.join(label(graph, n) for n in path)}",
        line=10,
        is_final=True,
    )
