"""
prim.py — Prim's Minimum Spanning Tree
=======================================
Frontier-growth MST from the start node.

Yields a Step for:
  1. Initialisation (key[start] = 0)
  2. Each node joining the tree (with the edge that attached it)
  3. Each key update of a frontier node
  4. Final summary (tree weight, or how many nodes were unreachable)

The frontier is every non-tree node with a finite key, in insertion
order; the cheapest key wins and ties go to the first-encountered id.
Direction is ignored, as for Kruskal.
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.errors import require_start
from algorithms.step import (
    INF, AuxKind, Step, StepBuilder, fmt, label, undirected_adjacency,
)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Prim(graph, source):",                    # 0
    "    key ← {v: ∞}; key[source] ← 0",           # 1
    "    while some v ∉ tree has key[v] < ∞:",     # 2
    "        u ← argmin key over non-tree",        # 3
    "        tree.add(u) via edge (parent[u], u)", # 4
    "        for (v, w) in adj(u):",               # 5
    "            if v ∉ tree and w < key[v]:",     # 6
    "                key[v] ← w; parent[v] ← u",   # 7
    "    return tree",                             # 8
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def prim(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
) -> Iterator[Step]:
    source = require_start(graph, start)
    adj = undirected_adjacency(graph)

    key:    Dict[int, float]         = {nid: INF for nid in graph.nodes}
    parent: Dict[int, Optional[int]] = {source: None}
    key[source] = 0
    outside = list(graph.nodes)

    sb = StepBuilder(AuxKind.TREE)
    sb.aux["key"] = key

    def pending() -> List[int]:
        return [n for n in outside if key[n] < INF]

    sb.set_frontier(pending())
    yield sb.build(f"Starting Prim's algorithm from node {label(graph, source)}", line=1)

    total = 0
    while outside:
        node = outside[0]
        for cand in outside:
            if key[cand] < key[node]:
                node = cand
        if key[node] == INF:
            break

        outside.remove(node)
        sb.visit(node)
        sb.current = node
        via = parent.get(node)
        if via is None:
            desc = f"Added start node {label(graph, node)} to the tree"
        else:
            edge = graph.get_edge_between(via, node)
            sb.add_edge(edge.ref)
            total += edge.weight
            desc = (
                f"Added node {label(graph, node)} to the tree via edge "
                f"{label(graph, via)}-{label(graph, node)} ({edge.weight}), total weight {total}"
            )
        sb.set_frontier(pending())
        yield sb.build(desc, line=4)

        for nbr, weight in adj[node]:
            if nbr in sb.visited or weight >= key[nbr]:
                continue
            old = key[nbr]
            key[nbr] = weight
            parent[nbr] = node
            sb.set_frontier(pending())
            yield sb.build(
                f"Updated key of node {label(graph, nbr)}: {fmt(old)} → {weight} "
                f"(edge {label(graph, node)}-{label(graph, nbr)})",
                line=7,
            )

    sb.current = None
    sb.set_frontier([])
    if outside:
        summary = (
            f"Prim's algorithm completed: tree spans {len(sb.visited)} node(s) with weight "
            f"{total}; {len(outside)} node(s) unreachable from {label(graph, source)}"
        )
    else:
        summary = f"Prim's algorithm completed: MST weight {total} with {len(sb.edges)} edge(s)"
    yield sb.build(summary, line=8, is_final=True)
