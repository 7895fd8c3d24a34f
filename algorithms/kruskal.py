"""
kruskal.py — Kruskal's Minimum Spanning Tree
=============================================
Edge-sorting greedy MST with a union-find forest.

Yields a Step for:
  1. Initialisation (edges sorted by weight)
  2. Each edge decision: ACCEPTED (joins two trees) or REJECTED (cycle)
  3. Final summary: total weight, or a spanning forest when the graph
     is disconnected

Edges sort by (weight, insertion order), so equal weights resolve in
the order the edges were created.  Direction is ignored: a spanning
tree is an undirected notion.

Aux payload: {"component": node → union-find representative}, i.e. which
partial tree every node currently belongs to.
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.step import AuxKind, Step, StepBuilder, label


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Kruskal(graph):",                         # 0
    "    sort edges by weight",                    # 1
    "    make_set(v) for v in V",                  # 2
    "    for (u, v, w) in edges:",                 # 3
    "        if find(u) ≠ find(v):",               # 4
    "            tree.add((u, v))",                # 5
    "            union(u, v)",                     # 6
    "        else: skip (cycle)",                  # 7
    "    return tree",                             # 8
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def kruskal(
    graph: Graph,
    start: Optional[int] = None,
    goal: Optional[int] = None,
) -> Iterator[Step]:
    parent: Dict[int, int] = {nid: nid for nid in graph.nodes}

    def find(x: int) -> int:
        root = x
        while parent[root] != root:
            root = parent[root]
        while parent[x] != root:
            parent[x], x = root, parent[x]
        return root

    ordered = sorted(
        enumerate(graph.edges.values()),
        key=lambda pair: (pair[1].weight, pair[0]),
    )
    edges = [e for _, e in ordered]

    sb = StepBuilder(AuxKind.COMPONENTS)

    def snapshot() -> None:
        sb.aux["component"] = {nid: find(nid) for nid in graph.nodes}

    snapshot()
    yield sb.build(
        f"Starting Kruskal's algorithm: {len(edges)} edge(s) sorted by weight: "
        + ", ".join(f"{e.source}-{e.target}({e.weight})" for e in edges),
        line=1,
    )

    total = 0
    needed = max(len(graph.nodes) - 1, 0)
    for edge in edges:
        if len(sb.edges) == needed:
            break
        u, v = edge.source, edge.target
        sb.set_frontier([u, v])
        ru, rv = find(u), find(v)
        if ru == rv:
            yield sb.build(
                f"Skipped edge {label(graph, u)}-{label(graph, v)} ({edge.weight}): "
                f"it would form a cycle",
                line=7,
            )
            continue
        parent[rv] = ru
        total += edge.weight
        sb.add_edge(edge.ref)
        sb.visit(u)
        sb.visit(v)
        snapshot()
        yield sb.build(
            f"Added edge {label(graph, u)}-{label(graph, v)} ({edge.weight}) to the tree, "
            f"total weight {total}",
            line=5,
        )

    sb.set_frontier([])
    trees = len({find(nid) for nid in graph.nodes})
    if trees <= 1:
        summary = f"Kruskal's algorithm completed: MST weight {total} with {len(sb.edges)} edge(s)"
    else:
        summary = (
            f"Kruskal's algorithm completed: graph is disconnected, minimum spanning "
            f"forest of {trees} tree(s) with weight {total}"
        )
    yield sb.build(summary, line=8, is_final=True)
