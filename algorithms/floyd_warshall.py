"""
floyd_warshall.py — Floyd–Warshall (All-Pairs Shortest Paths)
===============================================================
The signature "matrix algorithm".  The aux payload carries the full NxN
distance matrix at every step so the UI can render it as a live grid.

Structure:
  for k in nodes:          ← "intermediate" node
      for i in nodes:
          for j in nodes:
              if dist[i][k] + dist[k][j] < dist[i][j]:
                  dist[i][j] = dist[i][k] + dist[k][j]

Yields a Step for:
  1. Initialisation (adjacency → matrix)
  2. Start of each k-round
  3. Each (i, j) relaxation that actually changes the matrix
  4. End of each k-round (summary)
  5. Final: extract the start→goal path when both are selected

Only actual updates yield a step, which keeps the trace to a manageable
length for the UI even though the loop itself is O(V³).
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.step import INF, AuxKind, Step, StepBuilder, fmt, label


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def FloydWarshall(graph):",                   # 0
    "    dist ← adjacency matrix",                 # 1
    "    next ← initialise next-hop matrix",       # 2
    "    for k in V:",                             # 3
    "        for i in V:",                         # 4
    "            for j in V:",                     # 5
    "                if dist[i][k]+dist[k][j]",    # 6
    "                      < dist[i][j]:",         # 7
    "                    dist[i][j] = …",          # 8
    "                    next[i][j] = next[i][k]", # 9
    "    return dist, next",                       # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def floyd_warshall(
    graph: Graph,
    start: Optional[int] = None,
    goal: Optional[int] = None,
) -> Iterator[Step]:
    """
    start / goal are only used at the END to extract the specific
    path the user cares about.  The algorithm itself computes ALL pairs.
    """
    nodes = graph.node_ids()
    dist: Dict[int, Dict[int, float]]         = {i: {j: INF for j in nodes} for i in nodes}
    nxt:  Dict[int, Dict[int, Optional[int]]] = {i: {j: None for j in nodes} for i in nodes}

    for i in nodes:
        dist[i][i] = 0
        nxt[i][i]  = i
    for u in nodes:
        for v, w in graph.neighbours(u):
            if w < dist[u][v]:
                dist[u][v] = w
                nxt[u][v]  = v

    sb = StepBuilder(AuxKind.MATRIX)

    def snapshot() -> None:
        sb.aux = {str(i): dist[i] for i in nodes}

    snapshot()
    n = len(nodes)
    yield sb.build(
        f"Floyd-Warshall: initialise {n}×{n} distance matrix from adjacency. "
        f"Diagonal = 0, direct edges = weight, rest = ∞.",
        line=1,
    )

    for k in nodes:
        updates = 0
        sb.current = k
        sb.set_frontier([])
        yield sb.build(f"Round k = {label(graph, k)}: allow paths through it as intermediate", line=3)

        for i in nodes:
            if dist[i][k] == INF:
                continue
            for j in nodes:
                if i == j or dist[k][j] == INF:
                    continue
                candidate = dist[i][k] + dist[k][j]
                if candidate >= dist[i][j]:
                    continue
                old = dist[i][j]
                dist[i][j] = candidate
                nxt[i][j]  = nxt[i][k]
                updates += 1
                snapshot()
                sb.set_frontier([i, j])
                yield sb.build(
                    f"Updated dist[{label(graph, i)}][{label(graph, j)}] via {label(graph, k)}: "
                    f"{fmt(dist[i][k])} + {fmt(dist[k][j])} = {fmt(candidate)} < {fmt(old)}",
                    line=8,
                )

        sb.visit(k)
        sb.set_frontier([])
        yield sb.build(f"Round k = {label(graph, k)} complete: {updates} update(s)", line=3)

    sb.current = None
    if start is None or goal is None or start not in dist or goal not in dist:
        yield sb.build("All pairs computed", line=10, is_final=True)
        return
    if dist[start][goal] == INF:
        yield sb.build(
            f"All pairs computed. Node {label(graph, goal)} is not reachable from "
            f"{label(graph, start)}",
            line=10,
            is_final=True,
        )
        return

    sb.path = _reconstruct_path(nxt, start, goal)
    yield sb.build(
        f"All pairs computed. Shortest {label(graph, start)}→{label(graph, goal)}: "
        f"{' → '.join(label(graph, p) for p in sb.path)}, cost = {fmt(dist[start][goal])}",
        line=10,
        is_final=True,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _reconstruct_path(nxt: Dict[int, Dict[int, Optional[int]]], start: int, goal: int) -> List[int]:
    path = [start]
    cur: Optional[int] = start
    safety = len(nxt) + 1   # prevent infinite loop on bad data
    while cur != goal and safety > 0:
        cur = nxt[cur][goal]
        if cur is None:
            return []
        path.append(cur)
        safety -= 1
    return path
