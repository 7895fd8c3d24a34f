"""
topological.py — Topological Ordering (Kahn's algorithm)
=========================================================
Repeatedly output a node with in-degree 0 and delete its outgoing edges.

Yields a Step for:
  1. Initialisation (in-degrees computed, zero in-degree nodes queued)
  2. Each node output (position in the order)
  3. Each in-degree decrement (and the node joining the queue at 0)
  4. Final: the full order, or the set of nodes stuck on a cycle

An undirected edge is a 2-cycle, so an undirected graph with at least one
edge has no topological order; that is reported in a single final step.

Aux payload: {"order": node → position, "in_degree": node → remaining}.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.step import AuxKind, Step, StepBuilder, label


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def TopologicalSort(graph):",                 # 0
    "    indeg ← in-degree of every node",         # 1
    "    queue ← [v with indeg[v] = 0]",           # 2
    "    while queue is not empty:",               # 3
    "        u ← queue.dequeue(); order.add(u)",   # 4
    "        for v in adj(u):",                    # 5
    "            indeg[v] ← indeg[v] - 1",         # 6
    "            if indeg[v] = 0: queue.add(v)",   # 7
    "    if |order| < |V|: CYCLE",                 # 8
    "    return order",                            # 9
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def topological_sort(
    graph: Graph,
    start: Optional[int] = None,
    goal: Optional[int] = None,
) -> Iterator[Step]:
    sb = StepBuilder(AuxKind.ORDER)

    if not graph.directed and graph.edges:
        yield sb.build(
            "Topological sort needs a directed acyclic graph: every undirected edge "
            "is a 2-cycle, so no ordering exists",
            line=8,
            is_final=True,
        )
        return

    in_degree: Dict[int, int] = {nid: 0 for nid in graph.nodes}
    for edge in graph.edges.values():
        in_degree[edge.target] += 1
    order: Dict[int, int] = {}
    sb.aux.update({"order": order, "in_degree": in_degree})

    queue = deque(nid for nid in graph.nodes if in_degree[nid] == 0)
    sb.set_frontier(queue)
    yield sb.build(
        f"Computed in-degrees: {len(queue)} node(s) with in-degree 0 queued", line=2,
    )

    while queue:
        node = queue.popleft()
        order[node] = len(order)
        sb.visit(node)
        sb.current = node
        sb.set_frontier(queue)
        yield sb.build(f"Output node {label(graph, node)} at position {order[node]}", line=4)

        for nbr, _ in graph.neighbours(node):
            in_degree[nbr] -= 1
            if in_degree[nbr] == 0:
                queue.append(nbr)
                sb.set_frontier(queue)
                yield sb.build(
                    f"In-degree of node {label(graph, nbr)} dropped to 0, added to queue",
                    line=7,
                )
            else:
                yield sb.build(
                    f"Removed edge {label(graph, node)}→{label(graph, nbr)}, in-degree of "
                    f"node {label(graph, nbr)} is now {in_degree[nbr]}",
                    line=6,
                )

    sb.current = None
    sb.set_frontier([])
    if len(order) < len(graph.nodes):
        stuck = [nid for nid in graph.nodes if nid not in order]
        yield sb.build(
            f"Cycle detected: {len(stuck)} node(s) could not be ordered: "
            f"[{', '.join(label(graph, n) for n in stuck)}]",
            line=8,
            is_final=True,
        )
        return

    ranked = sorted(order, key=order.get)
    yield sb.build(
        f"Topological order: {', '.join(label(graph, n) for n in ranked)}",
        line=9,
        is_final=True,
    )
