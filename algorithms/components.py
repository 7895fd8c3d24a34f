"""
components.py — Connected-Component Labelling
==============================================
BFS sweep over every node in insertion order; each sweep that starts at
an unlabelled node opens a new component.  On a directed graph edges
are followed both ways (weak connectivity).

Aux payload: {"component": node → component label (0, 1, …)}.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.step import AuxKind, Step, StepBuilder, label, undirected_adjacency


PSEUDOCODE: List[str] = [
    "def ConnectedComponents(graph):",             # 0
    "    for s in V:",                             # 1
    "        if s labelled: continue",             # 2
    "        c ← new label; queue ← [s]",          # 3
    "        while queue is not empty:",           # 4
    "            u ← queue.dequeue()",             # 5
    "            for v in adj(u):",                # 6
    "                if v unlabelled:",            # 7
    "                    comp[v] ← c; queue.add(v)",  # 8
    "    return comp",                             # 9
]


def connected_components(
    graph: Graph,
    start: Optional[int] = None,
    goal: Optional[int] = None,
) -> Iterator[Step]:
    adj = undirected_adjacency(graph)
    component: Dict[int, int] = {}

    sb = StepBuilder(AuxKind.COMPONENTS)
    sb.aux["component"] = component

    count = 0
    for seed in graph.nodes:
        if seed in component:
            continue
        label_id = count
        count += 1
        component[seed] = label_id
        sb.visit(seed)
        queue = deque([seed])
        sb.current = None
        sb.set_frontier(queue)
        yield sb.build(
            f"Starting component {label_id} at node {label(graph, seed)}", line=3,
        )

        while queue:
            node = queue.popleft()
            sb.current = node
            sb.set_frontier(queue)
            yield sb.build(
                f"Visiting node {label(graph, node)} (component {label_id})", line=5,
            )
            for nbr, _ in adj[node]:
                if nbr in component:
                    continue
                component[nbr] = label_id
                sb.visit(nbr)
                queue.append(nbr)
                sb.set_frontier(queue)
                yield sb.build(
                    f"Discovered node {label(graph, nbr)}, added to component {label_id}",
                    line=8,
                )

    sb.current = None
    sb.set_frontier([])
    yield sb.build(f"Found {count} connected component(s)", line=9, is_final=True)
