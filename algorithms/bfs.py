"""
bfs.py — Breadth-First Traversal
=================================
Generator-based BFS.  Yields a Step at every meaningful event:
  1. Start            →  source enqueued and marked visited
  2. Dequeue a node   →  it becomes CURRENT
  3. List neighbours  →  adjacency of the current node
  4. Discover a node  →  enqueued, marked visited (it joins the frontier)
  5. Queue empty      →  completed

Traversal is exhaustive: a goal, if given, is ignored.  Neighbours are
examined in adjacency insertion order, so the trace is deterministic.

Pseudocode lines are 0-indexed and match the PSEUDOCODE constant
exported alongside the generator so the UI can highlight them live.
"""

from collections import deque
from typing import Iterator, List, Optional

from graph import Graph
from algorithms.errors import require_start
from algorithms.step import Step, StepBuilder, label


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, source):",                  # 0
    "    queue ← [source]",                     # 1
    "    visited ← {source}",                   # 2
    "    while queue is not empty:",            # 3
    "        node ← queue.dequeue()",           # 4
    "        for neighbour in adj(node):",      # 5
    "            if neighbour not visited:",    # 6
    "                visited.add(neighbour)",   # 7
    "                queue.enqueue(neighbour)", # 8
    "    return visited",                       # 9
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bfs(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
) -> Iterator[Step]:
    """
    Yields Step snapshots for every event during BFS execution.

    Args:
        graph : The graph to traverse.
        start : Starting node id.
        goal  : Accepted for a uniform signature; BFS traverses everything.
    """
    source = require_start(graph, start)

    sb    = StepBuilder()
    queue = deque([source])
    sb.visit(source)
    sb.set_frontier(queue)
    yield sb.build(f"Starting BFS from node {label(graph, source)}", line=1)

    while queue:
        node = queue.popleft()
        sb.current = node
        sb.set_frontier(queue)
        yield sb.build(f"Visiting node {label(graph, node)}", line=4)

        neighbours = [nbr for nbr, _ in graph.neighbours(node)]
        yield sb.build(
            f"Neighbors of {label(graph, node)}: [{', '.join(str(n) for n in neighbours)}]",
            line=5,
        )

        for nbr in neighbours:
            if nbr in sb.visited:
                continue
            sb.visit(nbr)
            queue.append(nbr)
            sb.set_frontier(queue)
            yield sb.build(f"Discovered node {label(graph, nbr)}, added to queue", line=8)

    sb.current = None
    sb.set_frontier([])
    yield sb.build(f"BFS completed: {len(sb.visited)} node(s) visited", line=9, is_final=True)
