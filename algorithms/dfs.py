"""
dfs.py — Depth-First Traversal
===============================
Generator-based DFS using an explicit stack (no Python recursion limit issues).

Yields a Step at:
  1. Push source onto stack
  2. Pop an already-visited node  →  skipped
  3. Pop a new node               →  VISITED, becomes CURRENT
  4. Push each unvisited neighbour
  5. Stack empty                  →  completed

Neighbours are pushed in REVERSE adjacency order so that they are popped
in adjacency order, matching what a recursive DFS would do.  We use the
"mark on pop" strategy, so a node can sit on the stack more than once;
the frontier shown to the renderer is the stack minus visited entries.
"""

from typing import Iterator, List, Optional

from graph import Graph
from algorithms.errors import require_start
from algorithms.step import Step, StepBuilder, label


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, source):",                        # 0
    "    stack ← [source]",                           # 1
    "    visited ← {}",                               # 2
    "    while stack is not empty:",                  # 3
    "        node ← stack.pop()",                     # 4
    "        if node in visited: continue",           # 5
    "        visited.add(node)",                      # 6
    "        for neighbour in reversed(adj(node)):",  # 7
    "            if neighbour not visited:",          # 8
    "                stack.push(neighbour)",          # 9
    "    return visited",                             # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dfs(
    graph: Graph,
    start: Optional[int],
    goal: Optional[int] = None,
) -> Iterator[Step]:
    source = require_start(graph, start)

    sb    = StepBuilder()
    stack = [source]

    def pending() -> List[int]:
        return [n for n in stack if n not in sb.visited]

    sb.set_frontier(pending())
    yield sb.build(f"Starting DFS from node {label(graph, source)}", line=1)

    while stack:
        node = stack.pop()

        # already visited (can happen because we mark-on-pop)
        if node in sb.visited:
            sb.set_frontier(pending())
            yield sb.build(f"Skipping already visited node {label(graph, node)}", line=5)
            continue

        sb.visit(node)
        sb.current = node
        sb.set_frontier(pending())
        yield sb.build(f"Visiting node {label(graph, node)}", line=6)

        unvisited = [nbr for nbr, _ in graph.neighbours(node) if nbr not in sb.visited]
        for nbr in reversed(unvisited):
            stack.append(nbr)
            sb.set_frontier(pending())
            yield sb.build(
                f"Pushed node {label(graph, nbr)} onto the stack (neighbor of {label(graph, node)})",
                line=9,
            )

    sb.current = None
    sb.set_frontier([])
    yield sb.build(f"DFS completed: {len(sb.visited)} node(s) visited", line=10, is_final=True)
