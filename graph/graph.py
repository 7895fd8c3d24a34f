"""
graph.py — Graph Store
=======================
Single source of truth for the graph structure.  Algorithms, the Edit
History and the HTTP layer all talk to this object.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove / reweight / rename / move)
  2. Start / goal selection & directedness
  3. Adjacency index                        (neighbours, rebuild_adjacency)
  4. Random graph generation                (circle placement + Bernoulli edges)
  5. Serialisation round-trip               (to_dict / load / from_dict)
  6. Read-side helpers                      (stats, components, search)

Design decisions:
  - Nodes in a dict keyed by int id, edges in a dict keyed by their
    (source, target) pair.  Both dicts keep insertion order, which is
    what makes the adjacency index (and therefore every trace)
    deterministic.
  - `_adj[node_id] → [(neighbour_id, weight), …]` is updated
    incrementally on single-edge changes and rebuilt from `edges` on
    bulk changes.  Either way it always equals what
    `rebuild_adjacency()` would produce.
  - Every mutator validates first and applies second, so a raised
    GraphError leaves the store untouched.  Successful mutators call
    `_changed()` exactly once; the Edit History listens there.
  - Node ids come from a counter that never moves backwards, so an id
    is never reused within a session (not even after undo).
"""

import logging
import math
import random
from typing import (
    Callable, Dict, Iterable, List, Optional, Set, Tuple
)

from graph.node import Node
from graph.edge import Edge, EdgeRef
from graph.errors import (
    DuplicateEdge,
    InvalidDocument,
    InvalidWeight,
    SelfLoop,
    UnknownEdge,
    UnknownNode,
)

logger = logging.getLogger(__name__)

Listener = Callable[["Graph", str], None]


class Graph:
    """
    Attributes:
        nodes    : {node_id: Node}
        edges    : {(source, target): Edge}
        directed : bool – graph-level directedness
        start    : node id the algorithms start from (or None)
        goal     : node id path-finding algorithms aim for (or None)
        _adj     : {node_id: [(neighbour_id, weight), …]}
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[int, Node]     = {}
        self.edges:    Dict[EdgeRef, Edge] = {}
        self.directed: bool                = directed
        self.start:    Optional[int]       = None
        self.goal:     Optional[int]       = None
        self._adj:     Dict[int, List[Tuple[int, int]]] = {}
        self._next_id: int                 = 0
        self._listeners: List[Listener]    = []

    # ==================================================================
    # CHANGE NOTIFICATION
    # ==================================================================
    def subscribe(self, listener: Listener) -> None:
        """listener(graph, action) fires once after every successful mutation."""
        self._listeners.append(listener)

    def _changed(self, action: str) -> None:
        logger.debug("graph mutation: %s", action)
        for listener in list(self._listeners):
            listener(self, action)

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Node:
        node = Node(self._next_id, x=x, y=y, label=label)
        self._next_id += 1
        self.nodes[node.id] = node
        self._adj[node.id] = []
        self._changed(f"add node {node.id}")
        return node

    def remove_node(self, node_id: int) -> None:
        """Delete a node together with every incident edge, in one step."""
        self._require_node(node_id)
        del self.nodes[node_id]
        self.edges = {ref: e for ref, e in self.edges.items() if not e.touches(node_id)}
        if self.start == node_id:
            self.start = None
        if self.goal == node_id:
            self.goal = None
        self.rebuild_adjacency()
        self._changed(f"remove node {node_id}")

    def rename_node(self, node_id: int, label: str) -> Node:
        return self.update_node(node_id, label=label)

    def move_node(self, node_id: int, x: float, y: float) -> Node:
        return self.update_node(node_id, x=x, y=y)

    def update_node(
        self,
        node_id: int,
        label: Optional[str] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Node:
        """Relabel and/or move a node as ONE change (one history entry)."""
        node = self._require_node(node_id)
        new_x = node.x if x is None else float(x)
        new_y = node.y if y is None else float(y)
        actions = []
        if label is not None:
            node.label = str(label)
            actions.append("rename")
        if x is not None or y is not None:
            node.x, node.y = new_x, new_y
            actions.append("move")
        if actions:
            self._changed(f"{' and '.join(actions)} node {node_id}")
        return node

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, source: int, target: int, weight: int = 1) -> Edge:
        self._require_node(source)
        self._require_node(target)
        if source == target:
            raise SelfLoop(f"Cannot connect node {source} to itself", node=source)
        weight = _validate_weight(weight)
        if self.find_edge(source, target) is not None:
            raise DuplicateEdge(
                f"An edge already exists between {source} and {target}",
                source=source, target=target,
            )

        edge = Edge(source, target, weight)
        self.edges[edge.ref] = edge
        self._adj[source].append((target, weight))
        if not self.directed:
            self._adj[target].append((source, weight))
        self._changed(f"add edge {source}-{target}")
        return edge

    def remove_edge(self, source: int, target: int) -> None:
        edge = self._require_edge(source, target)
        del self.edges[edge.ref]
        a, b = edge.ref
        self._adj[a] = [(n, w) for n, w in self._adj[a] if n != b]
        if not self.directed:
            self._adj[b] = [(n, w) for n, w in self._adj[b] if n != a]
        self._changed(f"remove edge {a}-{b}")

    def set_weight(self, source: int, target: int, weight: int) -> Edge:
        edge = self._require_edge(source, target)
        weight = _validate_weight(weight)
        edge.weight = weight
        a, b = edge.ref
        self._adj[a] = [(n, weight if n == b else w) for n, w in self._adj[a]]
        if not self.directed:
            self._adj[b] = [(n, weight if n == a else w) for n, w in self._adj[b]]
        self._changed(f"reweight edge {a}-{b}")
        return edge

    def find_edge(self, source: int, target: int) -> Optional[Edge]:
        """The edge source→target under the current directedness, or None."""
        edge = self.edges.get((source, target))
        if edge is None and not self.directed:
            edge = self.edges.get((target, source))
        return edge

    def get_edge_between(self, a: int, b: int) -> Optional[Edge]:
        """Edge joining a and b stored in either direction (highlight lookup)."""
        return self.edges.get((a, b)) or self.edges.get((b, a))

    # ==================================================================
    # START / GOAL / MODE
    # ==================================================================
    def set_start(self, node_id: Optional[int]) -> None:
        if node_id is not None:
            self._require_node(node_id)
        self.start = node_id
        self._changed(f"set start {node_id}")

    def set_goal(self, node_id: Optional[int]) -> None:
        if node_id is not None:
            self._require_node(node_id)
        self.goal = node_id
        self._changed(f"set goal {node_id}")

    def set_directed(self, directed: bool) -> None:
        directed = bool(directed)
        if directed == self.directed:
            return
        if not directed:
            seen: Set[frozenset] = set()
            for a, b in self.edges:
                key = frozenset((a, b))
                if key in seen:
                    raise DuplicateEdge(
                        f"Edges {a}→{b} and {b}→{a} would merge in an undirected graph",
                        source=a, target=b,
                    )
                seen.add(key)
        self.directed = directed
        self.rebuild_adjacency()
        self._changed("directed" if directed else "undirected")

    def clear(self) -> None:
        self.nodes = {}
        self.edges = {}
        self.start = None
        self.goal  = None
        self.rebuild_adjacency()
        self._changed("clear")

    # ==================================================================
    # ADJACENCY
    # ==================================================================
    def rebuild_adjacency(self) -> None:
        """Derive the adjacency index from scratch out of `edges`."""
        adj: Dict[int, List[Tuple[int, int]]] = {nid: [] for nid in self.nodes}
        for edge in self.edges.values():
            adj[edge.source].append((edge.target, edge.weight))
            if not self.directed:
                adj[edge.target].append((edge.source, edge.weight))
        self._adj = adj

    def neighbours(self, node_id: int) -> List[Tuple[int, int]]:
        """Return [(neighbour_id, weight)] in insertion order."""
        return list(self._adj.get(node_id, []))

    @property
    def adjacency(self) -> Dict[int, List[Tuple[int, int]]]:
        return {nid: list(entries) for nid, entries in self._adj.items()}

    # ==================================================================
    # BULK REPLACE (load / restore / generation)
    # ==================================================================
    def replace(
        self,
        nodes: Iterable[Node],
        edges: Iterable[Edge],
        directed: bool,
        start: Optional[int],
        goal: Optional[int],
        notify: Optional[str] = None,
    ) -> None:
        """
        Swap the whole structure in one go.  Callers pass already
        validated data.  `notify` is the action name to broadcast, or
        None for silent replacement (history restore).
        """
        self.nodes    = {n.id: n.copy() for n in nodes}
        self.edges    = {e.ref: e.copy() for e in edges}
        self.directed = bool(directed)
        self.start    = start
        self.goal     = goal
        if self.nodes:
            self._next_id = max(self._next_id, max(self.nodes) + 1)
        self.rebuild_adjacency()
        if notify is not None:
            self._changed(notify)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
            "directed": self.directed,
            "start":    self.start,
            "goal":     self.goal,
        }

    def load(self, data: dict) -> None:
        """Rehydrate from an exchange document.  All-or-nothing."""
        nodes, edges, directed, start, goal = _parse_document(data)
        self.replace(nodes, edges, directed, start, goal, notify="load")
        logger.info("loaded graph: %d nodes, %d edges", len(self.nodes), len(self.edges))

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        g.load(data)
        return g

    # ==================================================================
    # GENERATOR
    # ==================================================================
    def generate_random(
        self,
        num_nodes: int = 8,
        edge_probability: float = 0.3,
        random_weights: bool = True,
        weight_range: Tuple[int, int] = (1, 20),
        seed: Optional[int] = None,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> None:
        """
        Erdős–Rényi style random graph replacing the current one.
        Nodes are placed on a circle; each possible edge is included with
        probability `edge_probability`.  First node becomes start, last
        becomes goal.
        """
        rng = random.Random(seed)
        lo, hi = weight_range

        cx, cy = canvas_w / 2, canvas_h / 2
        radius = min(canvas_w, canvas_h) / 3
        nodes: List[Node] = []
        for i in range(num_nodes):
            angle = 2 * math.pi * i / num_nodes
            nid = self._next_id + i
            nodes.append(Node(nid, cx + radius * math.cos(angle), cy + radius * math.sin(angle)))

        edges: List[Edge] = []
        for i in range(num_nodes):
            for j in (range(num_nodes) if self.directed else range(i + 1, num_nodes)):
                if i == j:
                    continue
                if rng.random() < edge_probability:
                    w = rng.randint(lo, hi) if random_weights else 1
                    edges.append(Edge(nodes[i].id, nodes[j].id, w))

        start = nodes[0].id if num_nodes >= 2 else None
        goal  = nodes[-1].id if num_nodes >= 2 else None
        self.replace(nodes, edges, self.directed, start, goal, notify=f"generate {num_nodes} nodes")

    # ==================================================================
    # READ-SIDE HELPERS
    # ==================================================================
    def connected_components(self) -> List[List[int]]:
        """Weakly connected components, each in BFS discovery order."""
        undirected: Dict[int, List[int]] = {nid: [] for nid in self.nodes}
        for a, b in self.edges:
            undirected[a].append(b)
            undirected[b].append(a)

        seen: Set[int] = set()
        components: List[List[int]] = []
        for nid in self.nodes:
            if nid in seen:
                continue
            seen.add(nid)
            component, queue = [], [nid]
            while queue:
                cur = queue.pop(0)
                component.append(cur)
                for nbr in undirected[cur]:
                    if nbr not in seen:
                        seen.add(nbr)
                        queue.append(nbr)
            components.append(component)
        return components

    def stats(self) -> dict:
        n = len(self.nodes)
        max_edges = n * (n - 1) / 2
        total_degree = sum(len(v) for v in self._adj.values())
        return {
            "nodes":       n,
            "edges":       len(self.edges),
            "density":     round(len(self.edges) / max_edges, 2) if max_edges else 0,
            "avg_degree":  round(total_degree / n, 1) if n else 0,
            "components":  len(self.connected_components()),
        }

    def search(self, query: str) -> List[int]:
        """Ids whose id text or (case-insensitive) label contains `query`."""
        q = query.strip().lower()
        if not q:
            return []
        return [
            nid for nid, node in self.nodes.items()
            if q in str(nid) or q in node.label.lower()
        ]

    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    # ==================================================================
    # INTERNAL
    # ==================================================================
    def _require_node(self, node_id: int) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise UnknownNode(f"No node with id {node_id}", node=node_id)
        return node

    def _require_edge(self, source: int, target: int) -> Edge:
        edge = self.find_edge(source, target)
        if edge is None:
            raise UnknownEdge(f"No edge between {source} and {target}", source=source, target=target)
        return edge

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def _validate_weight(weight) -> int:
    """Accept positive integers (and integral floats); reject everything else."""
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise InvalidWeight(f"Weight must be a positive integer, got {weight!r}", weight=repr(weight))
    if isinstance(weight, float) and not weight.is_integer():
        raise InvalidWeight(f"Weight must be a positive integer, got {weight!r}", weight=weight)
    if weight <= 0:
        raise InvalidWeight(f"Weight must be a positive integer, got {weight!r}", weight=weight)
    return int(weight)


def _parse_document(data) -> Tuple[List[Node], List[Edge], bool, Optional[int], Optional[int]]:
    """Validate an exchange document completely before anything is applied."""
    if not isinstance(data, dict):
        raise InvalidDocument("Document must be a JSON object")
    raw_nodes = data.get("nodes", [])
    raw_edges = data.get("edges", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise InvalidDocument("'nodes' and 'edges' must be lists")
    directed = bool(data.get("directed", False))

    nodes: List[Node] = []
    ids: Set[int] = set()
    for nd in raw_nodes:
        if not isinstance(nd, dict) or "id" not in nd:
            raise InvalidDocument(f"Malformed node entry: {nd!r}")
        nid = nd["id"]
        if not _is_id(nid):
            raise InvalidDocument(f"Node id must be an integer: {nid!r}")
        if nid in ids:
            raise InvalidDocument(f"Duplicate node id {nid}")
        try:
            nodes.append(Node.from_dict(nd))
        except (TypeError, ValueError) as exc:
            raise InvalidDocument(f"Malformed node {nid}: {exc}") from exc
        ids.add(nid)

    edges: List[Edge] = []
    pairs: Set = set()
    for ed in raw_edges:
        if not isinstance(ed, dict) or "from" not in ed or "to" not in ed:
            raise InvalidDocument(f"Malformed edge entry: {ed!r}")
        a, b = ed["from"], ed["to"]
        if not (_is_id(a) and _is_id(b)):
            raise InvalidDocument(f"Edge endpoints must be integers: {a!r}-{b!r}")
        if a not in ids or b not in ids:
            raise InvalidDocument(f"Edge {a}-{b} references an unknown node")
        if a == b:
            raise InvalidDocument(f"Self-loop on node {a}")
        try:
            weight = _validate_weight(ed.get("weight", 1))
        except InvalidWeight as exc:
            raise InvalidDocument(f"Edge {a}-{b}: {exc.message}") from exc
        key = (a, b) if directed else frozenset((a, b))
        if key in pairs:
            raise InvalidDocument(f"Duplicate edge {a}-{b}")
        pairs.add(key)
        edges.append(Edge(a, b, weight))

    start, goal = data.get("start"), data.get("goal")
    for name, value in (("start", start), ("goal", goal)):
        if value is not None and not (_is_id(value) and value in ids):
            raise InvalidDocument(f"'{name}' references an unknown node: {value!r}")
    return nodes, edges, directed, start, goal


def _is_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
