"""
step.py — Algorithm Step Snapshot
==================================
Every algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of one instant of the run:

    • the frontier (queue / stack / open-set contents, in order)
    • the visited / closed set
    • the reconstructed path (empty until found)
    • edges to highlight (MST traces)
    • which line of pseudocode is executing right now
    • a plain-English description of the event

…plus an algorithm-specific auxiliary payload (distance map, g/f
scores, distance matrix, …) selected by `aux_kind`.  The header is the
same for every algorithm, so the Playback Controller never needs to
know which algorithm produced a trace.

Design decisions:
  - Step is a frozen dataclass with tuples / frozensets / read-only
    mapping proxies.  It is a SNAPSHOT: the generator is the only
    writer, the controller and renderer are pure readers.
  - Algorithms build Steps through StepBuilder, a mutable scratch-pad
    that copies everything on build() so later mutation of the
    builder never leaks into earlier Steps.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from graph import EdgeRef, Graph


INF = float("inf")


# ---------------------------------------------------------------------------
# Auxiliary payload discriminant
# ---------------------------------------------------------------------------
class AuxKind(Enum):
    NONE       = "none"
    DISTANCES  = "distances"    # {"dist": node → tentative distance}
    SCORES     = "scores"       # {"g": …, "h": …, "f": …}
    MATRIX     = "matrix"       # {str(row): {col: distance}}
    ORDER      = "order"        # {"order": node → position, "in_degree": node → deg}
    COMPONENTS = "components"   # {"component": node → label}
    TREE       = "tree"         # {"key": node → cheapest connecting weight}


Aux = Mapping[str, Mapping[int, float]]

_EMPTY_AUX: Aux = MappingProxyType({})


def freeze_aux(aux: Dict[str, Dict[int, float]]) -> Aux:
    """Deep-copy an aux dict into read-only mapping proxies."""
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in aux.items()})


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        description     : Human-readable event text ("Visiting node 3").
        frontier        : Node ids pending expansion, in structure order.
        visited         : Node ids visited / closed so far.
        path            : Reconstructed path, start → goal (empty until found).
        edges           : Extra edges to highlight (tree edges for MST).
        current         : Node being expanded right now, if any.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
        aux_kind        : Which auxiliary payload shape `aux` carries.
        aux             : Read-only {name: {node_id: number}}.
        is_final        : True on the very last step.
    """

    description:     str                   = ""
    frontier:        Tuple[int, ...]       = ()
    visited:         FrozenSet[int]        = frozenset()
    path:            Tuple[int, ...]       = ()
    edges:           Tuple[EdgeRef, ...]   = ()
    current:         Optional[int]         = None
    pseudocode_line: int                   = 0
    aux_kind:        AuxKind               = AuxKind.NONE
    aux:             Aux                   = field(default_factory=lambda: _EMPTY_AUX, hash=False)
    is_final:        bool                  = False

    def to_dict(self) -> dict:
        """JSON-friendly form; infinities become "∞" as in the matrix panel."""
        return {
            "description":     self.description,
            "frontier":        list(self.frontier),
            "visited":         sorted(self.visited),
            "path":            list(self.path),
            "edges":           [list(e) for e in self.edges],
            "current":         self.current,
            "pseudocode_line": self.pseudocode_line,
            "aux_kind":        self.aux_kind.value,
            "aux": {
                name: {str(k): (v if v != INF else "∞") for k, v in values.items()}
                for name, values in self.aux.items()
            },
            "is_final":        self.is_final,
        }


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad that algorithms use to construct Steps cleanly.

    Usage inside an algorithm generator:
        sb = StepBuilder(AuxKind.DISTANCES)
        sb.visit(3)
        sb.set_frontier([4, 5])
        sb.aux["dist"] = dist
        yield sb.build("Visiting node 3 with distance 2", line=6)
    """

    def __init__(self, aux_kind: AuxKind = AuxKind.NONE):
        self.aux_kind:  AuxKind                    = aux_kind
        self.frontier:  List[int]                  = []
        self.visited:   set                        = set()
        self.path:      List[int]                  = []
        self.edges:     List[EdgeRef]              = []
        self.current:   Optional[int]              = None
        self.aux:       Dict[str, Dict[int, float]] = {}

    # -- helpers --
    def visit(self, node_id: int) -> None:
        self.visited.add(node_id)

    def set_frontier(self, nodes: Iterable[int]) -> None:
        self.frontier = list(nodes)

    def add_edge(self, ref: EdgeRef) -> None:
        self.edges.append(ref)

    def build(self, description: str, line: int = 0, is_final: bool = False) -> Step:
        return Step(
            description=description,
            frontier=tuple(self.frontier),
            visited=frozenset(self.visited),
            path=tuple(self.path),
            edges=tuple(self.edges),
            current=self.current,
            pseudocode_line=line,
            aux_kind=self.aux_kind,
            aux=freeze_aux(self.aux) if self.aux else _EMPTY_AUX,
            is_final=is_final,
        )


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
def reconstruct_path(parent: Dict[int, Optional[int]], target: int) -> List[int]:
    """Walk the predecessor map backward from target, then reverse."""
    path: List[int] = []
    cur: Optional[int] = target
    while cur is not None:
        path.append(cur)
        cur = parent.get(cur)
    path.reverse()
    return path


def path_cost(graph: Graph, path: List[int]) -> int:
    total = 0
    for a, b in zip(path, path[1:]):
        edge = graph.get_edge_between(a, b)
        if edge is not None:
            total += edge.weight
    return total


def label(graph: Graph, node_id: int) -> str:
    node = graph.get_node(node_id)
    return node.label if node is not None else str(node_id)


def undirected_adjacency(graph: Graph) -> Dict[int, List[Tuple[int, int]]]:
    """Adjacency that ignores direction (MST / components on directed graphs)."""
    adj: Dict[int, List[Tuple[int, int]]] = {nid: [] for nid in graph.nodes}
    for edge in graph.edges.values():
        adj[edge.source].append((edge.target, edge.weight))
        adj[edge.target].append((edge.source, edge.weight))
    return adj


def fmt(value: float) -> str:
    """Render a score for descriptions: ints stay ints, ∞ stays ∞."""
    if value == INF:
        return "∞"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"
