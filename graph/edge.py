"""
edge.py — Graph Edge
====================
Connects two nodes with a positive integer weight.

Design decisions:
  - `source` and `target` are node ids, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - An edge is identified by its endpoint pair (EdgeRef).  The store
    guarantees at most one edge per pair (per unordered pair when the
    graph is undirected), so the pair is a sufficient key.
  - Directedness is a graph-wide mode, so the edge itself does not
    carry a `directed` flag.
"""

from typing import Tuple


EdgeRef = Tuple[int, int]


class Edge:
    """
    Attributes:
        source : Id of the tail node.
        target : Id of the head node.
        weight : Positive integer cost.
    """

    __slots__ = ("source", "target", "weight")

    def __init__(self, source: int, target: int, weight: int = 1):
        self.source: int = source
        self.target: int = target
        self.weight: int = weight

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def ref(self) -> EdgeRef:
        return (self.source, self.target)

    def touches(self, node_id: int) -> bool:
        return self.source == node_id or self.target == node_id

    def copy(self) -> "Edge":
        return Edge(self.source, self.target, self.weight)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "from":   self.source,
            "to":     self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(
            source=data["from"],
            target=data["to"],
            weight=data.get("weight", 1),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.source} → {self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and (self.source, self.target, self.weight) == (
            other.source, other.target, other.weight
        )

    def __hash__(self) -> int:
        return hash(self.ref)
