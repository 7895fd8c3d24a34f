"""
node.py — Graph Node
====================
Structural identity only: id, label and position.

Design decisions:
  - The id is an int handed out by the owning Graph's counter and is
    never reused within a session, so traces and history snapshots can
    refer to nodes by id safely.
  - There is NO visual state on the node.  Highlight tags live in the
    separate HighlightOverlay (graph/overlay.py) so that history
    snapshots never carry rendering concerns.
  - x / y belong to the layout / renderer.  Algorithms only read them
    for the A* heuristic.
"""

from typing import Optional


class Node:
    """
    Attributes:
        id    : Stable integer identifier.
        label : Human-readable name shown on the canvas (defaults to str(id)).
        x, y  : Canvas coordinates.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        node_id: int,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id:    int   = node_id
        self.label: str   = str(node_id) if label is None else str(label)
        self.x:     float = float(x)
        self.y:     float = float(y)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def distance_to(self, other: "Node") -> float:
        """Euclidean distance — the A* heuristic builds on this."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def copy(self) -> "Node":
        return Node(self.id, self.x, self.y, self.label)

    # ------------------------------------------------------------------
    # Serialisation  (exchange document shape)
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            node_id=data["id"],
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            label=data.get("label"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Node)
            and (self.id, self.label, self.x, self.y) == (other.id, other.label, other.x, other.y)
        )

    def __hash__(self) -> int:
        return hash(self.id)
