"""
errors.py — Graph Store Failures
=================================
Every rejected mutation raises one of these.  The store validates
BEFORE it touches anything, so when one of these escapes the graph is
exactly as it was before the call.

The HTTP layer maps `GraphError.kind` straight into the JSON error
payload, so the UI can show a friendly message per kind.
"""

from typing import Any


class GraphError(Exception):
    """Base class for every recoverable Graph Store failure."""

    kind: str = "graph_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message, **self.details}


class DuplicateEdge(GraphError):
    """An edge between these endpoints already exists (respecting directedness)."""
    kind = "duplicate_edge"


class InvalidWeight(GraphError):
    """Weight was not a positive integer."""
    kind = "invalid_weight"


class UnknownNode(GraphError):
    kind = "unknown_node"


class UnknownEdge(GraphError):
    kind = "unknown_edge"


class SelfLoop(GraphError):
    kind = "self_loop"


class InvalidDocument(GraphError):
    """Imported document does not have the exchange shape."""
    kind = "invalid_document"


__all__ = [
    "GraphError",
    "DuplicateEdge",
    "InvalidWeight",
    "UnknownNode",
    "UnknownEdge",
    "SelfLoop",
    "InvalidDocument",
]
