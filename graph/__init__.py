"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge, EdgeRef
    from graph import HighlightOverlay, NodeTag, EdgeTag
    from graph import GraphError, DuplicateEdge, InvalidWeight, …
"""

from graph.node    import Node
from graph.edge    import Edge, EdgeRef
from graph.graph   import Graph
from graph.overlay import HighlightOverlay, NodeTag, EdgeTag
from graph.errors  import (
    GraphError,
    DuplicateEdge,
    InvalidWeight,
    UnknownNode,
    UnknownEdge,
    SelfLoop,
    InvalidDocument,
)

__all__ = [
    "Node",      "Edge",     "EdgeRef",
    "Graph",
    "HighlightOverlay", "NodeTag", "EdgeTag",
    "GraphError", "DuplicateEdge", "InvalidWeight",
    "UnknownNode", "UnknownEdge", "SelfLoop", "InvalidDocument",
]
