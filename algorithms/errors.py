"""
errors.py — Algorithm Precondition Failures
============================================
Raised when a trace cannot be generated at all.  An unreachable goal is
NOT an error: it is a normal trace that ends with an empty path.
"""

from typing import Optional

from graph import Graph


class AlgorithmError(Exception):
    kind: str = "algorithm_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class MissingStart(AlgorithmError):
    kind = "missing_start"


class MissingGoal(AlgorithmError):
    kind = "missing_goal"


class UnknownAlgorithm(AlgorithmError):
    kind = "unknown_algorithm"


def require_start(graph: Graph, start: Optional[int]) -> int:
    if start is None or start not in graph.nodes:
        raise MissingStart("Please select a start node first.")
    return start


def require_goal(graph: Graph, goal: Optional[int]) -> int:
    if goal is None or goal not in graph.nodes:
        raise MissingGoal("Please select a goal node for this algorithm.")
    return goal


__all__ = [
    "AlgorithmError",
    "MissingStart",
    "MissingGoal",
    "UnknownAlgorithm",
    "require_start",
    "require_goal",
]
