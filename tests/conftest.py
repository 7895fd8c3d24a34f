"""
Shared fixtures: small hand-built graphs, a deterministic clock and a
Flask test client wired to it.
"""

import pytest

from config import Settings
from engine import FakeClock, Player, Scheduler
from graph import Graph, HighlightOverlay
from main import create_app


def build(edges, n=None, directed=False, start=None, goal=None):
    """Graph with nodes 0..n-1 on a horizontal line and the given (a, b, w) edges."""
    g = Graph(directed=directed)
    count = n if n is not None else max(max(a, b) for a, b, _ in edges) + 1
    for i in range(count):
        g.add_node(i * 100.0, 0.0)
    for a, b, w in edges:
        g.add_edge(a, b, w)
    g.set_start(start)
    g.set_goal(goal)
    return g


@pytest.fixture
def graph():
    return Graph()


@pytest.fixture
def path3():
    """0 - 1 and 0 - 2: BFS from 0 visits 0, 1, 2."""
    return build([(0, 1, 1), (0, 2, 1)], start=0)


@pytest.fixture
def chain3():
    """0 - 1 - 2, start 0."""
    return build([(0, 1, 1), (1, 2, 1)], start=0)


@pytest.fixture
def triangle():
    """Direct edge 0-1 costs 5, the detour 0-2-1 costs 2."""
    return build([(0, 1, 5), (0, 2, 1), (2, 1, 1)], start=0, goal=1)


@pytest.fixture
def split():
    """Two components: {0, 1} and {2, 3}."""
    return build([(0, 1, 1), (2, 3, 1)], start=0, goal=3)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def player(clock):
    return Player(HighlightOverlay(), Scheduler(clock), interval_ms=100, min_interval_ms=10)


@pytest.fixture
def settings():
    return Settings(secret_key="test-secret", testing=True)


@pytest.fixture
def app(settings, clock):
    return create_app(settings, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()
