"""
Edit history: recording via change notifications, bounds, redo truncation.
"""

import pytest

from engine import EditHistory
from graph import DuplicateEdge, Graph

from conftest import build


def test_first_edit_can_be_undone(graph):
    history = EditHistory(graph)
    assert not history.can_undo
    graph.add_node(5, 5)
    assert history.can_undo
    assert history.undo() is True
    assert graph.nodes == {}
    assert not history.can_undo
    assert history.can_redo


def test_undo_redo_round_trip(graph):
    history = EditHistory(graph)
    graph.add_node()
    graph.add_node()
    graph.add_edge(0, 1, 7)
    after = graph.to_dict()
    history.undo()
    assert graph.edges == {}
    assert graph.neighbours(0) == []
    history.redo()
    assert graph.to_dict() == after
    assert graph.neighbours(1) == [(0, 7)]


def test_history_is_bounded(graph):
    history = EditHistory(graph, capacity=50)
    for i in range(60):
        graph.add_node(i, i)
    assert history.depth == 50
    undos = 0
    while history.undo():
        undos += 1
    assert undos == 49
    assert len(graph.nodes) == 11


def test_new_edit_after_undo_truncates_redo(graph):
    history = EditHistory(graph)
    graph.add_node()
    graph.add_node()
    history.undo()
    assert history.can_redo
    graph.add_node(1, 1)
    assert not history.can_redo
    assert history.redo() is False


def test_failed_mutation_is_not_recorded():
    g = build([(0, 1, 1)])
    history = EditHistory(g)
    depth = history.depth
    with pytest.raises(DuplicateEdge):
        g.add_edge(1, 0)
    assert history.depth == depth


def test_restore_does_not_record(graph):
    history = EditHistory(graph)
    graph.add_node()
    graph.add_node()
    depth = history.depth
    history.undo()
    history.redo()
    assert history.depth == depth


def test_node_ids_not_reused_after_undo(graph):
    history = EditHistory(graph)
    graph.add_node()
    graph.add_node()
    history.undo()
    assert set(graph.nodes) == {0}
    assert graph.add_node().id == 2


def test_snapshots_are_independent_of_later_edits(graph):
    history = EditHistory(graph)
    graph.add_node(label="before")
    graph.rename_node(0, "after")
    history.undo()
    assert graph.nodes[0].label == "before"
    graph.nodes[0].label = "mutated directly"
    history.redo()
    history.undo()
    assert graph.nodes[0].label == "before"


def test_directedness_start_and_goal_are_restored():
    g = build([(0, 1, 1)], directed=True)
    history = EditHistory(g)
    g.set_start(0)
    g.set_goal(1)
    g.set_directed(False)
    history.undo()
    assert g.directed is True
    assert g.neighbours(1) == []
    history.undo()
    history.undo()
    assert (g.start, g.goal) == (None, None)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        EditHistory(Graph(), capacity=0)
