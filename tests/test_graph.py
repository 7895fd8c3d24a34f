"""
Graph Store: CRUD, adjacency consistency, validation and serialisation.
"""

import pytest

from engine import EditHistory
from graph import (
    DuplicateEdge, Graph, InvalidDocument, InvalidWeight, SelfLoop,
    UnknownEdge, UnknownNode,
)

from conftest import build


def adjacency_matches_rebuild(g: Graph) -> bool:
    before = g.adjacency
    g.rebuild_adjacency()
    return before == g.adjacency


def test_node_ids_are_sequential_and_labels_default_to_id(graph):
    a = graph.add_node(10, 20)
    b = graph.add_node(30, 40, label="hub")
    assert (a.id, b.id) == (0, 1)
    assert a.label == "0"
    assert b.label == "hub"
    assert graph.neighbours(a.id) == []


def test_undirected_edge_appears_in_both_adjacency_lists(graph):
    for _ in range(3):
        graph.add_node()
    graph.add_edge(0, 1, 4)
    graph.add_edge(1, 2, 2)
    assert graph.neighbours(0) == [(1, 4)]
    assert graph.neighbours(1) == [(0, 4), (2, 2)]
    assert adjacency_matches_rebuild(graph)


def test_directed_edge_only_in_source_list():
    g = build([(0, 1, 3)], directed=True)
    assert g.neighbours(0) == [(1, 3)]
    assert g.neighbours(1) == []


def test_duplicate_edge_rejected_and_store_unchanged():
    g = build([(0, 1, 3)])
    with pytest.raises(DuplicateEdge):
        g.add_edge(0, 1, 7)
    with pytest.raises(DuplicateEdge):
        g.add_edge(1, 0, 7)
    assert len(g.edges) == 1
    assert g.neighbours(0) == [(1, 3)]


def test_directed_graph_allows_both_directions():
    g = build([(0, 1, 3)], directed=True)
    g.add_edge(1, 0, 2)
    assert g.neighbours(1) == [(0, 2)]
    with pytest.raises(DuplicateEdge):
        g.add_edge(0, 1, 1)


@pytest.mark.parametrize("bad", [0, -3, 2.5, "4", None, True])
def test_invalid_weights_rejected(bad):
    g = build([], n=2)
    with pytest.raises(InvalidWeight):
        g.add_edge(0, 1, bad)
    assert g.edges == {}


def test_integral_float_weight_is_stored_as_int():
    g = build([], n=2)
    edge = g.add_edge(0, 1, 3.0)
    assert edge.weight == 3 and isinstance(edge.weight, int)


def test_self_loop_and_unknown_endpoint_rejected():
    g = build([], n=2)
    with pytest.raises(SelfLoop):
        g.add_edge(1, 1)
    with pytest.raises(UnknownNode):
        g.add_edge(0, 9)


def test_set_weight_updates_adjacency_incrementally():
    g = build([(0, 1, 3), (1, 2, 1)])
    g.set_weight(1, 0, 8)
    assert g.edges[(0, 1)].weight == 8
    assert g.neighbours(1) == [(0, 8), (2, 1)]
    assert adjacency_matches_rebuild(g)
    with pytest.raises(InvalidWeight):
        g.set_weight(0, 1, -1)
    assert g.edges[(0, 1)].weight == 8


def test_remove_edge_either_order_when_undirected():
    g = build([(0, 1, 3), (1, 2, 1)])
    g.remove_edge(1, 0)
    assert (0, 1) not in g.edges
    assert g.neighbours(0) == []
    with pytest.raises(UnknownEdge):
        g.remove_edge(0, 1)


def test_remove_node_cascades_and_clears_start_goal():
    g = build([(0, 1, 1), (1, 2, 1), (0, 2, 1)], start=1, goal=2)
    g.remove_node(1)
    assert set(g.nodes) == {0, 2}
    assert set(g.edges) == {(0, 2)}
    assert g.start is None
    assert g.goal == 2
    assert 1 not in g.adjacency
    assert adjacency_matches_rebuild(g)


def test_ids_never_reused_after_delete():
    g = build([], n=3)
    g.remove_node(2)
    assert g.add_node().id == 3


def test_listeners_fire_once_per_successful_mutation_only():
    g = build([(0, 1, 1)])
    seen = []
    g.subscribe(lambda graph, action: seen.append(action))
    g.add_node()
    with pytest.raises(DuplicateEdge):
        g.add_edge(0, 1)
    g.rename_node(0, "A")
    assert len(seen) == 2


def test_update_node_relabels_and_moves_as_one_change():
    g = build([], n=2)
    seen = []
    g.subscribe(lambda graph, action: seen.append(action))
    node = g.update_node(1, label="hub", x=5, y=6)
    assert (node.label, node.x, node.y) == ("hub", 5.0, 6.0)
    assert seen == ["rename and move node 1"]
    g.update_node(1, y=9)
    assert (node.x, node.y) == (5.0, 9.0)
    g.update_node(1)
    assert len(seen) == 2
    with pytest.raises(UnknownNode):
        g.update_node(7, label="x")


@pytest.mark.parametrize("directed", [False, True])
def test_adjacency_matches_rebuild_after_every_kind_of_change(directed):
    g = build([(0, 1, 2), (1, 2, 3), (2, 3, 4), (0, 3, 5)], directed=directed)
    history = EditHistory(g)

    def edit(op, *args):
        op(*args)
        assert adjacency_matches_rebuild(g), f"{op.__name__}{args}"

    edit(g.add_node, 400.0, 0.0)
    edit(g.add_edge, 4, 0, 6)
    edit(g.add_edge, 2, 4, 1)
    edit(g.set_weight, 1, 2, 9)
    edit(g.set_weight, 4, 0, 7)
    edit(g.remove_edge, 2, 3)
    edit(g.remove_node, 1)
    edit(g.add_edge, 3, 2, 8)
    edit(g.set_directed, not directed)
    edit(g.set_weight, 0, 3, 1)
    edit(g.set_directed, directed)
    edit(history.undo)
    edit(history.undo)
    edit(history.undo)
    edit(history.redo)
    edit(g.remove_edge, 0, 3)
    edit(g.load, g.to_dict())
    edit(history.undo)
    edit(history.redo)
    edit(g.load, {
        "nodes": [{"id": 7}, {"id": 8}, {"id": 9}],
        "edges": [{"from": 9, "to": 7, "weight": 2}, {"from": 7, "to": 8, "weight": 5}],
        "directed": directed,
    })
    assert g.neighbours(7) == ([(8, 5)] if directed else [(9, 2), (8, 5)])
    edit(g.clear)
    edit(history.undo)
    assert set(g.nodes) == {7, 8, 9}


def test_set_directed_refuses_to_merge_opposite_edges():
    g = build([(0, 1, 1), (1, 0, 2)], directed=True)
    with pytest.raises(DuplicateEdge):
        g.set_directed(False)
    assert g.directed is True
    assert len(g.edges) == 2


def test_switching_to_undirected_rebuilds_adjacency():
    g = build([(0, 1, 1)], directed=True)
    g.set_directed(False)
    assert g.neighbours(1) == [(0, 1)]


def test_round_trip_through_exchange_document():
    g = build([(0, 1, 4), (1, 2, 6)], start=0, goal=2)
    g.rename_node(1, "middle")
    doc = g.to_dict()
    assert doc["edges"][0] == {"from": 0, "to": 1, "weight": 4}
    copy = Graph.from_dict(doc)
    assert copy.to_dict() == doc
    assert copy.adjacency == g.adjacency


@pytest.mark.parametrize("doc", [
    [],
    {"nodes": [{"id": "a"}]},
    {"nodes": [{"id": 0}], "edges": [{"from": 0, "to": 5}]},
    {"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": 0, "to": 1, "weight": 0}]},
    {"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": 0, "to": 1}, {"from": 1, "to": 0}]},
    {"nodes": [{"id": 0}, {"id": 0}]},
    {"nodes": [{"id": 0}], "start": 3},
    {"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": [0], "to": 1}]},
    {"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": True, "to": 0}]},
    {"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": 0.0, "to": 1}]},
    {"nodes": [{"id": 0}, {"id": 1}], "start": True},
    {"nodes": [{"id": 0}, {"id": 1}], "goal": [1]},
    {"nodes": [{"id": 0}, {"id": 1}], "goal": 1.0},
])
def test_load_rejects_malformed_documents_without_changing_anything(doc):
    g = build([(0, 1, 1)])
    before = g.to_dict()
    with pytest.raises(InvalidDocument):
        g.load(doc)
    assert g.to_dict() == before


def test_load_advances_id_counter_past_imported_ids(graph):
    graph.load({"nodes": [{"id": 7, "label": "x", "x": 1, "y": 2}], "edges": []})
    assert graph.add_node().id == 8


def test_generate_random_is_seeded_and_picks_start_goal(graph):
    graph.generate_random(num_nodes=6, edge_probability=0.5, seed=3)
    other = Graph()
    other.generate_random(num_nodes=6, edge_probability=0.5, seed=3)
    assert graph.to_dict() == other.to_dict()
    assert graph.start == 0 and graph.goal == 5
    assert all(1 <= e.weight <= 20 for e in graph.edges.values())
    assert adjacency_matches_rebuild(graph)


def test_stats_and_components():
    g = build([(0, 1, 1), (2, 3, 1)], n=5)
    stats = g.stats()
    assert stats["nodes"] == 5
    assert stats["edges"] == 2
    assert stats["components"] == 3
    assert stats["density"] == 0.2
    assert stats["avg_degree"] == 0.8
    assert g.connected_components() == [[0, 1], [2, 3], [4]]


def test_search_matches_id_or_label(graph):
    graph.add_node(label="Alpha")
    graph.add_node(label="beta")
    graph.add_node(label="ALPINE")
    assert graph.search("alp") == [0, 2]
    assert graph.search("1") == [1]
    assert graph.search("  ") == []
