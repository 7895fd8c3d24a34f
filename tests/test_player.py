"""
Playback controller: navigation, highlight projection and timed auto-play.
"""

import pytest

from algorithms import MissingGoal, UnknownAlgorithm
from engine import StepperState
from graph import EdgeTag, NodeTag

from conftest import build


def tags(player, graph):
    return {nid: player.overlay.node_tag(nid, graph.start, graph.goal) for nid in graph.nodes}


def test_run_shows_first_step(player, path3):
    trace = player.run("bfs", path3, 0)
    assert player.cursor == 0
    assert player.current_step is trace.steps[0]
    assert player.state is StepperState.PAUSED
    assert not player.can_step_backward
    assert player.can_step_forward


def test_step_forward_and_backward_clamp_at_bounds(player, path3):
    player.run("bfs", path3, 0)
    assert player.step_backward() is False
    last = player.trace.last_index
    for _ in range(last):
        assert player.step_forward() is True
    assert player.step_forward() is False
    assert player.cursor == last
    assert player.state is StepperState.FINISHED
    assert player.step_backward() is True
    assert player.state is StepperState.PAUSED


def test_seek_clamps_and_is_idempotent(player, triangle):
    player.run("dijkstra", triangle, 0, 1)
    assert player.seek(-5) == 0
    assert player.seek(999) == player.trace.last_index

    player.seek(3)
    once = (player.overlay.trace_tags(), player.overlay.active_edges())
    player.seek(3)
    assert (player.overlay.trace_tags(), player.overlay.active_edges()) == once


def test_seek_matches_stepping_to_the_same_index(player, triangle):
    player.run("dijkstra", triangle, 0, 1)
    for _ in range(4):
        player.step_forward()
    stepped = (player.overlay.trace_tags(), player.overlay.active_edges())
    player.seek(0)
    player.seek(4)
    assert (player.overlay.trace_tags(), player.overlay.active_edges()) == stepped


def test_final_projection_marks_path_and_keeps_start_goal(player, triangle):
    player.run("dijkstra", triangle, 0, 1)
    player.seek(player.trace.last_index)
    t = tags(player, triangle)
    assert t[0] is NodeTag.START
    assert t[1] is NodeTag.GOAL
    assert t[2] is NodeTag.PATH
    assert player.overlay.edge_tag((0, 2)) is EdgeTag.ACTIVE
    assert player.overlay.edge_tag((2, 1)) is EdgeTag.ACTIVE
    assert player.overlay.edge_tag((0, 1)) is EdgeTag.NONE


def test_mst_edges_are_projected_as_active(player, triangle):
    player.run("kruskal", triangle)
    player.seek(player.trace.last_index)
    assert player.overlay.active_edges() == {(0, 2), (2, 1)}


def test_failed_run_keeps_previous_trace(player, triangle):
    player.run("bfs", triangle, 0)
    player.step_forward()
    before = (player.trace, player.cursor, player.overlay.trace_tags())
    with pytest.raises(MissingGoal):
        player.run("dijkstra", triangle, 0, None)
    with pytest.raises(UnknownAlgorithm):
        player.run("nope", triangle, 0)
    assert (player.trace, player.cursor, player.overlay.trace_tags()) == before


def test_play_auto_advances_and_cancels_itself_at_the_end(player, clock, path3):
    player.run("bfs", path3, 0)
    player.play()
    assert player.is_playing
    assert player.state is StepperState.PLAYING

    clock.advance(100)
    player.scheduler.tick()
    assert player.cursor == 1

    clock.advance(100 * 50)
    player.scheduler.tick()
    assert player.cursor == player.trace.last_index
    assert not player.is_playing
    assert player.state is StepperState.FINISHED
    assert player.scheduler.pending() == []


def test_pause_is_idempotent_and_stops_timer(player, clock, path3):
    player.pause()
    player.run("bfs", path3, 0)
    player.play()
    player.pause()
    player.pause()
    clock.advance(1000)
    player.scheduler.tick()
    assert player.cursor == 0
    assert player.state is StepperState.PAUSED


def test_set_interval_while_playing_keeps_cursor(player, clock, path3):
    player.run("bfs", path3, 0)
    player.play()
    clock.advance(100)
    player.scheduler.tick()
    assert player.cursor == 1

    player.set_interval(400)
    assert player.cursor == 1
    assert player.is_playing
    clock.advance(300)
    player.scheduler.tick()
    assert player.cursor == 1
    clock.advance(100)
    player.scheduler.tick()
    assert player.cursor == 2


def test_set_interval_is_clamped_to_minimum(player):
    player.set_interval(1)
    assert player.interval_ms == player.min_interval_ms


def test_run_while_playing_pauses_first(player, clock, path3):
    player.run("bfs", path3, 0)
    player.play()
    player.run("dfs", path3, 0)
    assert not player.is_playing
    clock.advance(1000)
    player.scheduler.tick()
    assert player.cursor == 0


def test_play_without_trace_reruns_last_algorithm(player, path3):
    with pytest.raises(UnknownAlgorithm):
        player.play()
    player.run("bfs", path3, 0)
    player.reset()
    assert player.trace is None
    player.play()
    assert player.trace.algorithm == "bfs"
    assert player.is_playing


def test_play_reruns_from_the_current_start_and_goal(player, triangle):
    player.run("dijkstra", triangle, 0, 1)
    player.reset()
    triangle.set_start(2)
    triangle.set_goal(0)
    player.play()
    assert (player.trace.start, player.trace.goal) == (2, 0)
    assert player.trace.steps[1].current == 2
    assert player.trace.final.path == (2, 0)


def test_play_after_the_graph_is_replaced_uses_the_new_ids(player, path3):
    player.run("bfs", path3, 0)
    player.reset()
    path3.load({
        "nodes": [{"id": 4}, {"id": 5}],
        "edges": [{"from": 4, "to": 5, "weight": 1}],
        "start": 4,
    })
    player.play()
    assert player.trace.start == 4
    assert player.trace.final.visited == frozenset({4, 5})


def test_reset_clears_trace_tags_only(player, path3):
    player.run("bfs", path3, 0)
    player.overlay.toggle_selected(2)
    player.seek(player.trace.last_index)
    player.reset()
    assert player.state is StepperState.IDLE
    assert player.overlay.trace_tags() == {}
    assert player.overlay.selected == {2}
    assert player.current_step is None


def test_metrics_summarise_the_trace(player, triangle):
    trace = player.run("dijkstra", triangle, 0, 1)
    m = trace.metrics(triangle)
    assert m.total_steps == len(trace)
    assert m.path_found is True
    assert m.path_length == 2
    assert m.path_cost == 2
    assert m.nodes_visited == 3


def test_metrics_are_fixed_when_the_trace_is_generated(player, triangle):
    player.run("dijkstra", triangle, 0, 1)
    assert player.metrics.path_cost == 2
    triangle.set_weight(0, 2, 9)
    triangle.remove_edge(2, 1)
    assert player.to_dict()["metrics"]["path_cost"] == 2
    player.reset()
    assert player.to_dict()["metrics"] is None


def test_mst_tree_weight_survives_later_edits(player, triangle):
    player.run("kruskal", triangle)
    assert player.metrics.tree_weight == 2
    triangle.set_weight(0, 2, 7)
    assert player.to_dict()["metrics"]["tree_weight"] == 2


def test_to_dict_exposes_current_step(player):
    g = build([(0, 1, 1)], start=0)
    player.run("bfs", g, 0)
    data = player.to_dict()
    assert data["algorithm"] == "bfs"
    assert data["step"]["description"] == "Starting BFS from node 0"
    assert data["metrics"]["algo_label"] == "Breadth-First Search"
