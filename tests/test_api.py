"""
Flask JSON API: editing, history, runs, playback and error mapping.
"""

import pytest

from config import Settings
from main import create_app


def make_triangle(client):
    for x in (0, 100, 200):
        client.post("/api/nodes", json={"x": x, "y": 0})
    client.post("/api/edges", json={"from": 0, "to": 1, "weight": 5})
    client.post("/api/edges", json={"from": 0, "to": 2, "weight": 1})
    client.post("/api/edges", json={"from": 2, "to": 1, "weight": 1})
    client.post("/api/graph/start", json={"node": 0})
    client.post("/api/graph/goal", json={"node": 1})


def test_empty_state(client):
    data = client.get("/api/state").get_json()
    assert data["nodes"] == []
    assert data["playback"]["state"] == "idle"
    assert data["history"] == {"can_undo": False, "can_redo": False, "depth": 1, "cursor": 0}


def test_add_node_and_edge(client):
    res = client.post("/api/nodes", json={"x": 10, "y": 20, "label": "A"})
    assert res.status_code == 201
    assert res.get_json()["node"] == {"id": 0, "label": "A", "x": 10.0, "y": 20.0}
    client.post("/api/nodes", json={"x": 30, "y": 40})
    res = client.post("/api/edges", json={"from": 0, "to": 1, "weight": 3})
    assert res.status_code == 201
    state = res.get_json()["state"]
    assert state["adjacency"] == {"0": [[1, 3]], "1": [[0, 3]]}
    assert state["stats"]["edges"] == 1


def test_duplicate_edge_is_a_400_with_kind(client):
    client.post("/api/nodes", json={})
    client.post("/api/nodes", json={})
    client.post("/api/edges", json={"from": 0, "to": 1})
    res = client.post("/api/edges", json={"from": 1, "to": 0})
    assert res.status_code == 400
    assert res.get_json()["error"] == "duplicate_edge"
    assert client.get("/api/state").get_json()["history"]["depth"] == 4


def test_unknown_node_is_a_404(client):
    res = client.delete("/api/nodes/42")
    assert res.status_code == 404
    assert res.get_json()["error"] == "unknown_node"
    res = client.patch("/api/edges", json={"from": 0, "to": 1, "weight": 2})
    assert res.status_code == 404
    assert res.get_json()["error"] == "unknown_edge"


def test_malformed_body_is_a_400(client):
    res = client.post("/api/edges", json={"from": "zero", "to": 1})
    assert res.status_code == 400
    assert res.get_json()["error"] == "bad_request"
    res = client.post("/api/edges", json={"from": 0, "to": 1, "weight": -2})
    assert res.status_code in (400, 404)


def test_invalid_weight(client):
    client.post("/api/nodes", json={})
    client.post("/api/nodes", json={})
    res = client.post("/api/edges", json={"from": 0, "to": 1, "weight": 0})
    assert res.status_code == 400
    assert res.get_json()["error"] == "invalid_weight"


def test_patch_node_renames_and_moves(client):
    client.post("/api/nodes", json={"x": 1, "y": 1})
    res = client.patch("/api/nodes/0", json={"label": "hub", "x": 50, "y": 60})
    assert res.get_json()["node"] == {"id": 0, "label": "hub", "x": 50.0, "y": 60.0}
    assert client.patch("/api/nodes/0", json={}).status_code == 400


def test_patch_with_label_and_position_is_one_undo_step(client):
    client.post("/api/nodes", json={"x": 1, "y": 1})
    client.patch("/api/nodes/0", json={"label": "hub", "x": 50})
    assert client.get("/api/state").get_json()["history"]["depth"] == 3
    node = client.post("/api/history/undo").get_json()["state"]["nodes"][0]
    assert node == {"id": 0, "label": "0", "x": 1.0, "y": 1.0, "tag": "none"}


def test_undo_redo(client):
    client.post("/api/nodes", json={})
    client.post("/api/nodes", json={})
    res = client.post("/api/history/undo")
    body = res.get_json()
    assert body["moved"] is True
    assert [n["id"] for n in body["state"]["nodes"]] == [0]
    body = client.post("/api/history/redo").get_json()
    assert [n["id"] for n in body["state"]["nodes"]] == [0, 1]
    assert client.post("/api/history/redo").get_json()["moved"] is False


def test_run_and_step_through_dijkstra(client):
    make_triangle(client)
    res = client.post("/api/run", json={"algorithm": "dijkstra"})
    assert res.status_code == 200
    playback = res.get_json()["state"]["playback"]
    assert playback["cursor"] == 0
    assert playback["state"] == "paused"
    total = playback["total_steps"]

    res = client.post("/api/step/goto", json={"index": total + 10})
    state = res.get_json()["state"]
    assert state["playback"]["cursor"] == total - 1
    assert state["playback"]["step"]["path"] == [0, 2, 1]
    assert state["playback"]["metrics"]["path_cost"] == 2
    tags = {n["id"]: n["tag"] for n in state["nodes"]}
    assert tags == {0: "start", 1: "goal", 2: "path"}
    active = {(e["from"], e["to"]) for e in state["edges"] if e["tag"] == "active"}
    assert active == {(0, 2), (2, 1)}

    moved = client.post("/api/step/next").get_json()["moved"]
    assert moved is False
    moved = client.post("/api/step/prev").get_json()["moved"]
    assert moved is True


def test_run_without_goal_is_refused(client):
    client.post("/api/nodes", json={})
    client.post("/api/graph/start", json={"node": 0})
    res = client.post("/api/run", json={"algorithm": "astar"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "missing_goal"
    res = client.post("/api/run", json={"algorithm": "bogus"})
    assert res.get_json()["error"] == "unknown_algorithm"


def test_play_advances_when_clock_moves(client, clock):
    make_triangle(client)
    client.post("/api/run", json={"algorithm": "bfs"})
    res = client.post("/api/step/play", json={"interval_ms": 100})
    assert res.get_json()["state"]["playback"]["state"] == "playing"
    clock.advance(250)
    playback = client.get("/api/state").get_json()["playback"]
    assert playback["cursor"] == 2

    client.post("/api/step/speed", json={"preset": "slow"})
    playback = client.get("/api/state").get_json()["playback"]
    assert playback["interval_ms"] == 1000
    assert playback["cursor"] == 2

    client.post("/api/step/pause")
    clock.advance(10_000)
    playback = client.get("/api/state").get_json()["playback"]
    assert playback["cursor"] == 2
    assert playback["state"] == "paused"


def test_unknown_speed_preset(client):
    res = client.post("/api/step/speed", json={"preset": "warp"})
    assert res.status_code == 400


def test_generate_caps_node_count(client):
    res = client.post("/api/graph/generate", json={"num_nodes": 99, "edge_probability": 0.5, "seed": 1})
    state = res.get_json()["state"]
    assert len(state["nodes"]) == 20
    assert state["start"] == 0
    assert state["goal"] == 19


def test_export_import_round_trip(client, app):
    make_triangle(client)
    doc = client.get("/api/graph/export").get_json()
    other = app.test_client()
    res = other.post("/api/graph/import", json=doc)
    assert res.status_code == 200
    assert other.get("/api/graph/export").get_json() == doc


def test_import_rejects_bad_document(client):
    res = client.post("/api/graph/import", json={"nodes": [{"id": 0}], "edges": [{"from": 0, "to": 3}]})
    assert res.status_code == 400
    assert res.get_json()["error"] == "invalid_document"


@pytest.mark.parametrize("edge", [
    {"from": [0], "to": 1},
    {"from": True, "to": 0},
    {"from": 0, "to": 1.0},
])
def test_import_rejects_non_integer_endpoints(client, edge):
    doc = {"nodes": [{"id": 0}, {"id": 1}], "edges": [edge]}
    res = client.post("/api/graph/import", json=doc)
    assert res.status_code == 400
    assert res.get_json()["error"] == "invalid_document"
    assert client.get("/api/state").get_json()["nodes"] == []


def test_play_after_regenerating_starts_from_the_new_start(client):
    client.post("/api/graph/generate", json={"num_nodes": 5, "seed": 1})
    client.post("/api/run", json={"algorithm": "bfs"})
    state = client.post("/api/graph/generate", json={"num_nodes": 5, "seed": 2}).get_json()["state"]
    assert state["start"] != 0
    res = client.post("/api/step/play")
    assert res.status_code == 200
    playback = res.get_json()["state"]["playback"]
    assert playback["state"] == "playing"
    assert playback["metrics"]["start"] == state["start"]


def test_search_and_select_tags(client):
    client.post("/api/nodes", json={"label": "alpha"})
    client.post("/api/nodes", json={"label": "beta"})
    client.post("/api/nodes", json={"label": "gamma"})
    results = client.get("/api/graph/search?q=ALP").get_json()["results"]
    assert [r["id"] for r in results] == [0]
    res = client.post("/api/graph/select", json={"node": 1})
    body = res.get_json()
    assert body["selected"] is True
    tags = {n["id"]: n["tag"] for n in body["state"]["nodes"]}
    assert tags == {0: "search-hit", 1: "selected", 2: "none"}


def test_directed_toggle_and_clear(client):
    make_triangle(client)
    state = client.post("/api/graph/directed", json={"directed": True}).get_json()["state"]
    assert state["directed"] is True
    assert state["adjacency"]["1"] == []
    state = client.post("/api/graph/clear").get_json()["state"]
    assert state["nodes"] == [] and state["edges"] == []
    assert state["history"]["can_undo"] is True


def test_algorithms_listing(client):
    algos = client.get("/api/algorithms").get_json()["algorithms"]
    by_key = {a["key"]: a for a in algos}
    assert by_key["dijkstra"]["requires_goal"] is True
    assert by_key["components"]["requires_start"] is False
    assert by_key["bfs"]["pseudocode"]


def test_reset_discards_trace(client):
    make_triangle(client)
    client.post("/api/run", json={"algorithm": "bfs"})
    state = client.post("/api/reset").get_json()["state"]
    assert state["playback"]["state"] == "idle"
    assert state["playback"]["step"] is None


def test_sessions_are_isolated(app):
    first, second = app.test_client(), app.test_client()
    first.post("/api/nodes", json={})
    assert second.get("/api/state").get_json()["nodes"] == []


def test_settings_from_env():
    s = Settings.from_env({"GRAPHVIZ_HISTORY_CAPACITY": "10", "GRAPHVIZ_LOG_LEVEL": "debug"})
    assert s.history_capacity == 10
    assert s.log_level == "DEBUG"
    with pytest.raises(ValueError):
        Settings.from_env({"GRAPHVIZ_INTERVAL_MS": "fast"})


def test_history_capacity_setting_is_used(clock):
    app = create_app(Settings(secret_key="k", testing=True, history_capacity=3), clock=clock)
    client = app.test_client()
    for _ in range(5):
        client.post("/api/nodes", json={})
    assert client.get("/api/state").get_json()["history"]["depth"] == 3
