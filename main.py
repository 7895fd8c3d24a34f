"""
main.py — Graph Algorithm Visualizer JSON API
===============================================
The web server that drives the visualizer.  It renders nothing: every
route reads or mutates the per-user Session and answers with JSON.

Routes:
  GET    /api/state               – graph view, tags, playback & history status
  POST   /api/nodes               – add a node               {x, y, label?}
  PATCH  /api/nodes/<id>          – rename and/or move       {label?, x?, y?}
  DELETE /api/nodes/<id>          – delete node (cascades to edges)
  POST   /api/edges               – add an edge              {from, to, weight?}
  PATCH  /api/edges               – change weight            {from, to, weight}
  DELETE /api/edges               – delete an edge           {from, to}
  POST   /api/graph/start         – choose start node        {node: id|null}
  POST   /api/graph/goal          – choose goal node         {node: id|null}
  POST   /api/graph/directed      – toggle directedness      {directed}
  POST   /api/graph/clear         – empty the canvas
  POST   /api/graph/generate      – random graph             {num_nodes, edge_probability, …}
  POST   /api/graph/import        – load an exchange document
  GET    /api/graph/export        – the exchange document
  GET    /api/graph/search?q=     – id / label search (highlights hits)
  POST   /api/graph/select        – toggle multi-select      {node}
  POST   /api/history/undo        – undo last edit
  POST   /api/history/redo        – redo
  GET    /api/algorithms          – registry cards
  POST   /api/run                 – generate a trace         {algorithm}
  POST   /api/step/next           – advance one step
  POST   /api/step/prev           – rewind one step
  POST   /api/step/goto           – jump to step N           {index}
  POST   /api/step/play           – start auto-play          {interval_ms?}
  POST   /api/step/pause          – stop auto-play
  POST   /api/step/speed          – change interval          {interval_ms} or {preset}
  POST   /api/reset               – discard the trace

State management:
  The Flask session cookie only carries a random session key.  The
  Session objects themselves live in an in-memory registry on the app
  (app.extensions["visualizer"]), one per browser.  Auto-play timers are
  ticked at the start of every request, so a client polling /api/state
  sees playback advance.

Errors:
  GraphError / AlgorithmError / ApiError become {"error": kind,
  "message": text} with status 400 (404 for unknown node or edge).
"""

import logging
import secrets
from typing import Any, Optional

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from algorithms import AlgorithmError, list_algorithms
from config import Settings
from engine import SPEED_PRESETS
from engine import Session as UserSession
from engine.scheduler import Clock
from graph import GraphError, UnknownEdge, UnknownNode
from logging_config import setup_logging

logger = logging.getLogger(__name__)

EXTENSION_KEY = "visualizer"


# ---------------------------------------------------------------------------
# Request-level errors
# ---------------------------------------------------------------------------
class ApiError(Exception):
    """Malformed request body (missing field, wrong type)."""

    kind = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_viz() -> UserSession:
    """The caller's Session, created on first use."""
    ext = current_app.extensions[EXTENSION_KEY]
    registry = ext["sessions"]
    sid = session.get("sid")
    if sid is None or sid not in registry:
        sid = secrets.token_hex(16)
        session["sid"] = sid
        registry[sid] = UserSession(ext["settings"], clock=ext["clock"])
        logger.info("new visualizer session %s…", sid[:8])
    return registry[sid]


def body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ApiError("Request body must be a JSON object")
    return data


def int_field(data: dict, name: str, default: Any = ...) -> Optional[int]:
    if name not in data:
        if default is ...:
            raise ApiError(f"Missing field '{name}'")
        return default
    value = data[name]
    if value is None and default is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ApiError(f"Field '{name}' must be an integer")
    return value


def number_field(data: dict, name: str, default: float) -> float:
    value = data.get(name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ApiError(f"Field '{name}' must be a number")
    return float(value)


def state_response(viz: UserSession, status: int = 200, **extra):
    payload = dict(extra)
    payload["state"] = viz.view()
    return jsonify(payload), status


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> Flask:
    settings = settings or Settings.from_env()
    if not settings.testing:
        setup_logging(settings.log_level_value, settings.log_file)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["TESTING"] = settings.testing
    app.extensions[EXTENSION_KEY] = {
        "settings": settings,
        "clock":    clock,
        "sessions": {},
    }

    register_error_handlers(app)
    register_routes(app)
    logger.info("visualizer app created")
    return app


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(GraphError)
    def handle_graph_error(exc: GraphError):
        status = 404 if isinstance(exc, (UnknownNode, UnknownEdge)) else 400
        logger.warning("rejected %s %s: %s", request.method, request.path, exc.message)
        return jsonify(exc.to_dict()), status

    @app.errorhandler(AlgorithmError)
    def handle_algorithm_error(exc: AlgorithmError):
        logger.info("run refused: %s", exc.message)
        return jsonify(exc.to_dict()), 400

    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        logger.warning("bad request %s %s: %s", request.method, request.path, exc.message)
        return jsonify(exc.to_dict()), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.name.lower().replace(" ", "_"), "message": exc.description}), exc.code


def register_routes(app: Flask) -> None:

    @app.before_request
    def tick_playback():
        if request.path.startswith("/api/"):
            get_viz().tick()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @app.route("/api/state", methods=["GET"])
    def api_state():
        return jsonify(get_viz().view())

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    @app.route("/api/nodes", methods=["POST"])
    def api_add_node():
        data = body()
        viz = get_viz()
        label = data.get("label")
        node = viz.graph.add_node(
            number_field(data, "x", 0.0),
            number_field(data, "y", 0.0),
            None if label is None else str(label),
        )
        return state_response(viz, 201, node=node.to_dict())

    @app.route("/api/nodes/<int:node_id>", methods=["PATCH"])
    def api_update_node(node_id: int):
        data = body()
        viz = get_viz()
        if "label" not in data and "x" not in data and "y" not in data:
            raise ApiError("Nothing to update: send 'label' and/or 'x', 'y'")
        node = viz.graph.get_node(node_id)
        if node is None:
            raise UnknownNode(f"No node with id {node_id}", node=node_id)
        moved = "x" in data or "y" in data
        node = viz.graph.update_node(
            node_id,
            label=str(data["label"]) if "label" in data else None,
            x=number_field(data, "x", node.x) if moved else None,
            y=number_field(data, "y", node.y) if moved else None,
        )
        return state_response(viz, node=node.to_dict())

    @app.route("/api/nodes/<int:node_id>", methods=["DELETE"])
    def api_delete_node(node_id: int):
        viz = get_viz()
        viz.graph.remove_node(node_id)
        return state_response(viz)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------
    @app.route("/api/edges", methods=["POST"])
    def api_add_edge():
        data = body()
        viz = get_viz()
        edge = viz.graph.add_edge(
            int_field(data, "from"), int_field(data, "to"), data.get("weight", 1),
        )
        return state_response(viz, 201, edge=edge.to_dict())

    @app.route("/api/edges", methods=["PATCH"])
    def api_set_weight():
        data = body()
        viz = get_viz()
        if "weight" not in data:
            raise ApiError("Missing field 'weight'")
        edge = viz.graph.set_weight(int_field(data, "from"), int_field(data, "to"), data["weight"])
        return state_response(viz, edge=edge.to_dict())

    @app.route("/api/edges", methods=["DELETE"])
    def api_delete_edge():
        data = body()
        viz = get_viz()
        viz.graph.remove_edge(int_field(data, "from"), int_field(data, "to"))
        return state_response(viz)

    # ------------------------------------------------------------------
    # Whole-graph operations
    # ------------------------------------------------------------------
    @app.route("/api/graph/start", methods=["POST"])
    def api_set_start():
        viz = get_viz()
        viz.graph.set_start(int_field(body(), "node", None))
        return state_response(viz)

    @app.route("/api/graph/goal", methods=["POST"])
    def api_set_goal():
        viz = get_viz()
        viz.graph.set_goal(int_field(body(), "node", None))
        return state_response(viz)

    @app.route("/api/graph/directed", methods=["POST"])
    def api_set_directed():
        data = body()
        viz = get_viz()
        if not isinstance(data.get("directed"), bool):
            raise ApiError("Field 'directed' must be true or false")
        viz.graph.set_directed(data["directed"])
        return state_response(viz)

    @app.route("/api/graph/clear", methods=["POST"])
    def api_clear():
        viz = get_viz()
        viz.clear()
        return state_response(viz)

    @app.route("/api/graph/generate", methods=["POST"])
    def api_graph_generate():
        data = body()
        viz = get_viz()
        viz.generate(
            num_nodes=int_field(data, "num_nodes", 8),
            edge_probability=number_field(data, "edge_probability", 0.3),
            random_weights=bool(data.get("random_weights", True)),
            seed=int_field(data, "seed", None),
        )
        return state_response(viz)

    @app.route("/api/graph/import", methods=["POST"])
    def api_graph_import():
        viz = get_viz()
        viz.load(body())
        return state_response(viz)

    @app.route("/api/graph/export", methods=["GET"])
    def api_graph_export():
        return jsonify(get_viz().graph.to_dict())

    @app.route("/api/graph/search", methods=["GET"])
    def api_graph_search():
        viz = get_viz()
        hits = viz.search(request.args.get("q", ""))
        return jsonify({
            "results": [viz.graph.nodes[nid].to_dict() for nid in hits],
        })

    @app.route("/api/graph/select", methods=["POST"])
    def api_graph_select():
        viz = get_viz()
        selected = viz.select(int_field(body(), "node"))
        return state_response(viz, selected=selected)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    @app.route("/api/history/undo", methods=["POST"])
    def api_undo():
        viz = get_viz()
        return state_response(viz, moved=viz.undo())

    @app.route("/api/history/redo", methods=["POST"])
    def api_redo():
        viz = get_viz()
        return state_response(viz, moved=viz.redo())

    # ------------------------------------------------------------------
    # Algorithms & playback
    # ------------------------------------------------------------------
    @app.route("/api/algorithms", methods=["GET"])
    def api_algorithms():
        return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})

    @app.route("/api/run", methods=["POST"])
    def api_run():
        data = body()
        viz = get_viz()
        algorithm = data.get("algorithm")
        if not isinstance(algorithm, str):
            raise ApiError("Field 'algorithm' must be a string")
        viz.run(algorithm)
        return state_response(viz)

    @app.route("/api/step/next", methods=["POST"])
    def api_step_next():
        viz = get_viz()
        return state_response(viz, moved=viz.player.step_forward())

    @app.route("/api/step/prev", methods=["POST"])
    def api_step_prev():
        viz = get_viz()
        return state_response(viz, moved=viz.player.step_backward())

    @app.route("/api/step/goto", methods=["POST"])
    def api_step_goto():
        viz = get_viz()
        viz.player.seek(int_field(body(), "index"))
        return state_response(viz)

    @app.route("/api/step/play", methods=["POST"])
    def api_step_play():
        viz = get_viz()
        viz.player.play(int_field(body(), "interval_ms", None))
        return state_response(viz)

    @app.route("/api/step/pause", methods=["POST"])
    def api_step_pause():
        viz = get_viz()
        viz.player.pause()
        return state_response(viz)

    @app.route("/api/step/speed", methods=["POST"])
    def api_step_speed():
        data = body()
        viz = get_viz()
        if "preset" in data:
            if data["preset"] not in SPEED_PRESETS:
                raise ApiError(f"Unknown preset; choose one of {', '.join(SPEED_PRESETS)}")
            viz.player.set_speed(data["preset"])
        else:
            viz.player.set_interval(int_field(data, "interval_ms"))
        return state_response(viz)

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        viz = get_viz()
        viz.player.reset()
        return state_response(viz)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app = create_app(Settings.from_env())
    print("=" * 60)
    print("  Graph Algorithm Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000/api/state")
    print("=" * 60)
    app.run(debug=False, host="0.0.0.0", port=5000)
