"""
main.py — Algorithm Replay Flask App
======================================
JSON host around the replay engine.  Each browser session owns a
PlaybackController, an AutoplayScheduler on a PollingClock and a Recorder,
plus the session's working structures.

Routes:
  GET  /api/algorithms               – registry cards
  POST /api/run                      – run an algorithm, load its Trace
  GET  /api/state                    – current playback view (polls autoplay)
  POST /api/playback/<command>       – play | pause | toggle | next | prev |
                                       seek | speed | reset | clear
  GET  /api/step/<i>                 – one Step of the loaded Trace
  GET  /api/export                   – last run (params, metrics, steps)

State management:
  The Flask session holds only a random id.  Everything else lives in an
  in-memory SessionRegistry keyed by that id:
    • controller / scheduler / clock
    • recorder        – last run + metrics
    • workspaces      – bst, avl (TreeSnapshot); stack, queue, array, list
                        (items); hash (keys in insertion order)
    • capacities      – capacity / table size after the last run
  Sessions idle for `session_ttl_s`, or beyond `max_sessions`, are
  dropped (cachetools.TTLCache) and their autoplay cancelled.
  Workspaces are replaced by the final snapshot of each successful
  mutating run, so "insert 5, then insert 7" builds on the same tree.

Autoplay:
  There is no background thread.  Every GET /api/state fires the ticks that
  fell due since the previous poll, so a client polling at any rate sees
  the same steps as one polling at the tick rate.
"""

import secrets
import time
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache
from flask import Flask, jsonify, request, session

from algorithms import get_algorithm, list_algorithms
from algorithms.errors import InvalidInputError, require_int
from algorithms.step import HashPayload, LinearPayload, TreePayload
from config import get_logger, load_settings
from engine import AutoplayScheduler, PlaybackController, PollingClock, Recorder
from structures import Graph, TreeSnapshot


log = get_logger("algoviz.host")

WORKSPACES = ("bst", "avl", "stack", "queue", "array", "list", "hash")
_SESSION_KEY = "algoviz_sid"


# ---------------------------------------------------------------------------
# Per-session state
# ---------------------------------------------------------------------------
class SessionEntry:
    """
    Attributes:
        controller : PlaybackController for this session.
        clock      : PollingClock the scheduler arms ticks on.
        scheduler  : AutoplayScheduler driving the controller.
        recorder   : Recorder holding the last run.
        workspaces : {"bst": TreeSnapshot | None, "stack": [..] | None, …}
        capacities : {"stack": int | None, …}; None = settings default.
    """

    def __init__(self, time_fn: Callable[[], float] = time.monotonic):
        self.controller = PlaybackController()
        self.clock      = PollingClock(time_fn)
        self.scheduler  = AutoplayScheduler(self.controller, self.clock)
        self.recorder   = Recorder()
        self.workspaces: Dict[str, Any]           = {name: None for name in WORKSPACES}
        self.capacities: Dict[str, Optional[int]] = {name: None for name in WORKSPACES}

    def poll(self) -> int:
        """Fire autoplay ticks that are due; returns how many fired."""
        return self.clock.run_due()

    def close(self) -> None:
        """Cancel any armed autoplay tick; the entry is being dropped."""
        self.scheduler.close()

    def workspace_dict(self) -> Dict[str, Any]:
        out = {}
        for name, value in self.workspaces.items():
            if isinstance(value, TreeSnapshot):
                out[name] = value.to_dict()
            elif value is None:
                out[name] = None
            else:
                out[name] = {"items": list(value), "capacity": self.capacities[name]}
        return out


class SessionCache(TTLCache):
    """TTLCache that stops a session's autoplay when the session leaves it."""

    def popitem(self):
        sid, entry = super().popitem()
        entry.close()
        log.debug("Evicted session %s (registry full)", sid[:8])
        return sid, entry

    def expire(self, time=None):
        expired = super().expire(time)
        for sid, entry in expired or ():
            entry.close()
            log.debug("Expired idle session %s", sid[:8])
        return expired


class SessionRegistry:
    """
    {session id: SessionEntry} with an idle timeout and a size bound.

    Every `get` renews the session's timeout.  A session idle for longer
    than `ttl` seconds, or the least recently used one once `maxsize` are
    held, is dropped and its scheduler closed; its next request starts
    from a fresh entry.
    """

    def __init__(
        self,
        time_fn: Callable[[], float] = time.monotonic,
        ttl: Optional[float] = None,
        maxsize: Optional[int] = None,
    ):
        settings = load_settings()
        self._time_fn = time_fn
        self._entries = SessionCache(
            maxsize=settings.max_sessions if maxsize is None else maxsize,
            ttl=settings.session_ttl_s if ttl is None else ttl,
            timer=time_fn,
        )

    def get(self, sid: str) -> SessionEntry:
        entry = self._entries.get(sid)
        if entry is None:
            entry = SessionEntry(self._time_fn)
            log.debug("New session %s", sid[:8])
        self._entries[sid] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sid: str) -> bool:
        return sid in self._entries


# ---------------------------------------------------------------------------
# Request → generator params
# ---------------------------------------------------------------------------
def graph_from_json(raw: Any, directed: bool = False) -> Graph:
    """
    Accepted shapes:
        None                                   → Graph.sample()
        "A: B(3) C(7)\\nB: C(1)"               → adjacency-list text
        {"nodes": [...], "edges": [...]}       → Graph.to_dict() form
        {"edges": [["A", "B", 3], ...]}        → (source, target[, weight]) rows
    """
    if raw is None:
        return Graph.sample()
    try:
        if isinstance(raw, str):
            return Graph.from_adjacency_list(raw, directed=directed)
        if isinstance(raw, dict) and "nodes" in raw:
            return Graph.from_dict(raw)
        if isinstance(raw, dict) and "edges" in raw:
            rows = []
            for row in raw["edges"]:
                if isinstance(row, dict):
                    rows.append((row["source"], row["target"], row.get("weight", 1)))
                elif len(row) in (2, 3):
                    rows.append((row[0], row[1], row[2] if len(row) == 3 else 1))
                else:
                    raise ValueError(f"edge row {row!r} must be [source, target] or [source, target, weight]")
            return Graph.from_edge_list(rows, nodes=raw.get("node_ids"), directed=raw.get("directed", directed))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Bad graph: {exc}") from exc
    raise InvalidInputError("graph must be adjacency text, a {nodes, edges} object or an {edges} list")


def tree_from_json(raw: Any) -> Any:
    """A serialised TreeSnapshot dict, or anything as_working_tree accepts."""
    if isinstance(raw, dict):
        try:
            return TreeSnapshot.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInputError(f"Bad tree: {exc}") from exc
    return raw


def build_params(info, body: Dict[str, Any], entry: SessionEntry) -> Dict[str, Any]:
    """Pick the params `info.fn` accepts from the body, falling back to the session workspace."""
    params: Dict[str, Any] = {}
    ws = info.workspace
    for name in info.params:
        if name == "graph":
            params["graph"] = graph_from_json(body.get("graph"), bool(body.get("directed", False)))
        elif name == "tree":
            params["tree"] = tree_from_json(body["tree"]) if "tree" in body else entry.workspaces[ws]
        elif name == "items":
            if "items" in body:
                params["items"] = body["items"]
            elif entry.workspaces[ws] is not None:
                params["items"] = list(entry.workspaces[ws])
        elif name == "capacity":
            if body.get("capacity") is not None:
                params["capacity"] = body["capacity"]
            elif entry.capacities[ws] is not None:
                params["capacity"] = entry.capacities[ws]
        elif body.get(name) is not None:
            params[name] = body[name]
    return params


def write_back(info, entry: SessionEntry) -> None:
    """Store the final snapshot of a successful mutating run in its workspace."""
    final = entry.recorder.trace.final
    if info.workspace is None or "mutating" not in info.tags or not final.is_complete:
        return
    snap = final.snapshot
    if isinstance(snap, TreePayload):
        entry.workspaces[info.workspace] = snap.root
    elif isinstance(snap, LinearPayload):
        entry.workspaces[info.workspace] = list(snap.items)
        entry.capacities[info.workspace] = snap.capacity
    elif isinstance(snap, HashPayload):
        entry.workspaces[info.workspace] = list(snap.keys)
        entry.capacities[info.workspace] = snap.table_size


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(time_fn: Callable[[], float] = time.monotonic) -> Flask:
    settings = load_settings()

    app = Flask(__name__)
    app.secret_key = settings.secret_key or secrets.token_hex(32)
    registry = SessionRegistry(time_fn)
    app.extensions["algoviz"] = registry

    def current_entry() -> SessionEntry:
        sid = session.get(_SESSION_KEY)
        if not sid:
            sid = session[_SESSION_KEY] = secrets.token_hex(16)
        return registry.get(sid)

    def state_payload(entry: SessionEntry) -> Dict[str, Any]:
        data = entry.controller.view.to_dict()
        metrics = entry.recorder.metrics
        data["metrics"] = asdict(metrics) if metrics else None
        return data

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------
    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(exc):
        log.warning("Rejected input on %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400

    # ------------------------------------------------------------------
    # API: Registry
    # ------------------------------------------------------------------
    @app.route("/api/algorithms", methods=["GET"])
    def api_algorithms():
        family = request.args.get("family")
        algos = [a for a in list_algorithms() if family is None or a.family == family]
        return jsonify({"algorithms": [a.to_dict() for a in algos]})

    # ------------------------------------------------------------------
    # API: Run
    # ------------------------------------------------------------------
    @app.route("/api/run", methods=["POST"])
    def api_run():
        body = request.get_json(silent=True) or {}
        algo_key = body.get("algo_key", "")
        info = get_algorithm(algo_key)
        if info is None:
            return jsonify({"error": f"Unknown algorithm: {algo_key}"}), 404

        entry = current_entry()
        params = build_params(info, body, entry)
        trace = entry.recorder.run(algo_key, **params)
        entry.controller.load(trace)
        write_back(info, entry)

        data = state_payload(entry)
        data["workspaces"] = entry.workspace_dict()
        return jsonify(data)

    # ------------------------------------------------------------------
    # API: State
    # ------------------------------------------------------------------
    @app.route("/api/state", methods=["GET"])
    def api_state():
        entry = current_entry()
        entry.poll()
        data = state_payload(entry)
        data["workspaces"] = entry.workspace_dict()
        return jsonify(data)

    @app.route("/api/step/<int:index>", methods=["GET"])
    def api_step(index: int):
        trace = current_entry().controller.view.trace
        if trace is None or index >= len(trace):
            return jsonify({"error": f"No step {index}"}), 404
        return jsonify(trace[index].to_dict())

    @app.route("/api/export", methods=["GET"])
    def api_export():
        return jsonify(current_entry().recorder.export())

    # ------------------------------------------------------------------
    # API: Playback
    # ------------------------------------------------------------------
    @app.route("/api/playback/<command>", methods=["POST"])
    def api_playback(command: str):
        entry = current_entry()
        ctl = entry.controller
        body = request.get_json(silent=True) or {}

        entry.poll()
        if command == "play":
            ctl.play()
        elif command == "pause":
            ctl.pause()
        elif command == "toggle":
            ctl.toggle_play()
        elif command == "next":
            ctl.step_forward()
        elif command == "prev":
            ctl.step_backward()
        elif command == "seek":
            ctl.seek(require_int(body.get("index"), "index"))
        elif command == "speed":
            try:
                ctl.set_speed(body.get("speed"))
            except ValueError as exc:
                raise InvalidInputError(str(exc)) from exc
        elif command == "reset":
            ctl.reset()
        elif command == "clear":
            ctl.clear()
        else:
            return jsonify({"error": f"Unknown playback command: {command}"}), 404
        return jsonify(state_payload(entry))

    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app = create_app()
    log.info("Algorithm replay server on http://localhost:5000 (%s)", load_settings().env)
    app.run(debug=load_settings().env == "dev", host="0.0.0.0", port=5000)
