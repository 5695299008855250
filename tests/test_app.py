"""
test_app.py

HTTP contract tests for the Flask host, through Flask's test client.
Autoplay is driven by a fake clock, so polling is deterministic.
"""

import pytest

from algorithms import REGISTRY
from config import load_settings
from main import SessionRegistry, create_app
from structures.tree import in_order
from structures import TreeSnapshot


class FakeTime:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def app(fake_time):
    app = create_app(time_fn=fake_time)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def run(client, algo_key, **body):
    return client.post("/api/run", json={"algo_key": algo_key, **body})


# =============================================================================
# Registry & run
# =============================================================================

class TestRun:

    def test_algorithms(self, client):
        resp = client.get("/api/algorithms")
        assert resp.status_code == 200
        assert len(resp.get_json()["algorithms"]) == len(REGISTRY)

    def test_algorithms_by_family(self, client):
        algos = client.get("/api/algorithms?family=linear").get_json()["algorithms"]
        assert {a["family"] for a in algos} == {"linear"}
        assert "stack-push" in {a["key"] for a in algos}

    def test_run_loads_trace(self, client):
        resp = run(client, "sorting-bubble", values=[3, 1, 2])
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["context_tag"] == "sorting-bubble"
        assert data["current_index"] == 0
        assert data["is_playing"] is False
        assert data["step"]["kind"] == "array"
        assert data["metrics"]["swaps"] == 2
        assert data["total_steps"] == data["metrics"]["total_steps"]

    def test_unknown_algorithm(self, client):
        resp = run(client, "quantum-sort")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_invalid_input_is_400(self, client):
        resp = run(client, "bst-insert")
        assert resp.status_code == 400
        assert "value" in resp.get_json()["error"]

    def test_bad_values_are_400(self, client):
        assert run(client, "sorting-bubble", values="a, b").status_code == 400

    def test_rejected_run_keeps_previous_trace(self, client):
        run(client, "sorting-bubble", values=[2, 1])
        run(client, "search-binary", values=[3, 1], target=1)
        assert client.get("/api/state").get_json()["context_tag"] == "sorting-bubble"

    def test_graph_from_adjacency_text(self, client):
        resp = run(client, "dijkstra", graph="A: B(1)\nB: C(2)", start="A")
        assert resp.status_code == 200
        steps = client.get("/api/export").get_json()["steps"]
        assert steps[-1]["snapshot"]["distances"] == {"A": 0, "B": 1, "C": 3}

    def test_graph_from_edge_rows(self, client):
        resp = run(client, "graph-bfs", graph={"edges": [["A", "B"], ["B", "C", 2]]}, target="C")
        assert resp.status_code == 200
        steps = client.get("/api/export").get_json()["steps"]
        assert steps[-1]["snapshot"]["path"] == ["A", "B", "C"]

    def test_graph_defaults_to_sample(self, client):
        data = run(client, "mst-kruskal").get_json()
        assert data["step"]["snapshot"]["graph"]["nodes"][0]["id"] == "A"

    def test_bad_graph_is_400(self, client):
        assert run(client, "graph-dfs", graph={"edges": [["A"]]}).status_code == 400
        assert run(client, "graph-dfs", graph=42).status_code == 400

    @pytest.mark.parametrize("weight", ["heavy", None, "1e999", True])
    def test_non_numeric_edge_weight_is_400(self, client, weight):
        graph = {"nodes": [{"id": "A"}, {"id": "B"}], "edges": [{"source": "A", "target": "B", "weight": weight}]}
        resp = run(client, "dijkstra", graph=graph, start="A")
        assert resp.status_code == 400
        assert "weight" in resp.get_json()["error"]
        assert run(client, "graph-bfs", graph={"edges": [["A", "B", weight]]}).status_code == 400

    def test_numeric_string_weight_is_accepted(self, client):
        graph = {"nodes": [{"id": "A"}, {"id": "B"}], "edges": [{"source": "A", "target": "B", "weight": "2.5"}]}
        assert run(client, "dijkstra", graph=graph, start="A").status_code == 200
        steps = client.get("/api/export").get_json()["steps"]
        assert steps[-1]["snapshot"]["distances"] == {"A": 0, "B": 2.5}

    def test_empty_adjacency_node_is_400(self, client):
        assert run(client, "graph-bfs", graph="A: (3)").status_code == 400

    def test_unordered_tree_is_400(self, client):
        tree = {"value": 5, "left": {"value": 9}, "right": {"value": 1}}
        for key in ("bst-search", "bst-insert", "traversal-inorder", "avl-insert"):
            resp = run(client, key, tree=tree, value=4)
            assert resp.status_code == 400, key
            assert "order" in resp.get_json()["error"]

    def test_unbalanced_tree_is_400_for_avl(self, client):
        chain = {"value": 1, "right": {"value": 2, "right": {"value": 3}}}
        resp = run(client, "avl-insert", tree=chain, value=4)
        assert resp.status_code == 400
        assert "AVL" in resp.get_json()["error"]
        assert run(client, "bst-insert", tree=chain, value=4).status_code == 200

    def test_degenerate_tree_runs(self, client):
        values = list(range(499))
        resp = run(client, "bst-insert", tree=values, value=499)
        assert resp.status_code == 200
        assert resp.get_json()["metrics"]["completed"] is True
        data = run(client, "traversal-postorder").get_json()
        assert data["metrics"]["completed"] is True
        assert data["workspaces"]["bst"]["height"] == 500


# =============================================================================
# Workspaces
# =============================================================================

class TestWorkspaces:

    def test_bst_builds_up_across_runs(self, client):
        for v in (50, 30, 70):
            assert run(client, "bst-insert", value=v).status_code == 200
        data = run(client, "bst-search", value=30).get_json()
        root = TreeSnapshot.from_dict(data["workspaces"]["bst"])
        assert in_order(root) == [30, 50, 70]
        assert client.get("/api/export").get_json()["metrics"]["completed"] is True

    def test_avl_workspace_is_separate(self, client):
        for v in (10, 20, 30):
            run(client, "avl-insert", value=v)
        ws = client.get("/api/state").get_json()["workspaces"]
        assert ws["avl"]["value"] == 20
        assert ws["bst"] is None

    def test_explicit_tree_overrides_workspace(self, client):
        run(client, "bst-insert", value=1)
        data = run(client, "traversal-inorder", tree=[5, 3, 8]).get_json()
        assert data["workspaces"]["bst"]["value"] == 1

    def test_stack_push_pop(self, client):
        run(client, "stack-push", value=1)
        run(client, "stack-push", value=2)
        data = run(client, "stack-pop").get_json()
        assert data["workspaces"]["stack"] == {"items": [1], "capacity": 10}

    def test_error_run_leaves_workspace(self, client):
        data = run(client, "queue-dequeue").get_json()
        assert data["metrics"]["error"] is True
        assert data["workspaces"]["queue"] is None

    def test_array_resize_carries_capacity(self, client):
        run(client, "array-resize", new_capacity=20)
        data = run(client, "array-insert", value=5).get_json()
        assert data["workspaces"]["array"]["capacity"] == 20
        assert data["workspaces"]["array"]["items"][-1] == 5

    def test_linked_list_builds_up(self, client):
        run(client, "list-insert", items=[], value=4)
        run(client, "list-insert", value=9)
        run(client, "list-insert", index=0, value=1)
        data = run(client, "list-delete", value=4).get_json()
        assert data["workspaces"]["list"]["items"] == [1, 9]
        assert run(client, "list-search", value=7).get_json()["metrics"]["error"] is True

    def test_hash_table_keeps_keys_and_size(self, client):
        run(client, "hash-insert", items=[], value=3, capacity=5)
        run(client, "hash-insert", value=8)
        data = run(client, "hash-search", value=8).get_json()
        assert data["workspaces"]["hash"] == {"items": [3, 8], "capacity": 5}
        assert data["metrics"]["completed"] is True
        final = client.get("/api/export").get_json()["steps"][-1]["snapshot"]
        assert final["found_at"] == [3, 1]

    def test_hash_bad_method_is_400(self, client):
        assert run(client, "hash-insert", value=1, method="cuckoo").status_code == 400

    def test_sessions_are_isolated(self, app):
        a, b = app.test_client(), app.test_client()
        run(a, "stack-push", value=1)
        assert b.get("/api/state").get_json()["workspaces"]["stack"] is None
        assert len(app.extensions["algoviz"]) == 2


# =============================================================================
# Playback
# =============================================================================

class TestPlayback:

    @pytest.fixture(autouse=True)
    def loaded(self, client):
        run(client, "sorting-bubble", values=[4, 3, 2, 1])

    def cmd(self, client, command, **body):
        return client.post(f"/api/playback/{command}", json=body)

    def test_next_prev(self, client):
        assert self.cmd(client, "next").get_json()["current_index"] == 1
        assert self.cmd(client, "next").get_json()["current_index"] == 2
        assert self.cmd(client, "prev").get_json()["current_index"] == 1

    def test_seek_clamps(self, client):
        data = self.cmd(client, "seek", index=10_000).get_json()
        assert data["current_index"] == data["total_steps"] - 1
        assert data["step"]["is_complete"] is True

    def test_seek_needs_number(self, client):
        assert self.cmd(client, "seek", index="x").status_code == 400

    def test_speed(self, client):
        assert self.cmd(client, "speed", speed=2).get_json()["speed"] == 2
        assert self.cmd(client, "speed", speed=3).status_code == 400

    def test_play_pause_toggle(self, client):
        assert self.cmd(client, "play").get_json()["is_playing"] is True
        assert self.cmd(client, "pause").get_json()["is_playing"] is False
        assert self.cmd(client, "toggle").get_json()["is_playing"] is True

    def test_reset_and_clear(self, client):
        self.cmd(client, "seek", index=3)
        assert self.cmd(client, "reset").get_json()["current_index"] == 0
        data = self.cmd(client, "clear").get_json()
        assert data["total_steps"] == 0
        assert data["step"] is None

    def test_unknown_command(self, client):
        assert self.cmd(client, "rewind").status_code == 404

    def test_autoplay_advances_on_poll(self, client, fake_time):
        self.cmd(client, "play")
        fake_time.now = 2.0
        data = client.get("/api/state").get_json()
        assert data["current_index"] == 2
        assert data["is_playing"] is True

    def test_autoplay_runs_to_end(self, client, fake_time):
        self.cmd(client, "speed", speed=4)
        self.cmd(client, "play")
        fake_time.now = 1000.0
        data = client.get("/api/state").get_json()
        assert data["current_index"] == data["total_steps"] - 1
        assert data["is_playing"] is False

    def test_step_by_index(self, client):
        data = client.get("/api/step/1").get_json()
        assert data["step_number"] == 1
        assert client.get("/api/step/9999").status_code == 404

    def test_step_without_trace(self, client):
        self.cmd(client, "clear")
        assert client.get("/api/step/0").status_code == 404


# =============================================================================
# Session registry
# =============================================================================

class TestSessionRegistry:

    def test_idle_session_expires_and_stops_autoplay(self, fake_time):
        registry = SessionRegistry(fake_time, ttl=60, maxsize=10)
        entry = registry.get("idle")
        entry.controller.load(entry.recorder.run("sorting-bubble", values=[3, 2, 1]))
        entry.controller.play()
        assert entry.scheduler.active

        fake_time.now = 61
        registry.get("busy")
        assert "idle" not in registry
        assert not entry.scheduler.active
        assert entry.clock.pending() == 0
        assert registry.get("idle") is not entry

    def test_get_renews_timeout(self, fake_time):
        registry = SessionRegistry(fake_time, ttl=60, maxsize=10)
        first = registry.get("s")
        fake_time.now = 50
        assert registry.get("s") is first
        fake_time.now = 100
        assert registry.get("s") is first
        fake_time.now = 161
        assert registry.get("s") is not first

    def test_size_bound_evicts_least_recently_used(self, fake_time):
        registry = SessionRegistry(fake_time, ttl=60, maxsize=2)
        a = registry.get("a")
        b = registry.get("b")
        registry.get("a")
        registry.get("c")
        assert len(registry) == 2
        assert "a" in registry and "c" in registry
        assert "b" not in registry
        assert registry.get("a") is a
        assert registry.get("b") is not b

    def test_http_session_forgotten_after_ttl(self, client, fake_time):
        run(client, "stack-push", value=1)
        fake_time.now = load_settings().session_ttl_s + 1
        assert client.get("/api/state").get_json()["workspaces"]["stack"] is None
