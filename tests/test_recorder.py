"""
test_recorder.py

Tests for the Recorder (run-to-completion, metrics, export) and the
algorithm registry it reads from.
"""

import json

import pytest

from algorithms import (
    REGISTRY,
    AlgoInfo,
    InvalidInputError,
    algorithms_by_family,
    algorithms_by_tag,
    get_algorithm,
    list_algorithms,
)
from engine import Recorder
from structures import Graph


# =============================================================================
# Registry
# =============================================================================

class TestRegistry:

    def test_keys_are_context_tags(self):
        for key, info in REGISTRY.items():
            assert isinstance(info, AlgoInfo)
            assert info.key == key == info.context_tag
            assert info.pseudocode

    def test_expected_operations_registered(self):
        for key in (
            "bst-insert", "bst-search", "bst-delete", "avl-insert",
            "dijkstra", "mst-kruskal", "mst-prim", "graph-bfs", "graph-dfs",
            "sorting-bubble", "search-linear",
            "stack-push", "stack-pop", "stack-peek",
            "queue-enqueue", "queue-dequeue", "queue-front", "queue-rear",
            "array-insert", "array-search", "array-resize",
            "sorting-merge", "sorting-quick",
            "list-insert", "list-delete", "list-search",
            "hash-insert", "hash-search",
        ):
            assert get_algorithm(key) is not None, key

    def test_unknown_key(self):
        assert get_algorithm("quantum-sort") is None

    def test_lookups(self):
        assert len(list_algorithms()) == len(REGISTRY)
        graph_keys = {a.key for a in algorithms_by_family("graph")}
        assert graph_keys == {"dijkstra", "mst-kruskal", "mst-prim", "graph-bfs", "graph-dfs"}
        assert {a.key for a in algorithms_by_tag("mst")} == {"mst-kruskal", "mst-prim"}

    def test_graph_operations_share_prefix(self):
        assert all(a.key.startswith(("graph-", "mst-", "dijkstra")) for a in algorithms_by_family("graph"))

    def test_to_dict_is_json_safe(self):
        json.dumps([a.to_dict() for a in list_algorithms()])


# =============================================================================
# Recorder
# =============================================================================

class TestRecorder:

    def test_run_records_trace_and_metrics(self):
        rec = Recorder()
        trace = rec.run("sorting-bubble", values=[3, 1, 2])
        assert rec.trace is trace
        assert trace.context_tag == "sorting-bubble"
        m = rec.get_metrics()
        assert m.total_steps == len(trace)
        assert m.comparisons == trace.final.snapshot.counters["comparisons"]
        assert m.swaps == 2
        assert m.completed and not m.error
        assert m.wall_time_ms >= 0
        assert m.memory_bytes > 0

    def test_insertion_shifts_count_as_swaps(self):
        m = Recorder()
        m.run("sorting-insertion", values=[3, 2, 1])
        assert m.metrics.swaps == 3

    def test_merge_writes_count_as_swaps(self):
        rec = Recorder()
        rec.run("sorting-merge", values=[38, 27, 43, 3])
        assert rec.metrics.comparisons == 5
        assert rec.metrics.swaps == 8

    def test_hash_comparisons_counted_from_steps(self):
        rec = Recorder()
        rec.run("hash-search", items=[33, 12], value=12, capacity=7)
        assert rec.metrics.comparisons == 2
        assert rec.metrics.completed

    def test_graph_metrics(self):
        rec = Recorder()
        rec.run("graph-bfs", graph=Graph.sample(), start="A", target="F")
        assert rec.metrics.nodes_visited == 6
        assert rec.metrics.path_length == 3

    def test_mst_weight(self, square_graph):
        rec = Recorder()
        rec.run("mst-prim", graph=square_graph)
        assert rec.metrics.total_weight == 6

    def test_tree_comparisons_counted_from_steps(self):
        rec = Recorder()
        rec.run("bst-insert", tree=[50, 30, 70], value=20)
        assert rec.metrics.comparisons == 2

    def test_error_runs_are_flagged(self):
        rec = Recorder()
        rec.run("search-linear", values=[1, 2, 3], target=9)
        assert rec.metrics.error
        assert not rec.metrics.completed

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            Recorder().run("quantum-sort")

    def test_unknown_param(self):
        with pytest.raises(InvalidInputError):
            Recorder().run("sorting-bubble", values=[1], speed=2)

    def test_invalid_input_keeps_previous_run(self):
        rec = Recorder()
        first = rec.run("sorting-bubble", values=[2, 1])
        with pytest.raises(InvalidInputError):
            rec.run("search-binary", values=[3, 1], target=1)
        assert rec.trace is first

    def test_export(self):
        rec = Recorder()
        assert rec.export() == {}
        rec.run("dijkstra", graph=Graph.sample(), start="A")
        data = rec.export()
        assert data["algo_key"] == "dijkstra"
        assert data["context_tag"] == "dijkstra"
        assert data["params"]["start"] == "A"
        assert data["params"]["graph"]["nodes"][0]["id"] == "A"
        assert data["metrics"]["total_steps"] == len(data["steps"])
        json.dumps(data, allow_nan=False)
