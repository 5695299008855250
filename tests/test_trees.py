"""
test_trees.py

Tests for the tree generators: BST insert / search / delete, AVL insert
with rotations, and the four traversal orders.
"""

import random

import pytest

from algorithms.avl import avl_insert, build_avl
from algorithms.bst import bst_delete, bst_insert, bst_search
from algorithms.errors import InvalidInputError
from algorithms.step import Trace
from algorithms.traversal import (
    inorder_traversal,
    levelorder_traversal,
    postorder_traversal,
    preorder_traversal,
    traverse,
)
from config import load_settings
from structures.tree import TreeSnapshot, build_bst, freeze, in_order, iter_nodes


BASE = [50, 30, 70, 20, 40, 60, 80]


def run(tag, gen) -> Trace:
    return Trace.from_steps(tag, gen)


def ops(trace: Trace):
    return [s.operation for s in trace]


# =============================================================================
# BST
# =============================================================================

class TestBstInsert:

    def test_insert_into_empty_tree(self):
        trace = run("bst-insert", bst_insert(None, 42))
        assert len(trace) == 1
        assert trace.final.is_complete
        assert trace.final.snapshot.root.value == 42

    def test_comparisons_then_leaf(self):
        trace = run("bst-insert", bst_insert([50, 30, 70, 20, 40], 35))
        assert ops(trace) == ["compare", "compare", "compare", "insert"]
        assert trace.final.snapshot.path == (50, 30, 40, 35)
        assert in_order(trace.final.snapshot.root) == [20, 30, 35, 40, 50, 70]

    def test_duplicate_is_error_step(self):
        trace = run("bst-insert", bst_insert(BASE, 40))
        assert trace.final.operation == "duplicate"
        assert trace.final.is_error and not trace.final.is_complete

    def test_earlier_snapshots_never_change(self):
        trace = run("bst-insert", bst_insert(BASE, 65))
        assert 65 not in in_order(trace[0].snapshot.root)
        assert 65 in in_order(trace.final.snapshot.root)

    def test_input_snapshot_is_not_mutated(self):
        snap = freeze(build_bst(BASE))
        run("bst-insert", bst_insert(snap, 65))
        assert in_order(snap) == sorted(BASE)

    def test_bad_value_raises_before_any_step(self):
        with pytest.raises(InvalidInputError):
            bst_insert(BASE, "abc")

    def test_sequential_inserts_stay_sorted(self):
        rng = random.Random(7)
        values = rng.sample(range(1000), 60)
        root = None
        for v in values:
            root = run("bst-insert", bst_insert(root, v)).final.snapshot.root
        assert in_order(root) == sorted(values)


class TestBstSearch:

    def test_found(self):
        trace = run("bst-search", bst_search(BASE, 60))
        assert ops(trace) == ["compare", "compare", "compare", "found"]
        assert trace.final.is_complete

    def test_not_found(self):
        trace = run("bst-search", bst_search(BASE, 65))
        assert trace.final.operation == "not-found"
        assert trace.final.is_error
        assert trace.final.snapshot.path == (50, 70, 60)

    def test_empty_tree(self):
        trace = run("bst-search", bst_search(None, 1))
        assert len(trace) == 1
        assert trace.final.operation == "empty"
        assert trace.final.is_error


class TestBstDelete:

    def test_leaf(self):
        trace = run("bst-delete", bst_delete(BASE, 20))
        assert trace.final.description == "Removing leaf node 20"
        assert in_order(trace.final.snapshot.root) == [30, 40, 50, 60, 70, 80]

    def test_one_child(self):
        trace = run("bst-delete", bst_delete([50, 30, 70, 20], 30))
        assert trace.final.description == "Replacing 30 with left child 20"
        assert in_order(trace.final.snapshot.root) == [20, 50, 70]

    def test_two_children_promotes_successor(self):
        trace = run("bst-delete", bst_delete(BASE, 50))
        assert "successor" in ops(trace)
        assert "replace" in ops(trace)
        root = trace.final.snapshot.root
        assert root.value == 60
        assert in_order(root) == [20, 30, 40, 60, 70, 80]
        assert trace.final.is_complete

    def test_successor_is_direct_right_child(self):
        trace = run("bst-delete", bst_delete([50, 30, 70, 80], 50))
        root = trace.final.snapshot.root
        assert root.value == 70
        assert in_order(root) == [30, 70, 80]

    def test_delete_only_node(self):
        trace = run("bst-delete", bst_delete([5], 5))
        assert trace.final.snapshot.root is None
        assert trace.final.is_complete

    def test_not_found(self):
        trace = run("bst-delete", bst_delete(BASE, 99))
        assert trace.final.operation == "not-found"
        assert trace.final.is_error

    def test_empty(self):
        trace = run("bst-delete", bst_delete(None, 1))
        assert trace.final.operation == "empty"


# =============================================================================
# AVL
# =============================================================================

def _assert_balanced(root):
    for node in iter_nodes(root):
        assert abs(node.balance) <= 1, f"node {node.value} has balance {node.balance}"


class TestAvlInsert:

    @pytest.mark.parametrize("seed, value, case, new_root", [
        ([10, 20], 30, "RR", 20),
        ([30, 20], 10, "LL", 20),
        ([30, 10], 20, "LR", 20),
        ([10, 30], 20, "RL", 20),
    ])
    def test_rotation_cases(self, seed, value, case, new_root):
        trace = run("avl-insert", avl_insert(seed, value))
        cases = [s.snapshot.case for s in trace if s.operation == "rotation-case"]
        assert cases == [case]
        assert trace.final.snapshot.root.value == new_root
        assert trace.final.is_complete
        _assert_balanced(trace.final.snapshot.root)

    def test_double_rotation_shows_two_rotations(self):
        trace = run("avl-insert", avl_insert([30, 10], 20))
        rotations = [s.snapshot.rotation for s in trace if s.operation == "rotate"]
        assert rotations == ["left", "left", "right", "right"]

    def test_every_snapshot_shows_the_whole_tree(self):
        trace = run("avl-insert", avl_insert([50, 30, 70, 10], 20))
        assert all(s.snapshot.root.value == 50 for s in trace)
        assert in_order(trace.final.snapshot.root) == [10, 20, 30, 50, 70]
        _assert_balanced(trace.final.snapshot.root)

    def test_balance_checks_walk_up(self):
        trace = run("avl-insert", avl_insert([20, 10, 30], 5))
        checked = [s.snapshot.highlighted[0] for s in trace if s.operation == "balance-check"]
        assert checked == [10, 20]
        assert "rotation-case" not in ops(trace)

    def test_duplicate(self):
        trace = run("avl-insert", avl_insert([10, 20], 20))
        assert trace.final.operation == "duplicate"
        assert trace.final.is_error
        assert "balance-check" not in ops(trace)

    def test_empty_tree(self):
        trace = run("avl-insert", avl_insert(None, 1))
        assert ops(trace) == ["start", "insert", "complete"]

    def test_sequential_inserts_stay_balanced(self):
        rng = random.Random(11)
        values = rng.sample(range(500), 80)
        root = None
        for v in values:
            trace = run("avl-insert", avl_insert(root, v))
            root = trace.final.snapshot.root
            _assert_balanced(root)
        assert in_order(root) == sorted(values)

    def test_ascending_inserts_stay_balanced(self):
        root = None
        for v in range(1, 32):
            root = run("avl-insert", avl_insert(root, v)).final.snapshot.root
        _assert_balanced(root)
        assert root.height == 5

    def test_build_avl_matches_traced_insert(self):
        root = None
        for v in [5, 2, 8, 1, 3, 9, 4]:
            root = run("avl-insert", avl_insert(root, v)).final.snapshot.root
        assert build_avl([5, 2, 8, 1, 3, 9, 4]) == root


# =============================================================================
# Traversals
# =============================================================================

class TestTraversal:

    TREE = [50, 30, 70, 20, 40]

    @pytest.mark.parametrize("gen, expected", [
        (inorder_traversal,    [20, 30, 40, 50, 70]),
        (preorder_traversal,   [50, 30, 20, 40, 70]),
        (postorder_traversal,  [20, 40, 30, 70, 50]),
        (levelorder_traversal, [50, 30, 70, 20, 40]),
    ])
    def test_result_order(self, gen, expected):
        trace = run("traversal", gen(self.TREE))
        assert list(trace.final.snapshot.result) == expected
        assert [s.snapshot.highlighted[0] for s in trace if s.operation == "visit"] == expected
        assert trace.final.is_complete

    def test_result_accumulates(self):
        trace = run("traversal-inorder", inorder_traversal(self.TREE))
        lengths = [len(s.snapshot.result) for s in trace]
        assert lengths == sorted(lengths)

    def test_completion_message(self):
        trace = run("traversal-inorder", inorder_traversal(self.TREE))
        assert trace.final.description == "In-Order Traversal Complete! Result: [20, 30, 40, 50, 70]"

    def test_empty_tree(self):
        trace = run("traversal-preorder", preorder_traversal(None))
        assert len(trace) == 1
        assert trace.final.is_error

    def test_unknown_order(self):
        with pytest.raises(InvalidInputError):
            traverse(self.TREE, "sideways")

    @pytest.mark.parametrize("gen, expected", [
        (inorder_traversal,   [("descend", 50), ("descend", 30), ("visit", 20), ("visit", 30),
                               ("descend", 30), ("visit", 40), ("visit", 50), ("descend", 50), ("visit", 70)]),
        (preorder_traversal,  [("visit", 50), ("descend", 50), ("visit", 30), ("descend", 30),
                               ("visit", 20), ("descend", 30), ("visit", 40), ("descend", 50), ("visit", 70)]),
        (postorder_traversal, [("descend", 50), ("descend", 30), ("visit", 20), ("descend", 30),
                               ("visit", 40), ("visit", 30), ("descend", 50), ("visit", 70), ("visit", 50)]),
    ])
    def test_descend_and_visit_order(self, gen, expected):
        trace = run("traversal", gen(self.TREE))
        walked = [(s.operation, s.snapshot.highlighted[0]) for s in trace if s.operation in ("descend", "visit")]
        assert walked == expected


# =============================================================================
# Degenerate trees
# =============================================================================

class TestDegenerateTrees:
    """Sorted keys build a chain as deep as the input is long."""

    CHAIN = list(range(499))

    def test_insert_at_the_bottom(self):
        trace = run("bst-insert", bst_insert(self.CHAIN, 499))
        assert trace.final.is_complete
        assert ops(trace).count("compare") == 499
        assert trace.final.snapshot.root.height == 500

    def test_search_and_delete_the_deepest_key(self):
        assert run("bst-search", bst_search(self.CHAIN, 498)).final.operation == "found"
        trace = run("bst-delete", bst_delete(self.CHAIN, 498))
        assert trace.final.is_complete
        assert trace.final.snapshot.root.height == 498

    @pytest.mark.parametrize("gen", [
        inorder_traversal, preorder_traversal, postorder_traversal, levelorder_traversal,
    ])
    def test_traversals_finish(self, gen):
        trace = run("traversal", gen(self.CHAIN))
        assert trace.final.is_complete
        assert sorted(trace.final.snapshot.result) == self.CHAIN

    def test_previous_snapshot_is_reused(self):
        root = run("bst-insert", bst_insert(self.CHAIN, 499)).final.snapshot.root
        trace = run("bst-search", bst_search(root, 0))
        assert trace.final.operation == "found"
        assert trace[0].snapshot.root == root


# =============================================================================
# Malformed trees
# =============================================================================

OUT_OF_ORDER = TreeSnapshot(value=5, left=TreeSnapshot(9), right=TreeSnapshot(1), height=2)


class TestTreeValidation:

    @pytest.mark.parametrize("fn", [bst_insert, bst_search, bst_delete, avl_insert])
    def test_out_of_order_snapshot_rejected(self, fn):
        with pytest.raises(InvalidInputError):
            fn(OUT_OF_ORDER, 4)

    def test_traversal_rejects_out_of_order_snapshot(self):
        with pytest.raises(InvalidInputError):
            inorder_traversal(OUT_OF_ORDER)

    def test_avl_rejects_unbalanced_snapshot(self):
        chain = freeze(build_bst([1, 2, 3]))
        with pytest.raises(InvalidInputError):
            avl_insert(chain, 4)
        assert run("bst-insert", bst_insert(chain, 4)).final.is_complete

    def test_avl_accepts_balanced_snapshot(self):
        trace = run("avl-insert", avl_insert(freeze(build_bst([2, 1, 3])), 4))
        assert trace.final.is_complete

    def test_oversized_snapshot_rejected(self, monkeypatch):
        snap = freeze(build_bst([2, 1, 3, 4]))
        monkeypatch.setenv("ALGOVIZ_MAX_INPUT_SIZE", "3")
        load_settings.cache_clear()
        with pytest.raises(InvalidInputError):
            bst_search(snap, 1)
