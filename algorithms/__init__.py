"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every traced algorithm / operation.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict keyed by context tag:
    {
        "bst-insert": AlgoInfo(key, label, fn, pseudocode, family, …),
        …
    }

The Recorder and the Flask host both consume it, so adding a new
algorithm is: write the generator, add one entry here.

`workspace` names the session structure a run reads its input from and
writes its final snapshot back to ("bst", "avl", "stack", "queue",
"array", "list", "hash"); graph, sorting and searching runs are stateless (None).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms import avl, bfs, bst, dfs, dijkstra, hashing, linear, mst, searching, sorting, traversal
from algorithms.errors import InvalidInputError
from algorithms.step import (
    ArrayPayload, GraphPayload, GraphStepBuilder, HashPayload, LinearPayload, Step, Trace, TreePayload,
)


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key == context tag, e.g. "bst-insert"
    label:            str                    # human label, e.g. "BST Insert"
    fn:               Callable               # the generator function
    pseudocode:       List[str]              # lines for the side-panel
    family:           str                    # "tree" | "graph" | "sorting" | "searching" | "linear" | "hashing"
    params:           List[str]    = field(default_factory=list)   # keyword arguments fn accepts
    tags:             List[str]    = field(default_factory=list)   # e.g. ["weighted", "shortest-path"]
    workspace:        Optional[str] = None   # session structure read / written back
    complexity_time:  str          = ""      # e.g. "O(V + E)"
    complexity_space: str          = ""      # e.g. "O(V)"
    description:      str          = ""      # one-liner for the UI card

    @property
    def context_tag(self) -> str:
        return self.key

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "family":           self.family,
            "params":           list(self.params),
            "tags":             list(self.tags),
            "workspace":        self.workspace,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
            "pseudocode":       list(self.pseudocode),
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
_ENTRIES: List[AlgoInfo] = [

    # -- trees --
    AlgoInfo(
        key="bst-insert", label="BST Insert", fn=bst.bst_insert, pseudocode=bst.INSERT_PSEUDOCODE,
        family="tree", params=["tree", "value"], tags=["bst", "mutating"], workspace="bst",
        complexity_time="O(h)", complexity_space="O(h)",
        description="Walks down comparing keys and hangs the new value off a leaf.",
    ),
    AlgoInfo(
        key="bst-search", label="BST Search", fn=bst.bst_search, pseudocode=bst.SEARCH_PSEUDOCODE,
        family="tree", params=["tree", "value"], tags=["bst", "search"], workspace="bst",
        complexity_time="O(h)", complexity_space="O(1)",
        description="Halves the candidate set at every node on average.",
    ),
    AlgoInfo(
        key="bst-delete", label="BST Delete", fn=bst.bst_delete, pseudocode=bst.DELETE_PSEUDOCODE,
        family="tree", params=["tree", "value"], tags=["bst", "mutating"], workspace="bst",
        complexity_time="O(h)", complexity_space="O(1)",
        description="Leaf, one-child and two-child (in-order successor) removal.",
    ),
    AlgoInfo(
        key="avl-insert", label="AVL Insert", fn=avl.avl_insert, pseudocode=avl.PSEUDOCODE,
        family="tree", params=["tree", "value"], tags=["avl", "self-balancing", "mutating"], workspace="avl",
        complexity_time="O(log n)", complexity_space="O(log n)",
        description="BST insert plus LL / RR / LR / RL rotations keeping every balance factor in [-1, 1].",
    ),
    AlgoInfo(
        key="traversal-inorder", label="In-Order Traversal", fn=traversal.inorder_traversal,
        pseudocode=traversal.INORDER_PSEUDOCODE,
        family="tree", params=["tree"], tags=["traversal", "depth-first"], workspace="bst",
        complexity_time="O(n)", complexity_space="O(h)",
        description="Left, root, right. Yields a BST's keys in sorted order.",
    ),
    AlgoInfo(
        key="traversal-preorder", label="Pre-Order Traversal", fn=traversal.preorder_traversal,
        pseudocode=traversal.PREORDER_PSEUDOCODE,
        family="tree", params=["tree"], tags=["traversal", "depth-first"], workspace="bst",
        complexity_time="O(n)", complexity_space="O(h)",
        description="Root, left, right. The order used to copy a tree.",
    ),
    AlgoInfo(
        key="traversal-postorder", label="Post-Order Traversal", fn=traversal.postorder_traversal,
        pseudocode=traversal.POSTORDER_PSEUDOCODE,
        family="tree", params=["tree"], tags=["traversal", "depth-first"], workspace="bst",
        complexity_time="O(n)", complexity_space="O(h)",
        description="Left, right, root. Children are handled before their parent.",
    ),
    AlgoInfo(
        key="traversal-levelorder", label="Level-Order Traversal", fn=traversal.levelorder_traversal,
        pseudocode=traversal.LEVELORDER_PSEUDOCODE,
        family="tree", params=["tree"], tags=["traversal", "breadth-first"], workspace="bst",
        complexity_time="O(n)", complexity_space="O(w)",
        description="Visits the tree level by level with a queue.",
    ),

    # -- graphs --
    AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra.dijkstra, pseudocode=dijkstra.PSEUDOCODE,
        family="graph", params=["graph", "start"], tags=["weighted", "shortest-path"],
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Greedily finalises the closest unvisited node. Optimal for non-negative weights.",
    ),
    AlgoInfo(
        key="mst-kruskal", label="Kruskal's MST", fn=mst.kruskal, pseudocode=mst.KRUSKAL_PSEUDOCODE,
        family="graph", params=["graph"], tags=["weighted", "mst", "union-find"],
        complexity_time="O(E log E)", complexity_space="O(V)",
        description="Takes the cheapest edges first, skipping any that would close a cycle.",
    ),
    AlgoInfo(
        key="mst-prim", label="Prim's MST", fn=mst.prim, pseudocode=mst.PRIM_PSEUDOCODE,
        family="graph", params=["graph", "start"], tags=["weighted", "mst"],
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Grows one tree from the start node along the cheapest outgoing edge.",
    ),
    AlgoInfo(
        key="graph-bfs", label="Breadth-First Search", fn=bfs.bfs, pseudocode=bfs.PSEUDOCODE,
        family="graph", params=["graph", "start", "target"], tags=["unweighted", "shortest-path", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer. Finds shortest path by hop count.",
    ),
    AlgoInfo(
        key="graph-dfs", label="Depth-First Search", fn=dfs.dfs, pseudocode=dfs.PSEUDOCODE,
        family="graph", params=["graph", "start", "target"], tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
    ),

    # -- sorting --
    AlgoInfo(
        key="sorting-bubble", label="Bubble Sort", fn=sorting.bubble_sort, pseudocode=sorting.BUBBLE_PSEUDOCODE,
        family="sorting", params=["values"], tags=["comparison", "stable", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs; stops after a pass with no swaps.",
    ),
    AlgoInfo(
        key="sorting-insertion", label="Insertion Sort", fn=sorting.insertion_sort,
        pseudocode=sorting.INSERTION_PSEUDOCODE,
        family="sorting", params=["values"], tags=["comparison", "stable", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Shifts each element left into the sorted prefix.",
    ),
    AlgoInfo(
        key="sorting-selection", label="Selection Sort", fn=sorting.selection_sort,
        pseudocode=sorting.SELECTION_PSEUDOCODE,
        family="sorting", params=["values"], tags=["comparison", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Selects the minimum of the unsorted suffix and swaps it into place.",
    ),
    AlgoInfo(
        key="sorting-merge", label="Merge Sort", fn=sorting.merge_sort, pseudocode=sorting.MERGE_PSEUDOCODE,
        family="sorting", params=["values"], tags=["comparison", "stable", "divide-and-conquer"],
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Splits the array in halves, then merges the sorted halves back together.",
    ),
    AlgoInfo(
        key="sorting-quick", label="Quick Sort", fn=sorting.quick_sort, pseudocode=sorting.QUICK_PSEUDOCODE,
        family="sorting", params=["values"], tags=["comparison", "in-place", "divide-and-conquer"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Partitions around the last element, then sorts each side.",
    ),

    # -- searching --
    AlgoInfo(
        key="search-linear", label="Linear Search", fn=searching.linear_search,
        pseudocode=searching.LINEAR_PSEUDOCODE,
        family="searching", params=["values", "target"], tags=["search"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Checks every element in order.",
    ),
    AlgoInfo(
        key="search-binary", label="Binary Search", fn=searching.binary_search,
        pseudocode=searching.BINARY_PSEUDOCODE,
        family="searching", params=["values", "target"], tags=["search", "sorted-input"],
        complexity_time="O(log n)", complexity_space="O(1)",
        description="Halves the sorted search window on every probe.",
    ),

    # -- linear structures --
    AlgoInfo(
        key="stack-push", label="Stack Push", fn=linear.stack_push, pseudocode=linear.STACK_PSEUDOCODE,
        family="linear", params=["items", "value", "capacity"], tags=["stack", "lifo", "mutating"],
        workspace="stack", complexity_time="O(1)", complexity_space="O(1)",
        description="Adds an element on top of the stack.",
    ),
    AlgoInfo(
        key="stack-pop", label="Stack Pop", fn=linear.stack_pop, pseudocode=linear.STACK_PSEUDOCODE,
        family="linear", params=["items", "capacity"], tags=["stack", "lifo", "mutating"],
        workspace="stack", complexity_time="O(1)", complexity_space="O(1)",
        description="Removes the top element.",
    ),
    AlgoInfo(
        key="stack-peek", label="Stack Peek", fn=linear.stack_peek, pseudocode=linear.STACK_PSEUDOCODE,
        family="linear", params=["items", "capacity"], tags=["stack", "lifo"],
        workspace="stack", complexity_time="O(1)", complexity_space="O(1)",
        description="Reads the top element without removing it.",
    ),
    AlgoInfo(
        key="queue-enqueue", label="Queue Enqueue", fn=linear.queue_enqueue, pseudocode=linear.QUEUE_PSEUDOCODE,
        family="linear", params=["items", "value", "capacity"], tags=["queue", "fifo", "mutating"],
        workspace="queue", complexity_time="O(1)", complexity_space="O(1)",
        description="Adds an element at the rear.",
    ),
    AlgoInfo(
        key="queue-dequeue", label="Queue Dequeue", fn=linear.queue_dequeue, pseudocode=linear.QUEUE_PSEUDOCODE,
        family="linear", params=["items", "capacity"], tags=["queue", "fifo", "mutating"],
        workspace="queue", complexity_time="O(1)", complexity_space="O(1)",
        description="Removes the front element.",
    ),
    AlgoInfo(
        key="queue-front", label="Queue Front", fn=linear.queue_front, pseudocode=linear.QUEUE_PSEUDOCODE,
        family="linear", params=["items", "capacity"], tags=["queue", "fifo"],
        workspace="queue", complexity_time="O(1)", complexity_space="O(1)",
        description="Reads the front element.",
    ),
    AlgoInfo(
        key="queue-rear", label="Queue Rear", fn=linear.queue_rear, pseudocode=linear.QUEUE_PSEUDOCODE,
        family="linear", params=["items", "capacity"], tags=["queue", "fifo"],
        workspace="queue", complexity_time="O(1)", complexity_space="O(1)",
        description="Reads the rear element.",
    ),
    AlgoInfo(
        key="array-insert", label="Array Insert", fn=linear.array_insert, pseudocode=linear.ARRAY_PSEUDOCODE,
        family="linear", params=["items", "index", "value", "capacity"], tags=["array", "mutating"],
        workspace="array", complexity_time="O(n)", complexity_space="O(1)",
        description="Shifts later elements right and writes the value at the index.",
    ),
    AlgoInfo(
        key="array-search", label="Array Search", fn=linear.array_search, pseudocode=linear.ARRAY_PSEUDOCODE,
        family="linear", params=["items", "value", "capacity"], tags=["array", "search"],
        workspace="array", complexity_time="O(n)", complexity_space="O(1)",
        description="Scans indices until the value turns up.",
    ),
    AlgoInfo(
        key="array-resize", label="Array Resize", fn=linear.array_resize, pseudocode=linear.ARRAY_PSEUDOCODE,
        family="linear", params=["items", "new_capacity", "capacity"], tags=["array", "mutating"],
        workspace="array", complexity_time="O(n)", complexity_space="O(n)",
        description="Moves the contents into an array of a different capacity.",
    ),
    AlgoInfo(
        key="list-insert", label="Linked List Insert", fn=linear.list_insert, pseudocode=linear.LIST_PSEUDOCODE,
        family="linear", params=["items", "index", "value"], tags=["linked-list", "mutating"],
        workspace="list", complexity_time="O(n)", complexity_space="O(1)",
        description="Walks to the position and splices in a new node.",
    ),
    AlgoInfo(
        key="list-delete", label="Linked List Delete", fn=linear.list_delete, pseudocode=linear.LIST_PSEUDOCODE,
        family="linear", params=["items", "value"], tags=["linked-list", "mutating"],
        workspace="list", complexity_time="O(n)", complexity_space="O(1)",
        description="Finds the node and points its predecessor past it.",
    ),
    AlgoInfo(
        key="list-search", label="Linked List Search", fn=linear.list_search, pseudocode=linear.LIST_PSEUDOCODE,
        family="linear", params=["items", "value"], tags=["linked-list", "search"],
        workspace="list", complexity_time="O(n)", complexity_space="O(1)",
        description="Follows next pointers from the head until the value turns up.",
    ),

    # -- hashing --
    AlgoInfo(
        key="hash-insert", label="Hash Table Insert", fn=hashing.hash_insert, pseudocode=hashing.INSERT_PSEUDOCODE,
        family="hashing", params=["items", "value", "capacity", "method"], tags=["hash-table", "mutating"],
        workspace="hash", complexity_time="O(1) avg, O(n) worst", complexity_space="O(1)",
        description="Hashes the key with k mod size; collisions chain or probe linearly.",
    ),
    AlgoInfo(
        key="hash-search", label="Hash Table Search", fn=hashing.hash_search, pseudocode=hashing.SEARCH_PSEUDOCODE,
        family="hashing", params=["items", "value", "capacity", "method"], tags=["hash-table", "search"],
        workspace="hash", complexity_time="O(1) avg, O(n) worst", complexity_space="O(1)",
        description="Recomputes the hash and checks only that bucket (or its probe run).",
    ),
]

REGISTRY: Dict[str, AlgoInfo] = {info.key: info for info in _ENTRIES}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_family(family: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family == family]


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_family",
    "algorithms_by_tag",
    "InvalidInputError",
    "Step",
    "Trace",
    "TreePayload",
    "GraphPayload",
    "ArrayPayload",
    "LinearPayload",
    "HashPayload",
    "GraphStepBuilder",
]
