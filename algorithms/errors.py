"""
errors.py — Generator Input Validation
=======================================
Malformed input is the one fatal-class condition: it is rejected before a
generator yields anything, so no partial Trace can ever exist.  Domain
conditions (empty tree, value not found, full stack, …) are NOT errors —
generators report those as terminal Steps.
"""

from typing import Any, Iterable, List, Optional, Union

from config import load_settings
from structures.graph import Graph
from structures.tree import TreeNode, TreeSnapshot, build_bst, is_avl, is_bst, size, thaw


class InvalidInputError(ValueError):
    """Generator input has the wrong type or shape."""


def require_int(value: Any, name: str = "value") -> int:
    """Accept ints and integral strings / floats; reject everything else."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidInputError(f"{name} must be a whole number, got {value!r}")


def parse_values(raw: Union[str, Iterable[Any]], name: str = "values", allow_empty: bool = True) -> List[int]:
    """
    "64, 34, 25" or [64, "34", 25.0] → [64, 34, 25].

    Length is capped by `settings.max_input_size`.
    """
    if raw is None:
        raise InvalidInputError(f"{name} is required")
    if isinstance(raw, str):
        tokens = [t for t in raw.replace(",", " ").split() if t]
    else:
        try:
            tokens = list(raw)
        except TypeError:
            raise InvalidInputError(f"{name} must be a list of numbers, got {raw!r}") from None
    values = [require_int(t, name) for t in tokens]
    if not allow_empty and not values:
        raise InvalidInputError(f"{name} must not be empty")
    limit = load_settings().max_input_size
    if len(values) > limit:
        raise InvalidInputError(f"{name} has {len(values)} items; the limit is {limit}")
    return values


def require_capacity(value: Any, name: str = "capacity") -> int:
    cap = require_int(value, name)
    if cap < 1:
        raise InvalidInputError(f"{name} must be at least 1, got {cap}")
    return cap


def as_working_tree(tree: Union[None, TreeSnapshot, Iterable[Any]]) -> Optional[TreeNode]:
    """
    Fresh mutable tree from None, a TreeSnapshot, or an iterable of values
    (plain BST insertion order).
    """
    if tree is None:
        return None
    if isinstance(tree, TreeSnapshot):
        return thaw(require_tree(tree))
    if isinstance(tree, TreeNode):
        raise InvalidInputError("pass a TreeSnapshot (use structures.freeze), not a live TreeNode")
    return build_bst(parse_values(tree, "tree"))


def require_tree(snap: TreeSnapshot, balanced: bool = False) -> TreeSnapshot:
    """
    Reject a snapshot a BST / AVL generator cannot work on: too many
    nodes, keys out of search-tree order or duplicated, and with
    `balanced`, a stored height that is wrong or a node with |balance| > 1.
    """
    limit = load_settings().max_input_size
    count = size(snap)
    if count > limit:
        raise InvalidInputError(f"tree has {count} nodes; the limit is {limit}")
    if not is_bst(snap):
        raise InvalidInputError("tree keys are not in binary-search-tree order")
    if balanced and not is_avl(snap):
        raise InvalidInputError("tree is not a valid AVL tree (some node has |balance| > 1)")
    return snap


def require_graph(graph: Any) -> Graph:
    if not isinstance(graph, Graph):
        raise InvalidInputError(f"expected a Graph, got {type(graph).__name__}")
    limit = load_settings().max_input_size
    if graph.node_count() > limit:
        raise InvalidInputError(f"graph has {graph.node_count()} nodes; the limit is {limit}")
    return graph


def require_node(graph: Graph, node_id: Any, name: str = "start") -> str:
    nid = str(node_id) if node_id is not None else ""
    if not graph.has_node(nid):
        raise InvalidInputError(f"{name} node {node_id!r} is not in the graph")
    return nid
