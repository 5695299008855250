"""
avl.py — AVL Tree Insertion
=============================
BST insertion followed by rebalancing on the way back up.

Yields a Step at:
  1. Start of the insertion
  2. Each comparison on the way down
  3. The new leaf (or the duplicate, which ends the run)
  4. Each ancestor on the way up: height + balance factor recomputed
  5. Imbalance detected (|balance| > 1), the case picked (LL / RR / LR / RL)
  6. Before and after every single rotation (a double rotation shows two)
  7. Final "tree is balanced" step

Case selection compares the inserted value with the unbalanced node's
child key:

    balance > 1,  value < left.value   → LL → rotate right
    balance < -1, value > right.value  → RR → rotate left
    balance > 1,  value > left.value   → LR → rotate left(left), rotate right
    balance < -1, value < right.value  → RL → rotate right(right), rotate left

Every rotated subtree is re-attached to its parent before the "after"
Step, so each snapshot shows the whole, consistent tree.
"""

from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from algorithms.errors import InvalidInputError, parse_values, require_int, require_tree
from algorithms.step import Step, TreePayload
from structures.tree import (
    TreeNode, TreeSnapshot, balance_factor, freeze, thaw, update_height,
)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def insert(node, v):",                                   # 0
    "    if node is None: return Node(v)",                    # 1
    "    if v < node.value: node.left ← insert(node.left, v)", # 2
    "    elif v > node.value: node.right ← insert(node.right, v)", # 3
    "    else: return node   # duplicate",                    # 4
    "    node.height ← 1 + max(h(left), h(right))",           # 5
    "    b ← h(left) − h(right)",                             # 6
    "    if b > 1 and v < node.left.value: return rotR(node)",   # 7
    "    if b < -1 and v > node.right.value: return rotL(node)", # 8
    "    if b > 1: node.left ← rotL(node.left); return rotR(node)",   # 9
    "    if b < -1: node.right ← rotR(node.right); return rotL(node)", # 10
    "    return node",                                        # 11
]

_CASE_LINES = {"LL": 7, "RR": 8, "LR": 9, "RL": 10}


class _Tree:
    """Holds the root so nested generators can re-attach a rotated subtree."""

    __slots__ = ("root", "stopped")

    def __init__(self, root: Optional[TreeNode]):
        self.root:    Optional[TreeNode] = root
        self.stopped: bool               = False

    def set_root(self, node: Optional[TreeNode]) -> None:
        self.root = node


Attach = Callable[[Optional[TreeNode]], None]


def _step(
    tree: _Tree,
    description: str,
    operation: str,
    line: int,
    highlighted: Tuple[int, ...] = (),
    balance: Optional[int] = None,
    rotation: Optional[str] = None,
    case: Optional[str] = None,
    is_error: bool = False,
    is_complete: bool = False,
) -> Step:
    return Step(
        description=description,
        operation=operation,
        snapshot=TreePayload(
            root=freeze(tree.root),
            highlighted=highlighted,
            balance=balance,
            rotation=rotation,
            case=case,
        ),
        is_error=is_error,
        is_complete=is_complete,
        pseudocode_line=line,
    )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def avl_insert(tree=None, value=None) -> Iterator[Step]:
    """
    Args:
        tree  : None, a TreeSnapshot from a previous run, or values to
                build an AVL tree from (inserted in order, untraced).
        value : Value to insert.
    """
    value = require_int(value)
    return _insert(_Tree(_as_avl_tree(tree)), value)


def _insert(tree: _Tree, value: int) -> Iterator[Step]:
    yield _step(tree, f"Starting AVL insertion of {value}", "start", 0)

    yield from _insert_at(tree, tree.root, value, tree.set_root)
    if tree.stopped:
        return

    yield _step(
        tree, f"AVL insertion of {value} complete. Every node is balanced.", "complete", 11,
        highlighted=(value,), is_complete=True,
    )


def _insert_at(tree: _Tree, node: Optional[TreeNode], value: int, attach: Attach) -> Iterator[Step]:
    if node is None:
        attach(TreeNode(value))
        yield _step(tree, f"Inserted {value} as new leaf node", "insert", 1, highlighted=(value,))
        return

    yield _step(tree, f"Comparing {value} with {node.value}", "compare", 2 if value < node.value else 3,
                highlighted=(node.value,))

    if value < node.value:
        yield from _insert_at(tree, node.left, value, lambda n: setattr(node, "left", n))
    elif value > node.value:
        yield from _insert_at(tree, node.right, value, lambda n: setattr(node, "right", n))
    else:
        tree.stopped = True
        yield _step(
            tree, f"Value {value} already exists - no insertion needed", "duplicate", 4,
            highlighted=(node.value,), is_error=True,
        )
        return

    if tree.stopped:
        return

    update_height(node)
    balance = balance_factor(node)
    yield _step(
        tree, f"Node {node.value}: height={node.height}, balance={balance}", "balance-check", 6,
        highlighted=(node.value,), balance=balance,
    )

    if abs(balance) <= 1:
        yield _step(tree, f"Node {node.value} is balanced. No rotation needed.", "balanced", 11,
                    highlighted=(node.value,), balance=balance)
        return

    yield _step(
        tree, f"Node {node.value} is unbalanced (balance={balance}). Need to rebalance!", "imbalanced", 6,
        highlighted=(node.value,), balance=balance,
    )

    if balance > 1:
        child = node.left
        case = "LL" if value < child.value else "LR"
    else:
        child = node.right
        case = "RR" if value > child.value else "RL"

    label = {
        "LL": "Left-Left case detected. Performing right rotation.",
        "RR": "Right-Right case detected. Performing left rotation.",
        "LR": "Left-Right case detected. Performing left-right rotation.",
        "RL": "Right-Left case detected. Performing right-left rotation.",
    }[case]
    yield _step(tree, label, "rotation-case", _CASE_LINES[case],
                highlighted=(node.value, child.value), balance=balance, case=case)

    if case == "LL":
        yield from _rotate_right(tree, node, attach, case)
    elif case == "RR":
        yield from _rotate_left(tree, node, attach, case)
    elif case == "LR":
        yield from _rotate_left(tree, node.left, lambda n: setattr(node, "left", n), case)
        yield from _rotate_right(tree, node, attach, case)
    else:
        yield from _rotate_right(tree, node.right, lambda n: setattr(node, "right", n), case)
        yield from _rotate_left(tree, node, attach, case)


# ---------------------------------------------------------------------------
# Rotations
# ---------------------------------------------------------------------------
def _rotate_right(tree: _Tree, y: TreeNode, attach: Attach, case: str) -> Iterator[Step]:
    yield _step(tree, f"Performing right rotation on node {y.value}", "rotate", _CASE_LINES[case],
                highlighted=(y.value,), rotation="right", case=case)

    x = y.left
    y.left = x.right
    x.right = y
    update_height(y)
    update_height(x)
    attach(x)

    yield _step(
        tree, f"Right rotation complete - {x.value} is now the root of this subtree", "rotate",
        _CASE_LINES[case], highlighted=(x.value,), balance=balance_factor(x), rotation="right", case=case,
    )


def _rotate_left(tree: _Tree, x: TreeNode, attach: Attach, case: str) -> Iterator[Step]:
    yield _step(tree, f"Performing left rotation on node {x.value}", "rotate", _CASE_LINES[case],
                highlighted=(x.value,), rotation="left", case=case)

    y = x.right
    x.right = y.left
    y.left = x
    update_height(x)
    update_height(y)
    attach(y)

    yield _step(
        tree, f"Left rotation complete - {y.value} is now the root of this subtree", "rotate",
        _CASE_LINES[case], highlighted=(y.value,), balance=balance_factor(y), rotation="left", case=case,
    )


# ---------------------------------------------------------------------------
# Untraced construction
# ---------------------------------------------------------------------------
def build_avl(values: Iterable[int]) -> Optional[TreeSnapshot]:
    """AVL tree from values inserted in order, without recording Steps."""
    root: Optional[TreeNode] = None
    for value in values:
        root = _plain_insert(root, value)
    return freeze(root)


def _plain_insert(node: Optional[TreeNode], value: int) -> TreeNode:
    if node is None:
        return TreeNode(value)
    if value < node.value:
        node.left = _plain_insert(node.left, value)
    elif value > node.value:
        node.right = _plain_insert(node.right, value)
    else:
        return node
    update_height(node)
    balance = balance_factor(node)
    if balance > 1:
        if value > node.left.value:
            node.left = _plain_rotate_left(node.left)
        return _plain_rotate_right(node)
    if balance < -1:
        if value < node.right.value:
            node.right = _plain_rotate_right(node.right)
        return _plain_rotate_left(node)
    return node


def _plain_rotate_right(y: TreeNode) -> TreeNode:
    x = y.left
    y.left, x.right = x.right, y
    update_height(y)
    update_height(x)
    return x


def _plain_rotate_left(x: TreeNode) -> TreeNode:
    y = x.right
    x.right, y.left = y.left, x
    update_height(x)
    update_height(y)
    return y


def _as_avl_tree(tree) -> Optional[TreeNode]:
    if tree is None:
        return None
    if isinstance(tree, TreeSnapshot):
        return thaw(require_tree(tree, balanced=True))
    if isinstance(tree, TreeNode):
        raise InvalidInputError("pass a TreeSnapshot (use structures.freeze), not a live TreeNode")
    return thaw(build_avl(parse_values(tree, "tree")))
