"""
tree.py — Binary Tree Nodes & Snapshots
=========================================
Two node types:

    TreeNode      – mutable working node the BST / AVL generators rewire.
    TreeSnapshot  – frozen copy that goes into a Step.

`freeze()` turns a working tree into a snapshot (a full, independent
copy), `thaw()` goes the other way so a generator can start from the tree
a previous run left behind without touching that run's snapshots.

Design decisions:
  - Every whole-tree walk here uses an explicit stack.  A BST built from
    sorted input is a chain as deep as the input is long, so nothing that
    runs once per level may recurse.
  - TreeSnapshot equality and hashing compare the shape and keys through
    the same iterative walk instead of the dataclass defaults, which
    would recurse one level per node.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Working node
# ---------------------------------------------------------------------------
class TreeNode:
    """
    Attributes:
        value  : Integer key.
        left   : Left child or None.
        right  : Right child or None.
        height : Height of the subtree rooted here (leaf = 1).  Only AVL
                 keeps it current; BST generators recompute on freeze.
    """

    __slots__ = ("value", "left", "right", "height")

    def __init__(self, value: int):
        self.value:  int                = value
        self.left:   Optional["TreeNode"] = None
        self.right:  Optional["TreeNode"] = None
        self.height: int                = 1

    def __repr__(self) -> str:
        return f"TreeNode({self.value}, h={self.height})"


# ---------------------------------------------------------------------------
# Frozen snapshot
# ---------------------------------------------------------------------------
@dataclass(frozen=True, eq=False, repr=False)
class TreeSnapshot:
    value:  int
    left:   Optional["TreeSnapshot"] = None
    right:  Optional["TreeSnapshot"] = None
    height: int                      = 1

    @property
    def balance(self) -> int:
        return height(self.left) - height(self.right)

    def to_dict(self) -> dict:
        built: Dict[int, dict] = {}
        for node in _bottom_up(self, _children):
            built[id(node)] = {
                "value":   node.value,
                "height":  node.height,
                "balance": node.balance,
                "left":    built[id(node.left)] if node.left is not None else None,
                "right":   built[id(node.right)] if node.right is not None else None,
            }
        return built[id(self)]

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["TreeSnapshot"]:
        """Inverse of `to_dict`; heights are recomputed, "balance" is ignored."""
        if data is None:
            return None
        built: Dict[int, TreeSnapshot] = {}
        for raw in _bottom_up(data, _dict_children):
            left  = built[id(raw["left"])] if raw.get("left") is not None else None
            right = built[id(raw["right"])] if raw.get("right") is not None else None
            built[id(raw)] = cls(
                value=int(raw["value"]),
                left=left,
                right=right,
                height=1 + max(height(left), height(right)),
            )
        return built[id(data)]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeSnapshot):
            return NotImplemented
        return self is other or _shape(self) == _shape(other)

    def __hash__(self) -> int:
        return hash(_shape(self))

    def __repr__(self) -> str:
        return f"TreeSnapshot(value={self.value}, height={self.height})"


AnyNode = Union[TreeNode, TreeSnapshot]


# ---------------------------------------------------------------------------
# Iterative walks
# ---------------------------------------------------------------------------
def _children(node: AnyNode) -> Tuple[Any, Any]:
    return node.left, node.right


def _dict_children(data: Any) -> Tuple[Any, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"tree node must be an object, got {type(data).__name__}")
    return data.get("left"), data.get("right")


def _bottom_up(root: Any, children: Callable[[Any], Tuple[Any, Any]]) -> List[Any]:
    """Every node under `root` in post-order, so children come before parents."""
    out:   List[Any] = []
    stack: List[Any] = [root]
    while stack:
        cur = stack.pop()
        out.append(cur)
        stack.extend(c for c in children(cur) if c is not None)
    out.reverse()
    return out


def _shape(node: Optional[AnyNode]) -> Tuple[Any, ...]:
    """Pre-order (value, height) pairs with None for missing children."""
    out:   List[Any] = []
    stack: List[Optional[AnyNode]] = [node]
    while stack:
        cur = stack.pop()
        if cur is None:
            out.append(None)
            continue
        out.append((cur.value, cur.height))
        stack.append(cur.right)
        stack.append(cur.left)
    return tuple(out)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------
def freeze(node: Optional[TreeNode]) -> Optional[TreeSnapshot]:
    """Deep, independent copy of a working tree.  Heights are recomputed."""
    if node is None:
        return None
    built: Dict[int, TreeSnapshot] = {}
    for cur in _bottom_up(node, _children):
        left  = built[id(cur.left)] if cur.left is not None else None
        right = built[id(cur.right)] if cur.right is not None else None
        built[id(cur)] = TreeSnapshot(
            value=cur.value,
            left=left,
            right=right,
            height=1 + max(height(left), height(right)),
        )
    return built[id(node)]


def thaw(snap: Optional[TreeSnapshot]) -> Optional[TreeNode]:
    """Fresh mutable copy of a snapshot."""
    if snap is None:
        return None
    built: Dict[int, TreeNode] = {}
    for cur in _bottom_up(snap, _children):
        node       = TreeNode(cur.value)
        node.left  = built[id(cur.left)] if cur.left is not None else None
        node.right = built[id(cur.right)] if cur.right is not None else None
        update_height(node)
        built[id(cur)] = node
    return built[id(snap)]


def build_bst(values: Iterable[int]) -> Optional[TreeNode]:
    """Plain (untraced) BST insertion; duplicates are dropped."""
    root: Optional[TreeNode] = None
    for value in values:
        if root is None:
            root = TreeNode(value)
            continue
        cur = root
        while True:
            if value < cur.value:
                if cur.left is None:
                    cur.left = TreeNode(value)
                    break
                cur = cur.left
            elif value > cur.value:
                if cur.right is None:
                    cur.right = TreeNode(value)
                    break
                cur = cur.right
            else:
                break
    return recompute_heights(root)


def recompute_heights(node: Optional[TreeNode]) -> Optional[TreeNode]:
    """Recompute `height` bottom-up in place; returns the node for chaining."""
    if node is not None:
        for cur in _bottom_up(node, _children):
            update_height(cur)
    return node


# ---------------------------------------------------------------------------
# Height / balance
# ---------------------------------------------------------------------------
def height(node: Optional[AnyNode]) -> int:
    return node.height if node is not None else 0


def balance_factor(node: Optional[AnyNode]) -> int:
    """height(left) − height(right)."""
    if node is None:
        return 0
    return height(node.left) - height(node.right)


def update_height(node: TreeNode) -> None:
    node.height = 1 + max(height(node.left), height(node.right))


# ---------------------------------------------------------------------------
# Shape checks
# ---------------------------------------------------------------------------
def is_bst(node: Optional[AnyNode]) -> bool:
    """Keys strictly increase left → right everywhere (no duplicates)."""
    values = in_order(node)
    return all(a < b for a, b in zip(values, values[1:]))


def is_avl(node: Optional[AnyNode]) -> bool:
    """A BST whose stored heights are correct and every |balance| ≤ 1."""
    if not is_bst(node):
        return False
    for cur in iter_nodes(node):
        if cur.height != 1 + max(height(cur.left), height(cur.right)):
            return False
        if abs(balance_factor(cur)) > 1:
            return False
    return True


# ---------------------------------------------------------------------------
# Queries (work on either node type)
# ---------------------------------------------------------------------------
def in_order(node: Optional[AnyNode]) -> List[int]:
    out: List[int] = []
    stack: List[Any] = []
    cur = node
    while stack or cur is not None:
        while cur is not None:
            stack.append(cur)
            cur = cur.left
        cur = stack.pop()
        out.append(cur.value)
        cur = cur.right
    return out


def pre_order(node: Optional[AnyNode]) -> List[int]:
    return [cur.value for cur in iter_nodes(node)]


def post_order(node: Optional[AnyNode]) -> List[int]:
    if node is None:
        return []
    return [cur.value for cur in _bottom_up(node, _children)]


def level_order(node: Optional[AnyNode]) -> List[int]:
    out: List[int] = []
    queue = deque([node] if node is not None else [])
    while queue:
        cur = queue.popleft()
        out.append(cur.value)
        if cur.left is not None:
            queue.append(cur.left)
        if cur.right is not None:
            queue.append(cur.right)
    return out


def size(node: Optional[AnyNode]) -> int:
    return len(in_order(node))


def contains(node: Optional[AnyNode], value: int) -> bool:
    while node is not None:
        if value == node.value:
            return True
        node = node.left if value < node.value else node.right
    return False


def iter_nodes(node: Optional[AnyNode]) -> Iterator[AnyNode]:
    """Pre-order iteration over the nodes themselves."""
    stack: List[Any] = [node] if node is not None else []
    while stack:
        cur = stack.pop()
        yield cur
        if cur.right is not None:
            stack.append(cur.right)
        if cur.left is not None:
            stack.append(cur.left)
