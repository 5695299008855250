"""
traversal.py — Binary Tree Traversals
=======================================
In-order, pre-order, post-order and level-order walks over a tree.

Yields a Step at:
  1. Start (names the visiting order)
  2. Every descent into a child                → "descend"
  3. Every visit, with the value appended to `result` → "visit"
  4. Final step carrying the complete result

The tree is never modified, so it is frozen once and every Step shares
the same structure.  An empty tree ends in a single error Step.
"""

from collections import deque
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from algorithms.errors import InvalidInputError, as_working_tree
from algorithms.step import Step, TreePayload
from structures.tree import TreeSnapshot, freeze


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
INORDER_PSEUDOCODE: List[str] = [
    "def inorder(node):",             # 0
    "    if node is None: return",    # 1
    "    inorder(node.left)",         # 2
    "    visit(node)",                # 3
    "    inorder(node.right)",        # 4
]

PREORDER_PSEUDOCODE: List[str] = [
    "def preorder(node):",            # 0
    "    if node is None: return",    # 1
    "    visit(node)",                # 2
    "    preorder(node.left)",        # 3
    "    preorder(node.right)",       # 4
]

POSTORDER_PSEUDOCODE: List[str] = [
    "def postorder(node):",           # 0
    "    if node is None: return",    # 1
    "    postorder(node.left)",       # 2
    "    postorder(node.right)",      # 3
    "    visit(node)",                # 4
]

LEVELORDER_PSEUDOCODE: List[str] = [
    "def levelorder(root):",              # 0
    "    queue ← [root]",                 # 1
    "    while queue is not empty:",      # 2
    "        node ← queue.dequeue()",     # 3
    "        visit(node)",                # 4
    "        enqueue node.left, node.right", # 5
]

_TITLES: Dict[str, str] = {
    "inorder":    "In-Order Traversal (Left → Root → Right)",
    "preorder":   "Pre-Order Traversal (Root → Left → Right)",
    "postorder":  "Post-Order Traversal (Left → Right → Root)",
    "levelorder": "Level-Order Traversal (breadth first)",
}


class _Walk:
    """Accumulates the visit order and builds Steps over one frozen tree."""

    def __init__(self, root: TreeSnapshot):
        self.root   = root
        self.result: List[int] = []

    def step(self, description: str, operation: str, line: int,
             highlighted: Tuple[int, ...] = (), is_complete: bool = False) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=TreePayload(root=self.root, highlighted=highlighted, result=tuple(self.result)),
            is_complete=is_complete,
            pseudocode_line=line,
        )

    def visit(self, node: TreeSnapshot, line: int) -> Step:
        self.result.append(node.value)
        return self.step(
            f"Visiting node {node.value} and adding to result", "visit", line,
            highlighted=(node.value,),
        )


# ---------------------------------------------------------------------------
# Public generators
# ---------------------------------------------------------------------------
def inorder_traversal(tree=None) -> Iterator[Step]:
    return _run(tree, "inorder")


def preorder_traversal(tree=None) -> Iterator[Step]:
    return _run(tree, "preorder")


def postorder_traversal(tree=None) -> Iterator[Step]:
    return _run(tree, "postorder")


def levelorder_traversal(tree=None) -> Iterator[Step]:
    return _run(tree, "levelorder")


def traverse(tree=None, order: str = "inorder") -> Iterator[Step]:
    """Dispatch on `order` ("inorder", "preorder", "postorder", "levelorder")."""
    if order not in _WALKERS:
        raise InvalidInputError(f"unknown traversal order {order!r}; expected one of {sorted(_WALKERS)}")
    return _run(tree, order)


def _run(tree, order: str) -> Iterator[Step]:
    root = freeze(as_working_tree(tree))
    return _traverse(root, order)


def _traverse(root: Optional[TreeSnapshot], order: str) -> Iterator[Step]:
    title = _TITLES[order]
    if root is None:
        yield Step(
            description=f"Tree is empty - nothing to traverse ({title})",
            operation="empty",
            snapshot=TreePayload(root=None),
            is_error=True,
            pseudocode_line=1,
        )
        return

    walk = _Walk(root)
    yield walk.step(f"Starting {title}", "start", 0)
    yield from _WALKERS[order](walk, root)
    yield walk.step(
        f"{title.split(' (')[0]} Complete! Result: [{', '.join(str(v) for v in walk.result)}]",
        "complete", 0, is_complete=True,
    )


# ---------------------------------------------------------------------------
# Walkers
# ---------------------------------------------------------------------------
# Each walker keeps its own stack of (node, stage) frames, where the stage
# says which part of the recursive definition runs next.  A degenerate tree
# is as deep as it is large.
def _inorder(walk: _Walk, root: TreeSnapshot) -> Iterator[Step]:
    stack: List[Tuple[TreeSnapshot, int]] = [(root, 0)]
    while stack:
        node, stage = stack.pop()
        if stage == 0:
            stack.append((node, 1))
            if node.left is not None:
                yield walk.step(f"Processing node {node.value} - going to left child first", "descend", 2,
                                highlighted=(node.value,))
                stack.append((node.left, 0))
        else:
            yield walk.visit(node, 3)
            if node.right is not None:
                yield walk.step(f"Processing node {node.value} - going to right child", "descend", 4,
                                highlighted=(node.value,))
                stack.append((node.right, 0))


def _preorder(walk: _Walk, root: TreeSnapshot) -> Iterator[Step]:
    stack: List[Tuple[TreeSnapshot, int]] = [(root, 0)]
    while stack:
        node, stage = stack.pop()
        if stage == 0:
            yield walk.visit(node, 2)
            stack.append((node, 1))
            if node.left is not None:
                yield walk.step(f"Processing node {node.value} - going to left child", "descend", 3,
                                highlighted=(node.value,))
                stack.append((node.left, 0))
        elif node.right is not None:
            yield walk.step(f"Processing node {node.value} - going to right child", "descend", 4,
                            highlighted=(node.value,))
            stack.append((node.right, 0))


def _postorder(walk: _Walk, root: TreeSnapshot) -> Iterator[Step]:
    stack: List[Tuple[TreeSnapshot, int]] = [(root, 0)]
    while stack:
        node, stage = stack.pop()
        if stage == 0:
            stack.append((node, 1))
            if node.left is not None:
                yield walk.step(f"Processing node {node.value} - going to left child first", "descend", 2,
                                highlighted=(node.value,))
                stack.append((node.left, 0))
        elif stage == 1:
            stack.append((node, 2))
            if node.right is not None:
                yield walk.step(f"Processing node {node.value} - going to right child", "descend", 3,
                                highlighted=(node.value,))
                stack.append((node.right, 0))
        else:
            yield walk.visit(node, 4)


def _levelorder(walk: _Walk, root: TreeSnapshot) -> Iterator[Step]:
    queue = deque([root])
    while queue:
        node = queue.popleft()
        yield walk.visit(node, 4)
        children = [c for c in (node.left, node.right) if c is not None]
        if children:
            queue.extend(children)
            yield walk.step(
                f"Enqueue children of {node.value}: {', '.join(str(c.value) for c in children)}",
                "descend", 5, highlighted=tuple(c.value for c in children),
            )


_WALKERS: Dict[str, Callable[[_Walk, TreeSnapshot], Iterator[Step]]] = {
    "inorder":    _inorder,
    "preorder":   _preorder,
    "postorder":  _postorder,
    "levelorder": _levelorder,
}
