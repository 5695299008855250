"""
bst.py — Binary Search Tree Insert / Search / Delete
=====================================================
Each operation runs against the tree a previous run left behind (a
TreeSnapshot, or a list of values) and yields a Step at:

  insert : every comparison on the way down, the new leaf (or duplicate)
  search : every comparison, found / not found
  delete : every comparison, found, and for the removal itself
             0 children  → leaf removed
             1 child     → node replaced by its child
             2 children  → in-order successor located, its value copied
                           up, then the successor node removed

The final Step's `snapshot.root` is the resulting tree.  Empty tree,
duplicate and not-found end with an `is_error` Step instead of raising.
"""

from typing import Iterator, List, Optional, Tuple

from algorithms.errors import as_working_tree, require_int
from algorithms.step import Step, TreePayload
from structures.tree import TreeNode, freeze


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
INSERT_PSEUDOCODE: List[str] = [
    "def insert(node, v):",                       # 0
    "    if node is None: return Node(v)",        # 1
    "    if v < node.value:",                     # 2
    "        node.left ← insert(node.left, v)",   # 3
    "    elif v > node.value:",                   # 4
    "        node.right ← insert(node.right, v)", # 5
    "    else: duplicate — do nothing",           # 6
    "    return node",                            # 7
]

SEARCH_PSEUDOCODE: List[str] = [
    "def search(node, v):",                       # 0
    "    if node is None: return NOT FOUND",      # 1
    "    if v == node.value: return node",        # 2
    "    if v < node.value:",                     # 3
    "        return search(node.left, v)",        # 4
    "    return search(node.right, v)",           # 5
]

DELETE_PSEUDOCODE: List[str] = [
    "def delete(root, v):",                             # 0
    "    node ← find(root, v)",                         # 1
    "    if node is None: return NOT FOUND",            # 2
    "    if node has two children:",                    # 3
    "        s ← min(node.right)",                      # 4
    "        node.value ← s.value",                     # 5
    "        node ← s",                                 # 6
    "    child ← node.left or node.right",              # 7
    "    replace node with child in its parent",        # 8
]


# ---------------------------------------------------------------------------
# Step helper
# ---------------------------------------------------------------------------
def _step(
    root: Optional[TreeNode],
    description: str,
    operation: str,
    line: int,
    highlighted: Tuple[int, ...] = (),
    path: Tuple[int, ...] = (),
    is_error: bool = False,
    is_complete: bool = False,
) -> Step:
    return Step(
        description=description,
        operation=operation,
        snapshot=TreePayload(root=freeze(root), highlighted=highlighted, path=path),
        is_error=is_error,
        is_complete=is_complete,
        pseudocode_line=line,
    )


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------
def bst_insert(tree=None, value=None) -> Iterator[Step]:
    """Insert `value`; yields comparison Steps then the new leaf."""
    value = require_int(value)
    root = as_working_tree(tree)
    return _insert(root, value)


def _insert(root: Optional[TreeNode], value: int) -> Iterator[Step]:
    if root is None:
        root = TreeNode(value)
        yield _step(
            root, f"Inserted {value} as root node", "insert", 1,
            highlighted=(value,), path=(value,), is_complete=True,
        )
        return

    node = root
    path: Tuple[int, ...] = ()
    while True:
        path += (node.value,)
        yield _step(root, f"Comparing {value} with {node.value}", "compare", 2, highlighted=(node.value,), path=path)

        if value < node.value:
            if node.left is not None:
                node = node.left
                continue
            node.left = TreeNode(value)
            yield _step(
                root, f"Inserted {value} to the left of {node.value}", "insert", 3,
                highlighted=(value,), path=path + (value,), is_complete=True,
            )
        elif value > node.value:
            if node.right is not None:
                node = node.right
                continue
            node.right = TreeNode(value)
            yield _step(
                root, f"Inserted {value} to the right of {node.value}", "insert", 5,
                highlighted=(value,), path=path + (value,), is_complete=True,
            )
        else:
            yield _step(
                root, f"Value {value} already exists in the tree", "duplicate", 6,
                highlighted=(node.value,), path=path, is_error=True,
            )
        return


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def bst_search(tree=None, value=None) -> Iterator[Step]:
    value = require_int(value)
    root = as_working_tree(tree)
    return _search(root, value)


def _search(root: Optional[TreeNode], value: int) -> Iterator[Step]:
    if root is None:
        yield _step(root, "Tree is empty", "empty", 1, is_error=True)
        return

    node: Optional[TreeNode] = root
    path: Tuple[int, ...] = ()
    while node is not None:
        path += (node.value,)
        yield _step(root, f"Comparing {value} with {node.value}", "compare", 2, highlighted=(node.value,), path=path)
        if value == node.value:
            yield _step(
                root, f"Found {value}!", "found", 2,
                highlighted=(node.value,), path=path, is_complete=True,
            )
            return
        node = node.left if value < node.value else node.right

    yield _step(root, f"Value {value} not found in the tree", "not-found", 1, path=path, is_error=True)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------
def bst_delete(tree=None, value=None) -> Iterator[Step]:
    value = require_int(value)
    root = as_working_tree(tree)
    return _delete(root, value)


def _delete(root: Optional[TreeNode], value: int) -> Iterator[Step]:
    if root is None:
        yield _step(root, "Tree is empty", "empty", 2, is_error=True)
        return

    # -- locate --
    parent: Optional[TreeNode] = None
    node:   Optional[TreeNode] = root
    path:   Tuple[int, ...]    = ()
    while node is not None:
        path += (node.value,)
        yield _step(
            root, f"Searching for {value}, currently at {node.value}", "compare", 1,
            highlighted=(node.value,), path=path,
        )
        if value == node.value:
            break
        parent = node
        node = node.left if value < node.value else node.right

    if node is None:
        yield _step(root, f"Value {value} not found in the tree", "not-found", 2, path=path, is_error=True)
        return

    yield _step(root, f"Found {value}, preparing to delete", "found", 1, highlighted=(value,), path=path)

    # -- two children: promote the in-order successor --
    promoted = False
    if node.left is not None and node.right is not None:
        succ_parent = node
        succ = node.right
        while succ.left is not None:
            succ_parent = succ
            succ = succ.left
        yield _step(
            root, f"Found inorder successor {succ.value} to replace {value}", "successor", 4,
            highlighted=(succ.value,), path=path,
        )
        node.value = succ.value
        yield _step(
            root, f"Replaced {value} with {succ.value}", "replace", 5,
            highlighted=(node.value,), path=path,
        )
        # the successor has no left child, so it falls into the 0/1-child case
        parent, node = succ_parent, succ
        promoted = True

    # -- zero or one child --
    child = node.left if node.left is not None else node.right
    if parent is None:
        root = child
    elif parent.left is node:
        parent.left = child
    else:
        parent.right = child

    if promoted:
        description = f"Removed the old successor node {node.value} from the right subtree"
        highlighted: Tuple[int, ...] = (node.value,)
    elif child is None:
        description = f"Removing leaf node {node.value}"
        highlighted = ()
    else:
        description = f"Replacing {node.value} with {'left' if child is node.left else 'right'} child {child.value}"
        highlighted = (child.value,)
    yield _step(root, description, "delete", 8, highlighted=highlighted, is_complete=True)
