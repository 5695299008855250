"""
structures/
-----------
Working data structures the trace generators operate on, and the frozen
snapshots that end up inside Steps.  Public API:

    from structures import Graph, Node, Edge, GraphSnapshot
    from structures import TreeNode, TreeSnapshot, freeze, thaw
    from structures import UnionFind
"""

from structures.node       import Node, NodeState
from structures.edge       import Edge, EdgeState
from structures.graph      import Graph, GraphSnapshot, NodeView, EdgeView
from structures.tree       import TreeNode, TreeSnapshot, freeze, thaw
from structures.union_find import UnionFind

__all__ = [
    "Node",      "NodeState",
    "Edge",      "EdgeState",
    "Graph",     "GraphSnapshot", "NodeView", "EdgeView",
    "TreeNode",  "TreeSnapshot",  "freeze",   "thaw",
    "UnionFind",
]
