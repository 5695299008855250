"""
mst.py — Minimum Spanning Tree (Kruskal & Prim)
=================================================
Both work on undirected weighted graphs and agree on the total weight.

Kruskal yields a Step at:
  1. Edges sorted ascending by weight (ties keep insertion order)
  2. Each edge considered
  3. Each accept (endpoints in different sets → union) or reject (cycle)
  4. Final step once V−1 edges are accepted

Prim yields a Step at:
  1. Start node placed in the tree
  2. Each selection of the cheapest edge leaving the tree
  3. Each addition of the new node / edge
  4. Final step

A disconnected graph still produces a result (a spanning forest for
Kruskal, the start component's tree for Prim) but the final Step is
error-flagged.  Directed graphs are rejected.
"""

from typing import Iterator, List, Optional, Set

from algorithms.errors import InvalidInputError, require_graph, require_node
from algorithms.step import GraphStepBuilder, Step, fmt_number
from structures.edge import Edge, EdgeState
from structures.graph import Graph
from structures.union_find import UnionFind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
KRUSKAL_PSEUDOCODE: List[str] = [
    "def Kruskal(graph):",                              # 0
    "    edges ← sort(E) by weight",                    # 1
    "    uf ← UnionFind(V)",                            # 2
    "    for (u, v, w) in edges:",                      # 3
    "        if uf.find(u) ≠ uf.find(v):",              # 4
    "            uf.union(u, v);  mst.add((u, v))",     # 5
    "        else: reject — would form a cycle",        # 6
    "        if |mst| = |V| − 1: break",                # 7
    "    return mst",                                   # 8
]

PRIM_PSEUDOCODE: List[str] = [
    "def Prim(graph, start):",                          # 0
    "    tree ← {start}",                               # 1
    "    while |tree| < |V|:",                          # 2
    "        (u, v, w) ← min edge with u ∈ tree, v ∉ tree", # 3
    "        if none: graph is disconnected",           # 4
    "        tree.add(v);  mst.add((u, v))",            # 5
    "    return mst",                                   # 6
]


def _check_undirected(graph: Graph) -> None:
    if graph.directed:
        raise InvalidInputError("minimum spanning trees need an undirected graph")


def _empty(graph: Graph, name: str) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot())
    yield sb.build(f"Graph is empty - add nodes before running {name}", "empty", 0, is_error=True)


def _label(edge: Edge) -> str:
    return f"{edge.source}-{edge.target} (weight {fmt_number(edge.weight)})"


# ---------------------------------------------------------------------------
# Kruskal
# ---------------------------------------------------------------------------
def kruskal(graph: Graph) -> Iterator[Step]:
    graph = require_graph(graph)
    _check_undirected(graph)
    if graph.node_count() == 0:
        return _empty(graph, "Kruskal's algorithm")
    return _kruskal(graph)


def _kruskal(graph: Graph) -> Iterator[Step]:
    sb     = GraphStepBuilder(graph.snapshot())
    uf     = UnionFind(graph.node_ids())
    edges  = graph.sorted_edges()
    needed = graph.node_count() - 1

    yield sb.build(
        "Sorted edges by weight: " + (", ".join(_label(e) for e in edges) or "no edges"),
        "sort", 1,
    )

    for edge in edges:
        if len(sb.mst_edges) == needed:
            break

        sb.consider_edge(edge.id)
        yield sb.build(f"Considering edge {_label(edge)}", "considering", 4)

        if uf.union(edge.source, edge.target):
            sb.choose_edge(edge.id, edge.weight)
            for end in (edge.source, edge.target):
                if end not in sb.tree_nodes:
                    sb.tree_nodes.append(end)
            yield sb.build(
                f"Added edge {edge.source}-{edge.target} to the MST. "
                f"Total weight: {fmt_number(sb.total_weight)}",
                "added", 5,
            )
        else:
            sb.mark_edge(edge.id, EdgeState.REJECTED)
            yield sb.build(
                f"Rejected edge {edge.source}-{edge.target}: {edge.source} and {edge.target} "
                f"are already connected (would create a cycle)",
                "rejected", 6,
            )

    if len(sb.mst_edges) == needed:
        yield sb.build(
            f"Kruskal's algorithm complete. MST has {len(sb.mst_edges)} edges "
            f"with total weight {fmt_number(sb.total_weight)}",
            "complete", 8, is_complete=True,
        )
    else:
        yield sb.build(
            f"Graph is disconnected: found a spanning forest of {uf.components()} components "
            f"with total weight {fmt_number(sb.total_weight)}",
            "disconnected", 8, is_error=True,
        )


# ---------------------------------------------------------------------------
# Prim
# ---------------------------------------------------------------------------
def prim(graph: Graph, start: Optional[str] = None) -> Iterator[Step]:
    """
    Args:
        graph : Undirected weighted graph.
        start : Node to grow the tree from (default: first node).
    """
    graph = require_graph(graph)
    _check_undirected(graph)
    if graph.node_count() == 0:
        return _empty(graph, "Prim's algorithm")
    start = require_node(graph, start if start is not None else graph.node_ids()[0])
    return _prim(graph, start)


def _prim(graph: Graph, start: str) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot(), start=start)
    in_tree: Set[str] = {start}
    sb.tree_nodes.append(start)
    sb.set_frontier(_outside_neighbours(graph, in_tree))
    yield sb.build(f"Starting Prim's algorithm from {start}", "start", 1)

    total = graph.node_count()
    while len(in_tree) < total:
        best: Optional[Edge] = None
        best_node = ""
        # scan tree nodes in insertion order so ties resolve deterministically
        for u in sb.tree_nodes:
            for v, edge in graph.neighbours(u):
                if v in in_tree:
                    continue
                if best is None or edge.weight < best.weight:
                    best, best_node = edge, v

        if best is None:
            break

        sb.set_current(best_node)
        sb.consider_edge(best.id)
        yield sb.build(f"Selecting minimum edge {_label(best)} leaving the tree", "select", 3)

        in_tree.add(best_node)
        sb.tree_nodes.append(best_node)
        sb.choose_edge(best.id, best.weight)
        sb.set_frontier(_outside_neighbours(graph, in_tree))
        yield sb.build(
            f"Added node {best_node} via edge {best.source}-{best.target}. "
            f"Total weight: {fmt_number(sb.total_weight)}",
            "added", 5,
        )

    sb.set_current(None)
    sb.set_frontier([])
    if len(in_tree) == total:
        yield sb.build(
            f"Prim's algorithm complete. MST has {len(sb.mst_edges)} edges "
            f"with total weight {fmt_number(sb.total_weight)}",
            "complete", 6, is_complete=True,
        )
    else:
        yield sb.build(
            f"Graph is disconnected: the tree from {start} spans only {len(in_tree)} of {total} nodes "
            f"(total weight {fmt_number(sb.total_weight)})",
            "disconnected", 4, is_error=True,
        )


def _outside_neighbours(graph: Graph, in_tree: Set[str]) -> List[str]:
    out: List[str] = []
    for nid in graph.node_ids():
        if nid in in_tree:
            continue
        if any(nbr in in_tree for nbr, _ in graph.neighbours(nid)):
            out.append(nid)
    return out
