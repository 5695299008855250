"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Single-source shortest paths with the textbook O(V²) selection: every
round scans the unvisited set for the smallest tentative distance.

Yields a Step at:
  1. Initialise distances (start = 0, everything else ∞)   → "initialize"
  2. Select the closest unvisited node                      → "visiting"
  3. Each neighbour check  (current + w vs. best known)      → "checking"
  4. Each successful relaxation                             → "relax"
  5. No unvisited node with a finite distance remains       → "unreachable"
  6. Final step with the shortest path to every reachable
     node, rebuilt from parent pointers                      → "complete"

Design decisions:
  - No heap.  The linear scan is what gets animated, and ties go to the
    node that appears first in graph order, so traces are deterministic.
  - Negative weights are rejected up front (InvalidInputError); an empty
    graph is a domain condition and ends in an error Step.
"""

import math
from typing import Dict, Iterator, List, Optional

from algorithms.errors import InvalidInputError, require_graph, require_node
from algorithms.step import GraphStepBuilder, Step, fmt_number, reconstruct_path
from structures.edge import EdgeState
from structures.graph import Graph


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, start):",                       # 0
    "    dist ← {v: ∞ for v in V};  dist[start] ← 0",    # 1
    "    unvisited ← V",                                 # 2
    "    while unvisited is not empty:",                 # 3
    "        u ← argmin(dist[v] for v in unvisited)",    # 4
    "        if dist[u] = ∞: break",                     # 5
    "        unvisited.remove(u)",                       # 6
    "        for (v, w) in adj(u), v unvisited:",        # 7
    "            if dist[u] + w < dist[v]:",             # 8
    "                dist[v] ← dist[u] + w",             # 9
    "                parent[v] ← u",                     # 10
    "    return dist, parent",                           # 11
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(graph: Graph, start: Optional[str] = None) -> Iterator[Step]:
    """
    Args:
        graph : Graph with non-negative weights.
        start : Source node id (default: first node).
    """
    graph = require_graph(graph)
    if graph.node_count() == 0:
        return _empty(graph)
    if graph.has_negative_edges():
        raise InvalidInputError("Dijkstra's algorithm requires non-negative edge weights")
    start = require_node(graph, start if start is not None else graph.node_ids()[0])
    return _dijkstra(graph, start)


def _empty(graph: Graph) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot())
    yield sb.build("Graph is empty - add nodes before running Dijkstra's algorithm", "empty", 0, is_error=True)


def _dijkstra(graph: Graph, start: str) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot(), start=start)

    dist: Dict[str, float] = {nid: math.inf for nid in graph.node_ids()}
    dist[start] = 0
    parents:     Dict[str, Optional[str]] = {start: None}
    parent_edge: Dict[str, str]           = {}
    unvisited:   List[str]                = graph.node_ids()

    def frontier() -> List[str]:
        return [n for n in unvisited if dist[n] < math.inf]

    sb.distances = dist
    sb.parents   = parents
    sb.set_frontier(frontier())
    yield sb.build(f"Starting Dijkstra's algorithm from {start}. All distances initialized.", "initialize", 1)

    while unvisited:
        # -- linear-scan selection --
        current = unvisited[0]
        for nid in unvisited[1:]:
            if dist[nid] < dist[current]:
                current = nid

        if dist[current] == math.inf:
            sb.set_current(None)
            yield sb.build("No more reachable nodes. Remaining nodes are unreachable.", "unreachable", 5)
            break

        unvisited.remove(current)
        sb.visit(current)
        sb.set_current(current)
        sb.set_frontier(frontier())
        yield sb.build(f"Visiting node {current} with distance {fmt_number(dist[current])}", "visiting", 4)

        for nbr, edge in graph.neighbours(current):
            if nbr not in unvisited:
                continue
            new_dist = dist[current] + edge.weight

            sb.consider_edge(edge.id)
            yield sb.build(
                f"Checking neighbor {nbr}. Current distance: {fmt_number(dist[nbr])}, new distance: {fmt_number(new_dist)}",
                "checking", 8,
            )

            if new_dist < dist[nbr]:
                old_edge = parent_edge.get(nbr)
                if old_edge is not None:
                    sb.mark_edge(old_edge, EdgeState.IGNORED)
                dist[nbr]        = new_dist
                parents[nbr]     = current
                parent_edge[nbr] = edge.id
                sb.mark_edge(edge.id, EdgeState.RELAXED)
                sb.set_frontier(frontier())
                yield sb.build(f"Updated distance to {nbr}: {fmt_number(new_dist)} (via {current})", "relax", 9)

    # -- final: every reachable node's path --
    sb.set_current(None)
    sb.set_frontier([])
    sb.paths = {nid: tuple(reconstruct_path(parents, nid)) for nid in graph.node_ids() if nid in parents}
    for eid in parent_edge.values():
        sb.mark_edge(eid, EdgeState.PATH)
    yield sb.build(
        f"Dijkstra's algorithm complete. Shortest paths from {start} calculated.", "complete", 11,
        is_complete=True,
    )
