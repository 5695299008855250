"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS.  Yields a Step at every meaningful event:
  1. Start node enqueued
  2. Dequeue a node  →  CURRENT, VISITED
  3. Examine each neighbour  →  edge CONSIDERING (IGNORED if already seen)
  4. Enqueue unseen neighbour  →  FRONTIER
  5. Target dequeued  →  reconstruct & highlight the hop-count shortest path

Without a target the walk covers the start's whole component and ends in a
complete Step listing the visit order.  With a target that is never
dequeued it ends in an error Step.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from algorithms.errors import require_graph, require_node
from algorithms.step import GraphStepBuilder, Step, reconstruct_path
from structures.edge import EdgeState
from structures.graph import Graph


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, start, target):",           # 0
    "    queue ← [start]",                      # 1
    "    seen ← {start}",                       # 2
    "    parent ← {}",                          # 3
    "    while queue is not empty:",            # 4
    "        node ← queue.dequeue()",           # 5
    "        if node == target: return path",   # 6
    "        for neighbour in adj(node):",      # 7
    "            if neighbour not in seen:",    # 8
    "                seen.add(neighbour)",      # 9
    "                parent[neighbour] = node", # 10
    "                queue.enqueue(neighbour)", # 11
    "    return NOT FOUND",                     # 12
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bfs(graph: Graph, start: Optional[str] = None, target: Optional[str] = None) -> Iterator[Step]:
    """
    Args:
        graph  : The graph to search.
        start  : Starting node id (default: first node).
        target : Optional goal node id.
    """
    graph = require_graph(graph)
    if graph.node_count() == 0:
        return _empty(graph)
    start = require_node(graph, start if start is not None else graph.node_ids()[0])
    if target is not None:
        target = require_node(graph, target, "target")
    return _bfs(graph, start, target)


def _empty(graph: Graph) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot())
    yield sb.build("Graph is empty - nothing to search", "empty", 0, is_error=True)


def _bfs(graph: Graph, start: str, target: Optional[str]) -> Iterator[Step]:
    sb    = GraphStepBuilder(graph.snapshot(), start=start, target=target)
    queue = deque([start])
    seen  = {start}
    parent: Dict[str, Optional[str]] = {start: None}
    parent_edge: Dict[str, str] = {}
    sb.parents = parent

    sb.set_frontier(queue)
    yield sb.build(
        f"Initialise: start node '{start}' is placed into the queue and marked as seen. "
        f"BFS explores layer by layer from here.",
        "enqueue", 1,
    )

    while queue:
        node = queue.popleft()
        sb.set_current(node)
        sb.visit(node)
        sb.set_frontier(queue)
        yield sb.build(f"Dequeue node '{node}' - it is the earliest discovered node still waiting.", "visit", 5)

        if node == target:
            path = reconstruct_path(parent, target)
            sb.set_current(None)
            sb.set_path(path, [parent_edge[n] for n in path[1:]])
            yield sb.build(
                f"Target '{target}' reached! The shortest path (by hop count) has "
                f"{len(path) - 1} edge(s): {' → '.join(path)}",
                "path", 6, is_complete=True,
            )
            return

        for nbr, edge in graph.neighbours(node):
            if nbr in seen:
                sb.ignore_edge(edge.id)
                sb.consider_edge(edge.id)
                yield sb.build(f"Examine edge {node}→{nbr}: '{nbr}' already seen - skip.", "check", 8)
                continue

            seen.add(nbr)
            parent[nbr] = node
            parent_edge[nbr] = edge.id
            queue.append(nbr)
            sb.mark_edge(edge.id, EdgeState.RELAXED)
            sb.set_frontier(queue)
            sb.consider_edge(edge.id)
            yield sb.build(f"Enqueue '{nbr}' (parent = '{node}').", "enqueue", 11)

    sb.set_current(None)
    if target is not None:
        yield sb.build(
            f"Queue is empty. Target '{target}' is NOT reachable from '{start}'.",
            "not-found", 12, is_error=True,
        )
    else:
        yield sb.build(
            f"BFS complete. Visit order: {', '.join(sb.visited)}",
            "complete", 12, is_complete=True,
        )
