"""
dfs.py — Depth-First Search
=============================
Generator-based DFS using an explicit stack (no Python recursion limit issues).

Yields a Step at:
  1. Push start onto the stack
  2. Pop a node  →  CURRENT, VISITED (or skipped if already visited)
  3. Examine each neighbour  →  edge IGNORED if already visited
  4. Push unseen neighbour  →  FRONTIER
  5. Target found  →  path reconstructed via the parent map
  6. Stack empty  →  complete (no target) or NOT FOUND (target given)

Nodes are marked on pop, so a node may sit on the stack more than once;
the parent recorded is the one from its most recent push, which is the
edge DFS actually followed to reach it.
"""

from typing import Dict, Iterator, List, Optional

from algorithms.errors import require_graph, require_node
from algorithms.step import GraphStepBuilder, Step, reconstruct_path
from structures.edge import EdgeState
from structures.graph import Graph


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, start, target):",           # 0
    "    stack ← [start]",                      # 1
    "    visited ← {}",                         # 2
    "    parent ← {}",                          # 3
    "    while stack is not empty:",            # 4
    "        node ← stack.pop()",               # 5
    "        if node in visited: continue",     # 6
    "        visited.add(node)",                # 7
    "        if node == target: return path",   # 8
    "        for neighbour in adj(node):",      # 9
    "            if neighbour not visited:",    # 10
    "                parent[neighbour] = node", # 11
    "                stack.push(neighbour)",    # 12
    "    return NOT FOUND",                     # 13
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dfs(graph: Graph, start: Optional[str] = None, target: Optional[str] = None) -> Iterator[Step]:
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
    return _dfs(graph, start, target)


def _empty(graph: Graph) -> Iterator[Step]:
    sb = GraphStepBuilder(graph.snapshot())
    yield sb.build("Graph is empty - nothing to search", "empty", 0, is_error=True)


def _dfs(graph: Graph, start: str, target: Optional[str]) -> Iterator[Step]:
    sb      = GraphStepBuilder(graph.snapshot(), start=start, target=target)
    stack   = [start]
    visited = set()
    parent: Dict[str, Optional[str]] = {start: None}
    parent_edge: Dict[str, str] = {}
    sb.parents = parent

    def pending() -> List[str]:
        return [n for n in stack if n not in visited]

    sb.set_frontier(stack)
    yield sb.build(
        f"Initialise: push start '{start}' onto the stack. "
        f"DFS dives as deep as possible before backtracking.",
        "push", 1,
    )

    while stack:
        node = stack.pop()

        if node in visited:
            sb.set_frontier(pending())
            yield sb.build(f"Pop '{node}' - already visited, skip.", "skip", 6)
            continue

        visited.add(node)
        sb.set_current(node)
        sb.visit(node)
        sb.set_frontier(pending())
        yield sb.build(
            f"Pop '{node}' from the stack and mark it visited. "
            f"DFS explores its neighbours before returning here.",
            "visit", 7,
        )

        if node == target:
            path = reconstruct_path(parent, target)
            sb.set_current(None)
            sb.set_path(path, [parent_edge[n] for n in path[1:]])
            yield sb.build(
                f"Target '{target}' found! Path: {' → '.join(path)} ({len(path) - 1} edge(s)).",
                "path", 8, is_complete=True,
            )
            return

        for nbr, edge in graph.neighbours(node):
            if nbr in visited:
                sb.ignore_edge(edge.id)
                sb.consider_edge(edge.id)
                yield sb.build(f"Edge {node}→{nbr}: '{nbr}' already visited - ignore.", "check", 10)
                continue

            parent[nbr] = node
            parent_edge[nbr] = edge.id
            stack.append(nbr)
            sb.mark_edge(edge.id, EdgeState.RELAXED)
            sb.set_frontier(pending())
            sb.consider_edge(edge.id)
            yield sb.build(f"Push '{nbr}' onto the stack (parent = '{node}').", "push", 12)

    sb.set_current(None)
    sb.set_frontier([])
    if target is not None:
        yield sb.build(
            f"Stack empty. '{target}' is not reachable from '{start}'.",
            "not-found", 13, is_error=True,
        )
    else:
        yield sb.build(
            f"DFS complete. Visit order: {', '.join(sb.visited)}",
            "complete", 13, is_complete=True,
        )
