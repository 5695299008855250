"""
graph.py — Graph Container & Snapshot
=======================================
The working graph that graph generators read, plus the frozen
`GraphSnapshot` that ends up inside every graph Step.

Responsibilities:
  1. Building nodes & edges                 (add / create)
  2. Adjacency queries                      (neighbours, sorted_edges)
  3. Text / dict import                     (adjacency list, edge list, dict)
  4. Serialisation round-trip               (to_dict / from_dict)
  5. Freezing                               (snapshot → GraphSnapshot)

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup;
    dict order doubles as the deterministic iteration order algorithms see.
  - A separate adjacency dict  `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree).
  - Generators never mutate a Graph, so a single GraphSnapshot taken at the
    start of a run is safely shared by every Step of that run.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Set, Tuple

from structures.node import Node
from structures.edge import Edge


# ---------------------------------------------------------------------------
# Frozen views
# ---------------------------------------------------------------------------
class NodeView(NamedTuple):
    id:    str
    label: str
    x:     float
    y:     float


class EdgeView(NamedTuple):
    id:     str
    source: str
    target: str
    weight: float


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable copy of a Graph's structure at snapshot time."""

    directed: bool
    nodes:    Tuple[NodeView, ...]
    edges:    Tuple[EdgeView, ...]

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n._asdict() for n in self.nodes],
            "edges":    [e._asdict() for e in self.edges],
        }


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        directed   : bool – graph-level directedness
        _adj       : {node_id: [(neighbour_id, edge_id), …]}
    """

    def __init__(self, directed: bool = False):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool           = directed
        self._adj:     Dict[str, List[Tuple[str, str]]] = {}

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        if not node.id:
            raise ValueError("node id must not be empty")
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, node_id: str, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Node:
        """Convenience: create + add in one call."""
        return self.add_node(Node(node_id=node_id, x=x, y=y, label=label))

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, edge: Edge) -> Edge:
        for end in (edge.source, edge.target):
            if end not in self.nodes:
                self.create_node(end)
        if edge.id in self.edges:
            # parallel edge — keep ids unique
            edge.id = f"{edge.id}#{len(self.edges)}"
        self.edges[edge.id] = edge
        self._adj[edge.source].append((edge.target, edge.id))
        if not edge.directed:
            self._adj[edge.target].append((edge.source, edge.id))
        return edge

    def create_edge(self, source: str, target: str, weight: float = 1.0, edge_id: Optional[str] = None) -> Edge:
        return self.add_edge(Edge(source=source, target=target, weight=weight, directed=self.directed, edge_id=edge_id))

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] for every reachable neighbour."""
        return [(nbr_id, self.edges[eid]) for nbr_id, eid in self._adj.get(node_id, [])]

    def sorted_edges(self) -> List[Edge]:
        """All edges ascending by weight; ties keep insertion order."""
        return sorted(self.edges.values(), key=lambda e: e.weight)

    # ==================================================================
    # SNAPSHOT
    # ==================================================================
    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            directed=self.directed,
            nodes=tuple(NodeView(n.id, n.label, n.x, n.y) for n in self.nodes.values()),
            edges=tuple(EdgeView(e.id, e.source, e.target, e.weight) for e in self.edges.values()),
        )

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=data.get("directed", False))
        for nd in data.get("nodes", []):
            g.add_node(Node.from_dict(nd))
        for ed in data.get("edges", []):
            ed = dict(ed)
            ed["directed"] = g.directed
            g.add_edge(Edge.from_dict(ed))
        g.layout_circle(only_unplaced=True)
        return g

    @classmethod
    def from_edge_list(
        cls,
        edges: Iterable[Tuple[str, str, float]],
        nodes: Optional[Iterable[str]] = None,
        directed: bool = False,
    ) -> "Graph":
        """
        Build from (source, target, weight) triples.  `nodes` fixes the node
        order (and adds isolated nodes); otherwise nodes appear in the order
        edges first mention them.
        """
        g = cls(directed=directed)
        for nid in nodes or []:
            g.create_node(nid)
        for src, tgt, w in edges:
            g.create_edge(str(src), str(tgt), weight=w)
        g.layout_circle()
        return g

    # ---------- Import from Adjacency List (text) ----------
    @classmethod
    def from_adjacency_list(cls, text: str, directed: bool = False) -> "Graph":
        """
        Parse a simple text adjacency list.

        Supported formats (one node per line):
            A: B C D            → A connects to B, C, D  (weight 1)
            A: B(3) C(7)        → A–B weight 3, A–C weight 7
            0 -> 1, 2, 3        → alternate arrow syntax

        Raises ValueError on a weight that is not a number or an empty
        node id (e.g. "A: (3)").
        """
        adjacency: Dict[str, List[Tuple[str, float]]] = {}

        for line in text.strip().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if ":" in line:
                parts = line.split(":", 1)
            elif "→" in line:
                parts = line.split("→", 1)
            elif "->" in line:
                parts = line.split("->", 1)
            else:
                adjacency.setdefault(line, [])
                continue

            src = parts[0].strip()
            if not src:
                raise ValueError(f"Line {line!r} has no source node before the separator")
            adjacency.setdefault(src, [])

            for token in parts[1].replace(",", " ").split():
                if "(" in token and token.endswith(")"):
                    tgt, w_str = token[:-1].split("(", 1)
                    try:
                        w = float(w_str)
                    except ValueError:
                        raise ValueError(f"Edge {src}-{tgt}: weight {w_str!r} is not a number") from None
                else:
                    tgt, w = token, 1.0
                if not tgt:
                    raise ValueError(f"Line {line!r}: token {token!r} names no target node")
                adjacency.setdefault(tgt, [])
                adjacency[src].append((tgt, w))

        g = cls(directed=directed)
        for label in adjacency:
            g.create_node(label)

        # deduplicate for undirected
        seen: Set = set()
        for src, targets in adjacency.items():
            for tgt, w in targets:
                key = (src, tgt) if directed else frozenset([src, tgt])
                if key in seen:
                    continue
                seen.add(key)
                g.create_edge(src, tgt, weight=w)

        g.layout_circle()
        return g

    # ---------- Default demo graph ----------
    @classmethod
    def sample(cls) -> "Graph":
        """Six-node weighted graph used when a caller supplies none."""
        return cls.from_edge_list(
            [
                ("A", "B", 4), ("A", "C", 2), ("B", "C", 1), ("B", "D", 5),
                ("C", "D", 8), ("C", "E", 10), ("D", "E", 2), ("D", "F", 6),
                ("E", "F", 3),
            ],
            nodes=["A", "B", "C", "D", "E", "F"],
        )

    # ==================================================================
    # LAYOUT
    # ==================================================================
    def layout_circle(
        self,
        canvas_w: float = 800,
        canvas_h: float = 500,
        only_unplaced: bool = False,
    ) -> None:
        """Place nodes evenly on a circle (renderers may ignore this)."""
        n = len(self.nodes)
        if n == 0:
            return
        if only_unplaced and any(node.x or node.y for node in self.nodes.values()):
            return
        cx, cy = canvas_w / 2, canvas_h / 2
        radius = min(canvas_w, canvas_h) * 0.35
        for i, node in enumerate(self.nodes.values()):
            angle = 2 * math.pi * i / n
            node.x = round(cx + radius * math.cos(angle), 2)
            node.y = round(cy + radius * math.sin(angle), 2)

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def has_negative_edges(self) -> bool:
        return any(e.weight < 0 for e in self.edges.values())

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return f"Graph({kind}, nodes={self.node_count()}, edges={self.edge_count()})"
