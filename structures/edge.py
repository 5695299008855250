"""
edge.py — Graph Edge
====================
Connects two nodes and carries a weight.

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references, so
    edges serialise cleanly and never drag a live node into a snapshot.
  - The default id is "source-target", which keeps traces reproducible:
    the same graph always produces the same edge ids.
  - Weight defaults to 1 for unweighted graphs and is always stored as a
    finite float; anything else raises ValueError at construction.
"""

import math
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Edge State Enum — the vocabulary GraphPayload.edge_states speaks
# ---------------------------------------------------------------------------
class EdgeState(Enum):
    CONSIDERING = "considering"   # being examined this step (Kruskal / Prim / BFS)
    RELAXED     = "relaxed"       # Dijkstra improved a distance through it
    IGNORED     = "ignored"       # examined and skipped
    CHOSEN      = "chosen"        # accepted into the MST
    REJECTED    = "rejected"      # would close a cycle
    PATH        = "path"          # on a reconstructed path


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
class Edge:
    """
    Attributes:
        id       : Unique identifier.
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Numeric cost (default 1).
        directed : If False, traversal works in both directions.
    """

    __slots__ = ("id", "source", "target", "weight", "directed")

    def __init__(
        self,
        source: str,
        target: str,
        weight: float = 1.0,
        directed: bool = False,
        edge_id: Optional[str] = None,
    ):
        self.source:   str   = str(source)
        self.target:   str   = str(target)
        self.id:       str   = edge_id or f"{self.source}-{self.target}"
        self.weight:   float = _as_weight(weight, self.id)
        self.directed: bool  = directed

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "source":   self.source,
            "target":   self.target,
            "weight":   self.weight,
            "directed": self.directed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(
            source=data["source"],
            target=data["target"],
            weight=data.get("weight", 1.0),
            directed=data.get("directed", False),
            edge_id=data.get("id"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


def _as_weight(weight, edge_id: str) -> float:
    """`weight` as a finite float, or ValueError."""
    if isinstance(weight, bool):
        raise ValueError(f"Edge {edge_id}: weight {weight!r} is not a number")
    try:
        value = float(weight)
    except (TypeError, ValueError):
        raise ValueError(f"Edge {edge_id}: weight {weight!r} is not a number") from None
    if not math.isfinite(value):
        raise ValueError(f"Edge {edge_id}: weight must be finite, got {weight!r}")
    return value
