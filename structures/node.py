from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Node State Enum — the vocabulary GraphPayload.node_states speaks
# ---------------------------------------------------------------------------
class NodeState(Enum):
    START     = "start"       # source of the run
    TARGET    = "target"      # goal of a BFS / DFS run
    FRONTIER  = "frontier"    # queued / stacked / tentative distance known
    CURRENT   = "current"     # the node being expanded RIGHT NOW
    VISITED   = "visited"     # fully processed
    IN_TREE   = "in_tree"     # part of the growing MST (Prim)
    PATH      = "path"        # on a reconstructed shortest path


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    A graph vertex.  Identity is the id; label and position only matter
    to whoever draws the graph.

    Attributes:
        id    : Unique identifier, also the key algorithms work with.
        label : Human-readable name (defaults to the id).
        x, y  : Layout coordinates (caller decides the unit).
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id:    str   = str(node_id)
        self.label: str   = label or self.id
        self.x:     float = float(x)
        self.y:     float = float(y)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            node_id=data["id"],
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            label=data.get("label"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.1f},{self.y:.1f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
