"""
step.py — Algorithm Step Snapshot & Trace
==========================================
Every generator yields Step objects; a Trace is the full ordered run.

A Step is a frozen-in-time picture of one meaningful moment of an
algorithm (a comparison, a swap, a visit, a rotation, …):

    • description      – plain-English "what just happened"
    • operation        – short machine tag ("compare", "rotate", "relax", …)
    • snapshot         – one of the payload variants below
    • is_error         – run ended on a domain condition (empty, not found, full)
    • is_complete      – run ended successfully
    • pseudocode_line  – line of the algorithm's PSEUDOCODE executing now

Design decisions:
  - Step and every payload are frozen dataclasses.  When a Step is built
    its payload's dicts are copied and any list is turned into a tuple, so
    nothing inside a Step aliases a container the generator keeps
    mutating.  Seeking backwards must never show future state.
  - Frozen members (TreeSnapshot, GraphSnapshot, tuples) are shared as-is,
    so every Step of a graph run holds the same GraphSnapshot object.
  - One payload class per algorithm family instead of a free-form dict,
    so renderers can dispatch on `snapshot.kind`.
  - Generators do not number their Steps; `Trace.from_steps` does, which
    keeps numbering contiguous no matter how a generator branches.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from structures.edge import EdgeState
from structures.graph import GraphSnapshot
from structures.node import NodeState
from structures.tree import TreeSnapshot


# ---------------------------------------------------------------------------
# Payload variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TreePayload:
    """
    Attributes:
        root        : Frozen copy of the whole tree (None when empty).
        highlighted : Node values to emphasise this step.
        path        : Values visited from the root so far.
        result      : Values emitted so far (traversals).
        balance     : Balance factor just computed (AVL).
        rotation    : "left" / "right" while a rotation is shown (AVL).
        case        : "LL" / "RR" / "LR" / "RL" once detected (AVL).
    """

    kind: ClassVar[str] = "tree"

    root:        Optional[TreeSnapshot] = None
    highlighted: Tuple[int, ...]        = ()
    path:        Tuple[int, ...]        = ()
    result:      Tuple[int, ...]        = ()
    balance:     Optional[int]          = None
    rotation:    Optional[str]          = None
    case:        Optional[str]          = None


@dataclass(frozen=True)
class GraphPayload:
    """
    Attributes:
        graph        : Frozen structure of the graph being processed.
        current      : Node being expanded right now.
        visited      : Nodes fully processed, in visit order.
        frontier     : Queue / stack / unvisited contents, in order.
        distances    : {node_id: tentative distance} (Dijkstra).
        parents      : {node_id: predecessor} as discovered so far.
        current_edge : Edge id being examined.
        path         : Reconstructed path (BFS / DFS target found).
        paths        : {node_id: path from start} (Dijkstra final step).
        mst_edges    : Edge ids accepted so far (Kruskal / Prim).
        total_weight : Sum of accepted MST edge weights.
        node_states  : {node_id: NodeState value} for the renderer.
        edge_states  : {edge_id: EdgeState value} for the renderer.
    """

    kind: ClassVar[str] = "graph"

    graph:        GraphSnapshot
    current:      Optional[str]                = None
    visited:      Tuple[str, ...]              = ()
    frontier:     Tuple[str, ...]              = ()
    distances:    Dict[str, float]             = field(default_factory=dict)
    parents:      Dict[str, Optional[str]]     = field(default_factory=dict)
    current_edge: Optional[str]                = None
    path:         Tuple[str, ...]              = ()
    paths:        Dict[str, Tuple[str, ...]]   = field(default_factory=dict)
    mst_edges:    Tuple[str, ...]              = ()
    total_weight: float                        = 0
    node_states:  Dict[str, str]               = field(default_factory=dict)
    edge_states:  Dict[str, str]               = field(default_factory=dict)


@dataclass(frozen=True)
class ArrayPayload:
    """
    Attributes:
        array          : Array contents at this moment.
        comparing      : Indices being compared.
        swapping       : Indices just swapped / shifted.
        sorted_indices : Indices known to be in final position.
        current_index  : Index under inspection (-1 = none).
        found_index    : Index where the target was found (-1 = none).
        low, high, mid : Active window: binary-search bounds, merge-sort split
                         (None when unused).
        pivot_index    : Quick-sort pivot position (-1 = none).
        target         : Value searched for.
        counters       : Running tallies: comparisons, swaps, shifts, writes, pass.
    """

    kind: ClassVar[str] = "array"

    array:          Tuple[int, ...]
    comparing:      Tuple[int, ...]  = ()
    swapping:       Tuple[int, ...]  = ()
    sorted_indices: Tuple[int, ...]  = ()
    current_index:  int              = -1
    found_index:    int              = -1
    low:            Optional[int]    = None
    high:           Optional[int]    = None
    mid:            Optional[int]    = None
    pivot_index:    int              = -1
    target:         Optional[int]    = None
    counters:       Dict[str, int]   = field(default_factory=dict)


@dataclass(frozen=True)
class LinearPayload:
    """
    Attributes:
        items       : Contents, bottom→top for a stack, front→rear for a queue,
                      head→tail for a linked list.
        structure   : "stack" / "queue" / "array" / "linked-list".
        capacity    : Maximum size.
        highlighted : Indices to emphasise.
    """

    kind: ClassVar[str] = "linear"

    items:       Tuple[int, ...]
    structure:   str
    capacity:    int
    highlighted: Tuple[int, ...] = ()


@dataclass(frozen=True)
class HashPayload:
    """
    Attributes:
        buckets     : Keys per bucket.  Chaining keeps a chain per bucket;
                      linear probing holds at most one key per slot.
        keys        : Every stored key in insertion order.
        method      : "chaining" / "probing".
        highlighted : Bucket index under inspection (-1 = none).
        probed      : Buckets visited by the current operation, in order.
        target      : Key being inserted or searched for.
        found_at    : (bucket, position) once a search succeeds.
        counters    : Running tallies: collisions, probes, comparisons.
    """

    kind: ClassVar[str] = "hash"

    buckets:     Tuple[Tuple[int, ...], ...]
    keys:        Tuple[int, ...]
    method:      str
    highlighted: int                        = -1
    probed:      Tuple[int, ...]            = ()
    target:      Optional[int]              = None
    found_at:    Optional[Tuple[int, int]]  = None
    counters:    Dict[str, int]             = field(default_factory=dict)

    @property
    def table_size(self) -> int:
        return len(self.buckets)


Payload = Union[TreePayload, GraphPayload, ArrayPayload, LinearPayload, HashPayload]


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        description     : Human-readable explanation (never empty).
        operation       : Short tag classifying the event.
        snapshot        : Payload variant; containers detached on construction.
        is_error        : Terminal step of a run that hit a domain condition.
        is_complete     : Terminal step of a successful run.
        step_number     : 0-based index inside its Trace.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
    """

    description:     str
    operation:       str
    snapshot:        Payload
    is_error:        bool = False
    is_complete:     bool = False
    step_number:     int  = 0
    pseudocode_line: int  = 0

    def __post_init__(self):
        if not isinstance(self.description, str) or not self.description.strip():
            raise ValueError("Step description must be a non-empty string")
        if not self.operation:
            raise ValueError("Step operation tag must be non-empty")
        object.__setattr__(self, "snapshot", _detach(self.snapshot))

    @property
    def is_terminal(self) -> bool:
        return self.is_error or self.is_complete

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "description":     self.description,
            "operation":       self.operation,
            "is_error":        self.is_error,
            "is_complete":     self.is_complete,
            "pseudocode_line": self.pseudocode_line,
            "kind":            self.snapshot.kind,
            "snapshot":        _jsonable(self.snapshot),
        }


# ---------------------------------------------------------------------------
# Trace
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Trace:
    """
    Ordered, immutable, non-empty sequence of Steps from one run.

    Attributes:
        context_tag : Which algorithm / operation produced it ("bst-insert", …).
        steps       : The Steps, numbered 0..n-1.
    """

    context_tag: str
    steps:       Tuple[Step, ...]

    def __post_init__(self):
        if not self.context_tag:
            raise ValueError("Trace needs a context tag")
        if not self.steps:
            raise ValueError("Trace must contain at least one step")
        object.__setattr__(self, "steps", tuple(self.steps))

    @classmethod
    def from_steps(cls, context_tag: str, steps: Iterable[Step]) -> "Trace":
        """Exhaust `steps` eagerly and renumber them 0..n-1."""
        numbered = tuple(
            s if s.step_number == i else dataclasses.replace(s, step_number=i)
            for i, s in enumerate(steps)
        )
        return cls(context_tag=context_tag, steps=numbered)

    @property
    def final(self) -> Step:
        return self.steps[-1]

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, idx: int) -> Step:
        return self.steps[idx]

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "context_tag": self.context_tag,
            "steps":       [s.to_dict() for s in self.steps],
        }


# ---------------------------------------------------------------------------
# GraphStepBuilder
# ---------------------------------------------------------------------------
class GraphStepBuilder:
    """
    Mutable scratch-pad graph generators fill in between Steps.

    Usage inside a generator:
        sb = GraphStepBuilder(graph.snapshot(), start="A")
        sb.set_current("A")
        sb.set_frontier(["B", "C"])
        yield sb.build("Visiting A", "visit", line=5)

    State persists across builds; node colours are derived at build time
    from the sets (start < frontier < visited < in-tree < current < path),
    so a generator never has to undo a previous node's colour.
    """

    def __init__(self, graph: GraphSnapshot, start: Optional[str] = None, target: Optional[str] = None):
        self.graph:  GraphSnapshot = graph
        self.start:  Optional[str] = start
        self.target: Optional[str] = target
        self.reset()

    def reset(self):
        self.current:      Optional[str]              = None
        self.current_edge: Optional[str]              = None
        self.visited:      List[str]                  = []
        self.frontier:     List[str]                  = []
        self.tree_nodes:   List[str]                  = []
        self.distances:    Dict[str, float]           = {}
        self.parents:      Dict[str, Optional[str]]   = {}
        self.path:         List[str]                  = []
        self.paths:        Dict[str, Tuple[str, ...]] = {}
        self.mst_edges:    List[str]                  = []
        self.total_weight: float                      = 0
        self.edge_states:  Dict[str, str]             = {}

    # -- helpers --
    def visit(self, node_id: str):
        if node_id not in self.visited:
            self.visited.append(node_id)

    def set_current(self, node_id: Optional[str]):
        self.current = node_id

    def set_frontier(self, nodes: Iterable[str]):
        self.frontier = list(nodes)

    def consider_edge(self, edge_id: Optional[str]):
        """Edge highlighted as CONSIDERING for the next build only."""
        self.current_edge = edge_id

    def mark_edge(self, edge_id: str, state: EdgeState):
        self.edge_states[edge_id] = state.value

    def ignore_edge(self, edge_id: str):
        """IGNORED unless the edge already carries a state."""
        self.edge_states.setdefault(edge_id, EdgeState.IGNORED.value)

    def choose_edge(self, edge_id: str, weight: float):
        self.mst_edges.append(edge_id)
        self.total_weight += weight
        self.mark_edge(edge_id, EdgeState.CHOSEN)

    def set_path(self, path: List[str], edge_ids: Iterable[str] = ()):
        self.path = list(path)
        for eid in edge_ids:
            self.mark_edge(eid, EdgeState.PATH)

    def node_states(self) -> Dict[str, str]:
        states: Dict[str, str] = {}
        if self.start is not None:
            states[self.start] = NodeState.START.value
        if self.target is not None:
            states[self.target] = NodeState.TARGET.value
        for layer, state in (
            (self.frontier,   NodeState.FRONTIER),
            (self.visited,    NodeState.VISITED),
            (self.tree_nodes, NodeState.IN_TREE),
            ([self.current] if self.current else [], NodeState.CURRENT),
            (self.path,       NodeState.PATH),
        ):
            for nid in layer:
                states[nid] = state.value
        return states

    def build(self, description: str, operation: str, line: int = 0,
              is_error: bool = False, is_complete: bool = False) -> Step:
        edge_states = dict(self.edge_states)
        if self.current_edge is not None:
            edge_states[self.current_edge] = EdgeState.CONSIDERING.value
        step = Step(
            description=description,
            operation=operation,
            snapshot=GraphPayload(
                graph=self.graph,
                current=self.current,
                visited=tuple(self.visited),
                frontier=tuple(self.frontier),
                distances=dict(self.distances),
                parents=dict(self.parents),
                current_edge=self.current_edge,
                path=tuple(self.path),
                paths=dict(self.paths),
                mst_edges=tuple(self.mst_edges),
                total_weight=self.total_weight,
                node_states=self.node_states(),
                edge_states=edge_states,
            ),
            is_error=is_error,
            is_complete=is_complete,
            pseudocode_line=line,
        )
        self.current_edge = None
        return step


def reconstruct_path(parents: Dict[str, Optional[str]], target: str) -> List[str]:
    """Walk parent pointers back from `target`; [] when it was never reached."""
    if target not in parents:
        return []
    path: List[str] = []
    cur: Optional[str] = target
    while cur is not None:
        path.append(cur)
        cur = parents.get(cur)
    path.reverse()
    return path


def fmt_number(value: float) -> str:
    """4.0 → "4", 2.5 → "2.5", inf → "∞"."""
    if value == float("inf"):
        return "∞"
    return str(int(value)) if float(value).is_integer() else str(value)


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------
def _detach(payload: Payload) -> Payload:
    """Copy of `payload` owning its dicts; lists become tuples.  Frozen members are shared."""
    changes: Dict[str, Any] = {}
    for f in dataclasses.fields(payload):
        value = getattr(payload, f.name)
        if isinstance(value, dict):
            changes[f.name] = dict(value)
        elif isinstance(value, list):
            changes[f.name] = tuple(value)
    return dataclasses.replace(payload, **changes) if changes else payload


def _jsonable(value: Any) -> Any:
    """Payloads → plain dicts / lists; infinities become None."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, float) and value == float("inf"):
        return None
    return value
