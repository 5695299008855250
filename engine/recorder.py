"""
recorder.py — Run Recorder & Analytics
========================================
Runs a registered algorithm to completion, keeps the resulting Trace and
computes the numbers an analytics panel shows next to it.

Usage:
    rec = Recorder()
    trace = rec.run("dijkstra", graph=g, start="A")   # exhausts the generator
    rec.metrics                                       # TraceMetrics card
    rec.export()                                      # JSON-safe dict for save / replay
"""

import sys
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from algorithms import AlgoInfo, get_algorithm
from algorithms.errors import InvalidInputError
from algorithms.step import ArrayPayload, GraphPayload, Trace
from config import get_logger


log = get_logger("algoviz.recorder")

# operations that count as one comparison when the payload keeps no counter
_COMPARE_OPS = frozenset({"compare", "checking", "check", "considering", "select", "search"})
_MOVE_OPS    = frozenset({"swap", "shift", "rotate"})


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class TraceMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    context_tag:   str   = ""
    total_steps:   int   = 0          # number of Steps yielded
    comparisons:   int   = 0
    swaps:         int   = 0          # swaps / shifts / rotations
    nodes_visited: int   = 0          # graph runs only
    path_length:   int   = 0          # edges on the reconstructed path
    total_weight:  float = 0.0        # MST weight
    wall_time_ms:  float = 0.0        # wall-clock time to run to completion
    memory_bytes:  int   = 0          # approx size of the step buffer (sys.getsizeof)
    error:         bool  = False      # final Step is_error
    completed:     bool  = False      # final Step is_complete


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        trace   : Trace of the last run (None before the first).
        metrics : TraceMetrics of the last run.
    """

    def __init__(self):
        self.trace:   Optional[Trace]        = None
        self.metrics: Optional[TraceMetrics] = None
        self._algo_info: Optional[AlgoInfo]  = None
        self._params:    Dict[str, Any]      = {}

    def run(self, algo_key: str, **params) -> Trace:
        """
        Validate, run `algo_key` to completion and record the Trace.

        Raises ValueError for an unknown key, InvalidInputError (a
        ValueError) for malformed params.
        """
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")
        unknown = set(params) - set(info.params)
        if unknown:
            raise InvalidInputError(f"{algo_key} does not accept {', '.join(sorted(unknown))}")

        start = time.monotonic()
        trace = Trace.from_steps(info.context_tag, info.fn(**params))
        wall_ms = (time.monotonic() - start) * 1000

        self._algo_info = info
        self._params    = dict(params)
        self.trace      = trace
        self.metrics    = self._compute_metrics(trace, wall_ms)
        log.info(
            "Recorded %s: %d steps in %.2f ms (%s)",
            algo_key, len(trace), wall_ms,
            "complete" if self.metrics.completed else "error" if self.metrics.error else "open",
        )
        return trace

    def get_metrics(self) -> Optional[TraceMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        if self.trace is None:
            return {}
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "params":   {k: _param_jsonable(v) for k, v in self._params.items()},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            **self.trace.to_dict(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, trace: Trace, wall_ms: float) -> TraceMetrics:
        info = self._algo_info
        last = trace.final
        snap = last.snapshot

        if isinstance(snap, ArrayPayload) and snap.counters:
            comparisons = snap.counters.get("comparisons", 0)
            swaps       = sum(snap.counters.get(k, 0) for k in ("swaps", "shifts", "writes"))
        else:
            comparisons = sum(1 for s in trace if s.operation in _COMPARE_OPS)
            swaps       = sum(1 for s in trace if s.operation in _MOVE_OPS)

        nodes_visited = path_length = 0
        total_weight = 0.0
        if isinstance(snap, GraphPayload):
            nodes_visited = len(snap.visited)
            path_length   = max(len(snap.path) - 1, 0)
            total_weight  = snap.total_weight

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(trace.steps)
        for s in trace:
            mem += sys.getsizeof(s)

        return TraceMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            context_tag=trace.context_tag,
            total_steps=len(trace),
            comparisons=comparisons,
            swaps=swaps,
            nodes_visited=nodes_visited,
            path_length=path_length,
            total_weight=total_weight,
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            error=last.is_error,
            completed=last.is_complete,
        )


def _param_jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return list(value)
    return value
