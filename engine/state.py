"""
state.py — Trace Store
=======================
What the playback layer knows at any instant:

    PlaybackState  – mutable record owned by exactly one PlaybackController
    PlaybackView   – frozen copy handed to every reader / observer

Invariants (kept by the controller, checked here by `check()`):
  - current_index ∈ [0, len(trace) − 1], and 0 when no trace is loaded
  - is_playing only while a trace is loaded
  - speed ∈ SPEED_PRESETS
"""

from dataclasses import dataclass
from typing import Optional

from algorithms.step import Step, Trace


# ---------------------------------------------------------------------------
# Speed presets (multipliers of the base tick interval)
# ---------------------------------------------------------------------------
SPEED_PRESETS = (0.25, 0.5, 1, 2, 4)


# ---------------------------------------------------------------------------
# Context-tag matching
# ---------------------------------------------------------------------------
def matches_context(tag: Optional[str], exact: Optional[str] = None, prefix: Optional[str] = None) -> bool:
    """
    True when `tag` equals `exact` or starts with `prefix`.

    Renderers use exact matching for one operation ("bst-insert") and
    prefix matching for a family ("graph-").  Passing neither is a
    programming error.
    """
    if exact is None and prefix is None:
        raise ValueError("matches_context needs an exact tag or a prefix")
    if tag is None:
        return False
    if exact is not None and tag == exact:
        return True
    return prefix is not None and tag.startswith(prefix)


# ---------------------------------------------------------------------------
# Mutable state
# ---------------------------------------------------------------------------
@dataclass
class PlaybackState:
    trace:         Optional[Trace] = None
    current_index: int             = 0
    is_playing:    bool            = False
    speed:         float           = 1
    context_tag:   Optional[str]   = None

    def check(self) -> None:
        """Raise AssertionError if an invariant is broken."""
        if self.trace is None:
            assert self.current_index == 0, "index must be 0 with no trace"
            assert not self.is_playing, "cannot play without a trace"
            assert self.context_tag is None, "context tag belongs to a trace"
        else:
            assert 0 <= self.current_index < len(self.trace), "index out of range"
        assert self.speed in SPEED_PRESETS, "speed must be a preset"

    def view(self) -> "PlaybackView":
        return PlaybackView(
            trace=self.trace,
            current_index=self.current_index,
            is_playing=self.is_playing,
            speed=self.speed,
            context_tag=self.context_tag,
        )


# ---------------------------------------------------------------------------
# Read-only view
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PlaybackView:
    trace:         Optional[Trace]
    current_index: int
    is_playing:    bool
    speed:         float
    context_tag:   Optional[str]

    @property
    def current_step(self) -> Optional[Step]:
        if self.trace is None:
            return None
        return self.trace[self.current_index]

    @property
    def total_steps(self) -> int:
        return len(self.trace) if self.trace is not None else 0

    @property
    def at_end(self) -> bool:
        return self.trace is None or self.current_index == len(self.trace) - 1

    def matches(self, exact: Optional[str] = None, prefix: Optional[str] = None) -> bool:
        return matches_context(self.context_tag, exact=exact, prefix=prefix)

    def to_dict(self, include_step: bool = True) -> dict:
        step = self.current_step
        data = {
            "context_tag":   self.context_tag,
            "current_index": self.current_index,
            "total_steps":   self.total_steps,
            "is_playing":    self.is_playing,
            "speed":         self.speed,
        }
        if include_step:
            data["step"] = step.to_dict() if step is not None else None
        return data
