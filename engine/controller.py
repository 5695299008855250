"""
controller.py — Playback Controller
====================================
The ONLY object allowed to mutate a PlaybackState.  Every consumer (the
Flask host, the autoplay scheduler, tests) drives playback through this
command surface and reads it through immutable PlaybackView copies.

State machine:
    EMPTY    →  load()          →  PAUSED  (index 0)
    PAUSED   →  play()          →  PLAYING (unless already at the last step)
    PLAYING  →  pause()         →  PAUSED
    PLAYING  →  reaches last    →  PAUSED  (reach-end)
    any      →  reset()         →  PAUSED  (index 0, trace kept)
    any      →  clear()         →  EMPTY

Design decisions:
  - Out-of-range navigation is clamped, and every command is a silent
    no-op while no trace is loaded.  Playback never raises for bad
    positions; only an unknown speed (a programming error) does.
  - Observers receive a PlaybackView after every change that actually
    changed something, in subscription order.
  - Not thread-safe, like everything else in the engine: it is driven
    from one thread / event loop.
"""

from typing import Callable, Iterable, List, Optional

from algorithms.step import Step, Trace
from config import get_logger, load_settings
from engine.state import SPEED_PRESETS, PlaybackState, PlaybackView, matches_context


log = get_logger("algoviz.engine")

Observer = Callable[[PlaybackView], None]


def validate_speed(speed) -> float:
    """Return `speed` if it is one of SPEED_PRESETS, else raise ValueError."""
    if isinstance(speed, bool) or speed not in SPEED_PRESETS:
        raise ValueError(f"speed must be one of {SPEED_PRESETS}, got {speed!r}")
    return speed


class PlaybackController:
    """
    Attributes:
        state : The PlaybackState this controller owns.  Read it through
                `view`; never assign to it from outside.
    """

    def __init__(self, speed: Optional[float] = None):
        initial = load_settings().default_speed if speed is None else speed
        self.state = PlaybackState(speed=validate_speed(initial))
        self._observers: List[Observer] = []

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------
    @property
    def view(self) -> PlaybackView:
        return self.state.view()

    @property
    def current_step(self) -> Optional[Step]:
        return self.view.current_step

    @property
    def has_trace(self) -> bool:
        return self.state.trace is not None

    def matches_context(self, exact: Optional[str] = None, prefix: Optional[str] = None) -> bool:
        return matches_context(self.state.context_tag, exact=exact, prefix=prefix)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Register `callback(view)`; returns a function that unsubscribes it."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, trace: Trace) -> None:
        """Replace the trace; index 0, paused."""
        if not isinstance(trace, Trace):
            raise TypeError(f"expected a Trace, got {type(trace).__name__}")
        s = self.state
        s.trace         = trace
        s.context_tag   = trace.context_tag
        s.current_index = 0
        s.is_playing    = False
        log.info("Loaded trace %s (%d steps)", trace.context_tag, len(trace))
        self._publish()

    def load_trace(self, steps: Iterable[Step], context_tag: str) -> Trace:
        """Build a Trace from `steps` (must be non-empty) and load it."""
        trace = Trace.from_steps(context_tag, steps)
        self.load(trace)
        return trace

    def reset(self) -> None:
        """Back to step 0, paused; the trace stays loaded."""
        s = self.state
        if s.trace is None:
            return
        if s.current_index == 0 and not s.is_playing:
            return
        s.current_index = 0
        s.is_playing    = False
        log.debug("Reset %s", s.context_tag)
        self._publish()

    def clear(self) -> None:
        """Drop the trace and its context tag."""
        s = self.state
        if s.trace is None:
            return
        log.debug("Cleared %s", s.context_tag)
        s.trace         = None
        s.context_tag   = None
        s.current_index = 0
        s.is_playing    = False
        self._publish()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step.  Returns False if already at the end (or no trace)."""
        s = self.state
        if s.trace is None or s.current_index >= len(s.trace) - 1:
            return False
        self._goto(s.current_index + 1)
        return True

    def step_backward(self) -> bool:
        """Rewind one step.  Returns False if already at the start (or no trace)."""
        s = self.state
        if s.trace is None or s.current_index <= 0:
            return False
        self._goto(s.current_index - 1)
        return True

    def seek(self, index: int) -> int:
        """Jump to `index`, clamped into range.  Returns the resulting index."""
        s = self.state
        if s.trace is None:
            return 0
        target = max(0, min(int(index), len(s.trace) - 1))
        if target != s.current_index:
            self._goto(target)
        return s.current_index

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        s = self.state
        if s.trace is None or s.is_playing:
            return
        if s.current_index >= len(s.trace) - 1:
            log.debug("Play ignored: %s is already at its last step", s.context_tag)
            return
        s.is_playing = True
        log.debug("Play %s from step %d at %sx", s.context_tag, s.current_index, s.speed)
        self._publish()

    def pause(self) -> None:
        s = self.state
        if not s.is_playing:
            return
        s.is_playing = False
        log.debug("Pause %s at step %d", s.context_tag, s.current_index)
        self._publish()

    def toggle_play(self) -> None:
        if self.state.is_playing:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed: float) -> None:
        """Change the speed multiplier; only the scheduler uses it."""
        speed = validate_speed(speed)
        if speed == self.state.speed:
            return
        self.state.speed = speed
        log.debug("Speed set to %sx", speed)
        self._publish()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, index: int) -> None:
        s = self.state
        s.current_index = index
        if s.is_playing and index == len(s.trace) - 1:
            s.is_playing = False
            log.debug("Reached the end of %s; playback stopped", s.context_tag)
        else:
            log.debug("Step %d/%d of %s", index, len(s.trace) - 1, s.context_tag)
        self._publish()

    def _publish(self) -> None:
        view = self.state.view()
        for callback in list(self._observers):
            callback(view)
