"""
scheduler.py — Autoplay Scheduler
==================================
Turns "is_playing" into actual motion: while a controller is playing and
not on its last step, exactly one tick is pending, `base_interval_ms /
speed` ahead; each tick calls `step_forward()` and the next tick is armed
from the resulting state change.

The timer source is anything with

    call_later(delay_seconds, callback) -> handle   (handle.cancel())

which is the asyncio event-loop API.  `PollingClock` provides the same
API for hosts without an event loop (the Flask app): due callbacks run
when the host calls `run_due()`.

Design decisions:
  - The scheduler reconciles on every PlaybackView it observes instead of
    hooking individual commands, so pause, reset, clear, load, speed
    change and reach-end all cancel the pending tick through one path.
  - Every armed tick carries a generation number; cancel() bumps the
    generation, so a tick that fires after being cancelled (a timer
    source that cannot truly cancel) is ignored.
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple

from config import get_logger, load_settings
from engine.controller import PlaybackController
from engine.state import PlaybackView


log = get_logger("algoviz.scheduler")


# ---------------------------------------------------------------------------
# PollingClock
# ---------------------------------------------------------------------------
class ClockHandle:
    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when:      float                = when
        self.callback:  Callable[[], None]   = callback
        self.cancelled: bool                 = False

    def cancel(self) -> None:
        self.cancelled = True


class PollingClock:
    """
    Deferred callbacks fired by polling.

    `time_fn` supplies "now" (time.monotonic by default; tests pass a fake).
    While a callback runs, the clock's time is that callback's due time, so
    a tick re-armed from inside a tick is scheduled relative to when it was
    due.  A late poll therefore catches up on every tick it missed.
    """

    def __init__(self, time_fn: Callable[[], float] = time.monotonic):
        self._time_fn = time_fn
        self._heap:   List[Tuple[float, int, ClockHandle]] = []
        self._seq     = itertools.count()
        self._firing_at: Optional[float] = None

    def time(self) -> float:
        return self._firing_at if self._firing_at is not None else self._time_fn()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ClockHandle:
        handle = ClockHandle(self.time() + delay, callback)
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))
        return handle

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every callback due at or before `now`; returns how many fired."""
        now = self._time_fn() if now is None else now
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            when, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._firing_at = when
            try:
                handle.callback()
            finally:
                self._firing_at = None
            fired += 1
        return fired

    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)


# ---------------------------------------------------------------------------
# AutoplayScheduler
# ---------------------------------------------------------------------------
class AutoplayScheduler:
    """
    Attributes:
        controller       : The PlaybackController being driven.
        clock            : Timer source (asyncio loop or PollingClock).
        base_interval_ms : Tick interval at 1x speed.
    """

    def __init__(self, controller: PlaybackController, clock, base_interval_ms: Optional[float] = None):
        self.controller       = controller
        self.clock            = clock
        self.base_interval_ms = load_settings().base_interval_ms if base_interval_ms is None else base_interval_ms
        if self.base_interval_ms <= 0:
            raise ValueError("base_interval_ms must be positive")

        self._handle      = None
        self._generation  = 0
        self._armed_speed: Optional[float] = None
        self._armed_trace = None

        self._unsubscribe = controller.subscribe(self._on_change)
        self._on_change(controller.view)

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------
    @property
    def active(self) -> bool:
        """True while a tick is pending."""
        return self._handle is not None

    def interval(self, speed: float) -> float:
        """Seconds between ticks at `speed`."""
        return self.base_interval_ms / speed / 1000.0

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            log.debug("Autoplay tick cancelled")
        self._generation += 1

    def close(self) -> None:
        """Cancel any pending tick and stop observing the controller."""
        self.cancel()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_change(self, view: PlaybackView) -> None:
        if not view.is_playing or view.at_end:
            self.cancel()
            return
        if (
            self._handle is None
            or view.speed != self._armed_speed
            or view.trace is not self._armed_trace
        ):
            self._arm(view)

    def _arm(self, view: PlaybackView) -> None:
        self.cancel()
        generation = self._generation
        delay = self.interval(view.speed)
        self._handle      = self.clock.call_later(delay, lambda: self._tick(generation))
        self._armed_speed = view.speed
        self._armed_trace = view.trace
        log.debug("Autoplay tick armed in %.3fs (generation %d)", delay, generation)

    def _tick(self, generation: int) -> None:
        if generation != self._generation:
            log.debug("Ignoring stale autoplay tick (generation %d)", generation)
            return
        self._handle = None
        self.controller.step_forward()
