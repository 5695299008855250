"""
engine/
-------
Playback & recording layer.

    from engine import PlaybackController, AutoplayScheduler, PollingClock, Recorder
"""

from engine.state      import SPEED_PRESETS, PlaybackState, PlaybackView, matches_context
from engine.controller import PlaybackController, validate_speed
from engine.scheduler  import AutoplayScheduler, ClockHandle, PollingClock
from engine.recorder   import Recorder, TraceMetrics

__all__ = [
    "SPEED_PRESETS",
    "PlaybackState",
    "PlaybackView",
    "matches_context",
    "PlaybackController",
    "validate_speed",
    "AutoplayScheduler",
    "ClockHandle",
    "PollingClock",
    "Recorder",
    "TraceMetrics",
]
