"""
engine/
-------
Playback, timing & edit-history layer.

    from engine import Player, EditHistory, Scheduler, Session
"""

from engine.scheduler import Scheduler, TimerHandle, FakeClock
from engine.trace     import Trace, RunMetrics
from engine.player    import Player, StepperState, SPEED_PRESETS
from engine.history   import EditHistory, HistorySnapshot
from engine.session   import Session

__all__ = [
    "Scheduler",
    "TimerHandle",
    "FakeClock",
    "Trace",
    "RunMetrics",
    "Player",
    "StepperState",
    "SPEED_PRESETS",
    "EditHistory",
    "HistorySnapshot",
    "Session",
]
