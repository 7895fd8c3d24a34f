"""
scheduler.py — Cooperative Repeating Timers
============================================
The Player never sleeps and never spawns threads.  It asks a Scheduler
for a repeating callback and gets back a TimerHandle it can cancel.
Callbacks only ever run inside `Scheduler.tick()`, which the owner's
event loop calls (the HTTP layer ticks once per request, the tests
tick after advancing a fake clock).

    sched  = Scheduler()
    handle = sched.every(700, player.step_forward)
    …
    sched.tick()        # fires every interval that has elapsed
    handle.cancel()

Catch-up: if several intervals elapsed since the last tick, the
callback fires once per elapsed interval, in order, unless it cancels
its own handle on the way (the Player does this at the last step).
"""

import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


# ---------------------------------------------------------------------------
# TimerHandle
# ---------------------------------------------------------------------------
class TimerHandle:
    """
    Attributes:
        interval_ms : Milliseconds between firings.
        callback    : Zero-argument callable.
        next_due    : Clock reading at which it fires next.
        cancelled   : True once cancel() has been called.
    """

    def __init__(self, interval_ms: float, callback: Callable[[], object], next_due: float):
        self.interval_ms: float                = interval_ms
        self.callback:    Callable[[], object] = callback
        self.next_due:    float                = next_due
        self.cancelled:   bool                 = False

    def cancel(self) -> None:
        """Idempotent.  A cancelled handle never fires again."""
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else f"due@{self.next_due:.0f}"
        return f"TimerHandle(every={self.interval_ms}ms, {state})"


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class Scheduler:

    def __init__(self, clock: Optional[Clock] = None):
        self._clock:   Clock             = clock or monotonic_ms
        self._handles: List[TimerHandle] = []

    def now(self) -> float:
        return self._clock()

    def every(self, interval_ms: float, callback: Callable[[], object]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        handle = TimerHandle(interval_ms, callback, self.now() + interval_ms)
        self._handles.append(handle)
        logger.debug("timer scheduled every %sms", interval_ms)
        return handle

    def tick(self) -> int:
        """Run every callback that is due.  Returns how many fired."""
        now = self.now()
        fired = 0
        for handle in list(self._handles):
            while handle.active and handle.next_due <= now:
                handle.next_due += handle.interval_ms
                handle.callback()
                fired += 1
        self._handles = [h for h in self._handles if h.active]
        return fired

    def pending(self) -> List[TimerHandle]:
        return [h for h in self._handles if h.active]


# ---------------------------------------------------------------------------
# FakeClock — deterministic time for tests and replays
# ---------------------------------------------------------------------------
class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms
