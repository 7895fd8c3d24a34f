"""
player.py — Step-by-Step Playback Controller
=============================================
The Player is the ONLY object that moves through a trace.  It owns the
current Trace, the cursor into it and the auto-advance timer, and it
projects the Step under the cursor onto the HighlightOverlay.

State machine:
    IDLE      →  run()           →  PAUSED   (FINISHED for a 1-step trace)
    PAUSED    →  play()          →  PLAYING
    PLAYING   →  pause()         →  PAUSED
    PLAYING   →  (last step)     →  FINISHED (timer cancels itself)
    FINISHED  →  step_backward() →  PAUSED
    any       →  reset()         →  IDLE

Every cursor move does a FULL re-projection from the Step alone, so
step, seek and run always leave identical tags for the same index no
matter how the cursor got there.

Timing is delegated to a Scheduler: play() registers a repeating
callback, pause() cancels it.  Nothing here sleeps or spawns a thread.
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from graph import Graph, HighlightOverlay, NodeTag
from algorithms import HEURISTIC_SCALE, UnknownAlgorithm, generate
from algorithms.step import Step
from engine.scheduler import Scheduler, TimerHandle
from engine.trace import RunMetrics, Trace

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1000,     # teaching mode
    "medium": 700,
    "fast":   300,
    "turbo":  50,       # demo mode
}


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------
class Player:
    """
    Attributes:
        overlay     : HighlightOverlay the projection writes into.
        scheduler   : Scheduler that drives auto-advance.
        trace       : Current Trace, or None before the first run.
        cursor      : Index into `trace.steps` currently displayed.
        state       : Current StepperState.
        interval_ms : Milliseconds between auto-advance ticks.
        metrics     : RunMetrics taken when the trace was generated; later
                      edits to the graph do not change them.
    """

    def __init__(
        self,
        overlay: HighlightOverlay,
        scheduler: Scheduler,
        interval_ms: int = SPEED_PRESETS["medium"],
        min_interval_ms: int = 50,
        heuristic_scale: float = HEURISTIC_SCALE,
    ):
        self.overlay:         HighlightOverlay = overlay
        self.scheduler:       Scheduler        = scheduler
        self.trace:           Optional[Trace]  = None
        self.cursor:          int              = 0
        self.state:           StepperState     = StepperState.IDLE
        self.min_interval_ms: int              = min_interval_ms
        self.interval_ms:     int              = max(min_interval_ms, int(interval_ms))
        self.heuristic_scale: float            = heuristic_scale
        self.metrics:         Optional[RunMetrics] = None

        self._graph:    Optional[Graph]       = None
        self._timer:    Optional[TimerHandle] = None
        self._last_run: Optional[Tuple[str, Graph]] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def run(
        self,
        algorithm: str,
        graph: Graph,
        start: Optional[int] = None,
        goal: Optional[int] = None,
    ) -> Trace:
        """
        Generate a fresh trace and show its first Step.

        Auto-play is stopped before anything else.  If generation raises
        (MissingStart, MissingGoal, UnknownAlgorithm) the previous trace,
        cursor and tags stay exactly as they were.
        """
        self.pause()
        steps = generate(algorithm, graph, start, goal, heuristic_scale=self.heuristic_scale)

        self.trace     = Trace(algorithm, steps, start, goal)
        self.metrics   = self.trace.metrics(graph)
        self._graph    = graph
        self._last_run = (algorithm, graph)
        self.cursor    = 0
        self._project()
        self._settle()
        logger.info(
            "run %s from %s to %s: %d step(s)", algorithm, start, goal, len(steps),
        )
        return self.trace

    def reset(self) -> None:
        """Back to IDLE: no trace, no trace tags.  Editor layers survive."""
        self.pause()
        self.trace   = None
        self.metrics = None
        self._graph  = None
        self.cursor  = 0
        self.overlay.clear_trace()
        self.state   = StepperState.IDLE
        logger.debug("player reset")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step.  Returns False (and changes nothing) at the end."""
        if not self.can_step_forward:
            return False
        self.cursor += 1
        self._project()
        if self.cursor == self.trace.last_index and self.is_playing:
            self._cancel_timer()
            logger.debug("playback reached the last step")
        self._settle()
        return True

    def step_backward(self) -> bool:
        """Rewind one step.  Returns False (and changes nothing) at index 0."""
        if not self.can_step_backward:
            return False
        self.cursor -= 1
        self._project()
        self._settle()
        return True

    def seek(self, index: int) -> int:
        """Jump to `index`, clamped to the trace.  Returns the new cursor."""
        if self.trace is None:
            return self.cursor
        self.cursor = max(0, min(int(index), self.trace.last_index))
        self._project()
        if self.cursor == self.trace.last_index and self.is_playing:
            self._cancel_timer()
        self._settle()
        return self.cursor

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self, interval_ms: Optional[int] = None) -> None:
        """
        Start auto-advance.  With no trace loaded the last algorithm is
        re-run against the graph's CURRENT start and goal.
        """
        if interval_ms is not None:
            self.interval_ms = self._clamp(interval_ms)
        if self.trace is None:
            if self._last_run is None:
                raise UnknownAlgorithm("Choose an algorithm to run first.")
            algorithm, graph = self._last_run
            self.run(algorithm, graph, graph.start, graph.goal)
        if self.is_playing or not self.can_step_forward:
            self._settle()
            return
        self._timer = self.scheduler.every(self.interval_ms, self._on_timer)
        self.state  = StepperState.PLAYING
        logger.debug("playing every %dms from step %d", self.interval_ms, self.cursor)

    def pause(self) -> None:
        """Idempotent; safe from any state."""
        self._cancel_timer()
        self._settle()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_interval(self, interval_ms: int) -> None:
        """Change the auto-advance interval; the cursor is untouched."""
        self.interval_ms = self._clamp(interval_ms)
        if self.is_playing:
            self._cancel_timer()
            self._timer = self.scheduler.every(self.interval_ms, self._on_timer)
            self.state  = StepperState.PLAYING
        logger.debug("interval set to %dms", self.interval_ms)

    def set_speed(self, preset: str) -> None:
        self.set_interval(SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"]))

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        if self.trace is None or not self.trace.steps:
            return None
        return self.trace[self.cursor]

    @property
    def total_steps(self) -> int:
        return len(self.trace) if self.trace is not None else 0

    @property
    def can_step_forward(self) -> bool:
        return self.trace is not None and self.cursor < self.trace.last_index

    @property
    def can_step_backward(self) -> bool:
        return self.trace is not None and self.cursor > 0

    @property
    def is_playing(self) -> bool:
        return self._timer is not None and self._timer.active

    def to_dict(self) -> dict:
        step = self.current_step
        return {
            "state":             self.state.value,
            "algorithm":         self.trace.algorithm if self.trace else None,
            "cursor":            self.cursor,
            "total_steps":       self.total_steps,
            "interval_ms":       self.interval_ms,
            "can_step_forward":  self.can_step_forward,
            "can_step_backward": self.can_step_backward,
            "step":              step.to_dict() if step else None,
            "metrics":           self.metrics.to_dict() if self.metrics else None,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_timer(self) -> None:
        if not self.step_forward():
            self._cancel_timer()
            self._settle()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _clamp(self, interval_ms: int) -> int:
        return max(self.min_interval_ms, int(interval_ms))

    def _settle(self) -> None:
        """Derive the state from trace, cursor and timer."""
        if self.trace is None:
            self.state = StepperState.IDLE
        elif self.is_playing:
            self.state = StepperState.PLAYING
        elif self.cursor >= self.trace.last_index:
            self.state = StepperState.FINISHED
        else:
            self.state = StepperState.PAUSED

    def _project(self) -> None:
        """Write the current Step into the overlay from scratch."""
        step = self.current_step
        self.overlay.clear_trace()
        if step is None:
            return
        for node_id in step.visited:
            self.overlay.tag_node(node_id, NodeTag.VISITED)
        for node_id in step.frontier:
            self.overlay.tag_node(node_id, NodeTag.VISITING)
        for node_id in step.path:
            self.overlay.tag_node(node_id, NodeTag.PATH)
        for a, b in list(zip(step.path, step.path[1:])) + list(step.edges):
            edge = self._graph.get_edge_between(a, b) if self._graph is not None else None
            self.overlay.activate_edge(edge.ref if edge is not None else (a, b))
        logger.debug(
            "step %d/%d: %s", self.cursor + 1, len(self.trace), step.description,
        )
