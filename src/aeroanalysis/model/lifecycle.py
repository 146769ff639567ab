"""
Simulation Lifecycle
====================
The state machine behind a simulated run:

    IDLE --upload--> CONFIGURING --run--> RUNNING --tick*--> COMPLETED
    any state --reset--> IDLE

Why is this file needed?
------------------------
1. Ordering: progress only moves forward, each milestone line is logged once
   and in order, and completion happens exactly when progress hits 100.
2. Isolation: it has no timer of its own. Whoever drives it (the Qt
   controller, or a test) calls `tick()` with the token handed out by
   `run()`. Ticks carrying an old token are ignored, so a timer that fires
   after a reset cannot touch the new session.

Requests made in the wrong state are no-ops (they return False/None and log a
warning); the UI is expected to prevent them in the first place.
"""
from __future__ import annotations

import itertools
import logging
import math
from typing import Optional

from aeroanalysis.config import PROGRESS_STEP
from aeroanalysis.errors import InvalidTransition
from aeroanalysis.model.report import AnalysisReport
from aeroanalysis.model.state import ModelHandle, SessionState, SimulationState

logger = logging.getLogger(__name__)

MILESTONES: tuple[str, ...] = (
    "Generating computational domain...",
    "Performing automated meshing...",
    "Applying boundary conditions...",
    "Initializing solver...",
    "Iterating solution (Step 1)...",
    "Iterating solution (Step 2)...",
    "Converging solution...",
    "Post-processing results...",
    "Finalizing simulation...",
)

MSG_MODEL_LOADED = "Model loaded: {name}"
MSG_STARTING = "Starting simulation..."
MSG_COMPLETED = "Simulation completed successfully."
MSG_FAILED = "Simulation failed: {reason}"


def milestone_for_progress(progress: int) -> Optional[str]:
    """The milestone line belonging to a progress value, if any."""
    index = math.floor((progress - 1) / (100 / len(MILESTONES)))
    if 0 <= index < len(MILESTONES):
        return MILESTONES[index]
    return None


class SimulationLifecycle:
    """Drives the state transitions of one `SessionState`."""

    # Shared counter so tokens never repeat, even across lifecycles
    _tokens = itertools.count(1)

    def __init__(self, session: SessionState) -> None:
        self.session = session

    # --- HELPERS ---

    @property
    def state(self) -> SimulationState:
        return self.session.state

    def can(self, operation: str) -> bool:
        allowed = {
            "upload": (SimulationState.IDLE,),
            "run": (SimulationState.CONFIGURING,),
            "tick": (SimulationState.RUNNING,),
            "set_wind": (SimulationState.IDLE, SimulationState.CONFIGURING),
            "analyse": (SimulationState.COMPLETED,),
            "fail": (SimulationState.CONFIGURING, SimulationState.RUNNING),
        }
        return self.session.state in allowed.get(operation, ())

    def require(self, operation: str) -> None:
        """Strict variant of `can()` for callers that want an exception."""
        if not self.can(operation):
            raise InvalidTransition(operation, self.session.state)

    def _ignored(self, operation: str) -> None:
        logger.warning(f"Ignoring '{operation}' while simulation is {self.session.state}.")

    # --- TRANSITIONS ---

    def upload(self, name: str) -> bool:
        if not self.can("upload"):
            self._ignored("upload")
            return False

        s = self.session
        s.model = ModelHandle(display_name=name)
        s.log = [MSG_MODEL_LOADED.format(name=name)]
        s.progress = 0
        s.clear_report()
        s.visualization.reset()
        s.epoch += 1
        s.state = SimulationState.CONFIGURING
        logger.info(f"Model '{name}' loaded.")
        return True

    def set_wind(self, speed: Optional[float] = None, direction: Optional[float] = None) -> bool:
        if not self.can("set_wind"):
            self._ignored("set_wind")
            return False

        wind = self.session.wind
        if speed is not None:
            wind = wind.with_speed(speed)
        if direction is not None:
            wind = wind.with_direction(direction)
        self.session.wind = wind
        return True

    def run(self) -> Optional[int]:
        """Start a run. Returns the token the ticks of this run must carry."""
        if not self.can("run"):
            self._ignored("run")
            return None

        s = self.session
        s.progress = 0
        s.clear_report()
        s.log.append(MSG_STARTING)
        s.run_token = next(self._tokens)
        s.state = SimulationState.RUNNING
        logger.info(
            f"Simulation started (run {s.run_token}): {s.wind.speed:.1f} m/s from {s.wind.direction}°."
        )
        return s.run_token

    def tick(self, token: Optional[int]) -> bool:
        """Advance one step. Returns False when the tick was stale and ignored."""
        s = self.session
        if s.state is not SimulationState.RUNNING or token is None or token != s.run_token:
            logger.debug(f"Stale tick for run {token} ignored.")
            return False

        s.progress = min(s.progress + PROGRESS_STEP, 100)

        milestone = milestone_for_progress(s.progress)
        if milestone is not None and milestone not in s.log:
            s.log.append(milestone)

        if s.progress >= 100:
            s.log.append(MSG_COMPLETED)
            s.run_token = None
            s.state = SimulationState.COMPLETED
            logger.info("Simulation completed.")
        return True

    def fail(self, reason: str) -> bool:
        if not self.can("fail"):
            self._ignored("fail")
            return False

        s = self.session
        s.log.append(MSG_FAILED.format(reason=reason))
        s.run_token = None
        s.state = SimulationState.ERROR
        logger.error(f"Simulation failed: {reason}")
        return True

    def reset(self) -> None:
        self.session.reset()

    # --- REPORT ---

    def apply_report(self, text: str, epoch: int) -> bool:
        """
        Commit a generated report, unless the session moved on since it was
        requested (reset, new upload) or is no longer showing results.
        """
        s = self.session
        if epoch != s.epoch or s.state is not SimulationState.COMPLETED:
            logger.info(f"Discarding stale analysis (requested in epoch {epoch}, now {s.epoch}).")
            return False

        s.report = AnalysisReport.from_text(text)
        return True
