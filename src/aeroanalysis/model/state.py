"""
Session State (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the loaded model, wind conditions, run timeline,
   active overlay and the analysis report in one place.
2. Decoupling: Views read from this object; the lifecycle and the controller
   write to it. It is passed explicitly, so several independent sessions can
   coexist (one per window, or one per test).

Classes:
    SimulationState: The lifecycle states.
    WindConditions: Speed and direction of the incoming flow.
    ModelHandle: The uploaded object (only its name is ever used).
    SessionState: The main container class.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from aeroanalysis.config import (
    DEFAULT_WIND_DIRECTION, DEFAULT_WIND_SPEED, MAX_WIND_SPEED, MIN_WIND_SPEED
)
from aeroanalysis.model.report import AnalysisReport
from aeroanalysis.model.visualization import VisualizationSelector

logger = logging.getLogger(__name__)


class SimulationState(str, Enum):
    IDLE = "IDLE"
    CONFIGURING = "CONFIGURING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


def clamp_wind_speed(speed: float) -> float:
    """Clamp to [MIN_WIND_SPEED, MAX_WIND_SPEED] at one-decimal resolution."""
    value = float(speed)
    if math.isnan(value):
        return DEFAULT_WIND_SPEED
    value = min(max(value, MIN_WIND_SPEED), MAX_WIND_SPEED)
    return round(value, 1)


def wrap_wind_direction(direction: float) -> int:
    """Whole degrees in [0, 360)."""
    value = float(direction)
    if not math.isfinite(value):
        return DEFAULT_WIND_DIRECTION
    return int(round(value)) % 360


@dataclass(frozen=True)
class WindConditions:
    speed: float = DEFAULT_WIND_SPEED  # m/s
    direction: int = DEFAULT_WIND_DIRECTION  # degrees, 0 = from North

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "speed", clamp_wind_speed(self.speed))
        object.__setattr__(self, "direction", wrap_wind_direction(self.direction))

    def with_speed(self, speed: float) -> WindConditions:
        return replace(self, speed=speed)

    def with_direction(self, direction: float) -> WindConditions:
        return replace(self, direction=direction)


@dataclass(frozen=True)
class ModelHandle:
    """An uploaded 3D object. The file content is never read."""
    display_name: str

    @property
    def object_name(self) -> str:
        """Name used in the analysis request: file name up to the first dot."""
        stem = self.display_name.split(".")[0].strip()
        return stem or "the object"


@dataclass
class SessionState:
    """
    The Single Source of Truth for one session.
    Pass this instance to the lifecycle, the controller and the views.
    """
    state: SimulationState = SimulationState.IDLE
    model: Optional[ModelHandle] = None
    wind: WindConditions = field(default_factory=WindConditions)

    progress: int = 0
    log: list[str] = field(default_factory=list)

    visualization: VisualizationSelector = field(default_factory=VisualizationSelector)
    report: AnalysisReport = field(default_factory=AnalysisReport)

    # Token of the run currently allowed to tick; None when nothing is running
    run_token: Optional[int] = None
    # Bumped on every reset/upload so late analysis results can be recognised
    epoch: int = 0

    def clear_report(self) -> None:
        self.report = AnalysisReport()

    def reset(self) -> None:
        """Clear all data for a new session."""
        self.state = SimulationState.IDLE
        self.model = None
        self.wind = WindConditions()
        self.progress = 0
        self.log = []
        self.visualization.reset()
        self.report = AnalysisReport()
        self.run_token = None
        self.epoch += 1
        logger.info("Session state has been reset.")
