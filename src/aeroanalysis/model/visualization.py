"""
Visualization Selection
=======================
Which single result overlay (streamlines, pressure, velocity or forces) is
currently shown.

The selection is one enum value rather than four independent booleans, so an
all-false or multi-true combination cannot be represented.
"""
from __future__ import annotations

from enum import Enum
from typing import Union


class VisualizationMode(str, Enum):
    STREAMLINES = "streamlines"
    PRESSURE = "pressure"
    VELOCITY = "velocity"
    FORCES = "forces"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    VisualizationMode.STREAMLINES: "Streamlines",
    VisualizationMode.VELOCITY: "Velocity Vectors",
    VisualizationMode.PRESSURE: "Pressure Contours",
    VisualizationMode.FORCES: "Aerodynamic Forces",
}

DEFAULT_VISUALIZATION = VisualizationMode.STREAMLINES


class VisualizationSelector:
    """Holds the active overlay. Selecting is an overwrite, never a toggle."""

    def __init__(self, mode: VisualizationMode = DEFAULT_VISUALIZATION) -> None:
        self._mode = VisualizationMode(mode)

    @property
    def mode(self) -> VisualizationMode:
        return self._mode

    def select(self, mode: Union[VisualizationMode, str]) -> VisualizationMode:
        """Make `mode` the only active overlay. Raises ValueError for unknown names."""
        self._mode = VisualizationMode(mode)
        return self._mode

    def reset(self) -> None:
        self._mode = DEFAULT_VISUALIZATION

    def is_active(self, mode: Union[VisualizationMode, str]) -> bool:
        return self._mode is VisualizationMode(mode)

    def flags(self) -> dict[str, bool]:
        """Boolean view for renderers: exactly one entry is True."""
        return {m.value: m is self._mode for m in VisualizationMode}

    def __repr__(self) -> str:
        return f"VisualizationSelector({self._mode.value!r})"
