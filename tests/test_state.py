"""Tests for the session data model: wind normalisation, model handle, reset."""
from __future__ import annotations

import math

import pytest

from aeroanalysis.config import DEFAULT_WIND_DIRECTION, DEFAULT_WIND_SPEED
from aeroanalysis.model.report import AnalysisReport
from aeroanalysis.model.state import (
    ModelHandle, SessionState, SimulationState, WindConditions, clamp_wind_speed, wrap_wind_direction
)
from aeroanalysis.model.visualization import VisualizationMode


@pytest.mark.parametrize(
    "raw, expected",
    [
        (10.0, 10.0),
        (0.0, 0.1),
        (-5.0, 0.1),
        (75.0, 50.0),
        (12.34, 12.3),
        (math.nan, DEFAULT_WIND_SPEED),
        (math.inf, 50.0),
    ],
)
def test_clamp_wind_speed(raw, expected):
    """Speeds are clamped to [0.1, 50] m/s at one decimal."""
    assert clamp_wind_speed(raw) == pytest.approx(expected)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, 0),
        (90, 90),
        (360, 0),
        (370, 10),
        (-90, 270),
        (359.6, 0),
        (math.nan, DEFAULT_WIND_DIRECTION),
    ],
)
def test_wrap_wind_direction(raw, expected):
    """Directions are whole degrees in [0, 360)."""
    assert wrap_wind_direction(raw) == expected


def test_wind_conditions_normalise_on_construction():
    """WindConditions never holds an out-of-range value."""
    wind = WindConditions(speed=120.0, direction=-45)
    assert wind.speed == 50.0
    assert wind.direction == 315

    slower = wind.with_speed(7.0)
    assert slower.speed == 7.0
    assert slower.direction == 315
    assert wind.speed == 50.0  # frozen, unchanged


@pytest.mark.parametrize(
    "display_name, object_name",
    [
        ("car.stl", "car"),
        ("wing.v2.obj", "wing"),
        ("model", "model"),
        (".hidden", "the object"),
        ("", "the object"),
    ],
)
def test_model_handle_object_name(display_name, object_name):
    """The object name is the file name up to the first dot."""
    assert ModelHandle(display_name).object_name == object_name


def test_session_reset_restores_defaults():
    """reset() returns every field to its initial value and bumps the epoch."""
    session = SessionState()
    session.state = SimulationState.COMPLETED
    session.model = ModelHandle("car.stl")
    session.wind = WindConditions(30.0, 180)
    session.progress = 100
    session.log = ["Model loaded: car.stl"]
    session.visualization.select(VisualizationMode.FORCES)
    session.report = AnalysisReport.from_text("Cd ≈ 0.4")
    session.run_token = 7
    epoch = session.epoch

    session.reset()

    assert session.state is SimulationState.IDLE
    assert session.model is None
    assert session.wind == WindConditions()
    assert session.progress == 0
    assert session.log == []
    assert session.visualization.mode is VisualizationMode.STREAMLINES
    assert session.report.is_empty
    assert session.run_token is None
    assert session.epoch == epoch + 1


def test_sessions_are_independent():
    """Two sessions never share their mutable parts."""
    a, b = SessionState(), SessionState()
    a.log.append("x")
    a.visualization.select("pressure")
    assert b.log == []
    assert b.visualization.mode is VisualizationMode.STREAMLINES
