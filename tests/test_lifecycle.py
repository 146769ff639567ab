"""Tests for the simulation state machine, driven tick by tick without a timer."""
from __future__ import annotations

import pytest

from aeroanalysis.errors import InvalidTransition
from aeroanalysis.model.lifecycle import (
    MILESTONES, MSG_COMPLETED, MSG_STARTING, SimulationLifecycle, milestone_for_progress
)
from aeroanalysis.model.state import SessionState, SimulationState
from aeroanalysis.model.visualization import VisualizationMode


def test_upload_moves_to_configuring(lifecycle, session):
    """Uploading names the model, starts a fresh log and enables configuration."""
    assert lifecycle.upload("car.stl")

    assert session.state is SimulationState.CONFIGURING
    assert session.model.display_name == "car.stl"
    assert session.log == ["Model loaded: car.stl"]
    assert session.progress == 0


def test_full_run_takes_twenty_ticks(lifecycle, session):
    """Progress rises by 5 per tick, never decreases and completes exactly at 100."""
    lifecycle.upload("car.stl")
    token = lifecycle.run()
    assert session.state is SimulationState.RUNNING
    assert session.log[-1] == MSG_STARTING

    seen = []
    for i in range(20):
        assert session.state is SimulationState.RUNNING, f"completed early after {i} ticks"
        assert lifecycle.tick(token)
        seen.append(session.progress)

    assert seen == list(range(5, 105, 5))
    assert session.state is SimulationState.COMPLETED
    assert session.run_token is None


def test_log_order_after_completed_run(completed_lifecycle):
    """Each milestone is logged exactly once, in order, and completion is last."""
    log = completed_lifecycle.session.log

    assert log == ["Model loaded: car.stl", MSG_STARTING, *MILESTONES, MSG_COMPLETED]
    assert len(set(log)) == len(log)


def test_ticks_after_completion_are_ignored(completed_lifecycle):
    """A late tick cannot push progress past 100 or log again."""
    session = completed_lifecycle.session
    log = list(session.log)

    assert not completed_lifecycle.tick(session.run_token)
    assert not completed_lifecycle.tick(12345)
    assert session.progress == 100
    assert session.log == log


def test_stale_token_is_ignored_after_reset(lifecycle, session):
    """A tick carrying the previous run's token does not touch the new run."""
    lifecycle.upload("car.stl")
    old = lifecycle.run()
    lifecycle.tick(old)

    lifecycle.reset()
    lifecycle.upload("wing.obj")
    new = lifecycle.run()

    assert new != old
    assert not lifecycle.tick(old)
    assert session.progress == 0
    assert lifecycle.tick(new)
    assert session.progress == 5


def test_reset_is_idempotent(completed_lifecycle):
    """Resetting twice leaves the same observable state as resetting once."""
    session = completed_lifecycle.session
    completed_lifecycle.reset()
    first = (session.state, session.model, session.wind, session.progress, list(session.log),
             session.visualization.mode, session.report, session.run_token)

    completed_lifecycle.reset()
    second = (session.state, session.model, session.wind, session.progress, list(session.log),
              session.visualization.mode, session.report, session.run_token)

    assert first == second
    assert session.state is SimulationState.IDLE


def test_reset_mid_run(lifecycle, session):
    """Reset during a run returns to IDLE with nothing left running."""
    lifecycle.upload("car.stl")
    token = lifecycle.run()
    for _ in range(7):
        lifecycle.tick(token)

    lifecycle.reset()

    assert session.state is SimulationState.IDLE
    assert session.progress == 0
    assert session.log == []
    assert not lifecycle.tick(token)


@pytest.mark.parametrize("setup_steps, operation", [
    ([], "run"),
    (["upload"], "upload"),
    (["upload", "run"], "set_wind"),
    (["upload", "run"], "upload"),
    (["upload"], "analyse"),
])
def test_invalid_transitions_are_no_ops(lifecycle, session, setup_steps, operation):
    """Operations requested in the wrong state change nothing."""
    for step in setup_steps:
        if step == "upload":
            lifecycle.upload("car.stl")
        elif step == "run":
            lifecycle.run()

    before = (session.state, session.progress, list(session.log), session.wind, session.run_token)

    if operation == "run":
        assert lifecycle.run() is None
    elif operation == "upload":
        assert not lifecycle.upload("other.stl")
    elif operation == "set_wind":
        assert not lifecycle.set_wind(speed=20.0)
    elif operation == "analyse":
        assert not lifecycle.can("analyse")

    after = (session.state, session.progress, list(session.log), session.wind, session.run_token)
    assert before == after


def test_require_raises_invalid_transition(lifecycle):
    """The strict check names the operation and the current state."""
    with pytest.raises(InvalidTransition) as excinfo:
        lifecycle.require("run")

    assert excinfo.value.operation == "run"
    assert excinfo.value.state is SimulationState.IDLE


def test_set_wind_normalises(lifecycle, session):
    """Wind edits are clamped and wrapped."""
    lifecycle.upload("car.stl")
    assert lifecycle.set_wind(speed=80.0, direction=400)
    assert session.wind.speed == 50.0
    assert session.wind.direction == 40


def test_fail_moves_to_error(lifecycle, session):
    """A failing run ends in ERROR with the reason in the log; only reset leaves it."""
    lifecycle.upload("car.stl")
    token = lifecycle.run()

    assert lifecycle.fail("solver diverged")

    assert session.state is SimulationState.ERROR
    assert session.log[-1] == "Simulation failed: solver diverged"
    assert not lifecycle.tick(token)
    assert not lifecycle.upload("car.stl")

    lifecycle.reset()
    assert session.state is SimulationState.IDLE


def test_fail_ignored_when_idle(lifecycle, session):
    assert not lifecycle.fail("nothing to fail")
    assert session.state is SimulationState.IDLE


def test_upload_resets_visualization(lifecycle, session):
    """A new model starts on the default overlay."""
    session.visualization.select(VisualizationMode.FORCES)
    lifecycle.upload("car.stl")
    assert session.visualization.mode is VisualizationMode.STREAMLINES


def test_apply_report_requires_current_epoch(completed_lifecycle):
    """Reports requested before a reset or re-upload are discarded."""
    session = completed_lifecycle.session
    epoch = session.epoch

    assert completed_lifecycle.apply_report("Cd ≈ 0.5", epoch)
    assert session.report.fields.cd == pytest.approx(0.5)

    assert not completed_lifecycle.apply_report("Cd ≈ 0.9", epoch - 1)
    assert session.report.fields.cd == pytest.approx(0.5)

    completed_lifecycle.reset()
    assert not completed_lifecycle.apply_report("Cd ≈ 0.9", epoch)
    assert session.report.is_empty


def test_tokens_are_unique_across_sessions():
    """Two lifecycles never hand out the same run token."""
    a, b = SimulationLifecycle(SessionState()), SimulationLifecycle(SessionState())
    a.upload("a.stl")
    b.upload("b.stl")
    assert a.run() != b.run()


@pytest.mark.parametrize("progress, expected", [
    (0, None),
    (5, MILESTONES[0]),
    (50, MILESTONES[4]),
    (100, MILESTONES[8]),
    (120, None),
])
def test_milestone_for_progress(progress, expected):
    assert milestone_for_progress(progress) == expected
