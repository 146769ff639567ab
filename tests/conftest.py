import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Import `aeroanalysis.*` from the repo's `src/` directory without installing.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))

    # Avoid Qt trying to connect to a display when GUI code is imported.
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication instance for Qt widget and timer tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture()
def suppress_message_boxes(monkeypatch):
    """Prevent modal QMessageBox calls from blocking tests; record what was shown."""
    from PySide6.QtWidgets import QMessageBox

    shown = []

    def _record(kind, answer):
        def _box(parent, title, text, *args, **kwargs):
            shown.append((kind, title, text))
            return answer
        return _box

    monkeypatch.setattr(QMessageBox, "information", _record("information", QMessageBox.StandardButton.Ok))
    monkeypatch.setattr(QMessageBox, "warning", _record("warning", QMessageBox.StandardButton.Ok))
    monkeypatch.setattr(QMessageBox, "critical", _record("critical", QMessageBox.StandardButton.Ok))
    monkeypatch.setattr(QMessageBox, "question", _record("question", QMessageBox.StandardButton.Yes))
    return shown


class FakeGenerator:
    """Stand-in text service: returns a fixed answer or raises, and records prompts."""

    def __init__(self, text="Cd ≈ 0.45 and Cl: -0.12. Peak gauge pressure is about 61.25 Pa.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture()
def fake_generator():
    return FakeGenerator()


@pytest.fixture()
def make_generator():
    """Factory for generators with a custom answer or error."""
    return FakeGenerator


@pytest.fixture()
def session():
    from aeroanalysis.model.state import SessionState

    return SessionState()


@pytest.fixture()
def lifecycle(session):
    from aeroanalysis.model.lifecycle import SimulationLifecycle

    return SimulationLifecycle(session)


@pytest.fixture()
def completed_lifecycle(lifecycle):
    """A lifecycle driven from IDLE to COMPLETED without a timer."""
    assert lifecycle.upload("car.stl")
    token = lifecycle.run()
    assert token is not None
    for _ in range(20):
        assert lifecycle.tick(token)
    return lifecycle
