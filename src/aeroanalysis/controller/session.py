"""
Session Controller
==================
Top-level composition of one session: the state, the lifecycle, the progress
timer and the analysis orchestrator. The views call its slots and listen to
its signals; they never modify the `SessionState` directly.

Why is this file needed?
------------------------
1. Timing: it owns the single QTimer that advances a run. The timer is
   stopped on completion, on reset, on failure and on shutdown.
2. Threading: report generation runs in an AnalysisWorker. The result is
   applied only if the session has not been reset or re-uploaded meanwhile.
3. Notification: every change is announced through a Qt Signal so the panels
   stay in sync without polling.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Union

from PySide6.QtCore import QObject, QTimer, Signal

from aeroanalysis.config import TICK_INTERVAL_MS
from aeroanalysis.controller.analysis import AnalysisOrchestrator
from aeroanalysis.controller.text_service import TextGenerator
from aeroanalysis.controller.workers import AnalysisWorker
from aeroanalysis.model.io import ExportManager
from aeroanalysis.model.lifecycle import SimulationLifecycle
from aeroanalysis.model.prompts import AnalysisRequest
from aeroanalysis.model.state import SessionState, SimulationState
from aeroanalysis.model.visualization import VisualizationMode

logger = logging.getLogger(__name__)


class SessionController(QObject):
    state_changed = Signal(object)  # SimulationState
    progress_changed = Signal(int)
    log_appended = Signal(str)
    log_cleared = Signal()
    wind_changed = Signal(object)  # WindConditions
    visualization_changed = Signal(object)  # VisualizationMode
    report_changed = Signal(object)  # AnalysisReport
    generating_changed = Signal(bool)

    def __init__(
        self,
        generator: TextGenerator,
        session: Optional[SessionState] = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.session = session if session is not None else SessionState()
        self.lifecycle = SimulationLifecycle(self.session)
        self.orchestrator = AnalysisOrchestrator(generator)

        self._worker: Optional[AnalysisWorker] = None
        # True for the span of a synchronous generation
        self._generating_inline = False

        self.timer = QTimer(self)
        self.timer.setInterval(tick_interval_ms)
        self.timer.timeout.connect(self._on_tick)

    # --- PROPERTIES ---

    @property
    def state(self) -> SimulationState:
        return self.session.state

    @property
    def is_generating(self) -> bool:
        return self._worker is not None or self._generating_inline or self.orchestrator.is_generating

    # --- USER INPUTS ---

    def upload_model(self, path: Union[str, os.PathLike]) -> bool:
        name = os.path.basename(os.fspath(path)) or os.fspath(path)
        if not self.lifecycle.upload(name):
            return False

        self.log_cleared.emit()
        for line in self.session.log:
            self.log_appended.emit(line)
        self.progress_changed.emit(self.session.progress)
        self.visualization_changed.emit(self.session.visualization.mode)
        self.report_changed.emit(self.session.report)
        self.state_changed.emit(self.session.state)
        return True

    def set_wind_speed(self, speed: float) -> bool:
        if self.lifecycle.set_wind(speed=speed):
            self.wind_changed.emit(self.session.wind)
            return True
        return False

    def set_wind_direction(self, direction: float) -> bool:
        if self.lifecycle.set_wind(direction=direction):
            self.wind_changed.emit(self.session.wind)
            return True
        return False

    def run_simulation(self) -> bool:
        log_size = len(self.session.log)
        token = self.lifecycle.run()
        if token is None:
            return False

        self._emit_new_log_lines(log_size)
        self.progress_changed.emit(self.session.progress)
        self.report_changed.emit(self.session.report)
        self.state_changed.emit(self.session.state)
        self.timer.start()
        return True

    def reset(self) -> None:
        # Stop the timer before touching state, so no tick lands in between
        self._stop_ticking()
        self.lifecycle.reset()

        self.log_cleared.emit()
        self.progress_changed.emit(self.session.progress)
        self.wind_changed.emit(self.session.wind)
        self.visualization_changed.emit(self.session.visualization.mode)
        self.report_changed.emit(self.session.report)
        self.state_changed.emit(self.session.state)

    def select_visualization(self, mode: Union[VisualizationMode, str]) -> None:
        previous = self.session.visualization.mode
        current = self.session.visualization.select(mode)
        if current is not previous:
            self.visualization_changed.emit(current)

    def fail(self, reason: str) -> bool:
        self._stop_ticking()
        log_size = len(self.session.log)
        if not self.lifecycle.fail(reason):
            return False
        self._emit_new_log_lines(log_size)
        self.state_changed.emit(self.session.state)
        return True

    # --- ANALYSIS ---

    def request_analysis(self, asynchronous: bool = True) -> bool:
        """Start a report generation. Only valid once the run has completed."""
        if not self.lifecycle.can("analyse"):
            logger.warning(f"Analysis requested while simulation is {self.session.state}; ignored.")
            return False
        if self.is_generating:
            logger.warning("Analysis already in progress; request ignored.")
            return False

        request = AnalysisRequest.from_session(self.session)
        epoch = self.session.epoch

        self.session.clear_report()
        self.report_changed.emit(self.session.report)

        if not asynchronous:
            self._generating_inline = True
            self.generating_changed.emit(True)
            try:
                text = self.orchestrator.generate(request)
                if text is not None:
                    self._on_analysis_ready(text, epoch)
            finally:
                self._generating_inline = False
                self.generating_changed.emit(False)
            return True

        self._worker = AnalysisWorker(self.orchestrator, request, epoch)
        self._worker.result_ready.connect(self._on_analysis_ready)
        self._worker.finished.connect(self._on_worker_finished)
        self.generating_changed.emit(True)
        self._worker.start()
        return True

    def _on_analysis_ready(self, text: str, epoch: int) -> None:
        if self.lifecycle.apply_report(text, epoch):
            self.report_changed.emit(self.session.report)

    def _on_worker_finished(self) -> None:
        worker = self._worker
        self._worker = None
        if worker is not None:
            worker.deleteLater()
        self.generating_changed.emit(False)

    # --- EXPORT ---

    def export_csv(self, filepath: Union[str, os.PathLike]) -> str:
        """Raises ExportEmptyError when the report has no quantitative data."""
        return ExportManager.export_csv(self.session.report.fields, filepath)

    # --- TIMER ---

    def _on_tick(self) -> None:
        log_size = len(self.session.log)
        progress = self.session.progress

        try:
            advanced = self.lifecycle.tick(self.session.run_token)
        except Exception as e:
            logger.exception("Simulation tick failed")
            self.fail(str(e))
            return

        if not advanced:
            self._stop_ticking()
            return

        self._emit_new_log_lines(log_size)
        if self.session.progress != progress:
            self.progress_changed.emit(self.session.progress)

        if self.session.state is not SimulationState.RUNNING:
            self._stop_ticking()
            self.state_changed.emit(self.session.state)

    def _stop_ticking(self) -> None:
        if self.timer.isActive():
            self.timer.stop()
            logger.debug("Progress timer stopped.")

    def _emit_new_log_lines(self, previous_size: int) -> None:
        for line in self.session.log[previous_size:]:
            self.log_appended.emit(line)

    # --- TEARDOWN ---

    def shutdown(self, wait_ms: int = 2000) -> None:
        """Stop the timer and let a running generation finish (or time out)."""
        self._stop_ticking()
        worker = self._worker
        if worker is not None and worker.isRunning():
            # A late result must not be applied to whatever comes next
            self.session.epoch += 1
            if not worker.wait(wait_ms):
                # A QThread destroyed while running aborts the process
                logger.warning(f"Analysis worker still running after {wait_ms} ms; terminating it.")
                worker.terminate()
                worker.wait()
