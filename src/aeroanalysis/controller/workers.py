"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: The text service can take many seconds to answer. Running
   it on the main thread would freeze the window and the progress timer.
2. Signals: The result is handed back to the GUI thread through a Qt Signal,
   which is the only safe way to touch widgets and session state.

Classes:
    AnalysisWorker: Runs one AnalysisOrchestrator.generate() call.
"""
import logging

from PySide6.QtCore import QThread, Signal

from aeroanalysis.controller.analysis import AnalysisOrchestrator
from aeroanalysis.model.prompts import AnalysisRequest

logger = logging.getLogger(__name__)


class AnalysisWorker(QThread):
    # (report text, session epoch the request was made in)
    result_ready = Signal(str, int)

    def __init__(self, orchestrator: AnalysisOrchestrator, request: AnalysisRequest, epoch: int) -> None:
        super().__init__()
        self.orchestrator = orchestrator
        self.request = request
        self.epoch = epoch

    def run(self) -> None:
        logger.info("Starting analysis in background thread...")
        text = self.orchestrator.generate(self.request)
        if text is None:
            logger.info("Analysis skipped; another generation is still running.")
            return
        self.result_ready.emit(text, self.epoch)
