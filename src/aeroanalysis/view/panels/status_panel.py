"""
Simulation Status Panel
Shows the lifecycle state, the progress bar and the run log.
"""
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QProgressBar, QPlainTextEdit, QGroupBox
from PySide6.QtCore import Qt

from aeroanalysis.controller.session import SessionController
from aeroanalysis.model.state import SimulationState

STATE_COLORS = {
    SimulationState.IDLE: "gray",
    SimulationState.CONFIGURING: "#1f77b4",
    SimulationState.RUNNING: "orange",
    SimulationState.COMPLETED: "green",
    SimulationState.ERROR: "red",
}


class StatusPanel(QWidget):
    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.controller = controller

        layout = QVBoxLayout(self)

        grp = QGroupBox("Simulation Status")
        l_grp = QVBoxLayout(grp)

        self.lbl_state = QLabel()
        self.lbl_state.setAlignment(Qt.AlignCenter)
        l_grp.addWidget(self.lbl_state)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(True)
        l_grp.addWidget(self.progress)

        self.txt_log = QPlainTextEdit()
        self.txt_log.setReadOnly(True)
        self.txt_log.setMaximumBlockCount(500)
        l_grp.addWidget(self.txt_log)

        layout.addWidget(grp)

        self.controller.state_changed.connect(self.on_state_changed)
        self.controller.progress_changed.connect(self.progress.setValue)
        self.controller.log_appended.connect(self.on_log_appended)
        self.controller.log_cleared.connect(self.txt_log.clear)

        for line in self.controller.session.log:
            self.on_log_appended(line)
        self.progress.setValue(self.controller.session.progress)
        self.on_state_changed(self.controller.state)

    def on_state_changed(self, state: SimulationState) -> None:
        self.lbl_state.setText(f"Status: {state.value.title()}")
        self.lbl_state.setStyleSheet(f"color: {STATE_COLORS[state]}; font-weight: bold;")

    def on_log_appended(self, line: str) -> None:
        self.txt_log.appendPlainText(f"> {line}")
        bar = self.txt_log.verticalScrollBar()
        bar.setValue(bar.maximum())

    def log_lines(self) -> list[str]:
        text = self.txt_log.toPlainText()
        return [line[2:] for line in text.splitlines() if line.startswith("> ")]
