"""
Simulation Setup Control Panel
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QDoubleSpinBox, QGroupBox, QFormLayout, QDial, QFileDialog,
    QMessageBox
)
from PySide6.QtCore import Qt

from aeroanalysis.config import MAX_WIND_SPEED, MIN_WIND_SPEED, MODEL_FILE_FILTER
from aeroanalysis.controller.session import SessionController
from aeroanalysis.model.state import SimulationState, WindConditions

logger = logging.getLogger(__name__)


class ControlPanel(QWidget):
    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.controller = controller

        layout = QVBoxLayout(self)

        # --- 1. Model ---
        grp_model = QGroupBox("1. 3D Model")
        l_model = QVBoxLayout(grp_model)

        self.btn_upload = QPushButton("Upload Model")
        self.btn_upload.setMinimumHeight(40)
        self.btn_upload.clicked.connect(self.on_upload_clicked)
        l_model.addWidget(self.btn_upload)

        lbl_formats = QLabel("Accepted formats: .stl, .obj, .ply")
        lbl_formats.setAlignment(Qt.AlignCenter)
        lbl_formats.setStyleSheet("color: gray;")
        l_model.addWidget(lbl_formats)

        layout.addWidget(grp_model)

        # --- 2. Wind Conditions ---
        grp_wind = QGroupBox("2. Wind Conditions")
        form = QFormLayout(grp_wind)

        self.spin_speed = QDoubleSpinBox()
        self.spin_speed.setDecimals(1)
        self.spin_speed.setRange(MIN_WIND_SPEED, MAX_WIND_SPEED)
        self.spin_speed.setSingleStep(0.1)
        self.spin_speed.setSuffix(" m/s")
        self.spin_speed.valueChanged.connect(self.controller.set_wind_speed)
        form.addRow("Wind Speed:", self.spin_speed)

        self.dial_direction = QDial()
        self.dial_direction.setRange(0, 359)
        self.dial_direction.setWrapping(True)
        self.dial_direction.setNotchesVisible(True)
        self.dial_direction.valueChanged.connect(self.controller.set_wind_direction)
        form.addRow("Wind Direction:", self.dial_direction)

        self.lbl_direction = QLabel()
        self.lbl_direction.setAlignment(Qt.AlignCenter)
        form.addRow("", self.lbl_direction)

        layout.addWidget(grp_wind)

        layout.addStretch()

        # --- Actions ---
        self.btn_run = QPushButton("Run Simulation")
        self.btn_run.setMinimumHeight(40)
        self.btn_run.clicked.connect(self.controller.run_simulation)
        layout.addWidget(self.btn_run)

        self.btn_reset = QPushButton("Reset")
        self.btn_reset.clicked.connect(self.controller.reset)
        layout.addWidget(self.btn_reset)

        self.controller.state_changed.connect(self.on_state_changed)
        self.controller.wind_changed.connect(self.on_wind_changed)

        self.on_wind_changed(self.controller.session.wind)
        self.on_state_changed(self.controller.state)

    # --- SLOTS ---

    def on_upload_clicked(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Upload 3D Model", "", MODEL_FILE_FILTER)
        if not fname:
            return
        try:
            self.controller.upload_model(fname)
        except Exception as e:
            logger.exception("Model upload failed")
            QMessageBox.critical(self, "Upload Error", f"Could not load the model:\n{e}")

    def on_wind_changed(self, wind: WindConditions) -> None:
        # Programmatic sync must not echo back into the controller
        self.spin_speed.blockSignals(True)
        self.dial_direction.blockSignals(True)
        try:
            self.spin_speed.setValue(wind.speed)
            self.dial_direction.setValue(wind.direction)
        finally:
            self.spin_speed.blockSignals(False)
            self.dial_direction.blockSignals(False)
        self.lbl_direction.setText(f"{wind.direction}°")

    def on_state_changed(self, state: SimulationState) -> None:
        is_idle = state is SimulationState.IDLE
        is_configuring = state is SimulationState.CONFIGURING
        is_running = state is SimulationState.RUNNING

        self.btn_upload.setEnabled(is_idle)
        self.btn_upload.setText("Upload Model" if is_idle else "Model Loaded")
        self.spin_speed.setEnabled(is_configuring)
        self.dial_direction.setEnabled(is_configuring)
        self.btn_run.setEnabled(is_configuring)
        self.btn_reset.setEnabled(not is_running)
