"""
Results Control Panel
=====================
Overlay selection, the quantitative summary parsed from the report, the
report itself and the CSV export.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QGroupBox, QFormLayout, QRadioButton, QButtonGroup,
    QStackedWidget, QTextBrowser, QHBoxLayout, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt

from aeroanalysis.config import DEFAULT_EXPORT_FILENAME
from aeroanalysis.controller.session import SessionController
from aeroanalysis.errors import ExportEmptyError
from aeroanalysis.model.io import EMPTY_EXPORT_NOTICE
from aeroanalysis.model.report import AnalysisReport, ReportFields
from aeroanalysis.model.state import SimulationState
from aeroanalysis.model.visualization import VisualizationMode
from aeroanalysis.view.widgets.force_chart import ForceChart

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
PLACEHOLDER_TEXT = "Click the button above to generate an AI-powered analysis of the simulation results."

# Display order of the overlay buttons
MODE_ORDER = (
    VisualizationMode.STREAMLINES,
    VisualizationMode.VELOCITY,
    VisualizationMode.PRESSURE,
    VisualizationMode.FORCES,
)


def format_value(value: Optional[float], decimals: int, unit: str = "") -> str:
    if value is None:
        return NOT_AVAILABLE
    text = f"{value:.{decimals}f}"
    return f"{text} {unit}" if unit else text


class ResultsControlPanel(QWidget):
    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.controller = controller

        outer = QVBoxLayout(self)
        self.stack = QStackedWidget()
        outer.addWidget(self.stack)

        # Page 0: nothing to show yet
        self.lbl_placeholder = QLabel("Complete a simulation to view results.")
        self.lbl_placeholder.setAlignment(Qt.AlignCenter)
        self.lbl_placeholder.setStyleSheet("color: gray;")
        self.stack.addWidget(self.lbl_placeholder)

        # Page 1: results
        page = QWidget()
        layout = QVBoxLayout(page)
        self.stack.addWidget(page)

        # --- Overlay selection ---
        grp_vis = QGroupBox("Results Visualization")
        l_vis = QVBoxLayout(grp_vis)
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons: dict[VisualizationMode, QRadioButton] = {}
        for idx, mode in enumerate(MODE_ORDER):
            btn = QRadioButton(mode.label)
            self.mode_group.addButton(btn, idx)
            self.mode_buttons[mode] = btn
            l_vis.addWidget(btn)
        self.mode_group.idClicked.connect(self.on_mode_clicked)

        # Pressure summary (pressure overlay only)
        self.grp_pressure = QGroupBox("Pressure Summary")
        form_pressure = QFormLayout(self.grp_pressure)
        self.lbl_overlay_gauge = QLabel()
        self.lbl_overlay_negative = QLabel()
        form_pressure.addRow("Peak Gauge Pressure:", self.lbl_overlay_gauge)
        form_pressure.addRow("Peak Negative Pressure:", self.lbl_overlay_negative)
        l_vis.addWidget(self.grp_pressure)

        # Force bars (forces overlay only)
        self.force_chart = ForceChart()
        l_vis.addWidget(self.force_chart)

        layout.addWidget(grp_vis)

        # --- AI analysis ---
        grp_ai = QGroupBox("AI Analysis")
        l_ai = QVBoxLayout(grp_ai)

        hbox = QHBoxLayout()
        hbox.addStretch()
        self.btn_export = QPushButton("Export CSV...")
        self.btn_export.setToolTip("Export Data as CSV")
        self.btn_export.clicked.connect(self.on_export_clicked)
        hbox.addWidget(self.btn_export)
        l_ai.addLayout(hbox)

        self.grp_summary = QGroupBox("Quantitative Summary")
        form = QFormLayout(self.grp_summary)
        self.lbl_cd = QLabel()
        self.lbl_cd.setToolTip("A measure of air resistance. Lower is generally better.")
        self.lbl_cl = QLabel()
        self.lbl_cl.setToolTip("Positive for upward lift, negative for downforce.")
        self.lbl_ld = QLabel()
        self.lbl_ld.setToolTip("Lift-to-Drag Ratio: A key indicator of aerodynamic efficiency.")
        self.lbl_gauge = QLabel()
        self.lbl_negative = QLabel()
        form.addRow("Drag Coefficient (Cd):", self.lbl_cd)
        form.addRow("Lift Coefficient (Cl):", self.lbl_cl)
        form.addRow("L/D Ratio:", self.lbl_ld)
        form.addRow("Peak Gauge Pressure:", self.lbl_gauge)
        form.addRow("Peak Negative Pressure:", self.lbl_negative)
        l_ai.addWidget(self.grp_summary)

        self.btn_generate = QPushButton("Generate Analysis")
        self.btn_generate.setMinimumHeight(40)
        self.btn_generate.clicked.connect(self.on_generate_clicked)
        l_ai.addWidget(self.btn_generate)

        self.txt_report = QTextBrowser()
        self.txt_report.setOpenExternalLinks(True)
        l_ai.addWidget(self.txt_report)

        layout.addWidget(grp_ai)

        # --- SIGNAL CONNECTIONS ---
        self.controller.state_changed.connect(self.on_state_changed)
        self.controller.visualization_changed.connect(self.on_visualization_changed)
        self.controller.report_changed.connect(self.on_report_changed)
        self.controller.generating_changed.connect(self.on_generating_changed)

        self.on_visualization_changed(self.controller.session.visualization.mode)
        self.on_report_changed(self.controller.session.report)
        self.on_state_changed(self.controller.state)

    # --- SLOTS ---

    def on_mode_clicked(self, button_id: int) -> None:
        self.controller.select_visualization(MODE_ORDER[button_id])

    def on_state_changed(self, state: SimulationState) -> None:
        self.stack.setCurrentIndex(1 if state is SimulationState.COMPLETED else 0)
        self._update_enabled()

    def on_visualization_changed(self, mode: VisualizationMode) -> None:
        btn = self.mode_buttons[mode]
        if not btn.isChecked():
            btn.setChecked(True)
        self._update_overlay_details()

    def on_report_changed(self, report: AnalysisReport) -> None:
        fields = report.fields
        self.lbl_cd.setText(format_value(fields.cd, 3))
        self.lbl_cl.setText(format_value(fields.cl, 3))
        self.lbl_ld.setText(format_value(fields.lift_to_drag_ratio, 2))
        self.lbl_gauge.setText(format_value(fields.peak_gauge, 2, "Pa"))
        self.lbl_negative.setText(format_value(fields.peak_negative, 2, "Pa"))
        self.lbl_overlay_gauge.setText(self.lbl_gauge.text())
        self.lbl_overlay_negative.setText(self.lbl_negative.text())
        self.force_chart.update_fields(fields)

        if report.is_empty:
            self.txt_report.setPlainText("" if self.controller.is_generating else PLACEHOLDER_TEXT)
        else:
            self.txt_report.setMarkdown(report.text)

        self._update_overlay_details()
        self._update_enabled()

    def on_generating_changed(self, generating: bool) -> None:
        self.btn_generate.setText("Generating..." if generating else "Generate Analysis")
        if generating:
            self.txt_report.setPlainText("Generating analysis...")
        elif self.controller.session.report.is_empty:
            self.txt_report.setPlainText(PLACEHOLDER_TEXT)
        self._update_overlay_details()
        self._update_enabled()

    def on_generate_clicked(self) -> None:
        self.controller.request_analysis()

    def on_export_clicked(self) -> None:
        fields = self.controller.session.report.fields
        if not fields.has_any:
            QMessageBox.information(self, "Export", EMPTY_EXPORT_NOTICE)
            return

        fname, _ = QFileDialog.getSaveFileName(self, "Export Analysis Data", DEFAULT_EXPORT_FILENAME, "CSV Files (*.csv)")
        if not fname:
            return
        if not fname.endswith(".csv"):
            fname += ".csv"

        try:
            self.controller.export_csv(fname)
        except ExportEmptyError as e:
            QMessageBox.information(self, "Export", str(e))
        except Exception as e:
            logger.exception("CSV export failed")
            QMessageBox.critical(self, "Export Error", f"Could not export the data:\n{e}")

    # --- HELPERS ---

    def _fields(self) -> ReportFields:
        return self.controller.session.report.fields

    def _update_overlay_details(self) -> None:
        mode = self.controller.session.visualization.mode
        fields = self._fields()
        show = not self.controller.is_generating and not self.controller.session.report.is_empty
        self.grp_pressure.setVisible(show and mode is VisualizationMode.PRESSURE and fields.has_pressure)
        self.force_chart.setVisible(show and mode is VisualizationMode.FORCES and fields.has_coefficients)
        self.grp_summary.setVisible(show and fields.has_any)

    def _update_enabled(self) -> None:
        completed = self.controller.state is SimulationState.COMPLETED
        generating = self.controller.is_generating
        self.btn_generate.setEnabled(completed and not generating)
        self.btn_export.setEnabled(completed and not generating and self._fields().has_any)
