"""
Main Application Window
=======================
The primary GUI container: setup controls on the left, the flow preview and
run status in the centre, results on the right.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (New Session, Export, Exit) to the
   session controller, and tears the controller down when the window closes.
"""
from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QSplitter
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from aeroanalysis.controller.session import SessionController
from aeroanalysis.model.state import SimulationState
from aeroanalysis.view.panels.control_panel import ControlPanel
from aeroanalysis.view.panels.results_panel import ResultsControlPanel
from aeroanalysis.view.panels.status_panel import StatusPanel
from aeroanalysis.view.widgets.flow_preview import FlowPreview


VISIBLE_APP_NAME = "Aero Analysis Studio"


class MainWindow(QMainWindow):
    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self.controller = controller

        self.resize(1400, 900)

        # --- MAIN CONTAINER ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT: Setup ---
        self.control_panel = ControlPanel(self.controller)
        splitter.addWidget(self.control_panel)

        # --- CENTRE: Preview above Status ---
        centre = QWidget()
        centre_layout = QVBoxLayout(centre)
        centre_layout.setContentsMargins(0, 0, 0, 0)
        self.preview = FlowPreview(self.controller)
        self.status_panel = StatusPanel(self.controller)
        centre_layout.addWidget(self.preview, stretch=3)
        centre_layout.addWidget(self.status_panel, stretch=2)
        splitter.addWidget(centre)

        # --- RIGHT: Results ---
        self.results_panel = ResultsControlPanel(self.controller)
        splitter.addWidget(self.results_panel)

        splitter.setSizes([320, 680, 400])

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # --- SIGNAL CONNECTIONS ---
        self.controller.state_changed.connect(self.on_state_changed)
        self.controller.report_changed.connect(self.on_report_changed)
        self.controller.generating_changed.connect(self.on_report_changed)

        self.on_state_changed(self.controller.state)

    def _create_actions(self) -> None:
        self.act_new = QAction("New Session", self)
        self.act_new.setShortcut("Ctrl+N")
        self.act_new.triggered.connect(self.controller.reset)

        self.act_export = QAction("Export Analysis Data...", self)
        self.act_export.setShortcut("Ctrl+E")
        self.act_export.triggered.connect(self.results_panel.on_export_clicked)
        self.act_export.setEnabled(False)  # Disabled until a report has data

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addSeparator()
        file_menu.addAction(self.act_export)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

    # --- SLOTS ---

    def on_state_changed(self, state: SimulationState) -> None:
        name = self.controller.session.model.display_name if self.controller.session.model else "No model"
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{name}] {state.value.title()}")
        self.act_new.setEnabled(state is not SimulationState.RUNNING)
        self.on_report_changed()

    def on_report_changed(self, *_args) -> None:
        self.act_export.setEnabled(self.results_panel.btn_export.isEnabled())

    def closeEvent(self, event, /) -> None:
        """Stop the progress timer and background work before closing."""
        self.controller.shutdown()
        event.accept()
