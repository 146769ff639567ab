"""
Force Comparison Chart
Horizontal bars for the drag and lift coefficients parsed from the report.
"""
from __future__ import annotations

import numpy as np
import pyqtgraph as pg
from PySide6.QtWidgets import QWidget, QVBoxLayout

from aeroanalysis.model.report import ReportFields

DRAG_COLOR = (31, 119, 180)
LIFT_COLOR = (214, 39, 40)


class ForceChart(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground('w')
        self.plot_widget.setMinimumHeight(120)
        self.plot_widget.setTitle('Force Comparison', color='black', size='10pt')
        self.plot_widget.showGrid(x=True, y=False, alpha=0.3)
        self.plot_widget.setXRange(0, 1.05, padding=0)
        self.plot_widget.getAxis('bottom').setPen('k')
        self.plot_widget.getAxis('left').setPen('k')
        self.plot_widget.getAxis('bottom').setTextPen('k')
        self.plot_widget.getAxis('left').setTextPen('k')
        self.plot_widget.setMouseEnabled(x=False, y=False)
        self.plot_widget.hideButtons()
        layout.addWidget(self.plot_widget)

        self.bars: pg.BarGraphItem | None = None
        self.labels: list[pg.TextItem] = []

    def update_fields(self, fields: ReportFields) -> None:
        """Redraw the bars; bars are scaled relative to the larger coefficient."""
        self.plot_widget.clear()
        self.labels = []
        self.bars = None

        rows = []
        drag_frac, lift_frac = fields.relative_force_magnitudes()
        if fields.cd is not None:
            rows.append(("Drag (Cd)", fields.cd, drag_frac, DRAG_COLOR))
        if fields.cl is not None:
            rows.append((fields.lift_label, fields.cl, lift_frac, LIFT_COLOR))

        if not rows:
            return

        y = np.arange(len(rows), dtype=float)
        widths = np.array([frac for _, _, frac, _ in rows], dtype=float)
        brushes = [pg.mkBrush(color) for _, _, _, color in rows]

        self.bars = pg.BarGraphItem(x0=np.zeros_like(y), y=y, height=0.6, width=widths, brushes=brushes)
        self.plot_widget.addItem(self.bars)

        for pos, (_, value, frac, _) in zip(y, rows):
            text = pg.TextItem(f"{value:.3f}", color='k', anchor=(0, 0.5))
            text.setPos(float(frac) + 0.01, float(pos))
            self.plot_widget.addItem(text)
            self.labels.append(text)

        self.plot_widget.getAxis('left').setTicks([[(float(pos), label) for pos, (label, *_rest) in zip(y, rows)]])
        self.plot_widget.setYRange(-0.5, len(rows) - 0.5, padding=0.1)
