"""
Flow Preview Widget
===================
A 2D sketch of the wind tunnel: the uploaded object, the incoming wind and,
once a run has completed, the active result overlay.

It only reads from the controller; nothing here feeds back into the session.
"""
from __future__ import annotations

import math

from PySide6.QtCore import Qt, QPointF, QRectF
from PySide6.QtGui import QPainter, QPen, QColor, QBrush, QPolygonF, QRadialGradient
from PySide6.QtWidgets import QWidget

from aeroanalysis.config import MAX_WIND_SPEED
from aeroanalysis.controller.session import SessionController
from aeroanalysis.model.state import SimulationState
from aeroanalysis.model.visualization import VisualizationMode

BACKGROUND = QColor(24, 28, 36)
OBJECT_FILL = QColor(160, 196, 255)
FLOW_COLOR = QColor(110, 220, 255)
DRAG_COLOR = QColor(31, 119, 180)
LIFT_COLOR = QColor(214, 39, 40)


def flow_vector(direction_deg: float) -> tuple[float, float]:
    """
    Unit vector (screen coordinates, y down) of the flow coming FROM
    `direction_deg` (0 = North, clockwise).
    """
    rad = math.radians(direction_deg)
    return -math.sin(rad), math.cos(rad)


def _arrow(painter: QPainter, start: QPointF, end: QPointF, head: float = 8.0) -> None:
    painter.drawLine(start, end)
    dx, dy = end.x() - start.x(), end.y() - start.y()
    length = math.hypot(dx, dy)
    if length < 1e-6:
        return
    ux, uy = dx / length, dy / length
    left = QPointF(end.x() - head * (ux + 0.5 * uy), end.y() - head * (uy - 0.5 * ux))
    right = QPointF(end.x() - head * (ux - 0.5 * uy), end.y() - head * (uy + 0.5 * ux))
    painter.drawPolygon(QPolygonF([end, left, right]))


class FlowPreview(QWidget):
    def __init__(self, controller: SessionController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.setMinimumSize(320, 240)

        for signal in (
            controller.state_changed,
            controller.wind_changed,
            controller.visualization_changed,
            controller.report_changed,
        ):
            signal.connect(self.on_session_changed)

    def on_session_changed(self, *_args) -> None:
        self.update()

    # --- PAINTING ---

    def paintEvent(self, event, /) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), BACKGROUND)

        session = self.controller.session
        if session.model is None:
            painter.setPen(QColor("gray"))
            painter.drawText(self.rect(), Qt.AlignCenter, "Upload a 3D model to begin.")
            painter.end()
            return

        body = self._body_rect()
        if session.state is SimulationState.COMPLETED:
            self._draw_overlay(painter, body)

        painter.setPen(QPen(Qt.black, 1.5))
        painter.setBrush(QBrush(OBJECT_FILL))
        painter.drawRoundedRect(body, 12, 12)
        painter.setPen(Qt.black)
        painter.drawText(body, Qt.AlignCenter, session.model.object_name)

        self._draw_wind_indicator(painter)
        painter.end()

    def _body_rect(self) -> QRectF:
        w, h = self.width(), self.height()
        size = min(w, h) * 0.3
        return QRectF(w / 2 - size / 2, h / 2 - size / 3, size, size * 2 / 3)

    def _draw_wind_indicator(self, painter: QPainter) -> None:
        wind = self.controller.session.wind
        fx, fy = flow_vector(wind.direction)
        center = QPointF(50, 50)
        start = QPointF(center.x() - 25 * fx, center.y() - 25 * fy)
        end = QPointF(center.x() + 25 * fx, center.y() + 25 * fy)

        painter.setPen(QPen(FLOW_COLOR, 2))
        painter.setBrush(QBrush(FLOW_COLOR))
        _arrow(painter, start, end)
        painter.drawText(QRectF(10, 82, 140, 20), Qt.AlignLeft, f"{wind.speed:.1f} m/s, {wind.direction}°")

    def _draw_overlay(self, painter: QPainter, body: QRectF) -> None:
        session = self.controller.session
        mode = session.visualization.mode
        fx, fy = flow_vector(session.wind.direction)
        # Perpendicular to the flow
        px, py = -fy, fx
        c = body.center()
        reach = max(self.width(), self.height())

        if mode is VisualizationMode.STREAMLINES:
            count = 5 + int(10 * session.wind.speed / MAX_WIND_SPEED)
            painter.setPen(QPen(FLOW_COLOR, 1.2))
            for i in range(count):
                offset = (i - (count - 1) / 2) * (reach / (count + 1))
                ox, oy = c.x() + px * offset, c.y() + py * offset
                painter.drawLine(QPointF(ox - fx * reach, oy - fy * reach), QPointF(ox + fx * reach, oy + fy * reach))

        elif mode is VisualizationMode.VELOCITY:
            painter.setPen(QPen(FLOW_COLOR, 1.5))
            painter.setBrush(QBrush(FLOW_COLOR))
            step = 60
            length = 10 + 30 * session.wind.speed / MAX_WIND_SPEED
            for x in range(step // 2, self.width(), step):
                for y in range(step // 2, self.height(), step):
                    start = QPointF(x, y)
                    if body.contains(start):
                        continue
                    _arrow(painter, start, QPointF(x + fx * length, y + fy * length), head=5)

        elif mode is VisualizationMode.PRESSURE:
            radius = body.width() * 0.8
            windward = QPointF(c.x() - fx * body.width() / 2, c.y() - fy * body.height() / 2)
            leeward = QPointF(c.x() + fx * body.width() / 2, c.y() + fy * body.height() / 2)
            for point, color in ((windward, QColor(255, 60, 60, 180)), (leeward, QColor(60, 120, 255, 160))):
                gradient = QRadialGradient(point, radius)
                gradient.setColorAt(0.0, color)
                gradient.setColorAt(1.0, QColor(color.red(), color.green(), color.blue(), 0))
                painter.setPen(Qt.NoPen)
                painter.setBrush(QBrush(gradient))
                painter.drawEllipse(point, radius, radius)

        elif mode is VisualizationMode.FORCES:
            fields = session.report.fields
            drag_frac, lift_frac = fields.relative_force_magnitudes()
            scale = body.width()
            if fields.cd is not None:
                painter.setPen(QPen(DRAG_COLOR, 3))
                painter.setBrush(QBrush(DRAG_COLOR))
                _arrow(painter, c, QPointF(c.x() + fx * scale * drag_frac, c.y() + fy * scale * drag_frac))
            if fields.cl is not None:
                sign = -1.0 if fields.cl >= 0 else 1.0  # screen y points down
                painter.setPen(QPen(LIFT_COLOR, 3))
                painter.setBrush(QBrush(LIFT_COLOR))
                _arrow(painter, c, QPointF(c.x(), c.y() + sign * scale * lift_frac))
