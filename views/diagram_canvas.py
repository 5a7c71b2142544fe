"""
Diagram canvas widget.

Forwards Qt input to the editor core as plain events and paints the
frame snapshot. All editing decisions are made by the EditorController;
this widget only converts coordinates and draws.
"""

import logging
from typing import Optional
from PyQt6.QtCore import Qt, QPointF, QRectF, QTimer, pyqtSignal
from PyQt6.QtGui import (
    QPainter, QPen, QBrush, QColor, QFont, QPainterPath,
    QKeyEvent, QMouseEvent, QPaintEvent
)
from PyQt6.QtWidgets import QWidget

from models.events import Key, KeyDown, PointerButton, PointerDown, PointerMove, PointerUp, TextInput, Tick
from models.geometry import Point
from services.editor_controller import EditorController
from services.frame_driver import FrameDriver, FrameSnapshot, PortRole
from services.settings_manager import EditorSettings

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16  # ~60 frames per second
OUTLINE_SCALE = 1.05

_QT_KEYS = {
    Qt.Key.Key_Return.value: Key.ENTER,
    Qt.Key.Key_Enter.value: Key.KEYPAD_ENTER,
    Qt.Key.Key_Escape.value: Key.ESCAPE,
    Qt.Key.Key_Backspace.value: Key.BACKSPACE,
    Qt.Key.Key_Delete.value: Key.DELETE,
}

_QT_BUTTONS = {
    Qt.MouseButton.LeftButton: PointerButton.LEFT,
    Qt.MouseButton.MiddleButton: PointerButton.MIDDLE,
    Qt.MouseButton.RightButton: PointerButton.RIGHT,
}


def qt_key_to_key(qt_key) -> Key:
    """Map a Qt key code (int or Qt.Key) to the editor's Key."""
    code = getattr(qt_key, "value", qt_key)
    return _QT_KEYS.get(int(code), Key.OTHER)


def qt_button_to_button(qt_button) -> Optional[PointerButton]:
    return _QT_BUTTONS.get(qt_button)


def rgb_color(rgb, alpha: float = 1.0) -> QColor:
    """Build a QColor from an [r, g, b] list."""
    color = QColor(int(rgb[0]), int(rgb[1]), int(rgb[2]))
    color.setAlphaF(alpha)
    return color


def _qpoint(p: Point) -> QPointF:
    return QPointF(p.x, p.y)


class DiagramCanvas(QWidget):
    """
    Canvas widget hosting one diagram editor.

    Signals:
        statusChanged(str): Status line text changed
    """

    statusChanged = pyqtSignal(str)

    def __init__(self, settings: Optional[EditorSettings] = None, parent=None):
        super().__init__(parent)
        self.settings = settings or EditorSettings()
        self.controller = EditorController(settings=self.settings)
        self.driver = FrameDriver(self.controller)

        self._scale = self.settings.window.ui_scale_factor or 1.0
        self._antialias = self.settings.window.validated_msaa() > 1
        self._last_status = ""

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)

        self._frame_timer = QTimer(self)
        self._frame_timer.timeout.connect(self._on_frame)
        self._frame_timer.start(FRAME_INTERVAL_MS)

    def _to_logical(self, event: QMouseEvent) -> tuple[float, float]:
        pos = event.position()
        return pos.x() / self._scale, pos.y() / self._scale

    def _on_frame(self):
        snapshot = self.driver.dispatch(Tick())
        if snapshot.status_text != self._last_status:
            self._last_status = snapshot.status_text
            self.statusChanged.emit(snapshot.status_text)
        self.update()

    # Input

    def mousePressEvent(self, event: QMouseEvent):
        button = qt_button_to_button(event.button())
        if button is None:
            super().mousePressEvent(event)
            return
        x, y = self._to_logical(event)
        self.driver.dispatch(PointerDown(button, x, y))
        event.accept()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        # Double-clicks are detected by the controller from the two presses
        self.mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        button = qt_button_to_button(event.button())
        if button is None:
            super().mouseReleaseEvent(event)
            return
        x, y = self._to_logical(event)
        self.driver.dispatch(PointerUp(button, x, y))
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        x, y = self._to_logical(event)
        self.driver.dispatch(PointerMove(x, y))
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        """Send the key, then any typed text; control characters are dropped by the editor."""
        self.driver.dispatch(KeyDown(qt_key_to_key(event.key()), event.isAutoRepeat()))
        if event.text():
            self.driver.dispatch(TextInput(event.text()))
        event.accept()

    # Painting

    def paintEvent(self, event: QPaintEvent):
        snapshot = self.driver.last_snapshot or self.driver.snapshot()
        colors = self.settings.colors

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, self._antialias)
        painter.fillRect(self.rect(), rgb_color(colors.background_rgb))

        painter.save()
        painter.scale(self._scale, self._scale)
        self._draw_connections(painter, snapshot)
        self._draw_preview(painter, snapshot)
        self._draw_shapes(painter, snapshot)
        self._draw_ports(painter, snapshot)
        painter.restore()

        self._draw_status(painter, snapshot)
        painter.end()

    def _draw_connections(self, painter: QPainter, snapshot: FrameSnapshot):
        colors = self.settings.colors
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for view in snapshot.connections:
            curve = view.curve
            path = QPainterPath(_qpoint(curve.p0))
            path.cubicTo(_qpoint(curve.p1), _qpoint(curve.p2), _qpoint(curve.p3))
            rgb = colors.selected_connector_line_rgb if view.is_selected else colors.connector_line_rgb
            painter.setPen(QPen(rgb_color(rgb), self.settings.connector.line_width))
            painter.drawPath(path)

    def _draw_preview(self, painter: QPainter, snapshot: FrameSnapshot):
        preview = snapshot.preview
        if preview is None:
            return
        color = rgb_color(self.settings.colors.preview_connector_line_rgb, self.settings.preview_alpha)
        pen = QPen(color, self.settings.connector.line_width, Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.drawLine(_qpoint(preview.start), _qpoint(preview.end))

    def _draw_shapes(self, painter: QPainter, snapshot: FrameSnapshot):
        shape_settings = self.settings.shape
        font = QFont()
        font.setPixelSize(max(1, int(shape_settings.text_size)))
        painter.setFont(font)
        text_flags = Qt.AlignmentFlag.AlignCenter.value | Qt.TextFlag.TextWordWrap.value

        for view in snapshot.shapes:
            rect = QRectF(
                view.center.x - view.width / 2.0,
                view.center.y - view.height / 2.0,
                view.width,
                view.height,
            )
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(rgb_color(shape_settings.base_color_rgb)))
            painter.drawRoundedRect(rect, view.corner_radius, view.corner_radius)

            if view.show_outline:
                outline_w = rect.width() * OUTLINE_SCALE
                outline_h = rect.height() * OUTLINE_SCALE
                outline = QRectF(
                    rect.center().x() - outline_w / 2.0,
                    rect.center().y() - outline_h / 2.0,
                    outline_w,
                    outline_h,
                )
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.setPen(QPen(
                    rgb_color(shape_settings.selection_outline_color_rgb),
                    shape_settings.selection_outline_width,
                ))
                radius = view.corner_radius * OUTLINE_SCALE
                painter.drawRoundedRect(outline, radius, radius)

            if view.display_text:
                wrap = shape_settings.wrap_width
                text_rect = QRectF(view.center.x - wrap / 2.0, rect.top(), wrap, rect.height())
                painter.setPen(rgb_color(self.settings.colors.text_rgb))
                painter.drawText(text_rect, text_flags, view.display_text)

    def _draw_ports(self, painter: QPainter, snapshot: FrameSnapshot):
        colors = self.settings.colors
        role_colors = {
            PortRole.DEFAULT: colors.default_port_rgb,
            PortRole.SELECTED_CONNECTOR: colors.selected_connector_port_rgb,
            PortRole.DRAFT_START: colors.active_new_line_start_port_rgb,
        }
        painter.setPen(Qt.PenStyle.NoPen)
        for port in snapshot.ports:
            painter.setBrush(QBrush(rgb_color(role_colors[port.role])))
            painter.drawEllipse(_qpoint(port.position), port.radius, port.radius)

    def _draw_status(self, painter: QPainter, snapshot: FrameSnapshot):
        font = QFont()
        font.setPixelSize(20)
        painter.setFont(font)
        painter.setPen(rgb_color(self.settings.colors.status_text_rgb))
        painter.drawText(QPointF(10, 30), snapshot.status_text)
