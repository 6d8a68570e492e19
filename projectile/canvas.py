"""Projectile canvas: QWidget that renders a Scene with QPainter."""

from PyQt6.QtCore import Qt, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QFont, QPolygonF
from PyQt6.QtWidgets import QWidget

from projectile.render import render_scene


def _qcolor(rgba):
    return QColor(*rgba)


class QPainterSurface:
    """DrawingSurface implementation on top of an active QPainter."""

    def __init__(self, painter):
        self._painter = painter

    def fill_rect(self, x, y, w, h, color):
        self._painter.fillRect(QRectF(x, y, w, h), _qcolor(color))

    def line(self, x0, y0, x1, y1, color, width=1.0):
        pen = QPen(_qcolor(color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self._painter.setPen(pen)
        self._painter.drawLine(QPointF(x0, y0), QPointF(x1, y1))

    def polyline(self, points, color, width=1.0, dashed=False):
        pen = QPen(_qcolor(color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        if dashed:
            pen.setStyle(Qt.PenStyle.DashLine)
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in points]))

    def circle(self, cx, cy, radius, color):
        self._painter.setPen(Qt.PenStyle.NoPen)
        self._painter.setBrush(QBrush(_qcolor(color)))
        self._painter.drawEllipse(QPointF(cx, cy), radius, radius)

    def polygon(self, points, color):
        self._painter.setPen(Qt.PenStyle.NoPen)
        self._painter.setBrush(QBrush(_qcolor(color)))
        self._painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in points]))

    def text(self, x, y, text, color, size=10.0, rotation=0.0):
        font = QFont()
        font.setPointSizeF(size * 0.75)
        self._painter.setFont(font)
        self._painter.setPen(_qcolor(color))
        if rotation:
            self._painter.save()
            self._painter.translate(x, y)
            self._painter.rotate(rotation)
            self._painter.drawText(QPointF(0, 0), text)
            self._painter.restore()
        else:
            self._painter.drawText(QPointF(x, y), text)


class ProjectileCanvas(QWidget):
    """Draws the current Scene; reports pointer movement and resizes."""

    # Surface pixel coordinates of the pointer
    hovered = pyqtSignal(float, float)
    hover_left = pyqtSignal()
    resized = pyqtSignal(int, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.scene = None
        self.setMinimumSize(480, 360)
        self.setMouseTracking(True)

    def set_scene(self, scene):
        self.scene = scene
        self.update()

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.hovered.emit(pos.x(), pos.y())

    def leaveEvent(self, event):
        self.hover_left.emit()
        super().leaveEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(self.width(), self.height())

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        if self.scene is None:
            painter.fillRect(self.rect(), QColor(248, 253, 255))
        else:
            render_scene(QPainterSurface(painter), self.scene)
        painter.end()
