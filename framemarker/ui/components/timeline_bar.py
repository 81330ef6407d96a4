"""Timeline bar widget used for both the overview and the detail timeline.

The bar is purely a view: it paints what it is told (progress, marker ticks,
optionally the zoom-window overlay) and forwards raw pointer input as signals
in widget-local x coordinates together with its track geometry. Mouse moves
arrive here for the whole drag because Qt grabs the pointer on press, so the
navigation controller always maps them through the bar that started the drag.
"""

from __future__ import annotations

from typing import List

from PySide6.QtCore import QRectF, QSize, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from ...utils.geometry import percent_to_offset


class TimelineBar(QWidget):
    """Horizontal track painting progress, marker ticks and a window overlay.

    Signals:
        pressed(x, track_left, track_width)
        moved(x)
        released()
        wheeled(delta)   positive = scroll towards later times
    """

    pressed = Signal(float, float, float)
    moved = Signal(float)
    released = Signal()
    wheeled = Signal(int)

    MARGIN = 8

    def __init__(self, parent=None, *, show_window: bool = False, height: int = 28):
        super().__init__(parent)
        self._progress = 0.0
        self._markers: List[float] = []
        self._window_left = 0.0
        self._window_width = 0.0
        self._show_window = show_window
        self._active = True
        self.setMinimumHeight(height)
        self.setMouseTracking(False)

    def sizeHint(self):  # type: ignore[override]
        return QSize(400, self.minimumHeight())

    # --- State setters (percent units, 0-100) ---
    def setProgress(self, percent: float):
        self._progress = percent
        self.update()

    def setMarkers(self, percents: List[float]):
        self._markers = list(percents)
        self.update()

    def setWindow(self, left_percent: float, width_percent: float):
        self._window_left = left_percent
        self._window_width = width_percent
        self.update()

    def setActive(self, active: bool):
        self._active = active
        self.update()

    def progress(self) -> float:
        return self._progress

    def markerCount(self) -> int:
        return len(self._markers)

    def trackRect(self) -> QRectF:
        return QRectF(
            self.MARGIN, 4, max(0, self.width() - self.MARGIN * 2), self.height() - 8
        )

    # --- Painting ---
    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing, True)
        track = self.trackRect()
        p.fillRect(track, QColor(40, 40, 46) if self._active else QColor(28, 28, 30))
        if not self._active:
            p.end()
            return
        fill = QRectF(
            track.x(), track.y(), percent_to_offset(self._progress, track.width()), track.height()
        )
        p.fillRect(fill, QColor(80, 160, 255, 110))
        p.setPen(QPen(QColor(255, 200, 60), 2))
        for percent in self._markers:
            x = track.x() + percent_to_offset(percent, track.width())
            p.drawLine(int(x), int(track.top()), int(x), int(track.bottom()))
        if self._show_window and self._window_width > 0:
            x = track.x() + percent_to_offset(self._window_left, track.width())
            w = percent_to_offset(self._window_width, track.width())
            p.setPen(QPen(QColor(255, 255, 255), 1))
            p.setBrush(QColor(255, 255, 255, 30))
            p.drawRect(QRectF(x, track.y(), w, track.height()))
        # play-head
        x_line = track.x() + percent_to_offset(self._progress, track.width())
        p.setPen(QPen(QColor(255, 255, 255), 2))
        p.drawLine(int(x_line), int(track.top()), int(x_line), int(track.bottom()))
        p.end()

    # --- Input forwarding ---
    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        track = self.trackRect()
        self.pressed.emit(event.position().x(), track.x(), track.width())
        event.accept()

    def mouseMoveEvent(self, event):  # type: ignore[override]
        if event.buttons() & Qt.MouseButton.LeftButton:
            self.moved.emit(event.position().x())
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.released.emit()
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def wheelEvent(self, event):  # type: ignore[override]
        delta = event.angleDelta().y()
        if delta == 0:
            return super().wheelEvent(event)
        # Qt reports wheel-up as positive; scrolling down moves forward in time.
        self.wheeled.emit(-delta)
        event.accept()


__all__ = ["TimelineBar"]
