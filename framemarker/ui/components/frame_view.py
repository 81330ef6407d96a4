"""QLabel-based preview of the current decoded frame."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel, QSizePolicy


class FrameView(QLabel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setStyleSheet("background:#222;color:#fff;font-size:18px;")
        self.setText("Open a video to start")
        self._last_frame = None
        # Ignored policy lets layouts shrink the label below the last pixmap size.
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)

    def sizeHint(self):  # type: ignore[override]
        return QSize(320, 180)

    def showFrame(self, frame, t: float = 0.0):
        if frame is None:
            return
        self._last_frame = frame
        self._render()

    def clear(self):  # type: ignore[override]
        self._last_frame = None
        super().clear()

    def _render(self):
        frame = self._last_frame
        if frame is None or self.width() <= 0 or self.height() <= 0:
            return
        array = np.asarray(frame)
        if array.ndim == 2:  # grayscale -> RGB
            array = np.stack([array] * 3, axis=-1)
        array = np.ascontiguousarray(array[:, :, :3], dtype=np.uint8)
        h, w = array.shape[0], array.shape[1]
        qimg = QImage(array.data, w, h, w * 3, QImage.Format.Format_RGB888)
        scaled = qimg.scaled(
            self.width(), self.height(), Qt.KeepAspectRatio, Qt.FastTransformation
        )
        self.setPixmap(QPixmap.fromImage(scaled))

    def resizeEvent(self, event):  # noqa: D401 - Qt override
        self._render()
        super().resizeEvent(event)


__all__ = ["FrameView"]
