"""Timeline panel: overview + magnifier controls + detail timeline + transport.

Composite widget hosting two `TimelineBar` instances and the controls around
them. It does not act on input itself; every user action is re-exposed as a
signal and the owner (MainWindow) forwards it to the `FrameSession`.

Signals:
    overviewPressed(x, left, width) / detailPressed(x, left, width)
    pointerMoved(x) / pointerReleased()
    wheeled(delta)
    zoomLevelSelected(int)
    magnifierToggled()
    playToggled()
    exportRequested()
"""

from __future__ import annotations

from typing import Dict

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...core.navigation import RenderState
from ...core.zoom import ZoomLevel
from ...utils.timefmt import format_time
from .timeline_bar import TimelineBar


class TimelinePanel(QWidget):
    overviewPressed = Signal(float, float, float)
    detailPressed = Signal(float, float, float)
    pointerMoved = Signal(float)
    pointerReleased = Signal()
    wheeled = Signal(int)
    zoomLevelSelected = Signal(int)
    magnifierToggled = Signal()
    playToggled = Signal()
    exportRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.overview = TimelineBar(show_window=True)
        layout.addWidget(self.overview)

        # Magnifier controls
        zoom_row = QHBoxLayout()
        zoom_row.setContentsMargins(2, 2, 2, 2)
        self.magnifier_btn = QPushButton("Magnifier On")
        zoom_row.addWidget(self.magnifier_btn)
        zoom_row.addWidget(QLabel("Magnify"))
        self.zoom_buttons: Dict[int, QPushButton] = {}
        self._zoom_group = QButtonGroup(self)
        self._zoom_group.setExclusive(True)
        for level in ZoomLevel:
            btn = QPushButton(f"{int(level)}x")
            btn.setCheckable(True)
            btn.setFixedHeight(22)
            self._zoom_group.addButton(btn, int(level))
            self.zoom_buttons[int(level)] = btn
            zoom_row.addWidget(btn)
        zoom_row.addStretch(1)
        layout.addLayout(zoom_row)

        self.detail = TimelineBar(height=36)
        layout.addWidget(self.detail)

        self.time_label = QLabel("00:00.000 / 00:00.000")
        layout.addWidget(self.time_label)

        # Transport
        transport = QHBoxLayout()
        transport.setContentsMargins(2, 2, 2, 2)
        self.play_btn = QPushButton("Play")
        self.hint_label = QLabel("Press SPACE to add marker at current position")
        self.hint_label.setStyleSheet("color:#999;")
        self.export_btn = QPushButton("Export Frames")
        transport.addWidget(self.play_btn)
        transport.addWidget(self.hint_label, stretch=1)
        transport.addWidget(self.export_btn)
        layout.addLayout(transport)
        self.setLayout(layout)

        # Wire bar input through
        self.overview.pressed.connect(self.overviewPressed.emit)
        self.detail.pressed.connect(self.detailPressed.emit)
        for bar in (self.overview, self.detail):
            bar.moved.connect(self.pointerMoved.emit)
            bar.released.connect(self.pointerReleased.emit)
            bar.wheeled.connect(self.wheeled.emit)
        self._zoom_group.idClicked.connect(self.zoomLevelSelected.emit)
        self.magnifier_btn.clicked.connect(self.magnifierToggled.emit)
        self.play_btn.clicked.connect(self.playToggled.emit)
        self.export_btn.clicked.connect(self.exportRequested.emit)

    # --- State application ---
    def applyState(self, state: RenderState):
        self.overview.setProgress(state.overview_progress_percent)
        self.overview.setMarkers([state.overview_percent(m) for m in state.all_markers])
        self.overview.setWindow(state.window_left_percent, state.window_width_percent)
        self.detail.setActive(state.zoom_enabled)
        self.detail.setProgress(state.detail_progress_percent)
        self.detail.setMarkers([state.detail_percent(m) for m in state.visible_markers])
        self.time_label.setText(
            f"{format_time(state.current_time)} / {format_time(state.duration)}"
        )
        self.magnifier_btn.setText(
            "Magnifier On" if state.zoom_enabled else "Magnifier Off"
        )
        btn = self.zoom_buttons.get(state.zoom_level)
        if btn is not None and not btn.isChecked():
            btn.setChecked(True)

    def updatePlayButton(self, playing: bool):
        self.play_btn.setText("Pause" if playing else "Play")

    def setExportEnabled(self, enabled: bool):
        self.export_btn.setEnabled(enabled)


__all__ = ["TimelinePanel"]
