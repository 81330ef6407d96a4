"""Chronological marker listing with click-to-seek and removal."""

from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...core.markers import Marker
from ...utils.timefmt import format_time

_ID_ROLE = Qt.ItemDataRole.UserRole


class MarkerList(QWidget):
    markerActivated = Signal(str)  # marker id to seek to
    removeRequested = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        header = QHBoxLayout()
        self.title = QLabel("Markers (0)")
        self.remove_btn = QPushButton("Remove")
        self.remove_btn.setEnabled(False)
        header.addWidget(self.title, stretch=1)
        header.addWidget(self.remove_btn)
        layout.addLayout(header)
        self.list = QListWidget()
        self.list.setSelectionMode(QListWidget.SingleSelection)
        layout.addWidget(self.list)
        self.setLayout(layout)

        self.list.itemClicked.connect(self._onItemClicked)
        self.list.currentItemChanged.connect(
            lambda cur, _prev: self.remove_btn.setEnabled(cur is not None)
        )
        self.remove_btn.clicked.connect(self._removeSelected)
        QShortcut(
            QKeySequence(QKeySequence.StandardKey.Delete),
            self.list,
            activated=self._removeSelected,
        )

    def setMarkers(self, markers: Sequence[Marker]):
        self.list.clear()
        for index, marker in enumerate(markers, start=1):
            item = QListWidgetItem(f"{index}. {format_time(marker.time)}")
            item.setData(_ID_ROLE, marker.id)
            self.list.addItem(item)
        self.title.setText(f"Markers ({len(markers)})")
        self.remove_btn.setEnabled(False)

    def selectedMarkerId(self) -> Optional[str]:
        item = self.list.currentItem()
        return None if item is None else item.data(_ID_ROLE)

    def _onItemClicked(self, item: QListWidgetItem):
        self.markerActivated.emit(item.data(_ID_ROLE))

    def _removeSelected(self):
        marker_id = self.selectedMarkerId()
        if marker_id is not None:
            self.removeRequested.emit(marker_id)


__all__ = ["MarkerList"]
