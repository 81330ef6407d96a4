"""Main application window (UI layer).

Hosts the frame preview, the dual timeline panel and the marker list, and
forwards their input to a `FrameSession`. The window owns the playback
controller (the session's surface) and handles the parts of export that touch
the desktop: choosing a directory, writing files and reporting failures.
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ..core.config import AppConfig
from ..core.errors import FramemarkerError
from ..core.session import FrameSession
from ..media.playback import VideoPlaybackController
from ..services.export import ExportResult, save_results
from ..utils.logging import setup_logging
from .components.frame_view import FrameView
from .components.marker_list import MarkerList
from .components.timeline_panel import TimelinePanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config: Optional[AppConfig] = None):
        super().__init__()
        self.config = config or AppConfig()
        self.setWindowTitle("Frame Marker")
        self.setGeometry(100, 100, 960, 680)
        self.controller = VideoPlaybackController(self)
        self.session = FrameSession(self.config, self)
        self._export_dir: Optional[Path] = None
        self._createMenuBar()
        self._createEditorLayout()
        self.session.attach_surface(self.controller)

    def centerOnPreferredScreen(self):
        """Center the window on the configured screen, else the primary one."""
        screens = QGuiApplication.screens()
        if not screens:
            return
        idx = self.config.screen_index
        screen = None
        if idx is not None and 0 <= idx < len(screens):
            screen = screens[idx]
        if screen is None:
            screen = QGuiApplication.primaryScreen() or screens[0]
        geo = screen.availableGeometry()
        win_geo = self.frameGeometry()
        win_geo.moveCenter(geo.center())
        self.move(win_geo.topLeft())

    def _createMenuBar(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")
        self.open_action = QAction("Open Video", self)
        self.open_action.triggered.connect(self._openMedia)
        file_menu.addAction(self.open_action)
        self.export_action = QAction("Export Frames", self)
        self.export_action.triggered.connect(self._exportFrames)
        file_menu.addAction(self.export_action)
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        about_menu = menu_bar.addMenu("About")
        about_action = QAction("About Frame Marker", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About Frame Marker",
            "Frame Marker\nMark moments in a video and export them as JPEG stills.",
        )

    def _createEditorLayout(self):
        """Preview + marker list on top, timeline panel below."""
        central_widget = QWidget()
        root_layout = QVBoxLayout()

        top_splitter = QSplitter()
        top_splitter.setOrientation(Qt.Horizontal)  # type: ignore
        self.preview = FrameView()
        top_splitter.addWidget(self.preview)
        self.marker_list = MarkerList()
        top_splitter.addWidget(self.marker_list)
        top_splitter.setStretchFactor(0, 4)
        top_splitter.setStretchFactor(1, 1)

        self.timeline = TimelinePanel()
        root_layout.addWidget(top_splitter, stretch=1)
        root_layout.addWidget(self.timeline)
        central_widget.setLayout(root_layout)
        self.setCentralWidget(central_widget)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setMaximumWidth(200)
        self.progress_bar.hide()
        self.statusBar().addPermanentWidget(self.progress_bar)

        # Playback -> view
        self.controller.frameReady.connect(self.preview.showFrame)
        self.controller.playStateChanged.connect(self.timeline.updatePlayButton)

        # Timeline input -> session
        tl = self.timeline
        tl.overviewPressed.connect(self.session.press_overview)
        tl.detailPressed.connect(self.session.press_detail)
        tl.pointerMoved.connect(self.session.pointer_moved)
        tl.pointerReleased.connect(self.session.pointer_released)
        tl.wheeled.connect(self.session.wheel)
        tl.zoomLevelSelected.connect(self.session.select_zoom_level)
        tl.magnifierToggled.connect(self.session.toggle_magnifier)
        tl.playToggled.connect(self.controller.toggle_play)
        tl.exportRequested.connect(self._exportFrames)

        # Markers
        self.marker_list.markerActivated.connect(self.session.seek_to_marker)
        self.marker_list.removeRequested.connect(self.session.remove_marker)
        QShortcut(QKeySequence("Space"), self, activated=self.session.add_marker)

        # Session -> view
        self.session.renderStateChanged.connect(self.timeline.applyState)
        self.session.markersChanged.connect(self.marker_list.setMarkers)
        self.session.exportProgress.connect(self._onExportProgress)
        self.session.exportActiveChanged.connect(self._onExportActiveChanged)
        self.session.exportFinished.connect(self._onExportFinished)
        self.session.exportFailed.connect(self._onExportFailed)
        self.timeline.applyState(self.session.render_state())

    # --- Media ---
    def _openMedia(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", "", "Video Files (*.mp4 *.mov *.avi *.mkv *.webm)"
        )
        if not file_path:
            return
        self.loadMediaPath(file_path)

    def loadMediaPath(self, file_path: str) -> bool:
        """Programmatic media load (used by _openMedia and tests).

        Refused while an export is running; the export captures from the
        loaded source.
        """
        if self.session.export_active():
            logger.warning("Not loading %s: export in progress", file_path)
            return False
        try:
            self.controller.load(file_path)
        except Exception as e:  # moviepy raises a mix of OSError/IOError/RuntimeError
            logger.error("Failed to load %s: %s", file_path, e)
            QMessageBox.critical(self, "Error", f"Failed to load video: {e}")
            return False
        self.preview.setText("")
        self.setWindowTitle(f"Frame Marker - {Path(file_path).name}")
        self.statusBar().showMessage(f"Loaded {Path(file_path).name}", 3000)
        return True

    def _ensureFFmpeg(self):
        """Check ffmpeg availability; MoviePy relies on it for decoding."""
        if shutil.which("ffmpeg") is None:
            QMessageBox.warning(
                self,
                "FFmpeg Missing",
                "FFmpeg not found in PATH. Please install ffmpeg to enable video decoding.",
            )

    # --- Export ---
    def _exportFrames(self):
        if self.session.export_active():
            return
        if not self.session.markers:
            # Lets the session report the empty export through exportFailed.
            self.session.export_frames()
            return
        out_dir = QFileDialog.getExistingDirectory(self, "Export Frames To")
        if not out_dir:
            return
        self.exportTo(out_dir)

    def exportTo(self, out_dir) -> bool:
        """Export every marker and write the stills into ``out_dir``."""
        self._export_dir = Path(out_dir)
        self.controller.pause()
        return self.session.export_frames()

    def _onExportProgress(self, fraction: float):
        self.progress_bar.setValue(int(round(fraction * 100)))

    def _onExportActiveChanged(self, active: bool):
        self.progress_bar.setVisible(active)
        self.timeline.setExportEnabled(not active)
        self.export_action.setEnabled(not active)
        self.open_action.setEnabled(not active)
        if active:
            self.statusBar().showMessage("Exporting frames...")

    def _onExportFinished(self, results: List[ExportResult]):
        out_dir = self._export_dir
        self._export_dir = None
        if out_dir is None:
            return
        try:
            paths = save_results(results, out_dir)
        except OSError as e:
            logger.error("Writing frames to %s failed: %s", out_dir, e)
            QMessageBox.critical(self, "Export Failed", f"Could not write frames: {e}")
            return
        self.statusBar().showMessage(f"Exported {len(paths)} frame(s) to {out_dir}", 5000)

    def _onExportFailed(self, error: FramemarkerError):
        self._export_dir = None
        self.statusBar().clearMessage()
        QMessageBox.warning(self, "Export Failed", str(error))


def run():  # convenience launcher
    config = AppConfig.from_env()
    setup_logging(config.log_level)
    app = QApplication(sys.argv)
    window = MainWindow(config)
    window._ensureFFmpeg()
    if len(sys.argv) > 1:
        window.loadMediaPath(sys.argv[1])
    window.show()
    window.centerOnPreferredScreen()
    sys.exit(app.exec())


__all__ = ["MainWindow", "run"]
