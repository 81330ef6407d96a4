"""Per-source editing session.

`FrameSession` is the explicit context object tying the core together: it
owns the `MarkerStore`, the `ZoomWindow`, the `NavigationController` and the
`FrameExportPipeline`, and holds a non-owning reference to whichever playback
surface the application attached. The presentation layer forwards raw input
here and repaints from ``renderStateChanged``.

Errors from the core are recovered at this boundary: rejected zoom levels and
export requests are logged and reported through return values / signals, never
raised into the UI event handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..services.export import FrameExportPipeline
from ..utils.geometry import TrackGeometry
from .config import AppConfig
from .errors import (
    ExportInProgressError,
    InvalidZoomLevelError,
    NoMarkersError,
    NoSourceError,
)
from .markers import Marker, MarkerStore
from .navigation import NavigationController, RenderState, build_render_state
from .zoom import ZoomLevel, ZoomWindow

logger = logging.getLogger(__name__)


class FrameSession(QObject):
    renderStateChanged = Signal(object)  # RenderState
    markersChanged = Signal(object)  # tuple[Marker, ...]
    exportProgress = Signal(float)
    exportFinished = Signal(object)  # list[ExportResult]
    exportFailed = Signal(object)  # FramemarkerError
    exportActiveChanged = Signal(bool)

    def __init__(self, config: Optional[AppConfig] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.config = config or AppConfig()
        self.markers = MarkerStore()
        self.window = ZoomWindow(level=self._defaultLevel())
        self.navigation = NavigationController(
            self.window, pan_step=self.config.pan_step_fraction
        )
        self.exporter = FrameExportPipeline(self.config.export_settings(), self)
        self.exporter.progressChanged.connect(self.exportProgress.emit)
        self.exporter.finished.connect(self.exportFinished.emit)
        self.exporter.failed.connect(self.exportFailed.emit)
        self.exporter.activeChanged.connect(self._onExportActiveChanged)
        self._surface = None

    # --- Surface lifecycle ---
    @property
    def surface(self):
        return self._surface

    def attach_surface(self, surface) -> None:
        if surface is self._surface:
            return
        self.detach_surface()
        self._surface = surface
        self.navigation.surface = surface
        surface.timeAdvanced.connect(self._onTimeAdvanced)
        surface.clipLoaded.connect(self._onClipLoaded)
        self.window.set_duration(surface.duration())
        self.refresh()

    def detach_surface(self) -> None:
        surface = self._surface
        if surface is None:
            return
        surface.timeAdvanced.disconnect(self._onTimeAdvanced)
        surface.clipLoaded.disconnect(self._onClipLoaded)
        self._surface = None
        self.navigation.surface = None
        self.navigation.pointer_released()

    # --- Render state ---
    def current_time(self) -> float:
        return self.navigation.current_time()

    def render_state(self) -> RenderState:
        return build_render_state(self.window, self.markers, self.current_time())

    def refresh(self) -> RenderState:
        state = self.render_state()
        self.renderStateChanged.emit(state)
        return state

    # --- Timeline input ---
    def press_overview(self, pointer_x: float, track_left: float, track_width: float):
        target = self.navigation.press_overview(
            pointer_x, TrackGeometry(track_left, track_width)
        )
        self.refresh()
        return target

    def press_detail(self, pointer_x: float, track_left: float, track_width: float):
        target = self.navigation.press_detail(
            pointer_x, TrackGeometry(track_left, track_width)
        )
        self.refresh()
        return target

    def pointer_moved(self, pointer_x: float):
        target = self.navigation.pointer_moved(pointer_x)
        if target is not None:
            self.refresh()
        return target

    def pointer_released(self) -> None:
        self.navigation.pointer_released()

    def wheel(self, delta: float) -> None:
        self.navigation.wheel(delta)
        self.refresh()

    def select_zoom_level(self, level) -> bool:
        try:
            self.window.set_level(level)
        except InvalidZoomLevelError as e:
            logger.warning("%s", e)
            return False
        self.refresh()
        return True

    def toggle_magnifier(self) -> bool:
        enabled = self.window.toggle_enabled(self.current_time())
        self.refresh()
        return enabled

    # --- Markers ---
    def add_marker(self) -> Optional[Marker]:
        """Drop a marker at the current playback time."""
        if self._surface is None or self.navigation.duration() <= 0:
            logger.debug("add_marker ignored: no source loaded")
            return None
        marker = self.markers.add(self.current_time())
        self._markersChanged()
        return marker

    def remove_marker(self, marker_id: str) -> bool:
        removed = self.markers.remove(marker_id)
        if removed:
            self._markersChanged()
        return removed

    def seek_to_marker(self, marker_id: str) -> Optional[float]:
        marker = self.markers.get(marker_id)
        if marker is None:
            return None
        return self.navigation.seek_to(marker.time)

    # --- Export ---
    def export_active(self) -> bool:
        return self.exporter.is_active()

    def export_frames(self) -> bool:
        """Start exporting every marker; False when nothing was started."""
        if not self.markers:
            logger.warning("Export requested without markers")
            self.exportFailed.emit(NoMarkersError())
            return False
        if self._surface is None or self.navigation.duration() <= 0:
            logger.warning("Export requested with no source loaded")
            self.exportFailed.emit(NoSourceError())
            return False
        try:
            return self.exporter.start(self._surface, self.markers.snapshot())
        except ExportInProgressError as e:
            logger.warning("%s", e)
            return False

    # --- Slots ---
    def _onTimeAdvanced(self, t: float):
        self.navigation.playback_advanced(t)
        self.refresh()

    def _onClipLoaded(self, duration: float):
        self.navigation.pointer_released()
        self.markers.clear()
        self.window.reset(duration, self._defaultLevel())
        self._markersChanged()

    def _onExportActiveChanged(self, active: bool):
        self.navigation.seeking_enabled = not active
        self.exportActiveChanged.emit(active)

    def _markersChanged(self):
        self.markersChanged.emit(self.markers.snapshot())
        self.refresh()

    def _defaultLevel(self) -> ZoomLevel:
        try:
            return ZoomLevel.coerce(self.config.default_zoom_level)
        except InvalidZoomLevelError as e:
            logger.warning("%s; using 2x", e)
            return ZoomLevel.X2


__all__ = ["FrameSession"]
