"""Navigation controller reconciling pointer input with the playback surface.

Drag handling is an explicit state machine over `DragMode`:

    IDLE --press overview--> DRAGGING_OVERVIEW
    IDLE --press detail----> DRAGGING_DETAIL   (ignored while magnifier is off)
    DRAGGING_* --move------> same state, seek reissued
    any --release----------> IDLE

The track geometry is captured at press time, so move events keep mapping
through the timeline that started the drag even if the pointer wanders over
the other one. Overview seeks re-centre the zoom window on the target; detail
seeks leave the window where it is because the user is already looking inside
it. Playback updates only ever `follow`.

`build_render_state` turns the model into the percent-based snapshot the
timeline widgets paint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..utils.geometry import (
    TrackGeometry,
    clamp_percent,
    fraction_to_time,
    time_to_percent,
)
from .markers import Marker, MarkerStore
from .zoom import DEFAULT_PAN_STEP, ZoomWindow

logger = logging.getLogger(__name__)


class DragMode(Enum):
    IDLE = "idle"
    DRAGGING_OVERVIEW = "dragging_overview"
    DRAGGING_DETAIL = "dragging_detail"


class NavigationController:
    def __init__(
        self,
        window: ZoomWindow,
        surface=None,
        *,
        pan_step: float = DEFAULT_PAN_STEP,
    ):
        self.window = window
        self.surface = surface
        self.pan_step = pan_step
        # Cleared while an export owns the surface.
        self.seeking_enabled = True
        self._mode = DragMode.IDLE
        self._track: Optional[TrackGeometry] = None

    @property
    def mode(self) -> DragMode:
        return self._mode

    def duration(self) -> float:
        if self.surface is None:
            return 0.0
        d = self.surface.duration()
        return d if d and d > 0 else 0.0

    def current_time(self) -> float:
        if self.surface is None:
            return 0.0
        return self.surface.current_time()

    # --- Pointer input ---
    def press_overview(self, pointer_x: float, track: TrackGeometry) -> Optional[float]:
        self._mode = DragMode.DRAGGING_OVERVIEW
        self._track = track
        return self._seek_overview(pointer_x)

    def press_detail(self, pointer_x: float, track: TrackGeometry) -> Optional[float]:
        if not self.window.enabled:
            return None
        self._mode = DragMode.DRAGGING_DETAIL
        self._track = track
        return self._seek_detail(pointer_x)

    def pointer_moved(self, pointer_x: float) -> Optional[float]:
        if self._mode is DragMode.DRAGGING_OVERVIEW:
            return self._seek_overview(pointer_x)
        if self._mode is DragMode.DRAGGING_DETAIL:
            return self._seek_detail(pointer_x)
        return None

    def pointer_released(self) -> None:
        self._mode = DragMode.IDLE
        self._track = None

    def wheel(self, delta: float) -> float:
        return self.window.pan(delta, self.pan_step)

    # --- Non-pointer navigation ---
    def playback_advanced(self, t: float) -> None:
        self.window.follow(t)

    def seek_to(self, t: float) -> Optional[float]:
        """Plain seek (e.g. clicking a marker); the window follows on the next update."""
        duration = self.duration()
        if duration <= 0:
            return None
        target = max(0.0, min(duration, t))
        return target if self._issue_seek(target) else None

    # --- Internal helpers ---
    def _seek_overview(self, pointer_x: float) -> Optional[float]:
        duration = self.duration()
        if duration <= 0 or self._track is None:
            return None
        target = fraction_to_time(self._track.fraction_at(pointer_x), 0.0, duration)
        if not self._issue_seek(target):
            return None
        self.window.recenter(target)
        return target

    def _seek_detail(self, pointer_x: float) -> Optional[float]:
        if not self.window.enabled or not self.window.ready or self._track is None:
            return None
        target = fraction_to_time(
            self._track.fraction_at(pointer_x), self.window.start, self.window.span
        )
        return target if self._issue_seek(target) else None

    def _issue_seek(self, target: float) -> bool:
        if self.surface is None:
            return False
        if not self.seeking_enabled:
            logger.debug("Seek to %.3f suppressed while export is running", target)
            return False
        self.surface.seek(target)
        return True


@dataclass(frozen=True)
class RenderState:
    current_time: float = 0.0
    duration: float = 0.0
    overview_progress_percent: float = 0.0
    detail_progress_percent: float = 0.0
    window_left_percent: float = 0.0
    window_width_percent: float = 0.0
    window_start: float = 0.0
    window_span: float = 0.0
    zoom_enabled: bool = True
    zoom_level: int = 2
    visible_markers: Tuple[Marker, ...] = ()
    all_markers: Tuple[Marker, ...] = ()

    def overview_percent(self, marker: Marker) -> float:
        return time_to_percent(marker.time, 0.0, self.duration)

    def detail_percent(self, marker: Marker) -> float:
        return time_to_percent(marker.time, self.window_start, self.window_span)


def build_render_state(
    window: ZoomWindow, markers: MarkerStore, current_time: float
) -> RenderState:
    all_markers = markers.snapshot()
    duration = window.duration
    if duration <= 0:
        return RenderState(
            current_time=current_time,
            zoom_enabled=window.enabled,
            zoom_level=int(window.level),
            all_markers=all_markers,
        )
    overview = clamp_percent(time_to_percent(current_time, 0.0, duration))
    if not window.enabled:
        return RenderState(
            current_time=current_time,
            duration=duration,
            overview_progress_percent=overview,
            window_start=window.start,
            window_span=window.span,
            zoom_enabled=False,
            zoom_level=int(window.level),
            all_markers=all_markers,
        )
    start, end = window.start, window.end
    return RenderState(
        current_time=current_time,
        duration=duration,
        overview_progress_percent=overview,
        detail_progress_percent=clamp_percent(
            time_to_percent(current_time, start, window.span)
        ),
        window_left_percent=time_to_percent(start, 0.0, duration),
        window_width_percent=time_to_percent(window.span, 0.0, duration),
        window_start=start,
        window_span=window.span,
        zoom_enabled=True,
        zoom_level=int(window.level),
        visible_markers=tuple(markers.visible_in_range(start, end)),
        all_markers=all_markers,
    )


__all__ = ["DragMode", "NavigationController", "RenderState", "build_render_state"]
