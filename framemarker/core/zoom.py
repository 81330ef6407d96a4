"""Zoom-window model for the magnified detail timeline.

The detail timeline shows ``span = duration / level`` seconds starting at
``start``. Every movement goes through `ZoomWindow.set_start`, which clamps to
``[0, max(0, duration - span)]`` so the window never hangs off either edge of
the track.

While the duration is unknown (zero) the span is zero and every window
operation is a silent no-op; the model simply is not ready yet.

Operations:
    set_duration(d)        new source; clamps the current start
    set_level(level)       change magnification keeping the centre time
    set_start(t)           the single clamping gate
    pan(sign, step)        nudge by a fraction of the span (wheel)
    follow(t)              minimal shift so a play-head stays visible
    toggle_enabled(t)      switch magnifier; re-enabling centres on ``t``
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Union

from .errors import InvalidZoomLevelError

logger = logging.getLogger(__name__)

DEFAULT_PAN_STEP = 0.08


class ZoomLevel(IntEnum):
    X2 = 2
    X4 = 4
    X8 = 8

    @classmethod
    def coerce(cls, level: Union["ZoomLevel", int]) -> "ZoomLevel":
        try:
            return cls(level)
        except (ValueError, TypeError):
            raise InvalidZoomLevelError(level) from None


class ZoomWindow:
    def __init__(
        self,
        duration: float = 0.0,
        level: Union[ZoomLevel, int] = ZoomLevel.X2,
        *,
        enabled: bool = True,
    ):
        self._duration = 0.0
        self._level = ZoomLevel.coerce(level)
        self._start = 0.0
        self.enabled = enabled
        self.set_duration(duration)

    # --- Derived quantities ---
    @property
    def duration(self) -> float:
        return self._duration

    @property
    def level(self) -> ZoomLevel:
        return self._level

    @property
    def start(self) -> float:
        return self._start

    @property
    def span(self) -> float:
        if self._duration <= 0:
            return 0.0
        return self._duration / int(self._level)

    @property
    def end(self) -> float:
        return self._start + self.span

    @property
    def center(self) -> float:
        return self._start + self.span / 2

    @property
    def ready(self) -> bool:
        return self._duration > 0

    def max_start(self) -> float:
        return max(0.0, self._duration - self.span)

    def contains(self, t: float) -> bool:
        return self._start <= t < self.end

    # --- Mutations ---
    def set_duration(self, duration: float) -> None:
        try:
            duration = float(duration)
        except (TypeError, ValueError):
            duration = 0.0
        # NaN and negatives mean "unknown"
        self._duration = duration if duration > 0 else 0.0
        if not self.ready:
            self._start = 0.0
            return
        self._start = self._clamp(self._start)

    def reset(self, duration: float, level: Union[ZoomLevel, int] = ZoomLevel.X2) -> None:
        """Back to the initial state for a freshly loaded source."""
        self._level = ZoomLevel.coerce(level)
        self._start = 0.0
        self.enabled = True
        self.set_duration(duration)

    def set_start(self, candidate: float) -> float:
        if not self.ready:
            logger.debug("set_start(%s) ignored: duration unknown", candidate)
            return self._start
        self._start = self._clamp(candidate)
        return self._start

    def set_level(self, level: Union[ZoomLevel, int]) -> ZoomLevel:
        """Change magnification, keeping the previous centre time in view.

        Raises `InvalidZoomLevelError` (state untouched) for levels outside
        {2, 4, 8}. While disabled only the level is stored; the magnifier
        re-centres on the play-head when it is switched back on anyway.
        """
        new_level = ZoomLevel.coerce(level)
        old_center = self.center
        self._level = new_level
        if self.enabled and self.ready:
            self.set_start(old_center - self.span / 2)
        else:
            self._start = self._clamp(self._start) if self.ready else 0.0
        return self._level

    def pan(self, delta_sign: float, step_fraction: float = DEFAULT_PAN_STEP) -> float:
        if not self.enabled or not self.ready or delta_sign == 0:
            return self._start
        direction = 1 if delta_sign > 0 else -1
        return self.set_start(self._start + self.span * step_fraction * direction)

    def follow(self, t: float) -> float:
        """Shift the window as little as possible so ``t`` is inside it."""
        if not self.enabled or not self.ready:
            return self._start
        if t < self._start:
            return self.set_start(t)
        if t >= self.end:
            return self.set_start(t - self.span)
        return self._start

    def recenter(self, t: float) -> float:
        if not self.enabled:
            return self._start
        return self.set_start(t - self.span / 2)

    def toggle_enabled(self, current_time: float) -> bool:
        self.enabled = not self.enabled
        if self.enabled:
            self.recenter(current_time)
        return self.enabled

    # --- Internal helpers ---
    def _clamp(self, candidate: float) -> float:
        return max(0.0, min(self.max_start(), float(candidate)))

    def __repr__(self) -> str:
        return (
            f"ZoomWindow(start={self._start:.3f}, span={self.span:.3f}, "
            f"level={int(self._level)}, enabled={self.enabled})"
        )


__all__ = ["ZoomLevel", "ZoomWindow", "DEFAULT_PAN_STEP"]
