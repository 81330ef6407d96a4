"""Playback surface contract consumed by navigation and export.

The core never owns a surface; the application constructs one per loaded
source (see `VideoPlaybackController`) and hands a reference to the session.

Seeking is asynchronous: ``seek(t)`` only *requests* the move. The surface
later emits ``seeked(resolved_time)`` once the frame at (or nearest to) ``t``
is decoded, or ``seekFailed(t, reason)``. ``snapshot_frame()`` is only
meaningful after ``seeked``; reading it earlier yields the previous frame.

Signals (Qt, declared on the concrete QObject):
    timeAdvanced(float)      position changed (playback tick or completed seek)
    playStateChanged(bool)   True while playing
    seeked(float)            requested seek completed
    seekFailed(float, str)   requested seek could not be resolved
    clipLoaded(float)        new source ready, carries its duration
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PlaybackSurface(Protocol):
    timeAdvanced: Any
    playStateChanged: Any
    seeked: Any
    seekFailed: Any
    clipLoaded: Any

    def current_time(self) -> float: ...

    def duration(self) -> float: ...

    def is_playing(self) -> bool: ...

    def seek(self, t: float) -> None: ...

    def natural_width(self) -> int: ...

    def natural_height(self) -> int: ...

    def snapshot_frame(self) -> Any: ...


__all__ = ["PlaybackSurface"]
