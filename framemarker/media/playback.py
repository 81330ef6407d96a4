"""MoviePy-backed playback surface.

`VideoPlaybackController` wraps a `ClipAdapter` and implements the
`PlaybackSurface` contract used by navigation and export:

    load(path_or_clip)
    play() / pause() / toggle_play()
    seek(seconds)            asynchronous, completes on the next event-loop turn
    current_time() -> float  pending seek target while a seek is in flight
    snapshot_frame()         last decoded RGB frame (numpy array)

Signals:
    frameReady(np.ndarray, float)   frame array + timestamp seconds
    timeAdvanced(float)             playback tick or completed seek
    playStateChanged(bool)          True while playing
    seeked(float)                   resolved time of a completed seek
    seekFailed(float, str)          requested time + reason
    clipLoaded(float)               duration

Seek semantics: a request only records the target. Completion runs from a
zero-delay QTimer so callers always observe the request/complete split the
export pipeline depends on. Requests issued before completion coalesce and
the last target wins; exactly one ``seeked``/``seekFailed`` is emitted for
the batch.

Frame Skipping:
To maintain real-time playback under UI load, the controller can skip frames. When
``frame_skip`` is enabled (default), each timer tick computes the desired frame
index from wall-clock elapsed time since play start. If decoding lags,
intermediate frames are dropped and playback jumps forward to the desired index.
Disable via ``set_frame_skipping(False)`` for frame-exact stepping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Optional, Tuple, Union

from PySide6.QtCore import QObject, Qt, QTimer, Signal

from .clip_adapter import ClipAdapter

logger = logging.getLogger(__name__)


@dataclass
class PlaybackState:
    playing: bool = False
    current_frame: int = 0
    total_frames: int = 0
    duration: float = 0.0
    fps: float = 0.0


class VideoPlaybackController(QObject):
    frameReady = Signal(object, float)  # (numpy array, t seconds)
    timeAdvanced = Signal(float)
    playStateChanged = Signal(bool)
    seeked = Signal(float)
    seekFailed = Signal(float, str)
    clipLoaded = Signal(float)  # duration

    def __init__(
        self,
        parent: Optional[QObject] = None,
        *,
        frame_skip: bool = True,
        sync_threshold_frames: int = 2,
    ):
        super().__init__(parent)
        self._clip_adapter: Optional[ClipAdapter] = None
        self._owns_clip = False
        self._state = PlaybackState()
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._tick)
        self._play_start_time: Optional[float] = None
        self._frame_skip_enabled = frame_skip
        # Coarse drift correction threshold used when frame_skip is disabled.
        self._sync_threshold_frames = sync_threshold_frames
        self._pending_seek: Optional[float] = None
        self._seek_scheduled = False
        self._last_frame = None

    # Configuration API
    def set_frame_skipping(self, enabled: bool):
        self._frame_skip_enabled = enabled

    # Public API
    def load(self, source: Union[str, ClipAdapter, object]):
        if isinstance(source, str):
            adapter = ClipAdapter.from_path(source)
            owns = True
        elif isinstance(source, ClipAdapter):
            adapter, owns = source, False
        else:
            adapter, owns = ClipAdapter.from_clip(source), False
        self.unload()
        self._clip_adapter = adapter
        self._owns_clip = owns
        fps = adapter.fps or 24.0
        duration = adapter.duration
        total_frames = int(round(fps * duration)) if duration > 0 else 0
        self._state = PlaybackState(
            playing=False,
            current_frame=0,
            total_frames=total_frames,
            duration=duration,
            fps=fps,
        )
        logger.info(
            "Loaded clip: %.3fs @ %.2f fps, %dx%d",
            duration,
            fps,
            *adapter.size,
        )
        self.clipLoaded.emit(duration)
        self.playStateChanged.emit(False)
        self.seek(0.0)

    def unload(self):
        self.pause()
        if self._clip_adapter is not None and self._owns_clip:
            self._clip_adapter.close()
        self._clip_adapter = None
        self._owns_clip = False
        self._state = PlaybackState()
        self._last_frame = None
        self._pending_seek = None

    def play(self):
        if not self._clip_adapter or self._state.total_frames <= 0:
            return
        if self._state.current_frame >= self._state.total_frames - 1:
            self._state.current_frame = 0
        fps = self._state.fps or 24.0
        if not self._timer.isActive():
            self._play_start_time = perf_counter() - (self._state.current_frame / fps)
            self._timer.start(int(1000 / fps))
        if not self._state.playing:
            self._state.playing = True
            self.playStateChanged.emit(True)

    def pause(self):
        if self._timer.isActive():
            self._timer.stop()
        if self._state.playing:
            self._state.playing = False
            self.playStateChanged.emit(False)

    def toggle_play(self):
        if self._state.playing:
            self.pause()
        else:
            self.play()

    def is_playing(self) -> bool:
        return self._state.playing

    def seek(self, t: float):
        target = max(0.0, float(t))
        if self._state.duration > 0:
            target = min(target, self._state.duration)
        self._pending_seek = target
        if not self._seek_scheduled:
            self._seek_scheduled = True
            QTimer.singleShot(0, self._completeSeek)

    def position(self) -> float:
        if not self._clip_adapter or self._state.total_frames <= 0:
            return 0.0
        return self._state.current_frame / (self._state.fps or 24.0)

    def current_time(self) -> float:
        if self._pending_seek is not None:
            return self._pending_seek
        return self.position()

    def duration(self) -> float:
        return self._state.duration

    def natural_size(self) -> Tuple[int, int]:
        if not self._clip_adapter:
            return (0, 0)
        return self._clip_adapter.size

    def natural_width(self) -> int:
        return self.natural_size()[0]

    def natural_height(self) -> int:
        return self.natural_size()[1]

    def snapshot_frame(self):
        if self._clip_adapter is None or self._last_frame is None:
            raise RuntimeError("no decoded frame available")
        return self._last_frame

    # Internal
    def _frameIndex(self, t: float) -> int:
        fps = self._state.fps or 24.0
        return int(max(0, min(int(t * fps), self._state.total_frames - 1)))

    def _decode(self, frame_index: int):
        t = frame_index / (self._state.fps or 24.0)
        frame = self._clip_adapter.get_frame(t)
        self._state.current_frame = frame_index
        self._last_frame = frame
        self.frameReady.emit(frame, t)
        self.timeAdvanced.emit(t)
        return t

    def _completeSeek(self):
        self._seek_scheduled = False
        target = self._pending_seek
        self._pending_seek = None
        if target is None:
            return
        if self._clip_adapter is None or self._state.total_frames <= 0:
            self.seekFailed.emit(target, "no media loaded")
            return
        try:
            resolved = self._decode(self._frameIndex(target))
        except Exception as e:
            logger.warning("Seek to %.3fs failed: %s", target, e)
            self.seekFailed.emit(target, str(e))
            return
        if self._state.playing:
            self._play_start_time = perf_counter() - resolved
        self.seeked.emit(resolved)

    def _tick(self):
        if not self._clip_adapter:
            self._timer.stop()
            return
        if self._pending_seek is not None:
            return  # the seek sets the new position
        fps = self._state.fps or 24.0
        # Derive target frame using wall clock to keep pace; optionally skip frames.
        target_index = self._state.current_frame + 1
        if self._play_start_time is not None:
            desired = int((perf_counter() - self._play_start_time) * fps)
            if self._frame_skip_enabled:
                if desired > self._state.current_frame:
                    target_index = desired
            elif desired - self._state.current_frame > self._sync_threshold_frames:
                target_index = desired
        if target_index >= self._state.total_frames:
            self.pause()
            return
        try:
            self._decode(target_index)
        except Exception as e:
            logger.warning("Decode failed at frame %d: %s", target_index, e)
            self.pause()


__all__ = ["PlaybackState", "VideoPlaybackController"]
