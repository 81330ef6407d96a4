"""Thread-safe adapter around MoviePy VideoFileClip providing simplified access.

Encapsulates the mutex locking strategy so the playback controller and any
background consumer can decode frames without duplicating lock handling.
"""

from __future__ import annotations

from typing import Tuple

from moviepy import VideoFileClip
from PySide6.QtCore import QMutex


class ClipAdapter:
    def __init__(self, clip):
        self._clip = clip
        self._mutex = QMutex()

    @property
    def clip(self):
        return self._clip

    @property
    def duration(self) -> float:
        return float(getattr(self._clip, "duration", 0.0) or 0.0)

    @property
    def fps(self) -> float:
        return float(getattr(self._clip, "fps", 0.0) or 0.0)

    @property
    def size(self) -> Tuple[int, int]:
        """Natural ``(width, height)`` of decoded frames; (0, 0) if unknown."""
        size = getattr(self._clip, "size", None)
        if not size:
            return (0, 0)
        return int(size[0]), int(size[1])

    def get_frame(self, t: float):
        self._mutex.lock()
        try:
            return self._clip.get_frame(t)
        finally:
            self._mutex.unlock()

    def close(self) -> None:
        self._mutex.lock()
        try:
            close = getattr(self._clip, "close", None)
            if close is not None:
                close()
        finally:
            self._mutex.unlock()

    @classmethod
    def from_path(cls, path: str) -> "ClipAdapter":
        return cls(VideoFileClip(path))

    @classmethod
    def from_clip(cls, clip) -> "ClipAdapter":
        return cls(clip)


__all__ = ["ClipAdapter"]
