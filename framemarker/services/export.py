"""Sequential, seek-accurate still export.

`FrameExportPipeline` walks a snapshot of the markers in ascending time order.
For each one it asks the playback surface to seek, returns to the event loop,
and only when the surface emits ``seeked`` does it capture the decoded frame,
scale it to the run's fixed output size and encode it as JPEG. Seek N+1 is
never issued before capture N, since the surface holds a single current frame.
A clip loaded on the surface mid-run aborts the export with
`CaptureFailureError` ("source changed").

Outcome is all-or-nothing: either ``finished`` carries one `ExportResult` per
marker in marker order, or ``failed`` carries the error and nothing else is
delivered. Progress is reported as ``completed / total`` after every capture
and reset to 0 when the run ends either way.

There is no timeout: a seek that never completes stalls the run.

Writing files is left to `save_results`, which applies the artifact naming
convention ``frame_{nnn}_{m}m{ss}s{mmm}.jpg``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image
from PySide6.QtCore import QObject, Signal

from ..core.errors import (
    CaptureFailureError,
    ExportInProgressError,
    FramemarkerError,
    NoMarkersError,
    SeekFailureError,
)
from ..core.markers import Marker
from ..utils.timefmt import frame_filename

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]  # 0.0 - 1.0


class ExportSettings:
    def __init__(
        self,
        max_width: int = 1080,
        max_height: int = 1920,
        jpeg_quality: int = 95,
    ):
        self.max_width = max_width
        self.max_height = max_height
        self.jpeg_quality = jpeg_quality


@dataclass(frozen=True)
class ExportResult:
    image_data: bytes
    source_time: float

    def filename(self, index: int) -> str:
        return frame_filename(index, self.source_time)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_output_size(
    width: int, height: int, max_width: int = 1080, max_height: int = 1920
) -> Tuple[int, int]:
    """Bound ``(width, height)`` by the ceiling, preserving aspect ratio.

    Sources within the ceiling keep their natural size; larger ones are scaled
    by ``min(max_width / width, max_height / height)``.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid frame size {width}x{height}")
    if width > max_width or height > max_height:
        ratio = min(max_width / width, max_height / height)
        width = max(1, _round_half_up(width * ratio))
        height = max(1, _round_half_up(height * ratio))
    return width, height


def encode_frame(frame, size: Tuple[int, int], quality: int = 95) -> bytes:
    """Encode an RGB(A)/grayscale numpy frame to JPEG bytes at ``size``."""
    if frame is None:
        raise ValueError("no frame data")
    array = np.asarray(frame)
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    image = Image.fromarray(array).convert("RGB")
    if image.size != tuple(size):
        image = image.resize(size, Image.Resampling.LANCZOS)
    buf = BytesIO()
    image.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def save_results(results: Sequence[ExportResult], out_dir: str | Path) -> List[Path]:
    """Write results to ``out_dir`` in order; returns the written paths."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    paths: List[Path] = []
    for index, result in enumerate(results, start=1):
        path = out / result.filename(index)
        path.write_bytes(result.image_data)
        paths.append(path)
    logger.info("Wrote %d frame(s) to %s", len(paths), out)
    return paths


class FrameExportPipeline(QObject):
    """Drive a playback surface through the markers and collect stills.

    Signals:
        progressChanged(float)   fraction completed, 0.0 again at the end
        finished(list)           list[ExportResult] in marker order
        failed(object)           FramemarkerError describing the abort
        activeChanged(bool)
    """

    progressChanged = Signal(float)
    finished = Signal(object)
    failed = Signal(object)
    activeChanged = Signal(bool)

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        parent: Optional[QObject] = None,
        *,
        progress: Optional[ProgressCallback] = None,
    ):
        super().__init__(parent)
        self.settings = settings or ExportSettings()
        if progress is not None:
            self.progressChanged.connect(progress)
        self._active = False
        self._surface = None
        self._markers: Tuple[Marker, ...] = ()
        self._index = 0
        self._results: List[ExportResult] = []
        self._size: Tuple[int, int] = (0, 0)
        self._awaiting_seek = False
        self._connected = False
        self._driving = False
        self._run_id = 0

    # Public API
    def is_active(self) -> bool:
        return self._active

    def output_size(self) -> Tuple[int, int]:
        return self._size

    def start(self, surface, markers: Sequence[Marker]) -> bool:
        """Begin exporting ``markers`` from ``surface``.

        Returns True once the first seek has been issued (a synchronous
        surface may already have finished the run by then). Returns False when
        the run ended before any seek, because there are no markers or the
        source has no usable frame size; the reason goes out through
        ``failed``. Raises `ExportInProgressError` if a run is already active;
        the running export is left untouched.
        """
        if self._active:
            raise ExportInProgressError()
        snapshot = tuple(sorted(markers, key=lambda m: m.time))
        if not snapshot:
            logger.warning("Export requested without markers")
            self.failed.emit(NoMarkersError())
            return False

        self._run_id += 1
        self._active = True
        self._surface = surface
        self._markers = snapshot
        self._index = 0
        self._results = []
        self.activeChanged.emit(True)
        try:
            self._size = compute_output_size(
                int(surface.natural_width()),
                int(surface.natural_height()),
                self.settings.max_width,
                self.settings.max_height,
            )
        except ValueError as e:
            self._abort(CaptureFailureError(snapshot[0].time, str(e)))
            return False
        logger.info(
            "Exporting %d frame(s) at %dx%d", len(snapshot), self._size[0], self._size[1]
        )
        surface.seeked.connect(self._onSeeked)
        surface.seekFailed.connect(self._onSeekFailed)
        surface.clipLoaded.connect(self._onClipLoaded)
        self._connected = True
        self.progressChanged.emit(0.0)
        self._seekCurrent()
        return True

    # Internal
    def _currentMarker(self) -> Marker:
        return self._markers[self._index]

    def _seekCurrent(self):
        """Issue seeks until one is left pending or the run ends.

        A surface that completes synchronously re-enters `_onSeeked` from
        inside ``seek``; that capture only advances the index and this loop
        issues the next seek, so the stack depth stays flat.
        """
        run = self._run_id
        self._driving = True
        try:
            while self._active and self._run_id == run:
                marker = self._currentMarker()
                logger.debug(
                    "Seeking to marker %d/%d at %.3fs",
                    self._index + 1,
                    len(self._markers),
                    marker.time,
                )
                # Set before seeking: a surface may complete synchronously.
                self._awaiting_seek = True
                try:
                    self._surface.seek(marker.time)
                except Exception as e:  # surface torn down or rejected the request
                    if not self._awaiting_seek:
                        raise
                    self._abort(SeekFailureError(marker.time, str(e)))
                    return
                if self._awaiting_seek:
                    return  # completes later; _onSeeked resumes the run
        finally:
            self._driving = False

    def _onSeeked(self, resolved_time: float):
        if not self._active or not self._awaiting_seek:
            return
        self._awaiting_seek = False
        marker = self._currentMarker()
        try:
            frame = self._surface.snapshot_frame()
            data = encode_frame(frame, self._size, self.settings.jpeg_quality)
        except Exception as e:
            self._abort(CaptureFailureError(marker.time, str(e)))
            return
        self._results.append(ExportResult(image_data=data, source_time=marker.time))
        self._index += 1
        total = len(self._markers)
        self.progressChanged.emit(self._index / total)
        if self._index >= total:
            self._finish()
        elif not self._driving:
            self._seekCurrent()

    def _onSeekFailed(self, t: float, reason: str):
        if not self._active or not self._awaiting_seek:
            return
        self._awaiting_seek = False
        self._abort(SeekFailureError(self._currentMarker().time, reason))

    def _onClipLoaded(self, duration: float):
        if not self._active:
            return
        self._abort(CaptureFailureError(self._currentMarker().time, "source changed"))

    def _finish(self):
        results = list(self._results)
        self._teardown()
        logger.info("Export finished: %d frame(s)", len(results))
        self.progressChanged.emit(0.0)
        self.finished.emit(results)

    def _abort(self, error: FramemarkerError):
        self._teardown()
        logger.warning("Export aborted: %s", error)
        self.progressChanged.emit(0.0)
        self.failed.emit(error)

    def _teardown(self):
        surface = self._surface
        if surface is not None and self._connected:
            surface.seeked.disconnect(self._onSeeked)
            surface.seekFailed.disconnect(self._onSeekFailed)
            surface.clipLoaded.disconnect(self._onClipLoaded)
        self._connected = False
        self._surface = None
        self._markers = ()
        self._results = []
        self._index = 0
        self._awaiting_seek = False
        self._active = False
        self.activeChanged.emit(False)


__all__ = [
    "ExportResult",
    "ExportSettings",
    "FrameExportPipeline",
    "compute_output_size",
    "encode_frame",
    "save_results",
]
