"""Error taxonomy for navigation and frame export.

Every error the core reports derives from `FramemarkerError` so the session and
UI can recover at one boundary. A zero/unknown duration is deliberately *not*
an error: window operations simply do nothing until the source is ready.
"""

from __future__ import annotations

from typing import Optional


class FramemarkerError(Exception):
    """Base class for reportable, non-fatal conditions."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class NoMarkersError(FramemarkerError):
    def __init__(self):
        super().__init__("Add at least one marker first")


class NoSourceError(FramemarkerError):
    def __init__(self):
        super().__init__("Open a video first")


class ExportInProgressError(FramemarkerError):
    def __init__(self):
        super().__init__("An export is already running")


class _MarkerFailure(FramemarkerError):
    """Failure tied to the marker being processed when the export aborted."""

    verb = "process"

    def __init__(self, time: float, reason: Optional[str] = None):
        super().__init__(f"Failed to {self.verb} frame at {time:.3f}s", reason)
        self.time = time
        self.reason = reason


class SeekFailureError(_MarkerFailure):
    verb = "seek to"


class CaptureFailureError(_MarkerFailure):
    verb = "capture"


class InvalidZoomLevelError(FramemarkerError, ValueError):
    def __init__(self, level: object):
        super().__init__(f"Unsupported zoom level: {level!r}", "expected 2, 4 or 8")
        self.level = level


__all__ = [
    "FramemarkerError",
    "NoMarkersError",
    "NoSourceError",
    "ExportInProgressError",
    "SeekFailureError",
    "CaptureFailureError",
    "InvalidZoomLevelError",
]
