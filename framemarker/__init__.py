"""Top-level application package exports.

Public API surface (keep minimal):
 - MainWindow, run (UI entry point)
 - FrameSession (markers + zoom window + navigation + export for one source)
 - MarkerStore, ZoomWindow, ZoomLevel (core state)
 - format_time (timestamp display)
"""

from .core.markers import Marker, MarkerStore  # noqa: F401
from .core.session import FrameSession  # noqa: F401
from .core.zoom import ZoomLevel, ZoomWindow  # noqa: F401
from .ui.main_window import MainWindow, run  # noqa: F401
from .utils.timefmt import format_time  # noqa: F401

__all__ = [
    "FrameSession",
    "MainWindow",
    "Marker",
    "MarkerStore",
    "ZoomLevel",
    "ZoomWindow",
    "format_time",
    "run",
]
