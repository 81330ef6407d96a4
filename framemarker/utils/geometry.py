"""Pure conversions between pointer pixels, track fractions, percentages and time.

A *fraction* is a position along a track in ``[0, 1]``; a *percent* is the same
quantity scaled to ``[0, 100]`` as consumed by the timeline widgets. Time ranges
are expressed as ``(start, span)`` so the same helpers serve the overview
timeline (``start=0, span=duration``) and the detail window.
"""

from __future__ import annotations

from dataclasses import dataclass


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class TrackGeometry:
    """Horizontal extent of a timeline track in pointer coordinates."""

    left: float
    width: float

    def fraction_at(self, pointer_x: float) -> float:
        return pointer_fraction(pointer_x, self.left, self.width)


def pointer_fraction(pointer_x: float, track_left: float, track_width: float) -> float:
    """Clamp ``(pointer_x - track_left) / track_width`` to ``[0, 1]``.

    A collapsed track (width <= 0) maps every pointer to 0.
    """
    if track_width <= 0:
        return 0.0
    return clamp01((pointer_x - track_left) / track_width)


def fraction_to_time(fraction: float, start: float, span: float) -> float:
    return start + fraction * span


def time_to_percent(t: float, start: float, span: float) -> float:
    """Position of ``t`` inside ``[start, start + span]`` as a percent (unclamped)."""
    if span <= 0:
        return 0.0
    return (t - start) / span * 100.0


def clamp_percent(percent: float) -> float:
    return max(0.0, min(100.0, percent))


def percent_to_offset(percent: float, track_width: float) -> float:
    """Pixel offset from the track's left edge for a percent position."""
    return percent / 100.0 * track_width


__all__ = [
    "TrackGeometry",
    "clamp01",
    "clamp_percent",
    "fraction_to_time",
    "percent_to_offset",
    "pointer_fraction",
    "time_to_percent",
]
