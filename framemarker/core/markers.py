"""Marker model: time-coded annotations that drive frame export.

Markers are identified by an opaque token, never by their time, so two markers
may sit on the same instant. The store keeps them sorted ascending by time at
all times; equal times keep insertion order because the sort is stable. The
1-based position of a marker in that order is its display number and the index
used in exported filenames.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


def _new_marker_id() -> str:
    return f"marker-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Marker:
    time: float  # seconds from start of the source
    id: str = field(default_factory=_new_marker_id)


class MarkerStore:
    def __init__(self):
        self._markers: List[Marker] = []

    def add(self, time: float) -> Marker:
        """Create a marker at ``time`` and insert it in chronological order."""
        time = float(time)
        if math.isnan(time) or time < 0:
            raise ValueError(f"marker time must be >= 0, got {time!r}")
        marker = Marker(time=time)
        self._markers.append(marker)
        self._markers.sort(key=lambda m: m.time)
        return marker

    def remove(self, marker_id: str) -> bool:
        """Drop the marker with ``marker_id``; returns False if it was absent."""
        before = len(self._markers)
        self._markers = [m for m in self._markers if m.id != marker_id]
        return len(self._markers) != before

    def clear(self) -> None:
        self._markers = []

    def get(self, marker_id: str) -> Optional[Marker]:
        for m in self._markers:
            if m.id == marker_id:
                return m
        return None

    def visible_in_range(self, start: float, end: float) -> List[Marker]:
        """Markers with ``start <= time <= end``, ascending."""
        return [m for m in self._markers if start <= m.time <= end]

    def snapshot(self) -> Tuple[Marker, ...]:
        return tuple(self._markers)

    def numbered(self) -> List[Tuple[int, Marker]]:
        """``(display_number, marker)`` pairs, numbered 1.. in time order."""
        return list(enumerate(self._markers, start=1))

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[Marker]:
        return iter(tuple(self._markers))

    def __bool__(self) -> bool:
        return bool(self._markers)


__all__ = ["Marker", "MarkerStore"]
