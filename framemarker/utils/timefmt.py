"""Time formatting utilities.

Provides `format_time` (mm:ss.mmm for UI labels) and `format_time_filename`
(``{m}m{ss}s{mmm}`` for exported frame names) plus `frame_filename`, which
builds the full artifact name for the n-th exported frame.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

__all__ = ["format_time", "format_time_filename", "frame_filename"]


def _to_millis(seconds: float, rounding: str) -> int:
    # Decimal(str(x)) keeps the literal value (1.2 stays 1.2, not 1.19999...).
    return int(
        (Decimal(str(seconds)) * Decimal(1000)).to_integral_value(rounding=rounding)
    )


def format_time(seconds: float) -> str:
    """Return a human-friendly timestamp mm:ss.mmm for UI labels.

    Uses ROUND_HALF_UP semantics for milliseconds to avoid Python's bankers rounding
    edge cases (e.g., 1.2345 -> 1.235). Accepts negative (clamps display to 0).
    """
    if seconds < 0:
        seconds = 0.0
    ms_total = _to_millis(seconds, ROUND_HALF_UP)
    m, rem = divmod(ms_total, 60000)
    s, ms = divmod(rem, 1000)
    return f"{m:02d}:{s:02d}.{ms:03d}"  # mm:ss.mmm


def format_time_filename(seconds: float) -> str:
    """Return ``{minutes}m{seconds:02}s{millis:03}`` with truncated sub-units.

    Minutes are not padded and may exceed 59 for long sources (no hour field).
    """
    if seconds < 0:
        seconds = 0.0
    ms_total = _to_millis(seconds, ROUND_FLOOR)
    m, rem = divmod(ms_total, 60000)
    s, ms = divmod(rem, 1000)
    return f"{m}m{s:02d}s{ms:03d}"


def frame_filename(index: int, seconds: float, extension: str = "jpg") -> str:
    """Name of the exported still for the 1-based marker ``index``."""
    return f"frame_{index:03d}_{format_time_filename(seconds)}.{extension}"
