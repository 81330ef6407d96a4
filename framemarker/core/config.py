"""Application configuration with environment overrides.

Every knob has a default matching the stock behaviour; ``FRAMEMARKER_*``
variables override them. Malformed values are logged and ignored rather than
aborting start-up.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "FRAMEMARKER_"

# field name -> environment suffix
_ENV_NAMES = {
    "max_export_width": "MAX_WIDTH",
    "max_export_height": "MAX_HEIGHT",
    "jpeg_quality": "JPEG_QUALITY",
    "pan_step_fraction": "PAN_STEP",
    "default_zoom_level": "ZOOM_LEVEL",
    "log_level": "LOG_LEVEL",
    "screen_index": "SCREEN_INDEX",
}

_CASTERS = {
    "max_export_width": int,
    "max_export_height": int,
    "jpeg_quality": int,
    "pan_step_fraction": float,
    "default_zoom_level": int,
    "screen_index": int,
}


@dataclass
class AppConfig:
    max_export_width: int = 1080
    max_export_height: int = 1920
    jpeg_quality: int = 95
    pan_step_fraction: float = 0.08
    default_zoom_level: int = 2
    log_level: str = "INFO"
    screen_index: Optional[int] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if env is None else env
        values = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + _ENV_NAMES[f.name])
            if raw is None or raw == "":
                continue
            caster = _CASTERS.get(f.name, str)
            try:
                values[f.name] = caster(raw)
            except ValueError:
                logger.warning(
                    "Ignoring %s%s=%r: not a valid %s",
                    ENV_PREFIX,
                    _ENV_NAMES[f.name],
                    raw,
                    caster.__name__,
                )
        config = cls(**values)
        if not 1 <= config.jpeg_quality <= 100:
            logger.warning("JPEG quality %s out of range, using 95", config.jpeg_quality)
            config.jpeg_quality = 95
        return config

    def export_settings(self):
        from ..services.export import ExportSettings

        return ExportSettings(
            max_width=self.max_export_width,
            max_height=self.max_export_height,
            jpeg_quality=self.jpeg_quality,
        )


__all__ = ["AppConfig", "ENV_PREFIX"]
