import logging

from framemarker.core.config import AppConfig
from framemarker.core.errors import (
    CaptureFailureError,
    FramemarkerError,
    InvalidZoomLevelError,
    SeekFailureError,
)
from framemarker.utils.logging import setup_logging


def test_defaults():
    config = AppConfig.from_env({})
    assert config == AppConfig()
    settings = config.export_settings()
    assert (settings.max_width, settings.max_height, settings.jpeg_quality) == (
        1080,
        1920,
        95,
    )


def test_env_overrides():
    config = AppConfig.from_env(
        {
            "FRAMEMARKER_MAX_WIDTH": "720",
            "FRAMEMARKER_JPEG_QUALITY": "80",
            "FRAMEMARKER_PAN_STEP": "0.25",
            "FRAMEMARKER_ZOOM_LEVEL": "8",
            "FRAMEMARKER_LOG_LEVEL": "DEBUG",
            "FRAMEMARKER_SCREEN_INDEX": "1",
        }
    )
    assert config.max_export_width == 720
    assert config.max_export_height == 1920
    assert config.jpeg_quality == 80
    assert config.pan_step_fraction == 0.25
    assert config.default_zoom_level == 8
    assert config.log_level == "DEBUG"
    assert config.screen_index == 1


def test_bad_values_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="framemarker"):
        config = AppConfig.from_env(
            {"FRAMEMARKER_MAX_HEIGHT": "tall", "FRAMEMARKER_JPEG_QUALITY": "400"}
        )
    assert config.max_export_height == 1920
    assert config.jpeg_quality == 95
    assert "FRAMEMARKER_MAX_HEIGHT" in caplog.text


def test_error_messages():
    err = SeekFailureError(1.2, "decode error")
    assert isinstance(err, FramemarkerError)
    assert str(err) == "Failed to seek to frame at 1.200s (decode error)"
    assert str(CaptureFailureError(3.0)) == "Failed to capture frame at 3.000s"
    assert isinstance(InvalidZoomLevelError(3), ValueError)


def test_setup_logging_is_idempotent():
    logger = logging.getLogger("framemarker")
    before = list(logger.handlers)
    try:
        setup_logging("debug")
        setup_logging("WARNING")
        ours = [h for h in logger.handlers if h.get_name() == "framemarker-console"]
        assert len(ours) == 1
        assert logger.level == logging.WARNING
        assert ours[0].level == logging.WARNING
    finally:
        for handler in list(logger.handlers):
            if handler not in before:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
