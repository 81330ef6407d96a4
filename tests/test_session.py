import pytest

from framemarker.core.config import AppConfig
from framemarker.core.errors import NoMarkersError, NoSourceError
from framemarker.core.session import FrameSession
from framemarker.core.zoom import ZoomLevel


@pytest.fixture
def session(surface):
    s = FrameSession()
    s.attach_surface(surface)
    return s


def _collect(signal):
    seen = []
    signal.connect(seen.append)
    return seen


def test_attach_sets_window_duration(session):
    assert session.window.duration == 60.0
    state = session.render_state()
    assert state.duration == 60.0
    assert state.window_width_percent == 50.0


def test_add_marker_at_current_time(session, surface):
    changes = _collect(session.markersChanged)
    surface.advance(12.5)
    marker = session.add_marker()
    assert marker.time == 12.5
    assert changes[-1] == (marker,)


def test_add_marker_requires_loaded_source(make_surface):
    s = FrameSession()
    assert s.add_marker() is None
    s.attach_surface(make_surface(duration=0.0))
    assert s.add_marker() is None
    assert len(s.markers) == 0


def test_remove_and_seek_to_marker(session, surface):
    surface.advance(4.0)
    marker = session.add_marker()
    surface.advance(10.0)
    assert session.seek_to_marker(marker.id) == 4.0
    assert surface.current_time() == 4.0
    assert session.seek_to_marker("nope") is None
    assert session.remove_marker(marker.id) is True
    assert session.remove_marker(marker.id) is False


def test_zoom_level_selection(session):
    assert session.select_zoom_level(3) is False
    assert session.window.level == ZoomLevel.X2
    assert session.select_zoom_level(8) is True
    assert session.render_state().zoom_level == 8


def test_toggle_magnifier_recenters(session, surface):
    surface.advance(40.0)
    assert session.toggle_magnifier() is False
    assert session.render_state().zoom_enabled is False
    assert session.toggle_magnifier() is True
    assert session.window.start == 25.0


def test_time_advance_follows_and_refreshes(session, surface):
    states = _collect(session.renderStateChanged)
    surface.advance(45.0)
    assert session.window.start == 15.0
    assert states[-1].current_time == 45.0


def test_pointer_input_forwarding(session, surface):
    session.press_overview(60.0, 10.0, 100.0)
    assert surface.seek_calls == [30.0]
    session.pointer_moved(110.0)
    session.pointer_released()
    session.pointer_moved(10.0)
    assert surface.seek_calls == [30.0, 60.0]
    session.wheel(-1)
    assert session.window.start == pytest.approx(30.0 - 30.0 * 0.08)


def test_new_clip_resets_markers_and_window(session, surface):
    surface.advance(5.0)
    session.add_marker()
    session.select_zoom_level(8)
    changes = _collect(session.markersChanged)
    surface.load(20.0)
    assert len(session.markers) == 0
    assert changes == [()]
    assert session.window.duration == 20.0
    assert session.window.level == ZoomLevel.X2
    assert session.window.start == 0.0


def test_configured_defaults(surface):
    s = FrameSession(AppConfig(default_zoom_level=4, pan_step_fraction=0.5))
    s.attach_surface(surface)
    assert s.window.level == ZoomLevel.X4
    s.wheel(1)
    assert s.window.start == 7.5


def test_invalid_configured_level_falls_back(surface):
    s = FrameSession(AppConfig(default_zoom_level=5))
    assert s.window.level == ZoomLevel.X2


def test_export_without_markers_reported(session):
    failures = _collect(session.exportFailed)
    assert session.export_frames() is False
    assert isinstance(failures[0], NoMarkersError)


def test_export_without_source_reported(session, surface):
    surface.advance(3.0)
    session.add_marker()
    session.detach_surface()
    failures = _collect(session.exportFailed)
    assert session.export_frames() is False
    assert isinstance(failures[0], NoSourceError)
    assert str(failures[0]) == "Open a video first"


def test_export_runs_and_blocks_navigation(make_surface, pump):
    surface = make_surface(async_seek=True)
    s = FrameSession()
    s.attach_surface(surface)
    surface.advance(1.0)
    s.add_marker()
    surface.advance(2.0)
    s.add_marker()
    finished = _collect(s.exportFinished)
    active = _collect(s.exportActiveChanged)

    assert s.export_frames() is True
    assert s.export_frames() is False  # already running
    s.press_overview(50.0, 0.0, 100.0)
    s.seek_to_marker(s.markers.snapshot()[1].id)
    assert surface.seek_calls == [1.0]

    assert pump(lambda: bool(finished))
    assert [r.source_time for r in finished[0]] == [1.0, 2.0]
    assert active == [True, False]
    assert s.navigation.seeking_enabled is True


def test_detach_surface(session, surface):
    session.detach_surface()
    assert session.surface is None
    surface.advance(30.0)
    assert session.current_time() == 0.0
