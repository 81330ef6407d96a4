import pytest

from framemarker.core.markers import MarkerStore
from framemarker.core.navigation import DragMode, NavigationController, build_render_state
from framemarker.core.zoom import ZoomLevel, ZoomWindow
from framemarker.utils.geometry import TrackGeometry

TRACK = TrackGeometry(0.0, 100.0)


@pytest.fixture
def nav(surface):
    window = ZoomWindow(surface.duration(), ZoomLevel.X2)
    return NavigationController(window, surface)


def test_overview_press_seeks_and_recenters(nav, surface):
    assert nav.press_overview(50.0, TRACK) == 30.0
    assert surface.seek_calls == [30.0]
    assert nav.mode is DragMode.DRAGGING_OVERVIEW
    assert nav.window.start == 15.0


def test_overview_drag_keeps_mapping_and_clamps_window(nav, surface):
    nav.press_overview(50.0, TRACK)
    assert nav.pointer_moved(75.0) == 45.0
    assert nav.window.start == 30.0  # max start for 60s at 2x
    assert nav.pointer_moved(-40.0) == 0.0
    assert nav.pointer_moved(400.0) == 60.0
    nav.pointer_released()
    assert nav.mode is DragMode.IDLE
    assert nav.pointer_moved(10.0) is None
    assert surface.seek_calls == [30.0, 45.0, 0.0, 60.0]


def test_detail_press_maps_through_window(nav, surface):
    nav.window.set_start(15.0)
    assert nav.press_detail(0.0, TRACK) == 15.0
    assert nav.pointer_moved(50.0) == 30.0
    assert nav.mode is DragMode.DRAGGING_DETAIL
    assert nav.window.start == 15.0
    assert surface.seek_calls == [15.0, 30.0]


def test_drag_uses_geometry_captured_at_press(nav, surface):
    nav.window.set_start(15.0)
    nav.press_detail(0.0, TrackGeometry(200.0, 50.0))
    assert nav.pointer_moved(225.0) == 30.0


def test_detail_press_ignored_when_magnifier_off(nav, surface):
    nav.window.toggle_enabled(0.0)
    assert nav.press_detail(50.0, TRACK) is None
    assert nav.mode is DragMode.IDLE
    assert surface.seek_calls == []


def test_collapsed_track_seeks_to_start(nav, surface):
    assert nav.press_overview(70.0, TrackGeometry(0.0, 0.0)) == 0.0


def test_no_seek_without_duration(make_surface):
    surface = make_surface(duration=0.0)
    nav = NavigationController(ZoomWindow(), surface)
    assert nav.press_overview(50.0, TRACK) is None
    assert nav.seek_to(3.0) is None
    assert surface.seek_calls == []


def test_wheel_pans_window(nav):
    nav.window.set_start(15.0)
    nav.wheel(120)
    assert nav.window.start == pytest.approx(15.0 + 30.0 * 0.08)
    nav.wheel(-120)
    assert nav.window.start == pytest.approx(15.0)


def test_playback_follows(nav):
    nav.playback_advanced(40.0)
    assert nav.window.start == 10.0


def test_seek_to_clamps(nav, surface):
    assert nav.seek_to(75.0) == 60.0
    assert nav.seek_to(-1.0) == 0.0
    assert nav.window.start == 0.0


def test_seeking_disabled_suppresses_surface_seeks(nav, surface):
    nav.seeking_enabled = False
    assert nav.press_overview(50.0, TRACK) is None
    assert nav.seek_to(10.0) is None
    assert surface.seek_calls == []
    assert nav.window.start == 0.0
    nav.wheel(1)
    assert nav.window.start > 0.0


def test_render_state_unknown_duration():
    state = build_render_state(ZoomWindow(), MarkerStore(), 0.0)
    assert state.duration == 0.0
    assert state.overview_progress_percent == 0.0
    assert state.window_width_percent == 0.0
    assert state.visible_markers == ()


def test_render_state_enabled():
    window = ZoomWindow(100.0, ZoomLevel.X4)
    window.set_start(10.0)
    markers = MarkerStore()
    for t in (5.0, 12.0, 35.0, 36.0):
        markers.add(t)
    state = build_render_state(window, markers, 20.0)
    assert state.overview_progress_percent == pytest.approx(20.0)
    assert state.detail_progress_percent == pytest.approx(40.0)
    assert state.window_left_percent == pytest.approx(10.0)
    assert state.window_width_percent == 25.0
    assert [m.time for m in state.visible_markers] == [12.0, 35.0]
    assert len(state.all_markers) == 4
    assert state.detail_percent(state.visible_markers[-1]) == pytest.approx(100.0)
    assert state.overview_percent(state.all_markers[0]) == pytest.approx(5.0)


def test_render_state_clamps_progress_outside_window():
    window = ZoomWindow(100.0, ZoomLevel.X4)
    state = build_render_state(window, MarkerStore(), 80.0)
    assert state.detail_progress_percent == 100.0


def test_render_state_disabled_hides_detail():
    window = ZoomWindow(100.0, ZoomLevel.X4)
    window.toggle_enabled(0.0)
    markers = MarkerStore()
    markers.add(1.0)
    state = build_render_state(window, markers, 50.0)
    assert state.zoom_enabled is False
    assert state.overview_progress_percent == 50.0
    assert state.detail_progress_percent == 0.0
    assert state.visible_markers == ()
    assert len(state.all_markers) == 1
