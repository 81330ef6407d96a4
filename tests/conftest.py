import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from PySide6.QtCore import QEventLoop, QObject, QTimer, Signal  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp():
    # Widgets need a QApplication; create it before any QCoreApplication can be.
    return QApplication.instance() or QApplication([])


class FakeSurface(QObject):
    """Scriptable playback surface.

    Seeks complete immediately, or on the next event-loop turn when
    ``async_seek`` is set. Times listed in ``fail_at`` report ``seekFailed``;
    ``capture_fails`` makes ``snapshot_frame`` raise. Every seek request and
    snapshot is appended to ``log`` so tests can check their interleaving.
    """

    timeAdvanced = Signal(float)
    playStateChanged = Signal(bool)
    seeked = Signal(float)
    seekFailed = Signal(float, str)
    clipLoaded = Signal(float)

    def __init__(self, duration=60.0, size=(64, 48), *, async_seek=False):
        super().__init__()
        self._duration = duration
        self._size = size
        self._time = 0.0
        self._frame = None
        self.async_seek = async_seek
        self.fail_at = set()
        self.capture_fails = False
        self.log = []

    @property
    def seek_calls(self):
        return [t for kind, t in self.log if kind == "seek"]

    def load(self, duration):
        self._duration = duration
        self._time = 0.0
        self.clipLoaded.emit(duration)

    def set_size(self, width, height):
        self._size = (width, height)

    def advance(self, t):
        self._time = t
        self.timeAdvanced.emit(t)

    def current_time(self):
        return self._time

    def duration(self):
        return self._duration

    def is_playing(self):
        return False

    def seek(self, t):
        self.log.append(("seek", t))
        if self.async_seek:
            QTimer.singleShot(0, lambda: self._complete(t))
        else:
            self._complete(t)

    def natural_width(self):
        return self._size[0]

    def natural_height(self):
        return self._size[1]

    def snapshot_frame(self):
        self.log.append(("snapshot", self._time))
        if self.capture_fails:
            raise RuntimeError("frame unreadable")
        return self._frame

    def _complete(self, t):
        if t in self.fail_at:
            self.seekFailed.emit(t, "decode error")
            return
        self._time = t
        shade = int(t * 10) % 256
        self._frame = np.full((self._size[1], self._size[0], 3), shade, dtype=np.uint8)
        self.timeAdvanced.emit(t)
        self.seeked.emit(t)


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def async_surface():
    return FakeSurface(async_seek=True)


@pytest.fixture
def pump():
    """Run the Qt event loop until ``predicate()`` holds or ``timeout_ms`` passes."""

    def _pump(predicate=None, timeout_ms=1000):
        loop = QEventLoop()
        deadline = {"left": timeout_ms}

        def step():
            if predicate is not None and predicate():
                loop.quit()
                return
            deadline["left"] -= 10
            if deadline["left"] <= 0:
                loop.quit()
                return
            QTimer.singleShot(10, step)

        QTimer.singleShot(0, step)
        loop.exec()
        return predicate() if predicate is not None else True

    return _pump


@pytest.fixture
def make_surface():
    return FakeSurface
