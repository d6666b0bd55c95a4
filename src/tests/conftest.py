import logging
import threading
import time

import pytest

from pad_system import ButtonId, LineMapping, MockLineProvider
from pad_system.interfaces import IEventSink
from pad_utils import HybridLogger


class RecordingSink(IEventSink):
    """Event sink remembering every frame it receives"""

    def __init__(self, fail=False):
        self.frames = []
        self.bound = None
        self.closed = False
        self.fail = fail
        self._current = []
        self._lock = threading.Lock()
        self._in_frame = 0
        self.interleaved = False

    def bind(self, identity, buttons):
        self.bound = (identity, list(buttons))

    def signal(self, button_id, pressed):
        if self.fail:
            raise ConnectionError("sink unavailable")
        with self._lock:
            if not self._current:
                self._in_frame += 1
                if self._in_frame > 1:
                    self.interleaved = True
            self._current.append((button_id, pressed))

    def end_frame(self):
        with self._lock:
            self.frames.append(list(self._current))
            self._current = []
            self._in_frame -= 1

    def close(self):
        self.closed = True

    @property
    def frame_count(self):
        with self._lock:
            return len(self.frames)


def wait_for(predicate, timeout=2.0, interval=0.002):
    """Poll predicate until true or timeout; returns the last result"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def hybrid_logger(tmp_path):
    hybrid = HybridLogger("gpio-joystick-test", log_dir=str(tmp_path), console=False)
    yield hybrid
    hybrid.cleanup()


@pytest.fixture
def logger(hybrid_logger):
    return hybrid_logger.get_class_logger("Test", logging.DEBUG)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def dpad_mapping():
    return [
        LineMapping("up", ButtonId.BTN_DPAD_UP, active_low=True, pin=2),
        LineMapping("down", ButtonId.BTN_DPAD_DOWN, active_low=True, pin=15),
        LineMapping("left", ButtonId.BTN_DPAD_LEFT, active_low=True, pin=25),
        LineMapping("right", ButtonId.BTN_DPAD_RIGHT, active_low=True, pin=20),
    ]


@pytest.fixture
def dpad_provider():
    # All four lines wired and idle (high, pull-up)
    return MockLineProvider.all_released(["up", "down", "left", "right"])


@pytest.fixture(autouse=True)
def log_test_lifecycle(request, hybrid_logger):
    """Log the start and end of every test into the test log file"""
    test_logger = hybrid_logger.get_class_logger("Pytest", logging.INFO)
    start_time = time.time()
    test_logger.info(f"[PYTEST START] {request.node.name}")
    yield
    test_logger.info(f"[PYTEST END] {request.node.name} ({time.time() - start_time:.3f}s)")
