import os
from datetime import datetime

import pytest
from PySide6.QtWidgets import QApplication

from BackEnd.core.clock import to_ms
from BackEnd.core.models import Subject, ToolKind
from BackEnd.services.log_store import LogStore

# widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeClock:
    """Callable clock returning epoch ms, moved by hand."""

    def __init__(self, start):
        self.now = to_ms(start)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += int(seconds * 1000)


class FakeTicker:
    """Stands in for the QTimer ticker; `fire()` simulates one timeout."""

    instances = []

    def __init__(self, interval_ms, callback):
        self.interval_ms = interval_ms
        self.callback = callback
        self.is_active = False
        FakeTicker.instances.append(self)

    def start(self):
        self.is_active = True

    def stop(self):
        self.is_active = False

    def fire(self):
        self.callback()


@pytest.fixture
def db_file(tmp_path):
    return tmp_path / "tracker.db"


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 10, 9, 0, 0))


@pytest.fixture
def baby():
    return Subject(id="baby-1", name="Lucía")


@pytest.fixture
def make_store(db_file, clock):
    def _make(tool, subject=None):
        return LogStore(ToolKind(tool), subject=subject, db_file=db_file, clock=clock)
    return _make


@pytest.fixture(scope="session")
def qapp():
    return QApplication.instance() or QApplication([])
