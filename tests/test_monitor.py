"""Tests for the rotation monitor."""

import os
import threading

import pytest

from conftest import LOG_FILENAME, wait_until
from daylog.monitor import RotationMonitor
from daylog.rotator import FileRotator


@pytest.fixture
def rotator(tmp_path, clock):
    r = FileRotator(str(tmp_path), LOG_FILENAME, clock=clock)
    r.start()
    yield r
    r.close()


class TestCheck:
    def test_no_rotation_on_same_day(self, rotator):
        monitor = RotationMonitor(rotator)
        assert monitor.check() is False
        assert monitor.check() is False
        assert not os.path.exists(rotator.active_path + ".2025-01-15")

    def test_rotates_once_after_midnight(self, rotator, clock):
        monitor = RotationMonitor(rotator)
        clock.advance(days=1)

        assert monitor.check() is True
        assert monitor.check() is False
        assert os.path.exists(rotator.active_path + ".2025-01-15")

    def test_failure_reported_and_retried(self, rotator, clock, monkeypatch):
        errors = []
        monitor = RotationMonitor(rotator, on_error=errors.append)
        clock.advance(days=1)

        def fail():
            raise OSError("disk gone")

        monkeypatch.setattr(rotator, "rotate", fail)
        assert monitor.check() is False
        assert monitor.check() is False
        assert len(errors) == 2
        assert str(errors[0]) == "disk gone"


class TestRun:
    def test_periodic_rotation_and_stop(self, rotator, clock):
        monitor = RotationMonitor(rotator, interval=0.05)
        t = threading.Thread(target=monitor.run, daemon=True)
        t.start()
        try:
            clock.advance(days=1)
            assert wait_until(lambda: os.path.exists(rotator.active_path + ".2025-01-15"))
        finally:
            monitor.stop()
            t.join(timeout=2.0)
        assert not t.is_alive()

    def test_stop_before_first_tick(self, rotator):
        monitor = RotationMonitor(rotator, interval=3600)
        t = threading.Thread(target=monitor.run, daemon=True)
        t.start()
        monitor.stop()
        t.join(timeout=2.0)
        assert not t.is_alive()
