import io
import os
import time
from datetime import datetime, timedelta

import pytest

from daylog.config import Config
from daylog.logger import DailyLogger

LOG_FILENAME = "app.log"


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def read_lines(path: str) -> list[str]:
    if not os.path.exists(path):
        return []
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 15, 10, 30, 0))


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides) -> Config:
        values = dict(
            log_dir=str(tmp_path / "logs"),
            log_filename=LOG_FILENAME,
            prefix="[app] ",
            level="DEBUG",
            console_levels=(),
            check_interval_seconds=3600.0,
        )
        values.update(overrides)
        return Config(**values)
    return _make


@pytest.fixture
def make_logger(make_config):
    """Factory for booted loggers; every logger is closed at teardown."""
    created = []

    def _make(clock=None, boot=True, **overrides):
        daily_logger = DailyLogger(
            make_config(**overrides),
            clock=clock,
            console_stream=io.StringIO(),
            fallback_stream=io.StringIO(),
        )
        created.append(daily_logger)
        if boot:
            daily_logger.boot()
        return daily_logger

    yield _make
    for daily_logger in created:
        daily_logger.close()
