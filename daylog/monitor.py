"""RotationMonitor: periodic check for a calendar-day boundary."""

import logging
import threading

from daylog.rotator import FileRotator

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 30.0


class RotationMonitor:
    """Wakes every ``interval`` seconds and rotates once the day has changed.

    A failed rotation is handed to ``on_error`` and retried on the next tick.
    """

    def __init__(self, rotator: FileRotator, on_error=None,
                 interval: float = DEFAULT_CHECK_INTERVAL):
        self._rotator = rotator
        self._on_error = on_error
        self._interval = interval
        self._stop = threading.Event()

    def run(self):
        while not self._stop.wait(timeout=self._interval):
            self.check()

    def check(self) -> bool:
        """Run one tick. Returns True if a rotation was performed."""
        if not self._rotator.is_rotation_due():
            return False
        try:
            self._rotator.rotate()
        except OSError as exc:
            if self._on_error is not None:
                self._on_error(exc)
            else:
                logger.error("Log rotation failed: %s", exc)
            return False
        return True

    def stop(self):
        self._stop.set()
