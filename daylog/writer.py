"""WriterLoop: the single consumer that drains the queue into the active file."""

import logging

from daylog.channel import BoundedQueue
from daylog.rotator import FileRotator

logger = logging.getLogger(__name__)


class WriterLoop:
    def __init__(self, q: BoundedQueue, rotator: FileRotator):
        self._queue = q
        self._rotator = rotator
        self._written = 0
        self._dropped = 0

    @property
    def written(self) -> int:
        return self._written

    @property
    def dropped(self) -> int:
        return self._dropped

    def run(self):
        """Write lines in queue order until the queue is closed and drained."""
        while True:
            line = self._queue.get()
            if line is None:
                logger.debug("Writer finished: %d written, %d dropped",
                             self._written, self._dropped)
                return
            try:
                self._rotator.write_line(line)
                self._written += 1
            except (OSError, ValueError) as exc:
                # Producers have already moved on; count it and keep going.
                self._dropped += 1
                logger.warning("Dropped log line: %s", exc)
            finally:
                self._queue.task_done()
