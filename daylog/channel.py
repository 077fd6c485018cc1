"""Bounded FIFO between emitting threads and the single writer thread."""

import queue
import threading

from daylog.errors import SinkClosedError

DEFAULT_CAPACITY = 8000

_END = object()


class BoundedQueue:
    """Fixed-capacity queue of rendered lines.

    ``put`` blocks while the queue is full; lines are never dropped. Closing
    is cooperative: ``close`` stops new puts, waits for producers that are
    already inside ``put``, and then enqueues an end marker behind every
    accepted line so the consumer sees all of them before ``get`` returns
    None.
    """

    def __init__(self, maxsize: int = DEFAULT_CAPACITY):
        if maxsize <= 0:
            raise ValueError("queue capacity must be positive")
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._cond = threading.Condition()
        self._closed = False
        self._pending = 0
        self._drained = False

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    def put(self, line: str):
        """Enqueue a line, blocking while full. Raises SinkClosedError once closed."""
        with self._cond:
            if self._closed:
                raise SinkClosedError("log queue is closed")
            self._pending += 1
        try:
            self._queue.put(line)
        finally:
            with self._cond:
                self._pending -= 1
                if self._pending == 0:
                    self._cond.notify_all()

    def get(self) -> str | None:
        """Block for the next line. Returns None once closed and drained."""
        if self._drained:
            return None
        item = self._queue.get()
        if item is _END:
            self._queue.task_done()
            self._drained = True
            return None
        return item

    def task_done(self):
        self._queue.task_done()

    def join(self):
        """Block until every accepted line has been marked done."""
        self._queue.join()

    def close(self):
        """Stop accepting lines and queue the end marker behind the accepted ones."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.wait_for(lambda: self._pending == 0)
        self._queue.put(_END)

    def abort(self) -> int:
        """Close without delivering. Discards queued lines and returns their count.

        Used when the consumer is gone for good, so that producers blocked on
        a full queue are released.
        """
        with self._cond:
            self._closed = True
        discarded = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                with self._cond:
                    if self._pending == 0:
                        break
                    self._cond.wait(timeout=0.05)
                continue
            self._queue.task_done()
            if item is not _END:
                discarded += 1
        self._drained = True
        return discarded
