"""Tests for the bounded queue: ordering, backpressure and closing."""

import threading
import time

import pytest

from daylog.channel import BoundedQueue
from daylog.errors import SinkClosedError


def _drain(q: BoundedQueue) -> list:
    items = []
    while True:
        item = q.get()
        if item is None:
            return items
        items.append(item)
        q.task_done()


class TestOrdering:
    def test_fifo(self):
        q = BoundedQueue(maxsize=10)
        for i in range(5):
            q.put(f"line-{i}")
        q.close()
        assert _drain(q) == [f"line-{i}" for i in range(5)]

    def test_default_capacity(self):
        assert BoundedQueue().maxsize == 8000

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            BoundedQueue(maxsize=0)


class TestBackpressure:
    def test_put_blocks_when_full(self):
        q = BoundedQueue(maxsize=2)
        q.put("a")
        q.put("b")
        done = threading.Event()

        def producer():
            q.put("c")
            done.set()

        t = threading.Thread(target=producer, daemon=True)
        t.start()
        assert not done.wait(timeout=0.2), "put should block on a full queue"

        assert q.get() == "a"
        q.task_done()
        assert done.wait(timeout=2.0)
        t.join(timeout=2.0)
        assert q.qsize() == 2


class TestClose:
    def test_put_after_close_raises(self):
        q = BoundedQueue(maxsize=4)
        q.close()
        assert q.closed
        with pytest.raises(SinkClosedError):
            q.put("late")

    def test_get_returns_none_after_drain(self):
        q = BoundedQueue(maxsize=4)
        q.put("only")
        q.close()
        assert q.get() == "only"
        q.task_done()
        assert q.get() is None
        assert q.get() is None

    def test_close_is_idempotent(self):
        q = BoundedQueue(maxsize=4)
        q.close()
        q.close()
        assert _drain(q) == []

    def test_close_keeps_lines_of_blocked_producers(self):
        q = BoundedQueue(maxsize=1)
        q.put("first")
        t = threading.Thread(target=q.put, args=("second",), daemon=True)
        t.start()
        time.sleep(0.1)  # producer is now blocked inside put

        closer = threading.Thread(target=q.close, daemon=True)
        closer.start()

        assert _drain(q) == ["first", "second"]
        t.join(timeout=2.0)
        closer.join(timeout=2.0)

    def test_join_waits_for_task_done(self):
        q = BoundedQueue(maxsize=4)
        q.put("x")
        joined = threading.Event()

        def joiner():
            q.join()
            joined.set()

        threading.Thread(target=joiner, daemon=True).start()
        assert not joined.wait(timeout=0.1)
        q.get()
        q.task_done()
        assert joined.wait(timeout=2.0)


class TestAbort:
    def test_discards_queued_lines(self):
        q = BoundedQueue(maxsize=4)
        q.put("a")
        q.put("b")
        assert q.abort() == 2
        assert q.get() is None
        with pytest.raises(SinkClosedError):
            q.put("c")

    def test_releases_blocked_producer(self):
        q = BoundedQueue(maxsize=1)
        q.put("a")
        t = threading.Thread(target=q.put, args=("b",), daemon=True)
        t.start()
        time.sleep(0.1)

        assert q.abort() == 2
        t.join(timeout=2.0)
        assert not t.is_alive()
        q.join()  # every line accounted for
