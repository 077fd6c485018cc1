"""Sinks a record can be dispatched to: console echo, queued file, fallback."""

import logging
import sys
from datetime import datetime

from daylog.channel import BoundedQueue
from daylog.formatter import Record, format_console, format_line
from daylog.levels import Level, LevelFilter

DEFAULT_CONSOLE_LEVELS = frozenset({Level.DEBUG, Level.INFO, Level.WARN, Level.ERROR})

FALLBACK_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

logger = logging.getLogger(__name__)


class ConsoleSink:
    """Synchronous colorized echo. Independent of the file threshold."""

    def __init__(self, levels=DEFAULT_CONSOLE_LEVELS, stream=None, clock=None):
        self._levels = frozenset(levels)
        self._stream = stream
        self._clock = clock or datetime.now

    def accepts(self, level: Level | None, forced: bool = False) -> bool:
        return not forced and level in self._levels

    def emit(self, record: Record):
        stream = self._stream or sys.stdout
        try:
            stream.write(format_console(record, self._clock()) + "\n")
            stream.flush()
        except (OSError, ValueError) as exc:
            # Best effort: the record still goes on to the file sink.
            logger.warning("Console echo failed: %s", exc)


class FileSink:
    """Renders the file line and hands it to the writer thread via the queue."""

    def __init__(self, q: BoundedQueue, level_filter: LevelFilter):
        self._queue = q
        self._filter = level_filter

    def accepts(self, level: Level | None, forced: bool = False) -> bool:
        if forced or level is None:
            return True
        return self._filter.should_emit(level)

    def emit(self, record: Record):
        self._queue.put(format_line(record))


class FallbackSink:
    """Direct, unbuffered write used right before the process exits."""

    def __init__(self, stream=None, clock=None):
        self._stream = stream
        self._clock = clock or datetime.now

    def emit(self, record: Record):
        stream = self._stream or sys.stderr
        stamp = self._clock().strftime(FALLBACK_TIME_FORMAT)
        stream.write(f"{stamp} {record.message}\n")
        stream.flush()
