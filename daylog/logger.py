"""DailyLogger — lifecycle and emit API of the asynchronous, daily-rotating sink."""

import contextlib
import logging
import sys
import threading
from concurrent.futures import TimeoutError as TaskTimeout
from datetime import datetime
from enum import Enum

from daylog.channel import BoundedQueue
from daylog.config import Config, load_config
from daylog.errors import LoggerStateError, SinkClosedError
from daylog.formatter import Record, caller_location, render_message, render_values
from daylog.levels import Level, LevelFilter, parse_level, parse_level_names
from daylog.monitor import RotationMonitor
from daylog.rotator import FileRotator
from daylog.sinks import ConsoleSink, FallbackSink, FileSink
from daylog.supervisor import Supervisor
from daylog.writer import WriterLoop

logger = logging.getLogger(__name__)

WRITER = "writer"
MONITOR = "monitor"


class State(Enum):
    UNCONFIGURED = "unconfigured"
    INITIALIZING = "initializing"
    RUNNING = "running"
    FAILED = "failed"
    CLOSED = "closed"


class DailyLogger:
    """Leveled logger that writes through a bounded queue to a daily-rotated file.

    Emit calls render the record on the calling thread, echo DEBUG..ERROR to
    the console, and push the file line onto the queue; they never touch the
    file. A single writer thread appends lines to the active file and a
    monitor thread rotates it when the calendar day changes.

    Instances are independent: each owns its queue, file and threads.
    """

    def __init__(self, config: Config, clock=None, console_stream=None,
                 fallback_stream=None, exit_func=sys.exit):
        self._config = config
        self._clock = clock or datetime.now
        self._exit = exit_func
        self._state = State.UNCONFIGURED
        self._state_lock = threading.Lock()

        self._queue = BoundedQueue(config.queue_size)
        self._rotator = FileRotator(config.log_dir, config.log_filename, config.prefix, self._clock)
        self._filter = LevelFilter(Level.DEBUG)
        self._console = ConsoleSink(parse_level_names(config.console_levels),
                                    console_stream, self._clock)
        self._file_sink = FileSink(self._queue, self._filter)
        self._fallback = FallbackSink(fallback_stream, self._clock)
        self._sinks = (self._console, self._file_sink)

        self._writer = WriterLoop(self._queue, self._rotator)
        self._monitor = RotationMonitor(self._rotator, on_error=self._report_rotation_failure,
                                        interval=config.check_interval_seconds)
        self._supervisor = Supervisor(config.max_task_restarts, on_fatal=self._on_task_fatal)

    # Lifecycle

    @property
    def state(self) -> State:
        return self._state

    @property
    def threshold(self) -> Level:
        return self._filter.threshold

    @property
    def active_path(self) -> str:
        return self._rotator.active_path

    @property
    def written(self) -> int:
        return self._writer.written

    @property
    def dropped(self) -> int:
        return self._writer.dropped

    def boot(self):
        """Open the active file and start the writer and monitor threads.

        Rotates first if the existing active file belongs to an earlier day.
        Raises OSError if the file cannot be opened; the logger then stays
        unconfigured and boot may be retried.
        """
        with self._state_lock:
            if self._state is not State.UNCONFIGURED:
                raise LoggerStateError(f"Cannot boot a logger that is {self._state.value}")
            self._state = State.INITIALIZING

        self._filter = LevelFilter(parse_level(self._config.level))
        self._file_sink = FileSink(self._queue, self._filter)
        self._sinks = (self._console, self._file_sink)
        try:
            self._rotator.start()
        except OSError:
            self._rotator.close()
            with self._state_lock:
                self._state = State.UNCONFIGURED
            raise

        self._supervisor.spawn(WRITER, self._writer.run)
        self._supervisor.spawn(MONITOR, self._monitor.run)
        with self._state_lock:
            self._state = State.RUNNING
        logger.info("Logging to %s (threshold %s)", self.active_path, self.threshold.name)

    def close(self, timeout: float = 5.0):
        """Stop accepting records, let the writer drain, then close the file."""
        with self._state_lock:
            previous = self._state
            if previous is State.INITIALIZING:
                raise LoggerStateError("Cannot close a logger while it is booting")
            if previous is State.CLOSED:
                return
            self._state = State.CLOSED
        if previous is State.UNCONFIGURED:
            return

        self._monitor.stop()
        self._await(MONITOR, timeout)
        self._queue.close()
        self._await(WRITER, timeout)
        self._rotator.close()
        logger.info("Closed %s: %d written, %d dropped",
                    self.active_path, self.written, self.dropped)

    def flush(self):
        """Block until every line accepted so far has been written."""
        self._queue.join()

    def check_rotation(self) -> bool:
        """Run one rotation check now instead of waiting for the monitor tick."""
        return self._monitor.check()

    # Leveled records

    def trace(self, msg, *args, location=None, stacklevel=1):
        self._log(Level.TRACE, lambda: render_message(msg, args), location, stacklevel)

    def debug(self, msg, *args, location=None, stacklevel=1):
        self._log(Level.DEBUG, lambda: render_message(msg, args), location, stacklevel)

    def info(self, msg, *args, location=None, stacklevel=1):
        self._log(Level.INFO, lambda: render_message(msg, args), location, stacklevel)

    def warn(self, msg, *args, location=None, stacklevel=1):
        self._log(Level.WARN, lambda: render_message(msg, args), location, stacklevel)

    warning = warn

    def error(self, msg, *args, location=None, stacklevel=1):
        self._log(Level.ERROR, lambda: render_message(msg, args), location, stacklevel)

    # Print family: no level tag, not subject to the threshold

    def print(self, *values, location=None, stacklevel=1):
        self._log(None, lambda: render_values(values), location, stacklevel)

    def printf(self, msg, *args, location=None, stacklevel=1):
        self._log(None, lambda: render_message(msg, args), location, stacklevel)

    def println(self, *values, location=None, stacklevel=1):
        self._log(None, lambda: render_values(values, " "), location, stacklevel)

    # Fatal class

    def fatal(self, *values, location=None, stacklevel=1):
        """Queue an ERROR record regardless of threshold, write it to the
        fallback stream, and exit with status 1.

        The queued copy may not reach the file before the process exits.
        """
        if location is None:
            location = caller_location(stacklevel)
        record = Record(Level.ERROR, location, render_values(values, " "), forced=True)
        if self._state is State.RUNNING:
            # A concurrent close may win the race; the fallback copy still goes out.
            with contextlib.suppress(SinkClosedError):
                self._file_sink.emit(record)
        self._fallback.emit(record)
        self._exit(1)

    fatally = fatal

    # Internals

    def _log(self, level, render, location, stacklevel):
        if self._state is not State.RUNNING:
            raise SinkClosedError(f"Logger is {self._state.value}")
        sinks = [sink for sink in self._sinks if sink.accepts(level)]
        if not sinks:
            return
        if location is None:
            location = caller_location(stacklevel + 1)
        record = Record(level, location, render())
        for sink in sinks:
            sink.emit(record)

    def _await(self, name: str, timeout: float):
        try:
            self._supervisor.wait(name, timeout)
        except TaskTimeout:
            logger.warning("Task %s did not finish within %.1fs", name, timeout)

    def _report_rotation_failure(self, exc: OSError):
        if self._state is State.RUNNING:
            self.error("Log split error: %s", exc)
        else:
            logger.error("Log split error: %s", exc)

    def _on_task_fatal(self, name: str, exc: Exception):
        if name != WRITER:
            logger.critical("Task %s stopped permanently: %s", name, exc)
            return
        with self._state_lock:
            if self._state is State.RUNNING:
                self._state = State.FAILED
        discarded = self._queue.abort()
        logger.critical("Writer stopped permanently, discarded %d queued line(s): %s",
                        discarded, exc)


def boot(config_path: str | None = None, **kwargs) -> DailyLogger:
    """Load the configuration, then construct and boot a DailyLogger."""
    daily_logger = DailyLogger(load_config(config_path), **kwargs)
    daily_logger.boot()
    return daily_logger
