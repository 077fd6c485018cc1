"""Record rendering — file lines and colorized console lines."""

import inspect
import os
from dataclasses import dataclass
from datetime import datetime

from daylog.levels import Level

# ANSI color codes, black background
COLORS = {
    Level.DEBUG: "\033[0;40;34m",  # blue
    Level.INFO: "\033[0;40;32m",   # green
    Level.WARN: "\033[0;40;33m",   # yellow
    Level.ERROR: "\033[0;40;31m",  # red
}
RESET = "\033[0m"

CONSOLE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class CallerLocation:
    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


@dataclass(frozen=True)
class Record:
    level: Level | None  # None for Print-family records
    location: CallerLocation
    message: str
    forced: bool = False


def caller_location(stacklevel: int = 1) -> CallerLocation:
    """Return the source location ``stacklevel`` frames above the function
    that calls this one.

    With the default of 1 this is the immediate caller of an emit method.
    Helpers that wrap an emit method pass a higher ``stacklevel`` so the
    location still points at their own caller.
    """
    frame = inspect.currentframe()
    for _ in range(stacklevel + 1):
        if frame.f_back is None:
            break
        frame = frame.f_back
    return CallerLocation(os.path.basename(frame.f_code.co_filename), frame.f_lineno)


def render_message(msg, args: tuple) -> str:
    """Formatted-message convention: ``msg % args`` when args are given."""
    if args:
        return str(msg) % args
    return str(msg)


def render_values(values: tuple, sep: str = "") -> str:
    """Plain-message convention: values converted with str() and joined."""
    return sep.join(str(v) for v in values)


def format_line(record: Record) -> str:
    """Render the file line body. The line writer adds prefix and timestamp."""
    if record.level is None:
        return f"[{record.location}] {record.message}"
    return f"[{record.level.name}] [{record.location}] {record.message}"


def format_console(record: Record, now: datetime) -> str:
    color = COLORS.get(record.level, "")
    return (
        f"{now.strftime(CONSOLE_TIME_FORMAT)} "
        f"{color}[{record.level.name}] [{record.location}] {record.message}{RESET}"
    )
