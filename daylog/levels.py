"""Severity levels and threshold filtering."""

from enum import IntEnum

from daylog.errors import ConfigError


class Level(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    OFF = 5


# DEBUG is deliberately absent: it is the fallback for anything unmatched.
_THRESHOLDS = {
    "OFF": Level.OFF,
    "TRACE": Level.TRACE,
    "INFO": Level.INFO,
    "WARN": Level.WARN,
    "ERROR": Level.ERROR,
}


def parse_level(value: str) -> Level:
    """Map a configured threshold string to a Level, case-insensitively.

    Unrecognized strings (and "DEBUG" itself) yield DEBUG.
    """
    return _THRESHOLDS.get(str(value).upper(), Level.DEBUG)


def parse_level_names(names) -> frozenset:
    """Strictly parse a list of record level names. OFF is not a record level."""
    levels = set()
    for name in names:
        try:
            level = Level[str(name).upper()]
        except KeyError:
            raise ConfigError(f"Unknown log level: {name!r}") from None
        if level is Level.OFF:
            raise ConfigError("OFF is not a record level")
        levels.add(level)
    return frozenset(levels)


class LevelFilter:
    def __init__(self, threshold: Level):
        self._threshold = threshold

    @property
    def threshold(self) -> Level:
        return self._threshold

    def should_emit(self, level: Level) -> bool:
        return level >= self._threshold
