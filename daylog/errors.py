"""Exceptions raised by the daylog sink."""


class ConfigError(Exception):
    """The log configuration could not be loaded or is invalid."""


class LoggerStateError(RuntimeError):
    """An operation was called in a lifecycle state that does not allow it."""


class SinkClosedError(LoggerStateError):
    """A record was emitted after the sink stopped accepting records."""
