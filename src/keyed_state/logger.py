"""Logger: a leveled sink gated by a runtime-mutable verbosity threshold."""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Any

_DEFAULT_LOGGER_NAME = "keyed_state"


class LogLevel(str, Enum):
    DEFAULT = "default"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    TRACE = "trace"


class LogVerbosity(IntEnum):
    """Ordered verbosity thresholds.  Higher values let more messages through."""

    NONE = 0
    MINIMAL = 1
    VERBOSE = 2
    VERY_VERBOSE = 3

    @classmethod
    def default(cls) -> LogVerbosity:
        return cls.MINIMAL


_LEVELS: dict[LogLevel, int] = {
    LogLevel.DEFAULT: logging.INFO,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.TRACE: logging.DEBUG,
}


class Logger:
    """Verbosity-gated front for a stdlib :class:`logging.Logger`.

    A message is emitted only when its verbosity is less than or equal to
    the configured threshold, so ``LogVerbosity.NONE`` messages always show
    and ``LogVerbosity.VERY_VERBOSE`` messages show only at the highest
    setting.  The threshold is part of namespace state: the preferences
    namespace calls :meth:`set_verbosity` whenever its ``verbosity`` key is
    written.

    Parameters:
        verbosity: Initial threshold (``0`` through ``3``).
        logger:    Underlying stdlib logger.  Defaults to ``keyed_state``.
    """

    def __init__(
        self,
        verbosity: int = LogVerbosity.MINIMAL,
        logger: logging.Logger | None = None,
    ) -> None:
        self._verbosity = LogVerbosity(verbosity)
        self._logger = logger or logging.getLogger(_DEFAULT_LOGGER_NAME)

    @property
    def verbosity(self) -> LogVerbosity:
        return self._verbosity

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_verbosity(self, verbosity: int) -> None:
        """Change the threshold.  Raises ``ValueError`` outside ``0..3``."""
        self._verbosity = LogVerbosity(verbosity)
        self._logger.info("Logger verbosity set to %s", self._verbosity.name.lower())

    def is_enabled_for(self, verbosity: int) -> bool:
        return verbosity <= self._verbosity

    def log(
        self,
        msgs: str | list[Any],
        level: LogLevel = LogLevel.DEFAULT,
        verbosity: int = LogVerbosity.MINIMAL,
    ) -> None:
        """Emit one or more messages.

        Args:
            msgs:      A string, or a list of anything printable.
            level:     Severity the messages are emitted at.
            verbosity: The threshold at which these messages show.
        """
        if not self.is_enabled_for(verbosity):
            return
        if isinstance(msgs, str):
            msgs = [msgs]
        stdlib_level = _LEVELS[LogLevel(level)]
        for msg in msgs:
            self._logger.log(stdlib_level, "%s", msg)

    def dump(
        self,
        obj: Any,
        level: LogLevel = LogLevel.DEFAULT,
        verbosity: int = LogVerbosity.MINIMAL,
    ) -> None:
        self.log([obj], level, verbosity)

    # ── convenience ──────────────────────────────────────────

    def default(self, msg: str, verbosity: int = LogVerbosity.MINIMAL) -> None:
        self.log(msg, LogLevel.DEFAULT, verbosity)

    def info(self, msg: str, verbosity: int = LogVerbosity.MINIMAL) -> None:
        self.log(msg, LogLevel.INFO, verbosity)

    def warn(self, msg: str, verbosity: int = LogVerbosity.MINIMAL) -> None:
        self.log(msg, LogLevel.WARN, verbosity)

    def error(self, msg: str, verbosity: int = LogVerbosity.MINIMAL) -> None:
        self.log(msg, LogLevel.ERROR, verbosity)
