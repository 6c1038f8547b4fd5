"""Structured command-event logging.

The dispatch pipeline reports every command outcome through a
:class:`LoggerContainer`. The container fans each event out to

* the default :class:`StdlibSink` (the ``cmdhandler.commands`` logger, rendered
  as JSON with the fields under ``cmd`` by
  :func:`cmdhandler.core.logger_setup.setup_logging`), and
* any number of named :class:`LogSink` instances registered by the bot author,
  each with its own minimum level.

Sinks are fire-and-forget: an exception raised by a sink is reported through
this module's logger and never reaches the caller.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import IntEnum
from typing import Any

from cmdhandler.core.exceptions import RegistrationError
from cmdhandler.core.logger_setup import COMMAND_LOGGER

__all__ = ["LogLevel", "LogSink", "StdlibSink", "LoggerContainer"]

logger = logging.getLogger(__name__)


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


_STDLIB_LEVELS: dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class LogSink(ABC):
    """Destination for command events (files, webhooks, databases, ...)."""

    @abstractmethod
    def emit(self, level: LogLevel, message: str, fields: Mapping[str, Any]) -> None:
        """Record one event. *fields* carries the structured payload."""


class StdlibSink(LogSink):
    """Forward events to a :mod:`logging` logger; fields travel in ``extra``."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self.target = target or logging.getLogger(COMMAND_LOGGER)

    def emit(self, level: LogLevel, message: str, fields: Mapping[str, Any]) -> None:
        self.target.log(_STDLIB_LEVELS[level], message, extra={"cmd": dict(fields)})


class _Registration:
    __slots__ = ("sink", "level")

    def __init__(self, sink: LogSink, level: LogLevel) -> None:
        self.sink = sink
        self.level = level


class LoggerContainer:
    def __init__(self, use_default_logger: bool = True, verbose: bool = False) -> None:
        self.verbose = verbose
        self._sinks: dict[str, _Registration] = {}
        if use_default_logger:
            self._sinks["default"] = _Registration(StdlibSink(), LogLevel.DEBUG)

    def register_logger(
        self, name: str, sink: LogSink, default_level: LogLevel = LogLevel.DEBUG
    ) -> LogSink:
        if not name:
            raise RegistrationError("logger name must not be empty")
        if not isinstance(sink, LogSink):
            raise RegistrationError(f"logger '{name}' must implement LogSink")
        if name in self._sinks:
            logger.warning(f"Replacing already registered logger '{name}'")
        self._sinks[name] = _Registration(sink, LogLevel(default_level))
        return sink

    def get_logger_by_name(self, name: str) -> LogSink | None:
        registration = self._sinks.get(name)
        return registration.sink if registration else None

    def set_level(self, name: str, level: LogLevel) -> None:
        try:
            self._sinks[name].level = LogLevel(level)
        except KeyError:
            raise RegistrationError(f"no logger registered as '{name}'") from None

    @property
    def names(self) -> list[str]:
        return list(self._sinks)

    def log(self, level: LogLevel, message: str, **fields: Any) -> None:
        if level == LogLevel.DEBUG and not self.verbose:
            return
        for name, registration in list(self._sinks.items()):
            if level < registration.level:
                continue
            try:
                registration.sink.emit(level, message, fields)
            except Exception:  # noqa: BLE001 – sinks must never break dispatch
                logger.exception(f"Log sink '{name}' failed to record event")

    def debug(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.ERROR, message, **fields)
