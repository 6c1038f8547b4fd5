"""
core/logger_setup.py - Logging configuration for the command handler.

Two streams are configured:

* application logs (every ``logging.getLogger(__name__)`` in the package) go
  to a rich console handler, or to JSON on stdout with ``LOG_FORMAT=json``;
* command events written by the default sink of
  :class:`cmdhandler.core.log_sinks.LoggerContainer` go to the
  ``cmdhandler.commands`` logger, which always renders JSON so the event
  fields (``invoke``, ``author_id``, ``guild_id``, ``status``, ``error``)
  survive as a nested ``cmd`` object.
"""

import collections
import copy
import logging
import logging.config
import os
import warnings
from typing import Any

from pythonjsonlogger import json as jsonlogger

COMMAND_LOGGER = "cmdhandler.commands"

_JSON_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def merge_dicts(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge *overrides* into *base* and return *base*.

    Nested dicts merge depth-first; on a type mismatch the override wins and a
    warning is emitted.
    """
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            merge_dicts(base[key], value)
            continue
        if key in base and not isinstance(base[key], type(value)):
            warnings.warn(
                f"Type mismatch for key '{key}': "
                f"{type(base[key]).__name__} vs {type(value).__name__}. "
                "Using override value."
            )
        base[key] = value
    return base


def command_event_formatter() -> jsonlogger.JsonFormatter:
    """JSON formatter used for command events; ``extra`` fields become JSON keys."""
    return jsonlogger.JsonFormatter(_JSON_FMT, datefmt="%Y-%m-%dT%H:%M:%S%z")


DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        # RichHandler only honours datefmt
        "rich": {"datefmt": "%Y-%m-%d %H:%M:%S"},
        "json": {"()": "cmdhandler.core.logger_setup.command_event_formatter"},
        "default": {"format": "%(asctime)s [%(levelname)s] %(message)s"},
    },
    "filters": {"dedupe": {"()": "cmdhandler.core.logger_setup._DuplicateFilter"}},
    "handlers": {
        "rich": {
            "class": "rich.logging.RichHandler",
            "markup": False,
            "rich_tracebacks": True,
            "show_path": False,
            "formatter": "rich",
            "filters": ["dedupe"],
        },
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["dedupe"],
            "stream": "ext://sys.stdout",
        },
        # no dedupe: two identical invocations are two events
        "commands": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        # discord.py is chatty at INFO during gateway reconnects
        "discord": {"level": "WARNING"},
        # LoggerContainer already filters by level and verbosity
        COMMAND_LOGGER: {"handlers": ["commands"], "level": "DEBUG", "propagate": False},
    },
    "root": {
        "handlers": ["rich"],
        "level": "INFO",
    },
}


class _DuplicateFilter(logging.Filter):
    """Drop a record whose (msg, exc_text) was seen within the last *window* records."""

    def __init__(self, window: int = 20) -> None:
        super().__init__()
        self._recent: collections.deque[tuple[str, str]] = collections.deque(maxlen=window)

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        key = (record.getMessage(), getattr(record, "exc_text", "") or "")
        if key in self._recent:
            return False
        self._recent.append(key)
        return True


_CONFIGURED: bool = False


def setup_logging(config_overrides: dict[str, Any] | None = None) -> None:
    """
    Configure logging once per process.

    Environment:
        LOG_LEVEL   root level (DEBUG, INFO, ...).
        LOG_FORMAT  ``pretty`` (default, rich console) or ``json`` (stdout).

    Args:
        config_overrides: merged into :data:`DEFAULT_LOGGING_CONFIG` last.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return  # already configured – avoid duplicate handlers

    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        config["root"]["level"] = env_level.upper()
    if os.getenv("LOG_FORMAT", "pretty").lower() == "json":
        config["root"]["handlers"] = ["stdout"]
    if config_overrides:
        merge_dicts(config, config_overrides)

    if not config.get("root", {}).get("handlers"):
        warnings.warn("Logging configuration missing handlers; using fallback console handler.")
        config.setdefault("handlers", {})["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "default",
        }
        config.setdefault("root", {})["handlers"] = ["console"]

    logging.config.dictConfig(config)
    _CONFIGURED = True


def reset_logging_state() -> None:
    """Allow a later ``setup_logging`` call to reconfigure. Used by tests."""
    global _CONFIGURED
    _CONFIGURED = False


# End of core/logger_setup.py
