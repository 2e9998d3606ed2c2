# Standard library imports
from collections.abc import MutableMapping
from functools import lru_cache
import logging
import sys
from typing import Any

# Local application imports
from civicpulse.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConsoleFormatter(logging.Formatter):
    """
    Console formatter; colours the whole line by level when ``use_color`` is set.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;20m",
        logging.INFO: "\x1b[38;20m",
        logging.WARNING: "\x1b[33;20m",
        logging.ERROR: "\x1b[31;20m",
        logging.CRITICAL: "\x1b[31;1m",
    }
    RESET = "\x1b[0m"

    def __init__(self, use_color: bool = True):
        super().__init__(LOG_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{line}{self.RESET}" if color else line


def _default_level() -> int | str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return logging.DEBUG if settings.DEBUG_MODE else logging.INFO


@lru_cache
def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    Logger for ``name`` with one stdout handler. Cached per name.

    ERROR records also reach Sentry in production through the logging
    integration in ``civicpulse.core.monitoring.sentry``.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = level if level is not None else _default_level()
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter(use_color=settings.LOG_COLOR and sys.stdout.isatty()))
    logger.addHandler(handler)
    # Parent handlers would print every line twice
    logger.propagate = False

    return logger


class ContextLoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """
    Appends ``key=value`` pairs (issue id, user id, ...) to every message;
    pairs whose value is None are left out.
    """

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        pairs = [f"{key}={value}" for key, value in (self.extra or {}).items() if value is not None]
        if pairs:
            msg = f"{msg} [{' '.join(pairs)}]"
        return msg, kwargs


def get_contextual_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """Logger that tags each message with ``context``."""
    return ContextLoggerAdapter(get_logger(name), context)
