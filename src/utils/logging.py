"""Logging setup for the web app and the GitHub lookup flow.

Log lines go to stdout as ``time level logger: message``. Lookups are
logged through ``LogContext`` so every line carries the username that was
looked up, e.g. ``[user_name='octocat'] GitHub user found: octocat``.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Literal

from src.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request, query or multipart chunk at INFO/DEBUG
QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "uvicorn.access",
    "sqlalchemy.engine",
    "aiosqlite",
    "asyncpg",
    "multipart",
    "python_multipart",
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def default_level() -> LogLevel:
    """Level used when none is given: DEBUG in development, WARNING under test."""
    settings = get_settings()
    if settings.is_production:
        return "INFO"
    if settings.app_env == "test":
        return "WARNING"
    return "DEBUG"


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root logger and quiet chatty libraries.

    Args:
        level: Override the level chosen from ``APP_ENV``
    """
    logging.basicConfig(
        level=getattr(logging, level or default_level()),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext(logging.LoggerAdapter):
    """Logger adapter prefixing messages with ``[key=value]`` pairs.

    Values are shown with ``repr`` so blank or odd usernames stay visible.

    Usage:
        log = LogContext(logger, user_name="octocat")
        log.debug("GitHub user not found")
    """

    def __init__(self, logger: logging.Logger, **context: object) -> None:
        super().__init__(logger, context)
        self.prefix = " ".join(f"[{k}={v!r}]" for k, v in context.items())

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}", kwargs
