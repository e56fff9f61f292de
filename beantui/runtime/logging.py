"""Centralized logging configuration for beantui.

Usage:
    from beantui.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Detailed debug info")
    logger.info("General info")
    logger.warning("Warning message")

Environment variables:
    BEANTUI_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
    BEANTUI_LOG_FILE: Write log records to this file instead of stderr.
        The editor draws on the terminal, so a file keeps the screen clean.
        Without one, terminal records are held while the editor runs and
        written once it exits (see defer_terminal_logging).
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

# Default log level, can be overridden by environment variable
DEFAULT_LOG_LEVEL = logging.INFO

# Format for log messages
LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOGGER_NAMESPACE = "beantui"

# Track if logging has been configured
_logging_configured = False


def _level_from_env() -> int:
    env_level = os.environ.get("BEANTUI_LOG_LEVEL", "").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(env_level, DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None, log_file: str | None = None, force: bool = False) -> None:
    """Configure the beantui namespace logger.

    Args:
        level: Log level to use. If None, reads from BEANTUI_LOG_LEVEL env var
               or uses DEFAULT_LOG_LEVEL.
        log_file: Path of a log file. If None, reads BEANTUI_LOG_FILE or
                  logs to stderr.
        force: Replace an existing configuration (used once the CLI knows
               its --log-file argument).
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    if level is None:
        level = _level_from_env()
    if log_file is None:
        log_file = os.environ.get("BEANTUI_LOG_FILE") or None

    # Choose format based on level
    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)
        old.close()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name, typically __name__

    Returns:
        Configured logger instance
    """
    configure_logging()
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime.

    Args:
        level: New log level (e.g., logging.DEBUG)
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    # Update format if switching to/from DEBUG
    for handler in logger.handlers:
        if level == logging.DEBUG:
            handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))


def _terminal_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)
    ]


@contextmanager
def defer_terminal_logging() -> Iterator[None]:
    """Hold records bound for a terminal stream until the block exits.

    The editor owns the whole screen while it runs, so a warning written to
    stderr mid-session would be drawn over the UI. File handlers are left
    attached and keep writing as usual.
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    held = _terminal_handlers(logger)
    if not held:
        yield
        return

    buffer = logging.handlers.MemoryHandler(capacity=10_000, flushLevel=logging.CRITICAL + 1)
    for handler in held:
        logger.removeHandler(handler)
    logger.addHandler(buffer)
    try:
        yield
    finally:
        logger.removeHandler(buffer)
        for handler in held:
            logger.addHandler(handler)
            for record in buffer.buffer:
                if record.levelno >= handler.level:
                    handler.handle(record)
        buffer.buffer.clear()
        buffer.close()
