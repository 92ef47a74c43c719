"""Process-wide leveled logger writing to stderr and, optionally, a file."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TextIO


class LogLevel(IntEnum):
    """Log levels ordered by severity."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    @classmethod
    def from_int(cls, value: int) -> LogLevel | None:
        """Return the level for ``value``, or None when it is out of range."""
        try:
            return cls(value)
        except ValueError:
            return None

    def as_char(self) -> str:
        """Single-letter tag used in log files."""
        return _CHARS[self]

    def colored_tag(self) -> str:
        """ANSI-colored single-letter tag for terminal output."""
        return _COLORED[self]


_CHARS = {
    LogLevel.DEBUG: "D",
    LogLevel.INFO: "I",
    LogLevel.WARNING: "W",
    LogLevel.ERROR: "E",
    LogLevel.FATAL: "F",
}

_COLORED = {
    LogLevel.DEBUG: "D",
    LogLevel.INFO: "\x1b[32mI\x1b[0m",
    LogLevel.WARNING: "\x1b[33mW\x1b[0m",
    LogLevel.ERROR: "\x1b[31mE\x1b[0m",
    LogLevel.FATAL: "\x1b[93mF\x1b[0m",
}


class LoggerAlreadyInitialized(RuntimeError):
    """Raised when the logger is initialized a second time."""


class _Logger:
    def __init__(self, level: LogLevel, file: TextIO | None) -> None:
        self.level = level
        self.file = file
        self.lock = threading.Lock()


class _State:
    logger: _Logger | None = None
    lock = threading.Lock()


_state = _State()


def init(level: LogLevel, log_file: str | Path | None = None) -> None:
    """Initialize the global logger; may be called only once until ``reset``."""
    with _state.lock:
        if _state.logger is not None:
            raise LoggerAlreadyInitialized("logger init called more than once")
        file = open(log_file, "a", encoding="utf-8") if log_file is not None else None
        _state.logger = _Logger(LogLevel(level), file)


def reset() -> None:
    """Drop the global logger, closing its file."""
    with _state.lock:
        logger, _state.logger = _state.logger, None
    if logger is not None and logger.file is not None:
        logger.file.close()


def should_log(level: LogLevel) -> bool:
    """Whether ``level`` would produce output; False before initialization."""
    logger = _state.logger
    return logger is not None and level >= logger.level


def log(level: LogLevel, message: str) -> None:
    """Write ``message`` at ``level``; the logger must be initialized."""
    logger = _state.logger
    if logger is None:
        raise RuntimeError("logger not initialized")
    if level < logger.level:
        return
    level = LogLevel(level)
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] [{level.colored_tag()}] {message}", file=sys.stderr)
    if logger.file is not None:
        with logger.lock:
            logger.file.write(f"[{timestamp}] [{level.as_char()}] {message}\n")
            logger.file.flush()


def _log_if_enabled(level: LogLevel, message: str) -> None:
    if should_log(level):
        log(level, message)


def debug(message: str) -> None:
    _log_if_enabled(LogLevel.DEBUG, message)


def info(message: str) -> None:
    _log_if_enabled(LogLevel.INFO, message)


def warning(message: str) -> None:
    _log_if_enabled(LogLevel.WARNING, message)


def error(message: str) -> None:
    _log_if_enabled(LogLevel.ERROR, message)


def fatal(message: str) -> None:
    """Log at FATAL level and terminate with exit status 1."""
    log(LogLevel.FATAL, message)
    raise SystemExit(1)