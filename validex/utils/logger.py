"""
Validex Logger
==============

Structured logging with keyword context.

Every library module logs through ``get_logger(__name__)``. Output
goes to stderr at the level configured under ``logging.level``.
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

import orjson


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Union[str, int, LogLevel]) -> LogLevel:
        """Accept ``"debug"``, ``10`` or a LogLevel."""
        if isinstance(value, str):
            return cls[value.strip().upper()]
        return cls(value)


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "validex"

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
                "traceback": traceback.format_exception(
                    type(self.exception),
                    self.exception,
                    self.exception.__traceback__,
                ),
            }

        return data

    def to_json(self) -> str:
        return orjson.dumps(self.to_dict(), default=repr).decode("utf-8")


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [DEBUG] validex.validation.parser: Parsed rule string spec=required|email
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        self.format_string = format_string or "{timestamp} [{level}] {logger}: {message}"
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        message = record.message

        # Context as key=value pairs
        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=record.level.name,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """One JSON document per record."""

    def format(self, record: LogRecord) -> str:
        return record.to_json()


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Stream output handler."""

    def __init__(
        self,
        stream: Any = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.stream = stream or sys.stderr

    def emit(self, record: LogRecord) -> None:
        self.stream.write(self.formatter.format(record) + "\n")
        self.stream.flush()


class MemoryHandler(LogHandler):
    """Keeps records in memory; used to inspect what was logged."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self) -> List[str]:
        return [record.message for record in self.records]


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger(__name__)

        logger.debug("Rule registered", identifier="email")
        logger.error("Rule construction failed", exception=e)

        # With context
        logger = logger.with_context(attribute="email")
        logger.debug("Rule bypassed")
    """

    def __init__(
        self,
        name: str = "validex",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[LogHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    def add_handler(self, handler: LogHandler) -> Logger:
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> Logger:
        self._handlers.remove(handler)
        return self

    def with_context(self, **context: Any) -> Logger:
        """
        Create logger with additional context.

        Args:
            **context: Context key-values

        Returns:
            New logger sharing handlers, with merged context
        """
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception:
                pass  # Logging must never break validation

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.ERROR, message, exception, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}
_handlers: List[LogHandler] = []
_level: Optional[LogLevel] = None


def _default_level() -> LogLevel:
    from validex.core.config import get_config

    return LogLevel.parse(get_config().get("logging.level", "WARNING"))


def _default_handlers() -> List[LogHandler]:
    if not _handlers:
        from validex.core.config import get_config

        fmt = get_config().get("logging.format", "text")
        formatter = JsonFormatter() if fmt == "json" else TextFormatter()
        _handlers.append(StreamHandler(formatter=formatter))
    return _handlers


def get_logger(
    name: str = "validex",
    level: Optional[LogLevel] = None,
) -> Logger:
    """
    Get or create logger.

    Loggers share the handlers installed by `configure_logging` (or a
    stderr handler built from configuration on first use).

    Args:
        name: Logger name, usually ``__name__``
        level: Log level override

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Logger(
            name=name,
            level=level or _level or _default_level(),
            handlers=_default_handlers(),
        )
    elif level is not None:
        _loggers[name].level = level

    return _loggers[name]


def configure_logging(
    level: Union[str, int, LogLevel] = LogLevel.WARNING,
    format: str = "text",
    stream: Any = None,
    handlers: Optional[List[LogHandler]] = None,
) -> None:
    """
    Configure logging for every validex logger.

    Args:
        level: Minimum level
        format: Output format ("text" or "json")
        stream: Output stream (stderr by default)
        handlers: Explicit handlers replacing the stream handler
    """
    global _level

    _level = LogLevel.parse(level)

    if handlers is None:
        formatter = JsonFormatter() if format == "json" else TextFormatter()
        handlers = [StreamHandler(stream=stream, formatter=formatter)]

    # Loggers hold a reference to the shared list, so mutate it in place
    _handlers[:] = handlers

    for logger in _loggers.values():
        logger.level = _level
        logger._handlers = _handlers
