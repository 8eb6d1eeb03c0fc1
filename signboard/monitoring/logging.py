"""
Structured logging for Signboard sessions.

Every record is one event: a name, a short message and flat key/value
data. Records carry the session they belong to and the asyncio task
that produced them, so a drain loop and the capture loop of the same
session can be told apart in one stream.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TextIO


class LogLevel(Enum):
    """Log levels, named as in the standard logging module."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)


@dataclass
class LogRecord:
    """One session event.

    Attributes:
        level: Log level name.
        event: Event name, e.g. ``segment_matched``.
        message: Short human-readable summary.
        timestamp: Unix timestamp.
        session_id: Session the event belongs to, if bound.
        task: Name of the asyncio task that logged it ("" outside a loop).
        data: Event fields.
    """

    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    session_id: Optional[str] = None
    task: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flat dictionary; event fields sit next to the record fields."""
        d: dict[str, Any] = {
            "level": self.level,
            "event": self.event,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.session_id is not None:
            d["session_id"] = self.session_id
        if self.task:
            d["task"] = self.task
        d.update(self.data)
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


def _current_task_name() -> str:
    try:
        task = asyncio.current_task()
    except RuntimeError:
        return ""
    return task.get_name() if task is not None else ""


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class StructuredLogger:
    """Event logger with JSON or single-line output.

    Example:
        logger = StructuredLogger("signboard", json_format=False)
        session_logger = logger.bind(session_id="a1b2")

        session_logger.segment_matched("thank you very much", units=3, missing=["very", "much"])
        # 12:00:00.125 INFO     segment_matched session=a1b2 Matched 3 units | units=3 ...
    """

    def __init__(
        self,
        name: str = "signboard",
        level: LogLevel = LogLevel.INFO,
        output: Optional[TextIO] = None,
        json_format: bool = True,
        context: Optional[dict[str, Any]] = None,
    ):
        """Initialize the logger.

        Args:
            name: Logger name.
            level: Minimum log level.
            output: Output stream. When None, the current sys.stderr is
                looked up on every write.
            json_format: One JSON object per line instead of text.
            context: Fields added to every record.
        """
        self.name = name
        self._level = level
        self._output = output
        self._json_format = json_format
        self._context: dict[str, Any] = dict(context or {})
        self._lock = threading.Lock()

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level.numeric >= self._level.numeric

    def bind(self, **context: Any) -> "StructuredLogger":
        """Return a logger that adds ``context`` to every record."""
        return StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
            context={**self._context, **context},
        )

    def _log(self, level: LogLevel, event: str, message: str = "", **data: Any) -> None:
        if not self.is_enabled_for(level):
            return

        fields = {**self._context, **data}
        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            session_id=fields.pop("session_id", None),
            task=_current_task_name(),
            data=fields,
        )
        line = record.to_json() if self._json_format else self._format_human(record)

        with self._lock:
            print(line, file=self._output or sys.stderr)

    def _format_human(self, record: LogRecord) -> str:
        clock = time.strftime("%H:%M:%S", time.localtime(record.timestamp))
        millis = int(record.timestamp * 1000) % 1000

        parts = [f"{clock}.{millis:03d}", f"{record.level.upper():8}", record.event]
        if record.session_id is not None:
            parts.append(f"session={record.session_id}")
        if record.message:
            parts.append(record.message)

        fields = [f"{k}={_format_value(v)}" for k, v in record.data.items() if v is not None]
        if fields:
            parts.append("| " + " ".join(fields))

        return " ".join(parts)

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.ERROR, event, message, **data)

    def critical(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.CRITICAL, event, message, **data)

    # Session events

    def segment_matched(
        self,
        text: str,
        units: int,
        missing: Optional[list[str]] = None,
        **extra: Any,
    ) -> None:
        """Log a finalized segment and what it compiled to."""
        missing = list(missing or [])
        self.info(
            "segment_matched",
            f"Matched {units} units",
            text_length=len(text),
            units=units,
            missing=len(missing),
            missing_words=missing,
            **extra,
        )

    def unit_displayed(self, key: str, kind: str, is_phrase: bool = False, **extra: Any) -> None:
        self.debug("unit_displayed", key=key, kind=kind, is_phrase=is_phrase, **extra)

    def review_entered(self, words: list[str], **extra: Any) -> None:
        """Log the start of a review round."""
        self.info(
            "review_entered",
            f"{len(words)} words need signs",
            words=list(words),
            **extra,
        )

    def storage_failed(
        self,
        error: Exception,
        operation: str = "",
        key: Optional[str] = None,
        **extra: Any,
    ) -> None:
        """Log a failed library read or write."""
        self.error(
            "storage_failed",
            str(error),
            error_type=type(error).__name__,
            operation=operation,
            key=key,
            **extra,
        )

    def capture_error(self, error: Exception, fatal: bool = False, **extra: Any) -> None:
        """Log a speech capture failure; only fatal ones are errors."""
        log = self.error if fatal else self.warning
        log(
            "capture_error",
            str(error),
            error_type=type(error).__name__,
            fatal=fatal,
            **extra,
        )


_global_logger: Optional[StructuredLogger] = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: Optional[TextIO] = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Replace the global session logger.

    The standard ``signboard`` logger gets the same threshold, so module
    loggers and session events are filtered alike.

    Args:
        level: Log level or its name.
        output: Output stream (default: stderr).
        json_format: Use JSON lines.

    Returns:
        The new global logger.
    """
    global _global_logger

    if isinstance(level, str):
        level = LogLevel(level.lower())

    _global_logger = StructuredLogger(
        name="signboard",
        level=level,
        output=output,
        json_format=json_format,
    )
    logging.getLogger("signboard").setLevel(level.numeric)

    return _global_logger


def get_logger(name: str = "signboard") -> StructuredLogger:
    """Return the global session logger, creating a default one on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name)

    return _global_logger
