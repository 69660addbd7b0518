"""
Structured logging for Beranouns.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        """Get numeric log level."""
        return {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }[self.value]


@dataclass
class LogRecord:
    """A structured log record.

    Attributes:
        level: Log level.
        event: Event name/type.
        message: Human-readable message.
        timestamp: Unix timestamp.
        data: Additional structured data.
    """

    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)

    # Context fields (set by logger)
    logger_name: str = ""
    thread_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d.update(d.pop("data", {}))
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


class StructuredLogger:
    """Structured logging with JSON output.

    Example:
        logger = StructuredLogger("beranouns")

        logger.info(
            "registration_minted",
            message="Minted 🐻",
            token_id=1,
            owner="0x...",
        )

        # Bound context is added to every record
        ctx_logger = logger.bind(registry="0xabc...")
        ctx_logger.info("paused")
    """

    def __init__(
        self,
        name: str = "beranouns",
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
    ):
        """Initialize the logger.

        Args:
            name: Logger name.
            level: Minimum log level.
            output: Output stream (default: stderr).
            json_format: Output as JSON (vs. human-readable).
        """
        self.name = name
        self._level = level
        self._output = output
        self._json_format = json_format
        self._context: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def level(self) -> LogLevel:
        return self._level

    def bind(self, **context: Any) -> StructuredLogger:
        """Create a new logger with bound context."""
        new_logger = StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        **data: Any,
    ) -> None:
        if level.numeric < self._level.numeric:
            return

        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            data={**self._context, **data},
            logger_name=self.name,
            thread_name=threading.current_thread().name,
        )
        self._emit(record)

    def _emit(self, record: LogRecord) -> None:
        with self._lock:
            if self._json_format:
                line = record.to_json()
            else:
                line = self._format_human(record)
            # Resolved at emit time so pytest's capsys sees the output
            print(line, file=self._output or sys.stderr)

    def _format_human(self, record: LogRecord) -> str:
        timestamp = time.strftime(
            "%Y-%m-%d %H:%M:%S",
            time.localtime(record.timestamp),
        )

        parts = [
            f"[{timestamp}]",
            f"[{record.level.upper()}]",
            f"[{record.event}]",
        ]

        if record.message:
            parts.append(record.message)

        if record.data:
            data_str = " ".join(f"{k}={v}" for k, v in record.data.items())
            parts.append(f"({data_str})")

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

    # Convenience methods for registry events

    def transition_accepted(
        self,
        action: str,
        actor: str,
        block_number: int | None = None,
        **extra: Any,
    ) -> None:
        self.debug(
            "transition_accepted",
            f"{action} accepted",
            action=action,
            actor=actor,
            block_number=block_number,
            **extra,
        )

    def transition_rejected(
        self,
        action: str,
        actor: str,
        reason: str,
        **extra: Any,
    ) -> None:
        self.info(
            "transition_rejected",
            f"{action} rejected: {reason}",
            action=action,
            actor=actor,
            reason=reason,
            **extra,
        )

    def registration_minted(
        self,
        label: str,
        token_id: int,
        owner: str,
        expires_at: int,
        price: int = 0,
        **extra: Any,
    ) -> None:
        self.info(
            "registration_minted",
            f"Minted {label} as token {token_id}",
            label=label,
            token_id=token_id,
            owner=owner,
            expires_at=expires_at,
            price=price,
            **extra,
        )

    def pause_changed(self, paused: bool, actor: str, **extra: Any) -> None:
        self.info(
            "pause_changed",
            "Registry paused" if paused else "Registry unpaused",
            paused=paused,
            actor=actor,
            **extra,
        )


# Global logger instance
_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Configure global logging.

    Args:
        level: Log level.
        output: Output stream.
        json_format: Use JSON format.

    Returns:
        Configured logger.
    """
    global _global_logger

    if isinstance(level, str):
        level = LogLevel(level)

    _global_logger = StructuredLogger(
        name="beranouns",
        level=level,
        output=output,
        json_format=json_format,
    )

    return _global_logger


def get_logger(name: str = "beranouns") -> StructuredLogger:
    """Get the global logger, creating it on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name)

    return _global_logger
