"""
Structured logging for the persistence layer.

Repositories log with keyword fields (``logger.debug("...", rows=3)``); the
fields travel on the record as ``extra_data`` and the formatters render
them, together with the correlation ID bound by
shared.infrastructure.correlation.
"""

import json
import logging
import sys
from typing import Any

from shared.config.settings import settings


def _record_context(record: logging.LogRecord) -> tuple[str | None, dict[str, Any] | None]:
    correlation_id = getattr(record, "correlation_id", None)
    if correlation_id == "-":
        correlation_id = None
    return correlation_id, getattr(record, "extra_data", None)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id, data = _record_context(record)
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if correlation_id:
            payload["correlation_id"] = correlation_id
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Single-line text: ``LEVEL logger [cid] message (key=value ...)``."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id, data = _record_context(record)
        parts = [f"{record.levelname:<8}", record.name]
        if correlation_id:
            parts.append(f"[{correlation_id[:8]}]")
        line = " ".join(parts) + f": {record.getMessage()}"
        if data:
            line += " (" + " ".join(f"{key}={value}" for key, value in data.items()) + ")"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger accepting keyword fields on every level method.

    Unknown keyword arguments are collected into ``record.extra_data``
    instead of being rejected by ``logging.Logger``.
    """

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **data: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["extra_data"] = data or None
        super()._log(level, msg, args, exc_info, extra, stack_info, stacklevel + 1)


logging.setLoggerClass(StructuredLogger)


def _resolve_level() -> int:
    if settings.log_level:
        return getattr(logging, settings.log_level)
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging() -> None:
    """
    Configure the root logger for the host application.
    Call this once at startup; the library itself never does.
    """
    # Import here to avoid circular imports
    from shared.infrastructure.correlation import CorrelationIdFilter

    log_level = _resolve_level()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # SQL echo goes through sqlalchemy.engine; keep the pool quiet
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    if settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Usage:
        logger = get_logger(__name__)
        logger.debug("Result cache populated", entity="BlogPost", rows=12)
    """
    return logging.getLogger(name)  # type: ignore
