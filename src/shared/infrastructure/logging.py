"""
Structured Logging
==================

JSON logs on stdout, one object per line.

Every record emitted while a request is being handled carries that
request's correlation id, taken from a context variable bound by
``CorrelationIDMiddleware``. Services never pass it around.

Usage:
    from src.shared.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Ticket created", extra={"ticket_id": 42, "priority": "High"})
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Optional

from pythonjsonlogger import jsonlogger


REDACTED = "***REDACTED***"
SENSITIVE_KEYS = ("password", "api_key", "secret")

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def bind_correlation_id(correlation_id: str) -> Token:
    """Attach a correlation id to the current context. Returns a reset token."""
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


def current_correlation_id() -> Optional[str]:
    return _correlation_id.get()


class CorrelationIdFilter(logging.Filter):
    """Copies the bound correlation id onto records that lack one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = _correlation_id.get()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for helpdesk logs.

    Adds ``timestamp`` (UTC, ISO 8601), ``environment`` and, inside a
    request, ``correlation_id``. Values under password/secret/api key
    fields are masked and credentials are cut out of ``database_url``.
    """

    def __init__(self, *args: Any, environment: str = "unknown", **kwargs: Any):
        self.environment = environment
        super().__init__(*args, **kwargs)

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault(
            "timestamp",
            datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        )
        log_record["environment"] = self.environment
        if log_record.get("correlation_id") is None:
            log_record.pop("correlation_id", None)

        for key, value in list(log_record.items()):
            if not isinstance(value, str):
                continue
            if any(s in key.lower() for s in SENSITIVE_KEYS):
                log_record[key] = REDACTED
            elif key == "database_url" and "@" in value:
                scheme, _, rest = value.partition("://")
                log_record[key] = f"{scheme}://{REDACTED}@{rest.rsplit('@', 1)[1]}"


def setup_logging(level: str = "INFO", environment: str = "development") -> None:
    """
    Route all logging through one JSON handler on stdout.

    Safe to call more than once; previous root handlers are replaced.
    """
    level_no = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(CustomJsonFormatter(
        fmt="%(name)s %(levelname)s %(message)s",
        environment=environment,
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_no)

    # Request lines come from LoggingMiddleware; statement echo is DEBUG-only
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level_no == logging.DEBUG else logging.WARNING
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_latency(logger: logging.Logger, operation: str, **extra_context: Any):
    """
    Log how long the wrapped block took, as ``latency_ms``.

    Usage:
        with log_latency(logger, "stats_compute"):
            counts = await uow.tickets.count_by_status()
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.info(
            f"{operation} completed",
            extra={
                "operation": operation,
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                **extra_context,
            },
        )
