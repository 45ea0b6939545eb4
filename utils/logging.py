"""
Logging setup and per-request correlation ids.

Every log line carries the correlation id of the request it was emitted in
(`-` outside a request), so a client-reported id can be traced through the logs.
"""

import logging
import re
import sys
import uuid

from flask import g, has_request_context

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(correlation_id)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CORRELATION_HEADER = "X-Correlation-ID"
_CORRELATION_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def normalize_correlation_id(value: str | None) -> str:
    """Accept a short opaque token from the client, otherwise mint a new one."""
    if value and _CORRELATION_PATTERN.match(value):
        return value
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    if has_request_context():
        return getattr(g, "correlation_id", None) or "-"
    return "-"


class CorrelationIdFilter(logging.Filter):
    """Stamps `record.correlation_id` unless passed via `extra`; never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stdout handler.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    # Statement logging is opt-in through SQLALCHEMY_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
