"""Logging configuration utilities for the HTTP server."""

import json
import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from session_server.domain.correlation_id import (
    ROOT_LOGGER_NAME,
    CorrelationLoggerAdapter,
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
REDACTED = "[REDACTED]"

# Applied in order; each keeps the key and masks only the secret part.
SENSITIVE_PATTERNS = [
    (re.compile(r"(?i)\b(jsessionid|password|token|secret)=[^;&\s]*"), rf"\1={REDACTED}"),
    (re.compile(r"(?i)\b((?:set-)?cookie|authorization):\s*.*"), rf"\1: {REDACTED}"),
    (
        re.compile(
            r"\b[A-Fa-f0-9]{8}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{12}\b"
        ),
        REDACTED,
    ),
    (re.compile(r"\b[A-Za-z0-9+/]{32,}={0,2}"), REDACTED),
]

# Structured fields copied from ``extra`` into formatted records.
EXTRA_KEYS = (
    "event",
    "client",
    "method",
    "route",
    "status_code",
    "bytes_in",
    "bytes_out",
    "duration_ms",
    "error_type",
    "reason",
    "path",
    "active_sessions",
    "host",
    "port",
    "directory",
    "log_destination",
    "log_level",
    "socket_timeout",
    "shutdown_grace_seconds",
    "remaining_workers",
    "signal",
)

# Fixed vocabulary, never user input.
TRUSTED_KEYS = frozenset({"event"})


def redact_sensitive(value: str) -> str:
    """Mask session ids, credentials and cookie headers inside ``value``."""
    if not value:
        return value
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def structured_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the known extras present on ``record``, redacting strings."""
    fields = {}
    for key in EXTRA_KEYS:
        if not hasattr(record, key):
            continue
        value = getattr(record, key)
        if isinstance(value, str) and key not in TRUSTED_KEYS:
            value = redact_sensitive(value)
        fields[key] = value
    return fields


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Ensure correlation_id field exists in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line with sorted keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "correlation_id": getattr(record, "correlation_id", "-"),
            "component": getattr(record, "component", "unknown"),
            "message": record.getMessage(),
        }
        log_data.update(structured_fields(record))
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, sort_keys=True, default=str)


class TextFormatter(logging.Formatter):
    """Human readable line followed by ``key=value`` pairs for the extras."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        line = super().format(record)
        fields = structured_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def _resolve_level(level_name: str) -> int:
    """Translate text level names into logging module numeric levels."""
    level = getattr(logging, level_name.upper(), None)
    if isinstance(level, int):
        return level
    return logging.INFO


def _build_handler(
    destination: Optional[str], level: int, use_json: bool = True
) -> logging.Handler:
    """Create a stdout or rotating file handler."""
    if destination and destination.lower() != "stdout":
        target_path = Path(destination)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            target_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(TextFormatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    return handler


def configure_logging(
    level: str = "INFO", destination: Optional[str] = None, use_json: bool = True
) -> CorrelationLoggerAdapter:
    """Route every ``session_server.*`` logger to a single handler.

    Calling this again replaces the previous handler, so it is safe to call
    from tests. Propagation is switched off to keep records out of the root
    logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    numeric_level = _resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    logger.addHandler(_build_handler(destination, numeric_level, use_json))
    return CorrelationLoggerAdapter(logger, {})
