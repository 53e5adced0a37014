"""Logging configuration for the httpserve logger tree.

Records are written one JSON object per line. Anything passed through
``extra=`` ends up in the object, so call sites choose their own fields
(``event``, ``path``, ``status_code`` and so on) without registering them here.
"""

import json
import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from httpserve.domain.correlation_id import LOGGER_ROOT, CorrelationLoggerAdapter

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
ROTATE_AT_BYTES = 10 * 1024 * 1024
ROTATED_FILES_KEPT = 5

REDACTED = "[REDACTED]"
CREDENTIAL_ASSIGNMENT = re.compile(
    r"(?i)(authorization|token|signature|password|secret|api[_-]?key)="
)
LONG_HEX_TOKEN = re.compile(r"\b[A-Fa-f0-9]{32,}\b")

# Attributes every LogRecord has; whatever else is on a record came from extra=.
_STANDARD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "correlation_id", "component"}


def redact_sensitive(value: str) -> str:
    """Hide strings that carry a credential assignment or a long hex token."""
    if value and (CREDENTIAL_ASSIGNMENT.search(value) or LONG_HEX_TOKEN.search(value)):
        return REDACTED
    return value


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = {}
    for name, value in vars(record).items():
        if name in _STANDARD_ATTRIBUTES or name.startswith("_"):
            continue
        fields[name] = redact_sensitive(value) if isinstance(value, str) else value
    return fields


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Give records logged outside an adapter a ``-`` correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = _extra_fields(record)
        payload.update(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            correlation_id=getattr(record, "correlation_id", "-"),
            component=getattr(record, "component", "unknown"),
            message=record.getMessage(),
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


def _open_handler(destination: Optional[str]) -> logging.Handler:
    if not destination or destination.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    log_path = Path(destination)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_path, maxBytes=ROTATE_AT_BYTES, backupCount=ROTATED_FILES_KEPT
    )


def configure_logging(
    level: str = "INFO", destination: Optional[str] = None, use_json: bool = True
) -> CorrelationLoggerAdapter:
    """Route the ``httpserve`` logger to one handler and return an adapter.

    ``destination`` is ``stdout`` (the default) or a file path, which is
    rotated once it grows past ``ROTATE_AT_BYTES``. Unknown level names fall
    back to INFO. Calling this again replaces the previous handler.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = _open_handler(destination)
    handler.setLevel(numeric_level)
    handler.addFilter(CorrelationIdFilter())
    if use_json:
        handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, DATE_FORMAT))

    logger = logging.getLogger(LOGGER_ROOT)
    for previous in list(logger.handlers):
        logger.removeHandler(previous)
        previous.close()
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False

    adapter = CorrelationLoggerAdapter(logger, {})
    adapter.info(
        "Logging configured",
        extra={
            "event": "logging_configured",
            "destination": destination or "stdout",
            "use_json": use_json,
        },
    )
    return adapter
