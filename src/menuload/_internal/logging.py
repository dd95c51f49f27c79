"""Structured logging setup for menuload."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

# Name given to the stderr handler installed by setup_logging, so repeated
# calls find it among handlers added by other code (e.g. pytest's caplog).
HANDLER_NAME = "menuload.stderr"

_TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _JsonFormatter(logging.Formatter):
    """Emit one-line JSON objects with keys: timestamp, level, logger, message."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def _own_handler(logger: logging.Logger) -> logging.StreamHandler | None:
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME and isinstance(handler, logging.StreamHandler):
            return handler
    return None


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool = False,
) -> logging.Logger:
    """Configure and return the root ``menuload`` logger.

    Installs one stderr handler on the ``menuload`` namespace. Later calls
    reuse it: the level and format are updated and the handler is pointed
    at the current ``sys.stderr``, so a CLI command invoked repeatedly in
    one process never writes to a stale stream.

    Args:
        level: Logging level (e.g., ``logging.DEBUG``). Defaults to INFO.
        json_format: If True, emit structured JSON logs instead of
            human-readable lines.

    Returns:
        The configured ``menuload`` logger.
    """
    logger = logging.getLogger("menuload")
    logger.setLevel(level)

    handler = _own_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    else:
        # Plain assignment: setStream would flush the old stream, which may be closed.
        handler.stream = sys.stderr

    handler.setLevel(level)
    if json_format:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt=_DATE_FORMAT))

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``menuload`` namespace.

    ``get_logger("engine.executor")`` returns
    ``logging.getLogger("menuload.engine.executor")``.
    """
    return logging.getLogger(f"menuload.{name}")
