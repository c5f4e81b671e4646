"""
Structured logging configuration for easyevents.

Provides JSON-formatted logs with trace_id support. Engine modules log with
the event's stream as trace_id, so one stream's activity can be followed
across nested raises and replays.

Environment Variables:
    EASYEVENTS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    EASYEVENTS_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from easyevents.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="AppEvents")
    logger.info("Replaying app events")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all records have a trace_id field, even if not set via extra.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(stream=None) -> logging.Handler:
    """
    Configure root logger with structured logging.

    Reads EASYEVENTS_LOG_LEVEL and EASYEVENTS_LOG_FORMAT. Replaces any
    handlers already installed on the root logger.

    Returns:
        The installed handler
    """
    log_level = os.getenv("EASYEVENTS_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("EASYEVENTS_LOG_FORMAT", "json").lower()
    if log_format not in ("json", "text"):
        raise ValueError(f"unsupported EASYEVENTS_LOG_FORMAT: {log_format}")

    level = LEVELS.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    # On the handler, so records propagated from child loggers get it too.
    handler.addFilter(TraceIDFilter())
    handler.setFormatter(build_formatter(log_format))
    root_logger.addHandler(handler)

    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return handler


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically a stream id)
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
