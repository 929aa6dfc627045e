"""
Structured logging configuration and utilities

Session and navigation components log through the standard library; this
module decides where those records go (console, rotating file, Streamlit
notices) and offers helpers for the events the client cares about.
"""

import logging
import logging.handlers
import json
import time
import traceback
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from contextlib import contextmanager
import streamlit as st

from config.app_config import LoggingConfig, get_config


# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_RECORD_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


class StructuredFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line

    Fields passed through `extra` are nested under "context".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = {k: v for k, v in vars(record).items() if k not in _RESERVED_RECORD_KEYS}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class StreamlitLogHandler(logging.Handler):
    """Surfaces warnings and errors as Streamlit notices during development"""

    def emit(self, record: logging.LogRecord):
        try:
            text = self.format(record)
            if record.levelno >= logging.ERROR:
                st.error(f"🚨 {text}")
            else:
                st.warning(f"⚠️ {text}")
        except Exception:
            self.handleError(record)


def _console_formatter(settings: LoggingConfig, debug: bool) -> logging.Formatter:
    if debug:
        return logging.Formatter(settings.format + " [%(filename)s:%(lineno)d]")
    return StructuredFormatter()


def setup_logging() -> logging.Logger:
    """
    Configure the root logger from the application config

    Returns:
        logging.Logger: Configured root logger
    """
    config = get_config()
    settings = config.logging
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(_console_formatter(settings, config.debug))
    root_logger.addHandler(console)

    if settings.enable_file_logging:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        # The file keeps everything, including navigation traces
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    if config.debug and config.environment == "development":
        notices = StreamlitLogHandler(level=logging.WARNING)
        notices.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(notices)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name (typically __name__)"""
    return logging.getLogger(name)


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str, **extra_fields):
    """
    Time a block and log its outcome

    Failures are logged with their type and re-raised unchanged.
    """
    started = time.perf_counter()
    logger.debug(f"{operation} started", extra={"operation": operation, **extra_fields})

    try:
        yield
    except Exception as e:
        logger.error(f"{operation} failed after {time.perf_counter() - started:.3f}s: {e}", extra={
            "operation": operation,
            "duration_seconds": time.perf_counter() - started,
            "status": "error",
            "error_type": type(e).__name__,
            **extra_fields
        }, exc_info=True)
        raise

    logger.info(f"{operation} finished", extra={
        "operation": operation,
        "duration_seconds": time.perf_counter() - started,
        "status": "success",
        **extra_fields
    })


def log_session_event(logger: logging.Logger, event_type: str, user_id: Optional[str] = None, **details):
    """
    Log session lifecycle events

    Args:
        logger: Logger instance
        event_type: Type of event (e.g., "saved", "cleared", "restored")
        user_id: Identifier of the user concerned, if any
        **details: Additional event details
    """
    logger.info("Session event", extra={
        "event_type": "session_event",
        "session_event_type": event_type,
        "user_id": user_id,
        "timestamp": datetime.now().isoformat(),
        **details
    })


def log_navigation_event(logger: logging.Logger, action: str, destination: str, depth: int, **details):
    """
    Log navigation transitions

    Args:
        logger: Logger instance
        action: Navigation action (e.g., "navigate_to", "navigate_back", "navigate_to_root")
        destination: Resulting current destination
        depth: Backstack depth after the transition
        **details: Additional event details
    """
    logger.debug("Navigation event", extra={
        "event_type": "navigation_event",
        "action": action,
        "destination": destination,
        "depth": depth,
        **details
    })


class ErrorTracker:
    """
    Counts errors per (type, context) and logs each occurrence

    The debug sidebar shows get_error_summary().
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.error_counts: Counter = Counter()
        self.last_error_at: Optional[str] = None

    def track_error(self, error: Exception, context: str = "", **extra_info):
        key = f"{type(error).__name__}:{context}"
        self.error_counts[key] += 1
        self.last_error_at = datetime.now().isoformat()

        self.logger.error(f"Error in {context or 'application'}: {error}", extra={
            "event_type": "error",
            "error_type": type(error).__name__,
            "context": context,
            "error_count": self.error_counts[key],
            **extra_info
        }, exc_info=(type(error), error, error.__traceback__))

    def get_error_summary(self) -> Dict[str, Any]:
        return {
            "total_errors": sum(self.error_counts.values()),
            "unique_errors": len(self.error_counts),
            "error_breakdown": dict(self.error_counts.most_common()),
            "last_error_at": self.last_error_at,
        }


# Global instances
_logger_setup = False
_error_tracker: Optional[ErrorTracker] = None


def initialize_logging() -> ErrorTracker:
    """Configure logging once and return the global error tracker"""
    global _logger_setup, _error_tracker

    if not _logger_setup:
        setup_logging()
        _logger_setup = True

    if _error_tracker is None:
        _error_tracker = ErrorTracker(logging.getLogger("playscore.errors"))

    return _error_tracker


def get_error_tracker() -> ErrorTracker:
    """Get the global error tracker, initializing logging on first use"""
    return _error_tracker or initialize_logging()
