"""
Structured logging configuration
Supports both Bunyan-style JSON and text formats for different environments

Logging is installed once by the process entry point:

    handler = get_subscriber("mailgate", "info", sys.stdout)
    init_subscriber(handler)

Library modules only ever call get_logger().
"""
import logging
import os
import socket
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from pythonjsonlogger import jsonlogger

# Bunyan numeric levels
BUNYAN_LEVELS = {
    logging.DEBUG: 20,
    logging.INFO: 30,
    logging.WARNING: 40,
    logging.ERROR: 50,
    logging.CRITICAL: 60,
}

LEVEL_ENV_VAR = "LOG_LEVEL"

_init_lock = threading.Lock()
_initialized = False


class BunyanJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter emitting Bunyan-compatible records"""

    def __init__(self, app_name: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.app_name = app_name
        self.hostname = socket.gethostname()

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["v"] = 0
        log_record["name"] = self.app_name
        log_record["msg"] = record.getMessage()
        log_record["level"] = BUNYAN_LEVELS.get(record.levelno, record.levelno)
        log_record["hostname"] = self.hostname
        log_record["pid"] = record.process
        log_record["time"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["target"] = record.name
        log_record["line"] = record.lineno
        log_record["file"] = record.pathname

        # Add exception info if present
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        # Remove internal fields
        for field in ["message", "levelname"]:
            log_record.pop(field, None)


def _resolve_level(env_filter: str) -> int:
    """Pick the level from LOG_LEVEL when set, else from env_filter"""
    name = (os.getenv(LEVEL_ENV_VAR) or env_filter).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def get_subscriber(
    name: str,
    env_filter: str,
    sink: TextIO,
    log_format: str = "json",
) -> logging.Handler:
    """
    Build a log handler writing to sink

    Args:
        name: Application name stamped on every JSON record
        env_filter: Default level, overridden by the LOG_LEVEL env var
        sink: Writable text stream (sys.stdout, a file, io.StringIO in tests)
        log_format: "json" for Bunyan records, "text" for human-readable lines

    Returns:
        Configured logging.Handler, not yet installed
    """
    handler = logging.StreamHandler(sink)
    handler.setLevel(_resolve_level(env_filter))

    if log_format == "json":
        formatter = BunyanJsonFormatter(name, "%(message)s")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    return handler


def init_subscriber(handler: logging.Handler) -> None:
    """
    Install handler as the process-wide log sink

    Must be called exactly once, before any component runs.

    Raises:
        RuntimeError: If logging was already initialized
    """
    global _initialized

    with _init_lock:
        if _initialized:
            raise RuntimeError("Failed to set logger: logging already initialized")

        root_logger = logging.getLogger()
        for existing in root_logger.handlers[:]:
            root_logger.removeHandler(existing)

        root_logger.setLevel(handler.level)
        root_logger.addHandler(handler)

        # Route warnings.warn() through logging
        logging.captureWarnings(True)

        # Adjust third-party loggers
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

        _initialized = True


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter to add context to all log messages"""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Add context to log messages"""
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra

        return msg, kwargs

    def with_context(self, **context) -> "LoggerAdapter":
        """Create a new logger with additional context"""
        new_extra = self.extra.copy()
        new_extra.update(context)
        return LoggerAdapter(self.logger, new_extra)


def get_logger(name: str, **context) -> LoggerAdapter:
    """
    Get a logger instance with optional context

    Args:
        name: Logger name (usually __name__)
        **context: Additional context to include in all logs

    Returns:
        LoggerAdapter instance

    Example:
        logger = get_logger(__name__, domain="delivery")
        logger.info("Email sent", extra={"recipient": "someone@example.com"})
    """
    logger = logging.getLogger(name)
    return LoggerAdapter(logger, context)
