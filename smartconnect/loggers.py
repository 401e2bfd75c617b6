"""
Logging configuration for the SmartConnect client.

This module provides a centralized logging setup with support for:
- Console output with colored formatting
- Optional file rotation with size limits
- Optional remote logging to Loki, pushed from a background thread
"""

import logging
import queue
import time
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import Final, Optional

import colorlog
import httpx

from .configs import LOG_FILE, LOG_LEVEL, LOKI_URL


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LOG_FORMAT: Final[str] = (
    "%(name)s | %(asctime)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s"
)
DEFAULT_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
MAX_LOG_FILE_SIZE: Final[int] = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT: Final[int] = 3
LOKI_TIMEOUT: Final[float] = 2.0


# =============================================================================
# Color Configuration
# =============================================================================

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


# =============================================================================
# Loki Integration
# =============================================================================

def send_to_loki(url: str, level: str, message: str, app: str) -> None:
    """
    Send a log entry to Loki.

    Args:
        url: Loki push endpoint.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        message: Log message.
        app: Application name for Loki labels.
    """
    try:
        log_entry = {
            "streams": [
                {
                    "stream": {"level": level, "app": app},
                    "values": [[str(int(time.time() * 1e9)), message]],
                }
            ]
        }
        headers = {"Content-Type": "application/json"}
        with httpx.Client() as client:
            client.post(url, json=log_entry, headers=headers, timeout=LOKI_TIMEOUT)
    except Exception as e:
        # Avoid recursive logging - just print to stderr
        print(f"[Loki send error]: {e}")


class LokiHandler(logging.Handler):
    """
    Logging handler that pushes records to Loki.

    Attributes:
        url: Loki push endpoint.
        app: Application name for Loki labels.
    """

    def __init__(self, url: str, app: str) -> None:
        super().__init__()
        self.url = url
        self.app = app

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            send_to_loki(self.url, record.levelname.upper(), message, self.app)
        except Exception:
            self.handleError(record)


class LokiQueueHandler(QueueHandler):
    """
    Queue in front of a LokiHandler.

    Records are pushed to Loki from a listener thread so the blocking
    HTTP call never runs on the event loop.

    Attributes:
        loki_handler: Handler that does the actual push.
        listener: Thread draining the queue into ``loki_handler``.
    """

    def __init__(self, url: str, app: str) -> None:
        super().__init__(queue.SimpleQueue())
        self.loki_handler = LokiHandler(url, app)
        self.listener = QueueListener(self.queue, self.loki_handler, respect_handler_level=True)
        self.listener.start()
        self._listening = True

    def close(self) -> None:
        # Stopping the listener flushes pending records
        if self._listening:
            self._listening = False
            self.listener.stop()
        super().close()


# =============================================================================
# Logger Factory
# =============================================================================

def get_logger(
    name: str,
    app: str = "smartconnect",
    log_file: Optional[str] = None,
    level: int = logging.DEBUG,
    loki_url: Optional[str] = None,
) -> logging.Logger:
    """
    Create and configure a logger with console, file and Loki handlers.

    The file and Loki handlers are only attached when ``log_file`` and
    ``loki_url`` are given.

    Args:
        name: Logger name.
        app: Application name for Loki labels.
        log_file: Path to the log file, or None for console only.
        level: Logging level (default: DEBUG).
        loki_url: Loki push endpoint, or None to disable remote logging.

    Returns:
        Configured logger instance.
    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)

    # Avoid duplicate handlers on repeated calls
    if logger_instance.handlers:
        return logger_instance

    console_formatter = colorlog.ColoredFormatter(
        f"%(name)s | %(log_color)s%(asctime)s | %(levelname)s | "
        f"%(funcName)s:%(lineno)d | %(message)s",
        datefmt=DEFAULT_DATE_FORMAT,
        log_colors=LOG_COLORS,
    )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger_instance.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        )
        logger_instance.addHandler(file_handler)

    if loki_url:
        loki_handler = LokiQueueHandler(loki_url, app)
        loki_handler.setLevel(level)
        loki_handler.loki_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                datefmt=DEFAULT_DATE_FORMAT,
            )
        )
        logger_instance.addHandler(loki_handler)

    return logger_instance


# =============================================================================
# Default Logger Instance
# =============================================================================

logger = get_logger(
    name="SMART_CONNECT",
    app="smartconnect",
    log_file=LOG_FILE,
    level=getattr(logging, LOG_LEVEL, logging.DEBUG),
    loki_url=LOKI_URL,
)
