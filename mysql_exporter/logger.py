"""
==========================
Logger Module
==========================

This module provides a logging setup for the exporter using Python's built-in logging library.
It supports both file and console logging, with rotating log files and a queue for thread-safe logging.
The producer thread and the export worker both log through the same queue, so neither blocks on file I/O.

Features:
- Uses `QueueHandler` to send log records to a queue.
- Uses `QueueListener` to listen for log records and write them to file and console.
- Configurable log folder and level.
- Formats log messages with timestamp, level, thread name, and message.

Usage:
>>> from mysql_exporter.logger import logger, configure_logger, shutdown_logger
>>> configure_logger()
>>> logger.info("This is an info message.")
>>> shutdown_logger()  # Important to stop the listener when done.

*Created: 2026-10-19*
"""

import logging
import logging.handlers
import os
import queue as std_queue
from typing import Optional

from mysql_exporter.helpers import config as default_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s"

# Public logger object other modules import
logger = logging.getLogger("mysqlExporter")
logger.setLevel(logging.INFO)

# If nothing configures logging, fall back to console so imports can safely log.
if not logger.handlers:
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

# Internal state
_configured = False
_queue: Optional[std_queue.Queue] = None
_listener: Optional[logging.handlers.QueueListener] = None


def configure_logger(log_folder=None, level: int = logging.INFO):
    """
    Configure the logger with file and console handlers.
    This sets up a rotating file handler and a console handler behind a QueueHandler/QueueListener pair,
    so records emitted from the export worker thread are written without blocking it.

    Args:
        log_folder (str | Path, optional): Folder for `exporter.log`. Defaults to the configured log folder.
        level (int, optional): Logging level. Defaults to `logging.INFO`.
    """
    global _configured, _queue, _listener

    if _configured:
        return

    log_folder = log_folder or default_config.LOG_FOLDER
    max_bytes = 5 * 1024 * 1024
    backup_count = 5

    os.makedirs(log_folder, exist_ok=True)
    log_file = os.path.join(log_folder, "exporter.log")

    logger.setLevel(level)

    # Remove the lightweight handler added on import so it doesn't duplicate output
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT)

    # Create queue and a QueueHandler on the public logger
    _queue = std_queue.Queue(-1)
    queue_handler = logging.handlers.QueueHandler(_queue)
    logger.addHandler(queue_handler)

    # Create real handlers that the listener will own
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setFormatter(fmt)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(fmt)

    _listener = logging.handlers.QueueListener(
        _queue, file_handler, console_handler)
    _listener.start()

    _configured = True


def shutdown_logger():
    """
    Shutdown the logger by stopping the listener and closing all handlers.
    This function ensures that all log messages are flushed and handlers are closed properly.
    A handler that fails to flush or close does not stop the others from being closed.
    """
    global _configured, _listener

    if _listener:
        try:
            _listener.stop()
        except Exception:
            pass
        for h in _listener.handlers:
            _close_handler(h)
        _listener = None

    for h in list(logger.handlers):
        _close_handler(h)
        logger.removeHandler(h)

    _configured = False


def _close_handler(handler: logging.Handler):
    try:
        handler.flush()
        handler.close()
    except Exception:
        pass
