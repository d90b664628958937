"""
==========================
Helpers - General Operations
==========================

This module provides general helper functions for the exporter, including directory management and time utilities.

Features:
- `now_ms`: Get the current time in milliseconds since the epoch.
- `ensure_dirs`: Ensure the log folder exists by creating it if it does not.


Usage:
>>> from mysql_exporter.helpers.general import now_ms, ensure_dirs
>>> current_time = now_ms()  # Get current time in milliseconds
>>> ensure_dirs()  # Ensure all necessary directories exist

*Created: 2026-10-19*
"""

import os
import time

import mysql_exporter.helpers.config as cfg


def now_ms() -> int:
    """
    Get the current time in milliseconds since the epoch.

    Returns:
        int: Current time in milliseconds.
    """
    return int(time.time() * 1000)


def ensure_dirs(log_folder=None) -> None:
    """
    Ensure the log folder exists by creating it if it does not.

    Args:
        log_folder (str | Path, optional): Folder to create. Defaults to the configured log folder.
    """
    os.makedirs(log_folder or cfg.LOG_FOLDER, exist_ok=True)
