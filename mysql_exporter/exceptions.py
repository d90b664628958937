"""
==========================
Exporter Exceptions
==========================

This module provides the exceptions raised by the exporter.
Lower-level driver errors are always chained (`raise ... from e`) so the original cause stays visible in the logs.

Usage:
>>> from mysql_exporter.exceptions import WriteError
>>> raise WriteError("INSERT into power_values failed")

*Created: 2026-10-19*
"""


class ExportError(Exception):
    """Base class for every error raised by the exporter."""
    pass


class ConfigurationError(ExportError):
    """Invalid or unreadable exporter configuration."""
    pass


class ConnectivityError(ExportError):
    """The sink could not be reached (network, authentication or timeout)."""
    pass


class QueryError(ExportError):
    """A read-only query against the sink failed while executing."""
    pass


class WriteError(ExportError):
    """A batch write of one table failed."""

    def __init__(self, message: str, table_name: str = None):
        super().__init__(message)
        self.table_name = table_name
