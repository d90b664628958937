"""
==========================
Worker Management Module
==========================

This module provides the worker threads of the exporter.

Features:
- Implements an `ExportWorker` class that extends `threading.Thread`.
- Drains export jobs one by one and writes each table to the MySQL sink.
- Provides a synchronous `stop` for graceful shutdown.

Usage:
>>> worker = ExportWorker("mysqlexporterThread", export_queue, lambda: connection)
>>> worker.start()
>>> worker.stop()

*Created: 2026-10-19*
"""

from mysql_exporter.workers.export_writer import ExportWorker
