"""
==========================
Export Writer Worker Module
==========================

This module provides the background worker that persists export jobs into the MySQL sink.
It uses a queue to decouple the producer from database latency: the producer only enqueues,
the worker performs the network I/O and SQL execution.


Features:
- Implements an `ExportWorker` class that extends `threading.Thread`.
- Blocks on the queue until a job arrives or a stop request wakes it.
- Writes each table of a job as one batched INSERT.
- Provides a synchronous `stop` that joins the thread.


Usage:
>>> from mysql_exporter.workers.export_writer import ExportWorker
>>> worker = ExportWorker("mysqlexporterThread", export_queue, lambda: connection)
>>> worker.start()  # Start the background writer thread
>>> export_queue.put(job)  # Enqueue an export job


*Created: 2026-10-19*
"""
from mysql_exporter.workers.export_writer.worker import ExportWorker
