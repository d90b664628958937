import threading
import queue
from typing import Callable, Optional

from mysql_exporter.exceptions import ExportError
from mysql_exporter.helpers.general import now_ms
from mysql_exporter.logger import logger
from mysql_exporter.models import ExportJob, TableSnapshot

# Put on the queue by `stop` to wake the blocking get
_WAKE_UP = object()


class ExportWorker(threading.Thread):
    """
    Background worker that drains export jobs one at a time and writes each table to the sink.
    This class extends `threading.Thread` and blocks on its queue until a job or a stop request arrives.
    Features:
    - Processes jobs in the order they were enqueued, and tables in the order of the job.
    - A failed table is logged and the next table is still attempted.
    - `stop` wakes the blocking wait, lets an in-flight write finish and joins the thread.
      Jobs still queued at that point are dropped.
    Usage:
    >>> worker = ExportWorker("mysqlexporterThread", export_queue, lambda: connection)
    >>> worker.start()
    >>> export_queue.put(job)
    >>> worker.stop()
    """

    def __init__(self, thread_name: str, export_queue: queue.Queue, connection_provider: Callable, exporter_name: str = "MySQLExporter"):
        """
        Args:
            thread_name (str): Name of the worker thread.
            export_queue (queue.Queue): Queue of `ExportJob` items shared with the producer.
            connection_provider (Callable): Returns the `MySQLConnection` to use. Called once per job,
                so a configuration change takes effect from the next job.
            exporter_name (str, optional): Name used in log messages. Defaults to "MySQLExporter".
        """
        super().__init__(name=thread_name, daemon=True)
        self.thread_name = thread_name
        self.q = export_queue
        self.connection_provider = connection_provider
        self.exporter_name = exporter_name
        self.stop_event = threading.Event()

    def run(self):
        """
        Main worker loop: wait for the next job and export it.
        Runs until `stop_event` is set. Remaining jobs are not drained.
        """
        logger.info("[%s] Export worker started", self.thread_name)
        while not self.stop_event.is_set():
            job = self.q.get()
            try:
                if self.stop_event.is_set():
                    if job is not _WAKE_UP:
                        logger.info("[%s] Stop requested, dropping export of %s",
                                    self.thread_name, job.timestamp)
                    break
                if job is _WAKE_UP:
                    logger.warning(
                        "[%s] Woken up without a stop request", self.thread_name)
                    continue
                self.process_job(job)
            except Exception:
                logger.exception("[%s] Export worker loop exception", self.thread_name)
            finally:
                self.q.task_done()
        logger.info("[%s] Export worker stopped", self.thread_name)

    def process_job(self, job: ExportJob):
        """
        Export every table of `job`, in order.
        Each table is exported independently; a failure is logged and the loop moves to the next table.

        Args:
            job (ExportJob): The job to export.
        """
        connection = self.connection_provider()
        if connection is None:
            logger.error(
                "[%s] No connection configured, dropping export of %s", self.thread_name, job.timestamp)
            return

        for table in job.tables:
            try:
                self.export_table(connection, table)
            except ExportError as e:
                logger.error("Export of table '%s' to '%s' failed: %s",
                             table.table_name, self.exporter_name, e)
            except Exception:
                logger.exception("Export of table '%s' to '%s' failed",
                                 table.table_name, self.exporter_name)

    def export_table(self, connection, table: TableSnapshot):
        """
        Write one table to the sink, skipping tables without rows or columns.

        Args:
            connection (MySQLConnection): Connection used for the write.
            table (TableSnapshot): The table to write.

        Raises:
            WriteError: If the batch write fails.
        """
        start = now_ms()
        if table.is_empty():
            logger.warning("empty table '%s', skip export", table.table_name)
            return
        connection.write_table(table)
        logger.debug("export table '%s' to '%s' finished in %d ms",
                     table.table_name, self.exporter_name, now_ms() - start)

    def stop(self, timeout: Optional[float] = None):
        """
        Stop the worker and wait for the thread to exit.
        An in-flight write is not cancelled; it completes or fails before the loop sees the stop request.

        Args:
            timeout (float, optional): Maximum time to wait for the thread. Defaults to waiting indefinitely.
        """
        self.stop_event.set()
        self.q.put(_WAKE_UP)
        if self.is_alive():
            self.join(timeout)
        if self.is_alive():
            logger.warning("[%s] still alive after join timeout", self.thread_name)
            return
        self._discard_wake_ups()

    def _discard_wake_ups(self):
        """Remove wake-up markers the stopped loop never consumed; queued jobs keep their order."""
        pending = []
        while True:
            try:
                item = self.q.get_nowait()
            except queue.Empty:
                break
            self.q.task_done()
            if item is not _WAKE_UP:
                pending.append(item)
        for item in pending:
            self.q.put(item)
