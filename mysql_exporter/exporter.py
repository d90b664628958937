"""
==========================
MySQL Exporter
==========================

This module provides the public face of the export pipeline.
The producer hands over export jobs without ever waiting on the database; a single background worker writes them to MySQL.

Features:
- `initialize` / `shutdown`: start and synchronously stop the export worker.
- `add_export`: non-blocking enqueue of an export job; jobs without tables are dropped.
- `test_connection`: synchronous connectivity check that bypasses the queue.
- `update_configuration`: rebuild the connection used for subsequent jobs.

Usage:
>>> from mysql_exporter.exporter import MySQLExporter
>>> exporter = MySQLExporter()
>>> exporter.update_configuration(SinkConnectionConfig(host="db.local", user="solar", password="secret"))
>>> exporter.initialize()
>>> exporter.add_export(ExportJob.now([table]))
>>> exporter.shutdown()

*Created: 2026-10-19*
"""

import queue
from typing import Optional

from mysql_exporter.db.connection import MySQLConnection, MySQLConnectionFactory
from mysql_exporter.exceptions import ConnectivityError, ExportError
from mysql_exporter.logger import logger
from mysql_exporter.models import ExporterData, ExportJob, SinkConnectionConfig
from mysql_exporter.workers.export_writer import ExportWorker

EXPORTER_NAME = "MySQLExporter"
EXPORTER_VERSION = "1.0.1"
SUPPORTS = "MySQL 5.x, 8.x"

WORKER_THREAD_NAME = "mysqlexporterThread"


class MySQLExporter:
    """
    Export queue and worker lifecycle for one MySQL sink.

    The queue is the only structure shared between the producer and the worker.
    `update_configuration` replaces the connection object instead of mutating it;
    the worker picks the connection up once per job, so a change applies from the next job
    and never touches a write already in progress.
    """

    def __init__(self, exporter_data: Optional[ExporterData] = None, connection_factory=None):
        """
        Args:
            exporter_data (ExporterData, optional): Name, setting and last-call bookkeeping.
                Defaults to a new `ExporterData` with the default setting.
            connection_factory (optional): Object with `create_connection(config)`. Defaults to `MySQLConnectionFactory`.
        """
        self.exporter_data = exporter_data or ExporterData(
            name=EXPORTER_NAME, setting=self.get_default_setting())
        self.connection_factory = connection_factory or MySQLConnectionFactory()
        self.queue: queue.Queue = queue.Queue()
        self.connection: Optional[MySQLConnection] = None
        self.worker: Optional[ExportWorker] = None
        self.update_configuration(self.exporter_data.setting)

    @staticmethod
    def get_default_setting() -> SinkConnectionConfig:
        return SinkConnectionConfig(
            host="localhost", port=3306, user="root", password="root", database="solarreader")

    def initialize(self):
        """Start the export worker. Must not be called twice without an intervening `shutdown`."""
        logger.debug("initialize mysql exporter")
        self.worker = ExportWorker(
            thread_name=WORKER_THREAD_NAME,
            export_queue=self.queue,
            connection_provider=lambda: self.connection,
            exporter_name=self.exporter_data.name,
        )
        self.worker.start()

    def shutdown(self):
        """
        Stop the export worker and wait until it has terminated.
        Jobs still in the queue are not exported.
        """
        if self.worker is None:
            return
        logger.info("Stopping export worker of '%s'...", self.exporter_data.name)
        self.worker.stop()
        self.worker = None

    def is_running(self) -> bool:
        return self.worker is not None and self.worker.is_alive()

    def queue_depth(self) -> int:
        return self.queue.qsize()

    def add_export(self, job: ExportJob):
        """
        Hand an export job to the worker. Never blocks.
        A job without tables is dropped and leaves `last_call` unchanged.

        Args:
            job (ExportJob): The tables of one export cycle.
        """
        if not job.tables:
            logger.debug("no exporting tables, skip export")
            return
        logger.debug("add export to '%s'", self.exporter_data.name)
        self.exporter_data.last_call = job.timestamp
        self.queue.put_nowait(job)

    def test_connection(self, config: SinkConnectionConfig) -> str:
        """
        Check that the sink described by `config` is reachable.
        Runs on the calling thread with a fresh connection object; the export queue is not involved.

        Args:
            config (SinkConnectionConfig): Setting to test.

        Raises:
            ConnectivityError: If the server cannot be reached or the version query fails.

        Returns:
            str: Success message including the server family and version.
        """
        try:
            version = self.connection_factory.create_connection(config).get_version()
        except ConnectivityError as e:
            logger.error("%s", e)
            raise
        except ExportError as e:
            logger.error("%s", e)
            raise ConnectivityError(str(e)) from e
        logger.info("connection successful to %s", version)
        return f"connection successful to {version}"

    def update_configuration(self, config: SinkConnectionConfig):
        """
        Use `config` for every job the worker starts from now on.

        Args:
            config (SinkConnectionConfig): The new connection setting.
        """
        self.exporter_data.setting = config
        self.connection = self.connection_factory.create_connection(config)
        logger.debug("configuration of '%s' updated to %s:%s/%s",
                     self.exporter_data.name, config.host, config.port, config.database)
