"""
==========================
MySQL Exporter Package
==========================

This package persists batches of collected tables into a MySQL database in the background.
The producer enqueues export jobs without blocking; a single worker thread writes them to the database.

Usage:
>>> from mysql_exporter import MySQLExporter, ExportJob, TableSnapshot
>>> exporter = MySQLExporter()
>>> exporter.initialize()
>>> exporter.add_export(ExportJob.now([TableSnapshot.from_values("power_values", ["ts", "watts"], [[1700000000, 1234]])]))
>>> exporter.shutdown()

>>> from mysql_exporter import start_app
>>> start_app()
"""
from mysql_exporter.app import start_app
from mysql_exporter.exporter import MySQLExporter
from mysql_exporter.models import ColumnSpec, ExporterData, ExportJob, RowSnapshot, SinkConnectionConfig, TableSnapshot
