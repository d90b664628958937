"""
==========================
Database - MySQL Connection
==========================

This module provides the connection to the MySQL (or MariaDB) sink.
Every operation opens its own connection and closes it again on every exit path; nothing is pooled or kept warm between jobs.

Features:
- `MySQLConnection.open`: connect with a short, fixed connect timeout.
- `MySQLConnection.get_version`: query the server family and version (used by the connectivity test only).
- `MySQLConnection.write_table`: insert all rows of one table as a single batch.
- `MySQLConnectionFactory`: builds a `MySQLConnection` from a `SinkConnectionConfig`.

Usage:
>>> from mysql_exporter.db.connection import MySQLConnection
>>> connection = MySQLConnection(SinkConnectionConfig(host="db.local", user="solar", password="secret"))
>>> connection.get_version()
'MySQL Community Server - GPL 8.0.36'
>>> connection.write_table(table)  # one batched INSERT for every row of `table`

*Created: 2026-10-19*
"""

import contextlib

import mysql.connector

from mysql_exporter.db.sql.statements import (
    SQL_SELECT_VERSION,
    build_insert_statement,
    rows_per_statement,
    validate_identifier,
)
from mysql_exporter.exceptions import ConnectivityError, QueryError, WriteError
from mysql_exporter.logger import logger
from mysql_exporter.models import SinkConnectionConfig, TableSnapshot

CONNECT_TIMEOUT_SECONDS = 5
UNKNOWN_VERSION = "unknown"


class MySQLConnection:
    """
    Connection parameters for one MySQL sink.
    The object holds no live connection; `open` creates a new one per call.
    """

    def __init__(self, config: SinkConnectionConfig, validate_identifiers: bool = True):
        """
        Args:
            config (SinkConnectionConfig): Host, port, credentials and database name.
            validate_identifiers (bool, optional): Reject table/column names outside the identifier allow-list
                before connecting. Defaults to True.
        """
        self.config = config
        self.validate_identifiers = validate_identifiers

    def open(self):
        """
        Open a new connection to the sink.

        Raises:
            ConnectivityError: If the server is unreachable, refuses the credentials or the connect times out.

        Returns:
            The live driver connection. The caller owns it and must close it.
        """
        cfg = self.config
        logger.debug("Connecting to mysql://%s:%s/%s", cfg.host, cfg.port, cfg.database)
        try:
            return mysql.connector.connect(
                host=cfg.host,
                port=cfg.port,
                user=cfg.user,
                password=cfg.password,
                database=cfg.database,
                connection_timeout=CONNECT_TIMEOUT_SECONDS,
            )
        except mysql.connector.Error as e:
            raise ConnectivityError(
                f"Cannot connect to {cfg.host}:{cfg.port}/{cfg.database}: {e}") from e

    @contextlib.contextmanager
    def connection(self):
        """Open a connection and close it when the block exits, whatever the outcome."""
        conn = self.open()
        try:
            yield conn
        finally:
            _close(conn)

    def get_version(self) -> str:
        """
        Query the server family and version.

        Raises:
            ConnectivityError: If no connection can be established.
            QueryError: If the version query fails.

        Returns:
            str: e.g. `"MySQL Community Server - GPL 8.0.36"`, or `"unknown"` when the query returns no row.
        """
        with self.connection() as conn:
            cursor = None
            try:
                cursor = conn.cursor()
                cursor.execute(SQL_SELECT_VERSION)
                row = cursor.fetchone()
            except mysql.connector.Error as e:
                raise QueryError(f"Version query failed: {e}") from e
            finally:
                _close(cursor)

        if not row:
            return UNKNOWN_VERSION
        version, comment = row[0], row[1]
        return f"{comment} {version}"

    def write_table(self, table: TableSnapshot) -> None:
        """
        Insert every row of `table` in one batch.
        The rows go to the server as one multi-row INSERT on a prepared cursor, values bound positionally in column order.
        Only a table with more bound values than a prepared statement accepts is split into several statements,
        all inside the same transaction.
        The batch either succeeds as a whole or the call fails; failing rows are not identified.

        Args:
            table (TableSnapshot): Table with at least one column and one row.

        Raises:
            WriteError: On any connect, authentication or execution failure.
        """
        if self.validate_identifiers:
            try:
                validate_identifier(table.table_name, allow_qualified=True)
                for name in table.column_names:
                    validate_identifier(name)
            except ValueError as e:
                raise WriteError(str(e), table.table_name) from e

        column_names = table.column_names
        rows = [tuple(row.values) for row in table.rows]
        chunk_size = rows_per_statement(len(column_names))
        logger.debug("sql: %s", build_insert_statement(table.table_name, column_names))

        try:
            with self.connection() as conn:
                cursor = None
                try:
                    cursor = conn.cursor(prepared=True)
                    for start in range(0, len(rows), chunk_size):
                        chunk = rows[start:start + chunk_size]
                        sql = build_insert_statement(table.table_name, column_names, len(chunk))
                        cursor.execute(sql, tuple(value for values in chunk for value in values))
                    conn.commit()
                except mysql.connector.Error as e:
                    _rollback(conn)
                    raise WriteError(
                        f"Writing table '{table.table_name}' failed: {e}", table.table_name) from e
                finally:
                    _close(cursor)
        except ConnectivityError as e:
            raise WriteError(str(e), table.table_name) from e


def _rollback(conn):
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("Rollback failed, connection already lost")


def _close(resource):
    if resource is None:
        return
    try:
        resource.close()
    except mysql.connector.Error:
        logger.warning("Closing %s failed, connection already lost", type(resource).__name__)


class MySQLConnectionFactory:
    """Creates `MySQLConnection` objects; the exporter calls it again on every configuration change."""

    def create_connection(self, config: SinkConnectionConfig) -> MySQLConnection:
        return MySQLConnection(config)
