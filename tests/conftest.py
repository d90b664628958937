import threading

import mysql.connector
import pytest

from mysql_exporter.exceptions import WriteError
from mysql_exporter.models import ExportJob, SinkConnectionConfig, TableSnapshot


class FakeConnection:
    """Records every `write_table` call; fails for the table names in `fail_tables`."""

    def __init__(self, config=None, fail_tables=(), version="MySQL Community Server - GPL 8.0.36"):
        self.config = config
        self.fail_tables = set(fail_tables)
        self.version = version
        self.written = []
        self.attempted = []
        self.written_event = threading.Event()
        self.lock = threading.Lock()

    def write_table(self, table):
        with self.lock:
            self.attempted.append(table.table_name)
        if table.table_name in self.fail_tables:
            raise WriteError(f"boom on {table.table_name}", table.table_name)
        with self.lock:
            self.written.append(table)
        self.written_event.set()

    def get_version(self):
        return self.version


class GatedConnection(FakeConnection):
    """Blocks inside `write_table` until `release` is set."""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def write_table(self, table):
        self.started.set()
        assert self.release.wait(5)
        super().write_table(table)


class FakeConnectionFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.created = []

    def create_connection(self, config):
        connection = FakeConnection(config, **self.kwargs)
        self.created.append(connection)
        return connection


@pytest.fixture
def power_table():
    return TableSnapshot.from_values(
        "power_values", ["ts", "watts"], [[1700000000, 1234], [1700000060, 1500]])


@pytest.fixture
def sink_config():
    return SinkConnectionConfig(host="db.local", port=3306, user="solar", password="secret", database="solarreader")


@pytest.fixture
def make_job():
    def _make(*tables):
        return ExportJob.now(tables)
    return _make


class FakeCursor:
    """Driver cursor double: every `execute` is one round trip to the server."""

    def __init__(self, conn, prepared=False):
        self.conn = conn
        self.prepared = prepared
        self.closed = False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params, self.prepared))
        if self.conn.fail_execute:
            raise mysql.connector.errors.IntegrityError("duplicate entry")

    def fetchone(self):
        return self.conn.row

    def close(self):
        self.closed = True


class FakeDriverConnection:
    def __init__(self, row=None, fail_execute=False, fail_cursor=False):
        self.row = row
        self.fail_execute = fail_execute
        self.fail_cursor = fail_cursor
        self.executed = []
        self.cursors = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, prepared=False):
        if self.fail_cursor:
            raise mysql.connector.errors.OperationalError("MySQL Connection not available.")
        cursor = FakeCursor(self, prepared=prepared)
        self.cursors.append(cursor)
        return cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


@pytest.fixture
def driver(monkeypatch):
    """
    Patch `mysql.connector.connect`.
    `fail_cursor` holds the 0-based numbers of the connections whose `cursor()` raises.
    """
    state = {"opened": [], "kwargs": [], "row": ("8.0.36", "MySQL Community Server - GPL"),
             "fail_execute": False, "fail_connect": False, "fail_cursor": set()}

    def fake_connect(**kwargs):
        state["kwargs"].append(kwargs)
        if state["fail_connect"]:
            raise mysql.connector.errors.InterfaceError("Can't connect to MySQL server (timed out)")
        conn = FakeDriverConnection(row=state["row"], fail_execute=state["fail_execute"],
                                    fail_cursor=len(state["opened"]) in state["fail_cursor"])
        state["opened"].append(conn)
        return conn

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)
    return state
