import datetime
import threading
import time

import pytest

from mysql_exporter.exceptions import ConnectivityError, QueryError
from mysql_exporter.exporter import EXPORTER_NAME, MySQLExporter
from mysql_exporter.models import ExporterData, ExportJob, SinkConnectionConfig, TableSnapshot

from conftest import FakeConnectionFactory, GatedConnection


@pytest.fixture
def factory():
    return FakeConnectionFactory()


@pytest.fixture
def exporter(factory):
    exporter = MySQLExporter(connection_factory=factory)
    yield exporter
    exporter.shutdown()


def test_default_setting():
    setting = MySQLExporter.get_default_setting()
    assert setting == SinkConnectionConfig("localhost", 3306, "root", "root", "solarreader")


def test_constructor_builds_connection_from_setting(factory, sink_config):
    exporter = MySQLExporter(ExporterData("solar", sink_config), connection_factory=factory)
    assert exporter.connection.config is sink_config
    assert exporter.exporter_data.name == "solar"


def test_default_exporter_name(exporter):
    assert exporter.exporter_data.name == EXPORTER_NAME


def test_add_export_with_empty_tables_is_dropped(exporter):
    job = ExportJob(timestamp=datetime.datetime(2026, 1, 1, tzinfo=datetime.timezone.utc), tables=())

    exporter.add_export(job)

    assert exporter.queue_depth() == 0
    assert exporter.exporter_data.last_call is None


def test_add_export_enqueues_and_updates_last_call(exporter, power_table):
    job = ExportJob(timestamp=datetime.datetime(2026, 1, 1, tzinfo=datetime.timezone.utc), tables=(power_table,))

    exporter.add_export(job)

    assert exporter.queue_depth() == 1
    assert exporter.exporter_data.last_call == job.timestamp


def test_add_export_never_blocks(exporter, power_table, make_job):
    job = make_job(power_table)
    start = time.monotonic()
    for _ in range(100_000):
        exporter.add_export(job)
    elapsed = time.monotonic() - start

    assert exporter.queue_depth() == 100_000
    assert elapsed < 10.0


def test_exported_job_reaches_connection(exporter, factory, power_table, make_job):
    exporter.initialize()
    exporter.add_export(make_job(power_table))
    exporter.queue.join()

    connection = factory.created[-1]
    assert [t.table_name for t in connection.written] == ["power_values"]


def test_empty_table_in_job_is_not_written(exporter, factory, power_table, make_job):
    exporter.initialize()
    empty = TableSnapshot.from_values("empty_values", ["ts"], [])

    exporter.add_export(make_job(empty, power_table))
    exporter.queue.join()

    assert factory.created[-1].attempted == ["power_values"]


def test_shutdown_terminates_worker(exporter, power_table, make_job):
    exporter.initialize()
    worker = exporter.worker
    assert exporter.is_running()

    exporter.shutdown()

    assert not worker.is_alive()
    assert not exporter.is_running()


def test_jobs_added_after_shutdown_are_not_dequeued(exporter, factory, power_table, make_job):
    exporter.initialize()
    exporter.shutdown()

    exporter.add_export(make_job(power_table))
    time.sleep(0.1)

    assert exporter.queue_depth() == 1
    assert factory.created[-1].attempted == []


def test_shutdown_without_initialize_is_noop(exporter):
    exporter.shutdown()
    assert not exporter.is_running()


def test_update_configuration_applies_to_next_job(exporter, factory, sink_config, power_table, make_job):
    exporter.initialize()
    exporter.add_export(make_job(power_table))
    exporter.queue.join()

    exporter.update_configuration(sink_config)
    exporter.add_export(make_job(power_table))
    exporter.queue.join()

    first, second = factory.created[-2], factory.created[-1]
    assert second.config is sink_config
    assert exporter.exporter_data.setting is sink_config
    assert first.attempted == ["power_values"]
    assert second.attempted == ["power_values"]


def test_test_connection_returns_version_message(exporter, factory, sink_config):
    message = exporter.test_connection(sink_config)

    assert message == "connection successful to MySQL Community Server - GPL 8.0.36"
    assert factory.created[-1].config is sink_config
    assert exporter.queue_depth() == 0


def test_test_connection_does_not_replace_worker_connection(exporter, sink_config):
    current = exporter.connection
    exporter.test_connection(sink_config)
    assert exporter.connection is current


class _FailingConnection:
    def __init__(self, error):
        self.error = error

    def get_version(self):
        raise self.error


class _FailingFactory:
    def __init__(self, error):
        self.error = error

    def create_connection(self, config):
        return _FailingConnection(self.error)


def test_test_connection_unreachable_host(sink_config):
    exporter = MySQLExporter(connection_factory=_FailingFactory(ConnectivityError("timed out")))
    with pytest.raises(ConnectivityError, match="timed out"):
        exporter.test_connection(sink_config)


def test_test_connection_wraps_query_error(sink_config):
    exporter = MySQLExporter(connection_factory=_FailingFactory(QueryError("no privileges")))
    with pytest.raises(ConnectivityError) as exc:
        exporter.test_connection(sink_config)
    assert isinstance(exc.value.__cause__, QueryError)


def test_shutdown_during_write_keeps_queue_depth_exact(power_table, make_job):
    connection = GatedConnection()

    class GatedFactory:
        def create_connection(self, config):
            return connection

    exporter = MySQLExporter(connection_factory=GatedFactory())
    exporter.initialize()
    exporter.add_export(make_job(power_table))
    assert connection.started.wait(5)
    exporter.add_export(make_job(power_table))
    threading.Timer(0.3, connection.release.set).start()

    exporter.shutdown()

    assert exporter.queue_depth() == 1
    assert connection.attempted == ["power_values"]
