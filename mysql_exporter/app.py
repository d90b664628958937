import argparse
import signal
import sys
import threading

from mysql_exporter.exceptions import ExportError
from mysql_exporter.exporter import MySQLExporter
from mysql_exporter.helpers import config as cfg
from mysql_exporter.helpers.general import ensure_dirs
from mysql_exporter.logger import configure_logger, logger, shutdown_logger
from mysql_exporter.models import ExporterData


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="mysql-exporter", description="Export collected tables to a MySQL database.")
    parser.add_argument("--config", default=cfg.CONFIG_FILE,
                        help="Path to the YAML configuration file (default: %(default)s)")
    parser.add_argument("--test-connection", action="store_true",
                        help="Check the configured database connection and exit")
    return parser.parse_args(argv)


def graceful_shutdown(exporter: MySQLExporter, stop_event: threading.Event):
    """
    Graceful shutdown sequence:
      1. stop+join the export worker (queued jobs are dropped)
      2. stop the logger listener
      3. release the main thread
    """
    logger.info("Beginning graceful shutdown...")
    try:
        exporter.shutdown()
    except Exception:
        logger.exception("Failed stopping export worker")
    finally:
        logger.info("Stopping Logger Queue...")
        shutdown_logger()
        stop_event.set()


def run_exporter(settings: dict) -> MySQLExporter:
    """
    Build the exporter from the loaded settings and start its worker.

    Args:
        settings (dict): Configuration as returned by `load_config`.

    Returns:
        MySQLExporter: The running exporter.
    """
    exporter_data = ExporterData(
        name=settings["exporter"]["name"], setting=cfg.sink_config_from(settings))
    exporter = MySQLExporter(exporter_data)
    exporter.initialize()
    logger.info("Exporter '%s' started for %s:%s/%s", exporter_data.name,
                exporter_data.setting.host, exporter_data.setting.port, exporter_data.setting.database)
    return exporter


def start_app(argv=None) -> int:
    """
    Entry point: test the connection, or run the exporter until SIGINT/SIGTERM.

    Returns:
        int: Process exit code.
    """
    args = parse_args(argv)

    try:
        settings = cfg.load_config(args.config)
        log_folder = settings["logging"]["folder"]
        ensure_dirs(log_folder)
        configure_logger(log_folder, cfg.log_level_from(settings))
    except ExportError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.test_connection:
        try:
            message = MySQLExporter().test_connection(cfg.sink_config_from(settings))
            print(message)
            return 0
        except ExportError as e:
            print(f"connection failed: {e}", file=sys.stderr)
            return 1
        finally:
            shutdown_logger()

    stop_event = threading.Event()
    try:
        exporter = run_exporter(settings)
    except ExportError as e:
        logger.error("Cannot start exporter: %s", e)
        shutdown_logger()
        return 2

    signal.signal(signal.SIGINT, lambda *a: graceful_shutdown(exporter, stop_event))
    signal.signal(signal.SIGTERM, lambda *a: graceful_shutdown(exporter, stop_event))

    try:
        while not stop_event.is_set():
            stop_event.wait(1.0)
    except KeyboardInterrupt:
        graceful_shutdown(exporter, stop_event)
    return 0
