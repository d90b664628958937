"""
===========================
APP: MySQL Exporter
===========================

What it does:
- Receives batches of collected metric tables from the host collection process.
- Persists them into a MySQL / MariaDB database from a single background worker.
- Never blocks the producer on database latency.
- Offers a connectivity check for validating the configured database.

Run `python main.py --test-connection` to check the settings in `.config.yml`.
"""
import sys

from mysql_exporter import start_app


if __name__ == "__main__":
    sys.exit(start_app())
