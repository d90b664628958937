"""
==========================
Database - SQL Statements Package
==========================

Usage:
>>> from mysql_exporter.db.sql import build_insert_statement, SQL_SELECT_VERSION

*Created: 2026-10-19*
"""
from mysql_exporter.db.sql.statements import *
