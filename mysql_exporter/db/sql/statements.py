"""
==========================
Database - SQL Statements
==========================

This module provides the two statement shapes the exporter sends to the MySQL sink:
the read-only version query and the parameterized INSERT built from a table's schema.

Table and column names are interpolated as-is, without quoting.
Callers must pass schema-safe identifiers; `validate_identifier` is the allow-list check applied at the write boundary.

Usage:
>>> from mysql_exporter.db.sql.statements import build_insert_statement, SQL_SELECT_VERSION
>>> build_insert_statement("power_values", ["ts", "watts"])
'INSERT INTO power_values (ts, watts) VALUES (?, ?);'

*Created: 2026-10-19*
"""

import re
from typing import Iterable

# Version query: server version and server family (e.g. "MySQL Community Server - GPL")
SQL_SELECT_VERSION = "SELECT VERSION(), @@version_comment"

SQL_INSERT_TEMPLATE = "INSERT INTO {table} ({columns}) VALUES {rows};"

PLACEHOLDER = "?"

# Server-side prepared statements accept at most 65535 bound parameters
MAX_PREPARED_PLACEHOLDERS = 65535

# MySQL identifiers are limited to 64 characters
MAX_IDENTIFIER_LENGTH = 64
# Unquoted MySQL identifiers: ASCII letters, digits, $, _ and U+0080..U+FFFF, not all digits
_IDENTIFIER_RE = re.compile(r"[0-9A-Za-z$_\u0080-\uffff]+")
_ALL_DIGITS_RE = re.compile(r"[0-9]+")


def build_insert_statement(table_name: str, column_names: Iterable[str], row_count: int = 1) -> str:
    """
    Build a parameterized INSERT for one table.
    Each row group has one positional placeholder per column, in column order.
    With `row_count > 1` the groups are repeated so a whole batch goes to the server as one multi-row INSERT.

    Args:
        table_name (str): Target table.
        column_names (Iterable[str]): Ordered column names.
        row_count (int, optional): Number of row groups in the VALUES clause. Defaults to 1.

    Returns:
        str: e.g. `INSERT INTO power_values (ts, watts) VALUES (?, ?);`
    """
    if row_count < 1:
        raise ValueError(f"row_count must be at least 1, got {row_count}")
    columns = list(column_names)
    row_group = "(" + ", ".join(PLACEHOLDER for _ in columns) + ")"
    return SQL_INSERT_TEMPLATE.format(
        table=table_name,
        columns=", ".join(columns),
        rows=", ".join(row_group for _ in range(row_count)),
    )


def rows_per_statement(column_count: int) -> int:
    """Largest number of rows whose placeholders fit into one prepared statement."""
    return max(1, MAX_PREPARED_PLACEHOLDERS // max(1, column_count))


def is_safe_identifier(name: str, allow_qualified: bool = False) -> bool:
    if not isinstance(name, str):
        return False
    parts = name.split(".") if allow_qualified else [name]
    if len(parts) > 2:
        return False
    return all(
        0 < len(part) <= MAX_IDENTIFIER_LENGTH
        and _IDENTIFIER_RE.fullmatch(part)
        and not _ALL_DIGITS_RE.fullmatch(part)
        for part in parts
    )


def validate_identifier(name: str, allow_qualified: bool = False) -> str:
    """
    Check a table or column name against the identifier allow-list.

    Args:
        name (str): Identifier to check.
        allow_qualified (bool, optional): Accept a `schema.table` form. Defaults to False.

    Raises:
        ValueError: If the name is not a plain identifier.

    Returns:
        str: The unchanged name.
    """
    if not is_safe_identifier(name, allow_qualified=allow_qualified):
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return name
