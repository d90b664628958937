"""
==========================
Export Data Models
==========================

This module provides the value objects passed between the producer and the export worker.

Features:
- `ColumnSpec`, `RowSnapshot` and `TableSnapshot` describe one table of computed values.
- `ExportJob` bundles the tables of one export cycle with its timestamp.
- `SinkConnectionConfig` is the resolved connection setting for the MySQL sink.
- `ExporterData` holds the exporter name, its current setting and the last accepted job timestamp.

Every row of a `TableSnapshot` must carry exactly one value per column, in column order.
The producer owns that contract; it is not re-checked here.

Usage:
>>> from mysql_exporter.models import ColumnSpec, RowSnapshot, TableSnapshot, ExportJob
>>> table = TableSnapshot("power_values", (ColumnSpec("ts"), ColumnSpec("watts")), (RowSnapshot((1700000000, 1234)),))
>>> job = ExportJob.now([table])

*Created: 2026-10-19*
"""

import datetime
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional, Tuple

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
DEFAULT_DATABASE = "solarreader"


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type: str = ""


@dataclass(frozen=True)
class RowSnapshot:
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class TableSnapshot:
    """
    A named relation of already-computed values.

    Args:
        table_name (str): Target table in the sink. Must be a trusted identifier.
        columns (tuple[ColumnSpec]): Ordered column list.
        rows (tuple[RowSnapshot]): Ordered rows, each aligned with `columns`.
    """
    table_name: str
    columns: Tuple[ColumnSpec, ...] = ()
    rows: Tuple[RowSnapshot, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def is_empty(self) -> bool:
        return not self.rows or not self.columns

    @classmethod
    def from_values(cls, table_name: str, column_names: Iterable[str], rows: Iterable[Iterable[Any]]) -> "TableSnapshot":
        """
        Build a snapshot from plain column names and row value lists.

        Args:
            table_name (str): Target table name.
            column_names (Iterable[str]): Ordered column names.
            rows (Iterable[Iterable[Any]]): Row values in column order.

        Returns:
            TableSnapshot: The immutable snapshot.
        """
        return cls(
            table_name=table_name,
            columns=tuple(ColumnSpec(name) for name in column_names),
            rows=tuple(RowSnapshot(tuple(values)) for values in rows),
        )


@dataclass(frozen=True)
class ExportJob:
    """One export cycle: a timestamp plus the tables to persist, in order."""
    timestamp: datetime.datetime
    tables: Tuple[TableSnapshot, ...] = ()

    @classmethod
    def now(cls, tables: Iterable[TableSnapshot]) -> "ExportJob":
        return cls(timestamp=datetime.datetime.now(datetime.timezone.utc), tables=tuple(tables))


@dataclass(frozen=True)
class SinkConnectionConfig:
    """
    Resolved connection setting for the MySQL sink.
    A new connection object is built from it whenever the setting changes.
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    database: str = DEFAULT_DATABASE

    def with_changes(self, **changes) -> "SinkConnectionConfig":
        return replace(self, **changes)


@dataclass
class ExporterData:
    """Mutable bookkeeping of one exporter instance."""
    name: str
    setting: SinkConnectionConfig = field(default_factory=SinkConnectionConfig)
    last_call: Optional[datetime.datetime] = None
