"""MySQL / MariaDB catalog adapter."""

from __future__ import annotations

from typing import Any, Final

from ..shared.settings import Settings
from .base import CatalogSession, Column, Table, contains

DEFAULT_PORT: Final[int] = 3306
DEFAULT_USER: Final[str] = "root"

STRING_TYPES: Final[frozenset[str]] = frozenset({
    "char",
    "varchar",
    "binary",
    "varbinary",
})
TEXT_TYPES: Final[frozenset[str]] = frozenset({
    "text",
    "tinytext",
    "mediumtext",
    "longtext",
    "blob",
    "tinyblob",
    "mediumblob",
    "longblob",
})
INTEGER_TYPES: Final[frozenset[str]] = frozenset({
    "tinyint",
    "smallint",
    "mediumint",
    "int",
    "bigint",
})
FLOAT_TYPES: Final[frozenset[str]] = frozenset({
    "numeric",
    "decimal",
    "float",
    "real",
    "double precision",
    "double",
})
TEMPORAL_TYPES: Final[frozenset[str]] = frozenset({
    "time",
    "timestamp",
    "date",
    "datetime",
    "year",
})
BOOLEAN_TYPES: Final[frozenset[str]] = frozenset({"bool", "boolean"})

TABLES_QUERY: Final[str] = """
    SELECT table_name AS table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
      AND table_schema = %s
    ORDER BY table_name
"""

VIEWS_QUERY: Final[str] = """
    SELECT table_name AS table_name
    FROM information_schema.views
    WHERE table_schema = %s
    ORDER BY table_name
"""

COLUMNS_QUERY: Final[str] = """
    SELECT
      ordinal_position AS ordinal_position,
      column_name AS column_name,
      data_type AS data_type,
      column_default AS column_default,
      is_nullable AS is_nullable,
      character_maximum_length AS character_maximum_length,
      numeric_precision AS numeric_precision,
      datetime_precision AS datetime_precision,
      column_key AS column_key,
      extra AS extra
    FROM information_schema.columns
    WHERE table_name = %s
      AND table_schema = %s
    ORDER BY ordinal_position
"""


class MySQL:
    """Catalog adapter for MySQL and MariaDB via mysql-connector-python.

    MySQL has no schemas below the database, so the database name is the
    schema filter.
    """

    name = "mysql"

    def __init__(self, settings: Settings, connection: Any | None = None) -> None:
        self.settings = settings
        self.schema = settings.db_name
        self._session = CatalogSession(
            self.name, self.schema, connection, verbose=settings.verbose
        )

    def connect_kwargs(self) -> dict[str, Any]:
        return {
            "host": self.settings.host,
            "port": self.settings.port or DEFAULT_PORT,
            "user": self.settings.user or DEFAULT_USER,
            "password": self.settings.password,
            "database": self.settings.db_name,
        }

    def _open_connection(self) -> Any:
        import mysql.connector

        return mysql.connector.connect(**self.connect_kwargs())

    def connect(self) -> None:
        self._session.open(self._open_connection)

    def close(self) -> None:
        self._session.close()

    def list_tables(self) -> list[Table]:
        rows = self._session.select(TABLES_QUERY, (self.schema,))
        return [Table(name=row["table_name"]) for row in rows]

    def list_views(self) -> list[Table]:
        rows = self._session.select(VIEWS_QUERY, (self.schema,))
        return [Table(name=row["table_name"], is_view=True) for row in rows]

    def list_columns(self, table: Table) -> None:
        rows = self._session.select(
            COLUMNS_QUERY, (table.name, self.schema), table=table.name
        )
        table.columns = [Column.from_row(row) for row in rows]

    def is_string(self, column: Column) -> bool:
        return column.data_type in STRING_TYPES

    def is_text(self, column: Column) -> bool:
        return column.data_type in TEXT_TYPES

    def is_integer(self, column: Column) -> bool:
        return column.data_type in INTEGER_TYPES

    def is_float(self, column: Column) -> bool:
        return column.data_type in FLOAT_TYPES

    def is_temporal(self, column: Column) -> bool:
        return column.data_type in TEMPORAL_TYPES

    def is_boolean(self, column: Column) -> bool:
        return column.data_type in BOOLEAN_TYPES

    def is_primary_key(self, column: Column) -> bool:
        return contains(column.column_key, "PRI")

    def is_auto_increment(self, column: Column) -> bool:
        return contains(column.extra, "auto_increment")
