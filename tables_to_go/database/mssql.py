"""SQL Server catalog adapter."""

from __future__ import annotations

from typing import Any, Final

from ..shared.settings import Settings
from .base import CatalogSession, Column, Table, collapse_constraint_rows, contains

DEFAULT_PORT: Final[int] = 1433
DEFAULT_USER: Final[str] = "sa"
DEFAULT_SCHEMA: Final[str] = "dbo"

STRING_TYPES: Final[frozenset[str]] = frozenset({
    "char",
    "varchar",
    "nchar",
    "nvarchar",
    "binary",
    "varbinary",
})
TEXT_TYPES: Final[frozenset[str]] = frozenset({"text", "ntext"})
INTEGER_TYPES: Final[frozenset[str]] = frozenset({
    "tinyint",
    "smallint",
    "int",
    "bigint",
})
FLOAT_TYPES: Final[frozenset[str]] = frozenset({
    "numeric",
    "decimal",
    "float",
    "real",
    "money",
    "smallmoney",
})
TEMPORAL_TYPES: Final[frozenset[str]] = frozenset({
    "time",
    "date",
    "datetime",
    "datetime2",
    "datetimeoffset",
    "smalldatetime",
})
BOOLEAN_TYPES: Final[frozenset[str]] = frozenset({"bit"})

TABLES_QUERY: Final[str] = """
    SELECT table_name AS table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
      AND table_schema = %(schema)s
    ORDER BY table_name
"""

VIEWS_QUERY: Final[str] = """
    SELECT table_name AS table_name
    FROM information_schema.views
    WHERE table_schema = %(schema)s
    ORDER BY table_name
"""

# Identity columns are reported through ``extra`` in the same vocabulary MySQL uses
COLUMNS_QUERY: Final[str] = """
    SELECT
      ic.ordinal_position AS ordinal_position,
      ic.column_name AS column_name,
      ic.data_type AS data_type,
      ic.column_default AS column_default,
      ic.is_nullable AS is_nullable,
      ic.character_maximum_length AS character_maximum_length,
      ic.numeric_precision AS numeric_precision,
      ic.datetime_precision AS datetime_precision,
      CASE
        WHEN COLUMNPROPERTY(
          OBJECT_ID(QUOTENAME(ic.table_schema) + '.' + QUOTENAME(ic.table_name)),
          ic.column_name,
          'IsIdentity'
        ) = 1 THEN 'auto_increment'
        ELSE ''
      END AS extra,
      itc.constraint_name AS constraint_name,
      itc.constraint_type AS constraint_type
    FROM information_schema.columns AS ic
      LEFT JOIN information_schema.key_column_usage AS kcu
        ON ic.table_name = kcu.table_name
       AND ic.table_schema = kcu.table_schema
       AND ic.column_name = kcu.column_name
      LEFT JOIN information_schema.table_constraints AS itc
        ON kcu.table_name = itc.table_name
       AND kcu.table_schema = itc.table_schema
       AND kcu.constraint_name = itc.constraint_name
    WHERE ic.table_name = %(table_name)s
      AND ic.table_schema = %(schema)s
    ORDER BY ic.ordinal_position
"""


class MSSQL:
    """Catalog adapter for Microsoft SQL Server via pymssql."""

    name = "mssql"

    def __init__(self, settings: Settings, connection: Any | None = None) -> None:
        self.settings = settings
        self.schema = settings.schema or DEFAULT_SCHEMA
        self._session = CatalogSession(
            self.name, self.schema, connection, verbose=settings.verbose
        )

    def connect_kwargs(self) -> dict[str, Any]:
        return {
            "server": self.settings.host,
            "port": self.settings.port or DEFAULT_PORT,
            "user": self.settings.user or DEFAULT_USER,
            "password": self.settings.password,
            "database": self.settings.db_name,
        }

    def _open_connection(self) -> Any:
        import pymssql

        return pymssql.connect(**self.connect_kwargs())

    def connect(self) -> None:
        self._session.open(self._open_connection)

    def close(self) -> None:
        self._session.close()

    def list_tables(self) -> list[Table]:
        rows = self._session.select(TABLES_QUERY, {"schema": self.schema})
        return [Table(name=row["table_name"]) for row in rows]

    def list_views(self) -> list[Table]:
        rows = self._session.select(VIEWS_QUERY, {"schema": self.schema})
        return [Table(name=row["table_name"], is_view=True) for row in rows]

    def list_columns(self, table: Table) -> None:
        rows = self._session.select(
            COLUMNS_QUERY,
            {"table_name": table.name, "schema": self.schema},
            table=table.name,
        )
        table.columns = collapse_constraint_rows(Column.from_row(row) for row in rows)
        for column in table.columns:
            # (max) types report a length of -1
            if column.character_maximum_length is not None and column.character_maximum_length < 0:
                column.character_maximum_length = None

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
        return contains(column.constraint_type, "PRIMARY KEY")

    def is_auto_increment(self, column: Column) -> bool:
        return contains(column.extra, "auto_increment")
