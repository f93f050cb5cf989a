"""PostgreSQL catalog adapter."""

from __future__ import annotations

from typing import Any, Final

from ..shared.settings import Settings
from .base import CatalogSession, Column, Table, collapse_constraint_rows, contains

DEFAULT_PORT: Final[int] = 5432
DEFAULT_USER: Final[str] = "postgres"
DEFAULT_SCHEMA: Final[str] = "public"

STRING_TYPES: Final[frozenset[str]] = frozenset({
    "character varying",
    "varchar",
    "character",
    "char",
})
TEXT_TYPES: Final[frozenset[str]] = frozenset({"text"})
INTEGER_TYPES: Final[frozenset[str]] = frozenset({
    "smallint",
    "integer",
    "bigint",
    "smallserial",
    "serial",
    "bigserial",
})
FLOAT_TYPES: Final[frozenset[str]] = frozenset({
    "numeric",
    "decimal",
    "real",
    "double precision",
})
TEMPORAL_TYPES: Final[frozenset[str]] = frozenset({
    "time",
    "timestamp",
    "time with time zone",
    "timestamp with time zone",
    "time without time zone",
    "timestamp without time zone",
    "date",
})
BOOLEAN_TYPES: Final[frozenset[str]] = frozenset({"boolean"})

TABLES_QUERY: Final[str] = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
      AND table_schema = %s
    ORDER BY table_name
"""

VIEWS_QUERY: Final[str] = """
    SELECT table_name
    FROM information_schema.views
    WHERE table_schema = %s
    ORDER BY table_name
"""

COLUMNS_QUERY: Final[str] = """
    SELECT
      ic.ordinal_position,
      ic.column_name,
      ic.table_name,
      ic.column_default,
      ic.is_nullable,
      ic.data_type,
      ic.character_maximum_length,
      ic.numeric_precision,
      ic.datetime_precision,
      itc.constraint_name,
      itc.constraint_type
    FROM information_schema.columns AS ic
      LEFT JOIN information_schema.key_column_usage AS kcu
        ON ic.table_name = kcu.table_name
       AND ic.table_schema = kcu.table_schema
       AND ic.column_name = kcu.column_name
      LEFT JOIN information_schema.table_constraints AS itc
        ON kcu.table_name = itc.table_name
       AND kcu.table_schema = itc.table_schema
       AND kcu.constraint_name = itc.constraint_name
    WHERE ic.table_name = %s
      AND ic.table_schema = %s
    ORDER BY ic.ordinal_position
"""


class PostgreSQL:
    """Catalog adapter for PostgreSQL via psycopg2."""

    name = "pg"

    def __init__(self, settings: Settings, connection: Any | None = None) -> None:
        self.settings = settings
        self.schema = settings.schema or DEFAULT_SCHEMA
        self._session = CatalogSession(
            self.name, self.schema, connection, verbose=settings.verbose
        )

    def connect_kwargs(self) -> dict[str, Any]:
        return {
            "host": self.settings.host,
            "port": self.settings.port or DEFAULT_PORT,
            "user": self.settings.user or DEFAULT_USER,
            "password": self.settings.password,
            "dbname": self.settings.db_name,
        }

    def _open_connection(self) -> Any:
        import psycopg2

        connection = psycopg2.connect(**self.connect_kwargs())
        connection.set_session(readonly=True, autocommit=True)
        return connection

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
        table.columns = collapse_constraint_rows(Column.from_row(row) for row in rows)

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
        return contains(column.column_default, "nextval")
