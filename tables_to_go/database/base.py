"""Catalog data model and the connection helper shared by all dialects."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

from ..shared.errors import DatabaseConnectionError, QueryError


@dataclass(slots=True)
class Column:
    """A column as reported by ``information_schema.columns``.

    ``column_key`` and ``extra`` are filled by MySQL (and by the SQL Server
    query for identity columns), ``constraint_name`` and ``constraint_type``
    by PostgreSQL and SQL Server.
    """

    ordinal_position: int
    column_name: str
    data_type: str
    column_default: str | None = None
    is_nullable: str = "NO"
    character_maximum_length: int | None = None
    numeric_precision: int | None = None
    datetime_precision: int | None = None
    column_key: str = ""
    extra: str = ""
    constraint_name: str | None = None
    constraint_type: str | None = None

    @property
    def nullable(self) -> bool:
        return self.is_nullable == "YES"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Column:
        """Build a column from a catalog row, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in row.items():
            name = str(key).lower()
            if name not in known:
                continue
            # mysql.connector hands back some catalog strings as bytes
            if isinstance(value, (bytes, bytearray)):
                value = value.decode("utf-8")
            values[name] = value
        # String columns may come back as NULL for MySQL's column_key/extra
        for name in ("column_key", "extra"):
            if values.get(name) is None:
                values[name] = ""
        return cls(**values)


@dataclass(slots=True)
class Table:
    """A table or view and its columns in ordinal order."""

    name: str
    columns: list[Column] = field(default_factory=list)
    is_view: bool = False


class Database(Protocol):
    """Capabilities every dialect provides to the struct generator."""

    name: str
    schema: str

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def list_tables(self) -> list[Table]: ...

    def list_views(self) -> list[Table]: ...

    def list_columns(self, table: Table) -> None: ...

    def is_string(self, column: Column) -> bool: ...

    def is_text(self, column: Column) -> bool: ...

    def is_integer(self, column: Column) -> bool: ...

    def is_float(self, column: Column) -> bool: ...

    def is_temporal(self, column: Column) -> bool: ...

    def is_boolean(self, column: Column) -> bool: ...

    def is_primary_key(self, column: Column) -> bool: ...

    def is_auto_increment(self, column: Column) -> bool: ...


class CatalogSession:
    """Owns the DB-API connection of one run and executes catalog queries.

    Driver exceptions are re-raised as :class:`DatabaseConnectionError` or
    :class:`QueryError` carrying the dialect and schema.
    """

    __slots__ = ("dialect", "schema", "verbose", "_connection")

    def __init__(
        self,
        dialect: str,
        schema: str,
        connection: Any | None = None,
        verbose: bool = False,
    ) -> None:
        self.dialect = dialect
        self.schema = schema
        self.verbose = verbose
        self._connection = connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def open(self, factory: Callable[[], Any]) -> None:
        """Open the connection using a driver specific factory."""
        if self._connection is not None:
            return
        try:
            self._connection = factory()
        except Exception as e:
            raise DatabaseConnectionError(
                f"could not connect to database: {e}", self.dialect, self.schema
            ) from e

    def close(self) -> None:
        """Close the connection; a failing driver close only prints a warning."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        except Exception as e:
            print(f"Warning: could not close {self.dialect!r} connection: {e}")
        finally:
            self._connection = None

    def select(
        self,
        query: str,
        params: Sequence[Any] | Mapping[str, Any],
        table: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a catalog query and return its rows keyed by lower-case column name.

        Args:
            query: Literal SQL with ``%s`` or ``%(name)s`` markers.
            params: Values bound to the markers.
            table: Table the query is about, for error context.

        Raises:
            QueryError: If the session is closed or the driver fails.
        """
        if self._connection is None:
            raise QueryError("no open connection", self.dialect, self.schema, table)

        cursor = None
        try:
            cursor = self._connection.cursor()
            cursor.execute(query, params)
            names = [str(description[0]).lower() for description in cursor.description]
            rows = cursor.fetchall()
        except Exception as e:
            if self.verbose:
                print(f"> Error while querying the catalog of {self.schema!r}")
            raise QueryError(str(e), self.dialect, self.schema, table) from e
        finally:
            if cursor is not None:
                cursor.close()

        return [dict(zip(names, row)) for row in rows]


def contains(value: str | None, marker: str) -> bool:
    """Null-safe substring test used for key and identity markers."""
    return value is not None and marker in value


def collapse_constraint_rows(columns: Iterable[Column]) -> list[Column]:
    """Collapse the rows a column gets for each constraint it takes part in.

    Joining ``key_column_usage`` yields one row per constraint, so a column
    that is both a foreign key and unique shows up twice. A primary key row
    wins over any other row of the same column.
    """
    by_position: dict[int, Column] = {}
    for column in columns:
        seen = by_position.get(column.ordinal_position)
        if seen is None or contains(column.constraint_type, "PRIMARY KEY"):
            by_position[column.ordinal_position] = column
    return [by_position[position] for position in sorted(by_position)]
