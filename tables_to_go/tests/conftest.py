from __future__ import annotations

from typing import Any

import pytest

from tables_to_go.database.base import Column, Table
from tables_to_go.shared.settings import Settings


class FakeCursor:
    def __init__(self, connection: FakeConnection) -> None:
        self.connection = connection
        self.description: list[tuple[str, ...]] | None = None
        self._rows: list[tuple[Any, ...]] = []
        self.closed = False

    def execute(self, query: str, params: Any) -> None:
        self.connection.executed.append((query, params))
        if self.connection.error is not None:
            raise self.connection.error
        names, rows = self.connection.results.pop(0)
        self.description = [(name, None, None, None, None, None, None) for name in names]
        self._rows = list(rows)

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._rows

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """DB-API connection returning canned result sets in call order."""

    def __init__(self, *results: tuple[list[str], list[tuple[Any, ...]]]) -> None:
        self.results = list(results)
        self.executed: list[tuple[str, Any]] = []
        self.cursors: list[FakeCursor] = []
        self.error: Exception | None = None
        self.cursor_error: Exception | None = None
        self.close_error: Exception | None = None
        self.closed = False

    def cursor(self) -> FakeCursor:
        if self.cursor_error is not None:
            raise self.cursor_error
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeDatabase:
    """In-memory catalog using the PostgreSQL vocabulary."""

    name = "pg"
    schema = "public"

    def __init__(self, tables: dict[str, list[Column]], views: dict[str, list[Column]] | None = None) -> None:
        self.tables = tables
        self.views = views or {}
        self.column_calls: list[str] = []

    def connect(self) -> None:
        pass

    def close(self) -> None:
        pass

    def list_tables(self) -> list[Table]:
        return [Table(name=name) for name in self.tables]

    def list_views(self) -> list[Table]:
        return [Table(name=name, is_view=True) for name in self.views]

    def list_columns(self, table: Table) -> None:
        self.column_calls.append(table.name)
        source = self.views if table.is_view else self.tables
        table.columns = list(source[table.name])

    def is_string(self, column: Column) -> bool:
        return column.data_type in ("varchar", "character varying", "char")

    def is_text(self, column: Column) -> bool:
        return column.data_type == "text"

    def is_integer(self, column: Column) -> bool:
        return column.data_type in ("int", "integer", "bigint")

    def is_float(self, column: Column) -> bool:
        return column.data_type in ("numeric", "real")

    def is_temporal(self, column: Column) -> bool:
        return column.data_type in ("timestamp", "date")

    def is_boolean(self, column: Column) -> bool:
        return column.data_type == "boolean"

    def is_primary_key(self, column: Column) -> bool:
        return column.constraint_type == "PRIMARY KEY"

    def is_auto_increment(self, column: Column) -> bool:
        return (column.column_default or "").startswith("nextval")


def make_column(
    name: str,
    data_type: str,
    nullable: bool = False,
    position: int = 1,
    **extra: Any,
) -> Column:
    return Column(
        ordinal_position=position,
        column_name=name,
        data_type=data_type,
        is_nullable="YES" if nullable else "NO",
        **extra,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(output_dir=tmp_path, gofmt=False)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase({})
