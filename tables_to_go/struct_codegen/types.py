"""Column classification and Go type mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from ..database.base import Column, Database


class Category(Enum):
    """Semantic category of a column's raw data type."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    TEMPORAL = "temporal"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class GoType:
    """A Go type and the package it has to import, if any."""

    name: str
    import_path: str | None = None


_SQL: Final[str] = "database/sql"

NULL_STRING: Final[GoType] = GoType("sql.NullString", _SQL)

# (non-null, nullable) per category
GO_TYPES: Final[dict[Category, tuple[GoType, GoType]]] = {
    Category.STRING: (GoType("string"), NULL_STRING),
    Category.TEXT: (GoType("string"), NULL_STRING),
    Category.INTEGER: (GoType("int"), GoType("sql.NullInt64", _SQL)),
    Category.FLOAT: (GoType("float64"), GoType("sql.NullFloat64", _SQL)),
    Category.TEMPORAL: (
        GoType("time.Time", "time"),
        GoType("pq.NullTime", "github.com/lib/pq"),
    ),
    Category.BOOLEAN: (GoType("bool"), GoType("sql.NullBool", _SQL)),
    Category.UNKNOWN: (NULL_STRING, NULL_STRING),
}


def classify(database: Database, column: Column) -> Category:
    """Put a column into exactly one category using the dialect's vocabulary."""
    if database.is_string(column):
        return Category.STRING
    if database.is_text(column):
        return Category.TEXT
    if database.is_integer(column):
        return Category.INTEGER
    if database.is_float(column):
        return Category.FLOAT
    if database.is_temporal(column):
        return Category.TEMPORAL
    if database.is_boolean(column):
        return Category.BOOLEAN
    return Category.UNKNOWN


def map_type(category: Category, nullable: bool) -> GoType:
    """Resolve the Go field type for a category and nullability.

    Unknown categories always map to ``sql.NullString`` so that any value
    can be scanned.
    """
    non_null, nullable_type = GO_TYPES[category]
    return nullable_type if nullable else non_null
