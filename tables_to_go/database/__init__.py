"""Database catalog adapters, one per supported dialect."""

from __future__ import annotations

from typing import Any, Final

from ..shared.errors import SettingsError
from ..shared.settings import Settings
from .base import CatalogSession, Column, Database, Table
from .mssql import MSSQL
from .mysql import MySQL
from .postgresql import PostgreSQL

DIALECTS: Final[dict[str, type]] = {
    PostgreSQL.name: PostgreSQL,
    MySQL.name: MySQL,
    MSSQL.name: MSSQL,
}


def create_database(settings: Settings, connection: Any | None = None) -> Database:
    """Instantiate the adapter for ``settings.db_type``.

    Raises:
        SettingsError: If the dialect is not supported.
    """
    try:
        dialect = DIALECTS[settings.db_type]
    except KeyError as e:
        raise SettingsError(
            f"unsupported database type '{settings.db_type}'", "db_type"
        ) from e
    return dialect(settings, connection)


__all__ = [
    "CatalogSession",
    "Column",
    "Database",
    "Table",
    "MSSQL",
    "MySQL",
    "PostgreSQL",
    "DIALECTS",
    "create_database",
]
