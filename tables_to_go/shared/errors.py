"""Custom exceptions for tables-to-go."""

from __future__ import annotations


def _catalog_context(message: str, dialect: str | None, schema: str | None) -> str:
    if dialect is None:
        return message
    return f"Dialect '{dialect}' (schema '{schema}'): {message}"


class TablesToGoError(Exception):
    """Base exception for every failure that aborts a generation run."""

    def __init__(self, message: str, table: str | None = None) -> None:
        self.table = table
        full_message = f"{message}" if not table else f"[{table}] {message}"
        super().__init__(full_message)


class SettingsError(TablesToGoError):
    """Raised when the run configuration is invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        self.setting = setting
        if setting:
            message = f"Setting '{setting}': {message}"
        super().__init__(message)


class CatalogError(TablesToGoError):
    """Raised for failures talking to the database catalog."""

    def __init__(
        self,
        message: str,
        dialect: str,
        schema: str,
        table: str | None = None,
    ) -> None:
        self.dialect = dialect
        self.schema = schema
        super().__init__(_catalog_context(message, dialect, schema), table)


class DatabaseConnectionError(CatalogError):
    """Raised when the database session cannot be established."""


class QueryError(CatalogError):
    """Raised when a catalog query fails."""


class FormatError(TablesToGoError):
    """Raised when generated source is rejected by the formatter.

    ``reason`` keeps the formatter's message so the error can be raised
    again with the dialect and schema of the run.
    """

    def __init__(
        self,
        message: str,
        table: str,
        dialect: str | None = None,
        schema: str | None = None,
    ) -> None:
        self.reason = message
        self.dialect = dialect
        self.schema = schema
        super().__init__(
            _catalog_context(f"Could not format generated source: {message}", dialect, schema),
            table,
        )


class WriteError(TablesToGoError):
    """Raised when a generated file cannot be written."""

    def __init__(
        self,
        message: str,
        path: str,
        table: str | None = None,
        dialect: str | None = None,
        schema: str | None = None,
    ) -> None:
        self.path = path
        self.dialect = dialect
        self.schema = schema
        super().__init__(
            _catalog_context(f"Could not write '{path}': {message}", dialect, schema),
            table,
        )
