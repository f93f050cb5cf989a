"""Shared utilities for tables-to-go."""

from .naming import (
    CAMEL_CASE,
    ORIGINAL,
    OUTPUT_FORMATS,
    camel_case,
    format_name,
    title_case,
)
from .errors import (
    TablesToGoError,
    SettingsError,
    CatalogError,
    DatabaseConnectionError,
    QueryError,
    FormatError,
    WriteError,
)
from .settings import (
    SUPPORTED_DB_TYPES,
    Settings,
    build_settings,
    load_settings_file,
)

__all__ = [
    # Naming utilities
    "CAMEL_CASE",
    "ORIGINAL",
    "OUTPUT_FORMATS",
    "camel_case",
    "format_name",
    "title_case",
    # Errors
    "TablesToGoError",
    "SettingsError",
    "CatalogError",
    "DatabaseConnectionError",
    "QueryError",
    "FormatError",
    "WriteError",
    # Settings
    "SUPPORTED_DB_TYPES",
    "Settings",
    "build_settings",
    "load_settings_file",
]
