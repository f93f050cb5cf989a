"""Run configuration: defaults, YAML settings files and verification."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Final, Mapping

import yaml

from .errors import SettingsError
from .naming import OUTPUT_FORMATS

SUPPORTED_DB_TYPES: Final[tuple[str, ...]] = ("pg", "mysql", "mssql")


# Accepted YAML value types per setting; None is only allowed for OPTIONAL_SETTINGS.
SETTING_TYPES: Final[dict[str, tuple[type, ...]]] = {
    "db_type": (str,),
    "host": (str,),
    "port": (int,),
    "user": (str,),
    "password": (str,),
    "db_name": (str,),
    "schema": (str,),
    "output_dir": (str, Path),
    "output_format": (str,),
    "prefix": (str,),
    "suffix": (str,),
    "package_name": (str,),
    "tags_no_db": (bool,),
    "tags_structable": (bool,),
    "tags_structable_only": (bool,),
    "structable_recorder": (bool,),
    "tags_sql": (bool,),
    "tags_sql_only": (bool,),
    "include_views": (bool,),
    "gofmt": (bool,),
    "verbose": (bool,),
}
OPTIONAL_SETTINGS: Final[frozenset[str]] = frozenset({"port", "user", "schema"})


@dataclass
class Settings:
    """Connection target and generation preferences for one run.

    ``port``, ``user`` and ``schema`` default to ``None`` and are resolved by
    the selected dialect.
    """

    db_type: str = "pg"
    host: str = "127.0.0.1"
    port: int | None = None
    user: str | None = None
    password: str = ""
    db_name: str = "postgres"
    schema: str | None = None

    output_dir: Path = Path(".")
    output_format: str = "c"
    prefix: str = ""
    suffix: str = ""
    package_name: str = "dto"

    tags_no_db: bool = False
    tags_structable: bool = False
    tags_structable_only: bool = False
    structable_recorder: bool = False
    tags_sql: bool = False
    tags_sql_only: bool = False

    include_views: bool = False
    gofmt: bool = True
    verbose: bool = False

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)
        if self.port is not None:
            self.port = _as_port(self.port)

    def verify(self) -> None:
        """Check the settings before any database work starts.

        Raises:
            SettingsError: On the first invalid setting.
        """
        if self.db_type not in SUPPORTED_DB_TYPES:
            raise SettingsError(
                f"unsupported database type '{self.db_type}', "
                f"supported: {', '.join(SUPPORTED_DB_TYPES)}",
                "db_type",
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise SettingsError(
                f"unsupported output format '{self.output_format}', "
                "use 'c' (camelCase) or 'o' (original)",
                "output_format",
            )
        if not self.output_dir.is_dir():
            raise SettingsError(
                f"output directory '{self.output_dir}' does not exist",
                "output_dir",
            )
        if not self.package_name.strip():
            raise SettingsError("package name must not be empty", "package_name")


def _as_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"invalid port {value!r}", "port") from e
    if not 0 < port < 65536:
        raise SettingsError(f"port {port} out of range", "port")
    return port


def _check_value(name: str, value: Any) -> None:
    if value is None:
        if name in OPTIONAL_SETTINGS:
            return
        raise SettingsError("a value is required", name)
    expected = SETTING_TYPES[name]
    # bool is an int subclass, so `port: true` must be rejected explicitly
    if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
        raise SettingsError(
            f"expected {expected[0].__name__}, got {type(value).__name__} {value!r}", name
        )


def setting_names() -> frozenset[str]:
    """Names accepted in a settings file."""
    return frozenset(f.name for f in fields(Settings))


def load_settings_file(path: Path) -> dict[str, Any]:
    """Load setting overrides from a YAML file.

    Args:
        path: Path to a YAML mapping whose keys are ``Settings`` field names.

    Returns:
        The parsed overrides.

    Raises:
        SettingsError: If the file cannot be read or parsed, or names an
            unknown setting or gives a value of the wrong type.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(f"Failed to read settings file '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in '{path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file '{path}' must contain a mapping")

    unknown = sorted(str(key) for key in set(data) - setting_names())
    if unknown:
        raise SettingsError(f"unknown setting(s) in '{path}'", ", ".join(unknown))

    for name, value in data.items():
        _check_value(name, value)

    return data


def build_settings(
    file_values: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Merge defaults, settings-file values and explicit overrides.

    ``None`` values in ``overrides`` mean "not given" and do not replace a
    value from the file.
    """
    merged: dict[str, Any] = dict(file_values or {})
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    return Settings(**merged)
