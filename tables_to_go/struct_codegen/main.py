"""
Struct Code Generator - Generates Go structs from a live database catalog.

For every table (and optionally view) of the configured schema this module:
- maps each column to a Go field type and struct tags
- renders a Go source file from a template
- hands the source to gofmt
- writes ``<prefix><Table><suffix>.go`` into the output directory
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Final, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..database.base import Database, Table
from ..shared.errors import FormatError, WriteError
from ..shared.naming import format_name
from ..shared.settings import Settings
from .tags import TagKind, effective_tags, generate_tags
from .types import Category, classify, map_type

# Template configuration
TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

GOFMT_COMMAND: Final[tuple[str, ...]] = ("gofmt",)
RECORDER_IMPORT: Final[str] = "github.com/Masterminds/structable"
GO_EXTENSION: Final[str] = ".go"


@dataclass(frozen=True, slots=True)
class StructField:
    """A single Go struct field."""

    name: str
    type: str
    tag: str
    column_name: str
    category: Category


@dataclass(frozen=True, slots=True)
class StructSpec:
    """Everything needed to render one generated file."""

    package_name: str
    struct_name: str
    fields: tuple[StructField, ...]
    imports: tuple[str, ...]
    recorder: bool = False


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self._struct_template = self.template_env.get_template("struct.go.j2")

    @property
    def struct_template(self):
        return self._struct_template


Formatter = Callable[[str, str], str]


def build_struct(
    settings: Settings,
    database: Database,
    table: Table,
    enabled: frozenset[TagKind],
) -> StructSpec:
    """Map a table's columns to struct fields and collect their imports.

    Args:
        settings: Naming convention, prefix/suffix, package and recorder flag.
        database: Dialect used to classify columns.
        table: Table with its columns already loaded.
        enabled: Tag kinds to render.

    Returns:
        The struct specification ready for rendering.
    """
    fields: list[StructField] = []
    # dict keeps first-seen order while deduplicating
    imports: dict[str, None] = {}

    for column in table.columns:
        category = classify(database, column)
        go_type = map_type(category, column.nullable)
        if go_type.import_path:
            imports.setdefault(go_type.import_path, None)

        fields.append(
            StructField(
                name=format_name(column.column_name, settings.output_format),
                type=go_type.name,
                tag=generate_tags(database, column, enabled),
                column_name=column.column_name,
                category=category,
            )
        )

    if settings.structable_recorder:
        imports.setdefault(RECORDER_IMPORT, None)

    struct_name = format_name(
        settings.prefix + table.name + settings.suffix, settings.output_format
    )

    return StructSpec(
        package_name=settings.package_name,
        struct_name=struct_name,
        fields=tuple(fields),
        imports=tuple(imports),
        recorder=settings.structable_recorder,
    )


def render_struct(spec: StructSpec, ctx: GeneratorContext) -> str:
    """Render the Go source of a struct specification."""
    return ctx.struct_template.render(
        package_name=spec.package_name,
        struct_name=spec.struct_name,
        fields=spec.fields,
        imports=spec.imports,
        recorder=spec.recorder,
    )


def format_go_source(
    source: str,
    table: str,
    command: Sequence[str] = GOFMT_COMMAND,
) -> str:
    """Format generated source with gofmt.

    If gofmt is not installed the source is returned unchanged.

    Raises:
        FormatError: If gofmt rejects the source.
    """
    try:
        result = subprocess.run(
            list(command),
            input=source,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError:
        print(f"Warning: {command[0]} not found, writing unformatted source")
        return source
    except subprocess.CalledProcessError as e:
        message = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise FormatError(message, table) from e
    return result.stdout


def write_struct_file(
    output_dir: Path,
    struct_name: str,
    content: str,
    table: str | None = None,
    dialect: str | None = None,
    schema: str | None = None,
) -> Path:
    """Write a generated struct to ``<output_dir>/<struct_name>.go``.

    Raises:
        WriteError: If the file cannot be written.
    """
    output_path = output_dir / f"{struct_name}{GO_EXTENSION}"
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise WriteError(str(e), str(output_path), table, dialect, schema) from e
    return output_path


def _keep_source(source: str, table: str) -> str:
    return source


def generate(
    settings: Settings,
    database: Database,
    ctx: GeneratorContext | None = None,
    formatter: Formatter | None = None,
) -> int:
    """Generate one Go file per table of a connected database.

    The run stops at the first error; files written before it stay on disk.

    Args:
        settings: Run configuration.
        database: Connected catalog adapter.
        ctx: Template context, created when not given.
        formatter: Source formatter, gofmt unless ``settings.gofmt`` is off.

    Returns:
        Number of files written.
    """
    if ctx is None:
        ctx = GeneratorContext()
    if formatter is None:
        formatter = format_go_source if settings.gofmt else _keep_source

    enabled = effective_tags(settings)

    print(f"running for {settings.db_type!r}...")

    tables = database.list_tables()
    if settings.include_views:
        tables.extend(database.list_views())

    if settings.verbose:
        print(f"> number of tables: {len(tables)}")

    written = 0
    for table in tables:
        if settings.verbose:
            kind = "view" if table.is_view else "table"
            print(f"> processing {kind} {table.name!r}")

        database.list_columns(table)

        if settings.verbose:
            print(f"\t> number of columns: {len(table.columns)}")

        spec = build_struct(settings, database, table, enabled)

        if settings.verbose:
            for struct_field in spec.fields:
                print(
                    f"\t\t> {struct_field.column_name}: "
                    f"{struct_field.category.value} -> {struct_field.type}"
                )

        try:
            content = formatter(render_struct(spec, ctx), table.name)
        except FormatError as e:
            if e.dialect is not None:
                raise
            raise FormatError(e.reason, table.name, database.name, database.schema) from e

        write_struct_file(
            settings.output_dir,
            spec.struct_name,
            content,
            table.name,
            database.name,
            database.schema,
        )
        written += 1

    print("done!")

    return written
