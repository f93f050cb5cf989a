#!/usr/bin/env python3
"""
Generate Go structs from the tables of a database.

Usage:
    python -m tables_to_go [options]
    tables-to-go [options]

Examples:
    tables-to-go -v -t pg -h localhost -s public -d mydb -u me -p secret
    tables-to-go -t mysql -d shop -of ./dto -format o -tags-structable
    tables-to-go --config tables-to-go.yaml --views
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from tables_to_go.database import create_database
from tables_to_go.shared import (
    OUTPUT_FORMATS,
    SUPPORTED_DB_TYPES,
    TablesToGoError,
    build_settings,
    load_settings_file,
)
from tables_to_go.struct_codegen import generate

# CLI destinations that map one-to-one onto Settings fields
SETTING_DESTS: tuple[str, ...] = (
    "db_type",
    "host",
    "port",
    "user",
    "password",
    "db_name",
    "schema",
    "output_dir",
    "output_format",
    "prefix",
    "suffix",
    "package_name",
    "tags_no_db",
    "tags_structable",
    "tags_structable_only",
    "structable_recorder",
    "tags_sql",
    "tags_sql_only",
    "include_views",
    "gofmt",
    "verbose",
)


def _flag(parser: argparse.ArgumentParser, *names: str, dest: str, help: str) -> None:
    """Add a boolean flag whose absence leaves the setting untouched."""
    parser.add_argument(*names, dest=dest, action="store_const", const=True, help=help)


def build_parser() -> argparse.ArgumentParser:
    # -h selects the host, so help lives on -? / --help
    parser = argparse.ArgumentParser(
        prog="tables-to-go",
        description="Generate Go structs from database tables",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-?", "--help", action="help", help="show help and usage")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with settings; command line flags take precedence",
    )
    _flag(parser, "-v", "--verbose", dest="verbose", help="verbose output")

    conn = parser.add_argument_group("database")
    conn.add_argument(
        "-t",
        "--type",
        dest="db_type",
        choices=SUPPORTED_DB_TYPES,
        help="type of database to use (default: pg)",
    )
    conn.add_argument("-u", "--user", dest="user", help="user to connect to the database")
    conn.add_argument("-p", "--password", dest="password", help="password of user")
    conn.add_argument("-d", "--database", dest="db_name", help="database name")
    conn.add_argument("-s", "--schema", dest="schema", help="schema name")
    conn.add_argument("-h", "--host", dest="host", help="host of database")
    conn.add_argument(
        "--port",
        dest="port",
        type=int,
        help="port of database host, defaults to the dialect's standard port",
    )

    out = parser.add_argument_group("output")
    out.add_argument(
        "-of",
        "--output-dir",
        dest="output_dir",
        type=Path,
        help="output directory (default: current working directory)",
    )
    out.add_argument(
        "-format",
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        help="camelCase (c) or original (o) names",
    )
    out.add_argument("-pre", "--prefix", dest="prefix", help="prefix for file- and struct names")
    out.add_argument("-suf", "--suffix", dest="suffix", help="suffix for file- and struct names")
    out.add_argument("-pn", "--package-name", dest="package_name", help="package name")
    _flag(out, "--views", dest="include_views", help="also generate structs for views")
    out.add_argument(
        "--no-gofmt",
        dest="gofmt",
        action="store_const",
        const=False,
        help="do not run gofmt on the generated files",
    )

    tags = parser.add_argument_group("tags")
    _flag(tags, "-tags-no-db", "--tags-no-db", dest="tags_no_db", help="do not create db-tags")
    _flag(
        tags,
        "-tags-structable",
        "--tags-structable",
        dest="tags_structable",
        help="generate tags for use in Masterminds/structable",
    )
    _flag(
        tags,
        "-tags-structable-only",
        "--tags-structable-only",
        dest="tags_structable_only",
        help="generate ONLY tags for use in Masterminds/structable",
    )
    _flag(
        tags,
        "-structable-recorder",
        "--structable-recorder",
        dest="structable_recorder",
        help="generate a structable.Recorder field",
    )
    _flag(
        tags,
        "-experimental-tags-sql",
        "--experimental-tags-sql",
        dest="tags_sql",
        help="generate sql-tags",
    )
    _flag(
        tags,
        "-experimental-tags-sql-only",
        "--experimental-tags-sql-only",
        dest="tags_sql_only",
        help="generate ONLY sql-tags",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        file_values: dict[str, Any] = {}
        if args.config is not None:
            file_values = load_settings_file(args.config)

        overrides = {dest: getattr(args, dest) for dest in SETTING_DESTS}
        settings = build_settings(file_values, overrides)
        settings.verify()

        database = create_database(settings)
        database.connect()
        try:
            count = generate(settings, database)
        finally:
            database.close()

        print(f"Generated {count} struct file(s) into {settings.output_dir}")
    except TablesToGoError as e:
        raise SystemExit(f"Error: {e}") from e

    return 0


if __name__ == "__main__":
    sys.exit(main())
