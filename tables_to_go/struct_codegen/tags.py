"""Struct tag selection and generation."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Final, Iterable

from ..database.base import Column, Database
from ..shared.settings import Settings


class TagKind(IntEnum):
    """Kinds of struct tags; the value is the order tags are written in."""

    DB = 1
    STBL = 2
    SQL = 3


DEFAULT_TAGS: Final[frozenset[TagKind]] = frozenset({TagKind.DB})


def apply_only(current: Iterable[TagKind], kind: TagKind) -> frozenset[TagKind]:
    """Enable ``kind`` and nothing else, whatever was enabled before."""
    return frozenset({kind})


def effective_tags(settings: Settings) -> frozenset[TagKind]:
    """Compute the enabled tag kinds for a run.

    Flags are applied in a fixed order, so when several ``*_only`` flags are
    set the last one in that order wins.
    """
    tags = set(DEFAULT_TAGS)
    if settings.tags_no_db:
        tags.clear()
    if settings.tags_structable:
        tags.add(TagKind.STBL)
    if settings.tags_structable_only:
        tags = set(apply_only(tags, TagKind.STBL))
    if settings.tags_sql:
        tags.add(TagKind.SQL)
    if settings.tags_sql_only:
        tags = set(apply_only(tags, TagKind.SQL))
    return frozenset(tags)


def db_tag(database: Database, column: Column) -> str:
    return f'db:"{column.column_name}"'


def stbl_tag(database: Database, column: Column) -> str:
    """Masterminds/structable tag with key and serial markers."""
    value = column.column_name
    if database.is_primary_key(column):
        value += ",PRIMARY_KEY"
    if database.is_auto_increment(column):
        value += ",SERIAL,AUTO_INCREMENT"
    return f'stbl:"{value}"'


def sql_tag(database: Database, column: Column) -> str:
    """Experimental ``sql`` tag describing the column type and nullability."""
    parts: list[str] = []
    if column.data_type:
        col_type = column.data_type
        length = column.character_maximum_length
        if database.is_string(column) and length is not None and length > 0:
            col_type += f"({length})"
        parts.append(f"type:{col_type}")
    if not column.nullable:
        parts.append("not null")
    if not parts:
        return ""
    return f'sql:"{";".join(parts)}"'


TAGGERS: Final[dict[TagKind, Callable[[Database, Column], str]]] = {
    TagKind.DB: db_tag,
    TagKind.STBL: stbl_tag,
    TagKind.SQL: sql_tag,
}


def generate_tags(
    database: Database,
    column: Column,
    enabled: frozenset[TagKind],
) -> str:
    """Render the struct tag annotation for a field.

    Returns:
        The annotation with its leading space, e.g. `` `db:"id"` ``, or an
        empty string when no enabled tagger produced anything.
    """
    tags = [TAGGERS[kind](database, column) for kind in sorted(enabled)]
    tags = [tag for tag in tags if tag]
    if not tags:
        return ""
    return " `" + " ".join(tags) + "`"
