"""Struct Code Generator - Generates Go structs from database catalogs."""

from .main import (
    GeneratorContext,
    StructField,
    StructSpec,
    build_struct,
    format_go_source,
    generate,
    render_struct,
    write_struct_file,
)
from .tags import TagKind, apply_only, effective_tags, generate_tags
from .types import Category, GoType, classify, map_type

__all__ = [
    "GeneratorContext",
    "StructField",
    "StructSpec",
    "build_struct",
    "format_go_source",
    "generate",
    "render_struct",
    "write_struct_file",
    "TagKind",
    "apply_only",
    "effective_tags",
    "generate_tags",
    "Category",
    "GoType",
    "classify",
    "map_type",
]
