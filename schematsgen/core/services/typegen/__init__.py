"""
Schema-to-type compiler.

Public API:
    compile_schema(schema, model_name)       → list[GeneratedBlock]
    parse_schema(schema, model_name=, ctx=)  → declaration text
    resolve_field(key, raw, ctx)             → one declaration line
"""

from schematsgen.core.services.typegen.compiler import compile_schema
from schematsgen.core.services.typegen.emitter import convert_to_singular, get_subdocument_name
from schematsgen.core.services.typegen.errors import (
    CircularSchemaError,
    SchemaDepthError,
    TypegenError,
    UnreachableVariantError,
    UnsupportedSchemaTypeError,
)
from schematsgen.core.services.typegen.kinds import PrimitiveKind, classify_type_marker
from schematsgen.core.services.typegen.normalizer import parse_schema, render_blocks
from schematsgen.core.services.typegen.resolver import (
    describe_field,
    get_should_lean_include_virtuals,
    render_type,
    resolve_field,
)
from schematsgen.core.services.typegen.subdocuments import expand_subdocuments

__all__ = [
    "CircularSchemaError",
    "PrimitiveKind",
    "SchemaDepthError",
    "TypegenError",
    "UnreachableVariantError",
    "UnsupportedSchemaTypeError",
    "classify_type_marker",
    "compile_schema",
    "convert_to_singular",
    "describe_field",
    "expand_subdocuments",
    "get_should_lean_include_virtuals",
    "get_subdocument_name",
    "parse_schema",
    "render_blocks",
    "render_type",
    "resolve_field",
]
