"""
Declaration file generator — stitch compiled models into one .d.ts file.

Per model, in load order:

    lean subdocument blocks + lean model type, ``<Model>Object`` alias
    <Model>Query / Queries / Methods / Statics / Model / Schema
    document subdocument blocks + ``<Model>Document``

Without mongoose (``no_mongoose``) only the lean types are written and
the file is plain TypeScript with no module augmentation.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from schematsgen.core.models.declaration import GeneratedBlock
from schematsgen.core.models.schema import Schema
from schematsgen.core.models.template import GeneratedFile
from schematsgen.core.services.typegen.emitter import format_key_entry

_FILE_HEADER = """\
/* tslint:disable */
/* eslint-disable */

// ######################################## THIS FILE WAS GENERATED BY SCHEMATSGEN ######################################## //

// NOTE: ANY CHANGES MADE WILL BE OVERWRITTEN ON SUBSEQUENT EXECUTIONS OF SCHEMATSGEN.

"""

# Statics the ORM attaches to every model on its own.
_SKIPPED_FUNCTIONS = frozenset({"initializeTimestamps"})


def generate_declaration_file(
    compiled: Mapping[str, list[GeneratedBlock]],
    schemas: Mapping[str, Schema],
    *,
    output_path: str,
    no_mongoose: bool = False,
) -> GeneratedFile:
    """Assemble the declaration file for every compiled model.

    Args:
        compiled: Model name → blocks from ``compile_schema``.
        schemas: Model name → schema (source of method/static/query names).
        output_path: Where the file will be written.
        no_mongoose: Emit lean types only, without the module augmentation.
    """
    sections = []
    for model_name, blocks in compiled.items():
        schema = schemas.get(model_name)
        sections.append(_lean_section(model_name, blocks))
        if not no_mongoose:
            sections.append(_function_section(model_name, schema))
            sections.append(_document_section(blocks))

    body = "".join(sections)
    if no_mongoose:
        content = _FILE_HEADER + body
    else:
        content = (
            _FILE_HEADER
            + 'import mongoose from "mongoose";\n\n'
            + 'declare module "mongoose" {\n\n'
            + body
            + "}\n"
        )

    return GeneratedFile(
        path=output_path,
        content=content,
        overwrite=True,
        reason=f"Type declarations for {len(compiled)} model(s)",
    )


def _lean_section(model_name: str, blocks: list[GeneratedBlock]) -> str:
    text = "".join(block.lean_text for block in blocks)
    return text + f"export type {model_name}Object = {model_name}\n\n"


def _document_section(blocks: list[GeneratedBlock]) -> str:
    return "".join(block.document_text or "" for block in blocks)


def _function_section(model_name: str, schema: Schema | None) -> str:
    methods = schema.methods if schema else {}
    statics = schema.statics if schema else {}
    query = schema.query if schema else {}

    query_type = f"{model_name}Query"
    document_type = f"{model_name}Document"
    model_type = f"{model_name}Model"

    return (
        "/**\n"
        " * Mongoose Query type\n"
        " *\n"
        " * This type is returned from query functions. For most use cases, you should not need to use this type explicitly.\n"
        " */\n"
        f"export type {query_type} = mongoose.Query<any, {document_type}, {model_name}Queries> & {model_name}Queries\n\n"
        f"/**\n * Mongoose Query functions\n *\n * Query functions attached to {model_name}Schema.query.\n */\n"
        + _type_literal(f"{model_name}Queries", query, this_type=query_type, return_type=query_type)
        + f"/**\n * Mongoose Method functions\n *\n * Instance methods attached to {model_name}Schema.methods.\n */\n"
        + _type_literal(f"{model_name}Methods", methods, this_type=document_type)
        + f"/**\n * Mongoose Static functions\n *\n * Statics attached to {model_name}Schema.statics.\n */\n"
        + _type_literal(f"{model_name}Statics", statics, this_type=model_type)
        + "/**\n"
        " * Mongoose Model type\n"
        " *\n"
        " * Pass this type to the Mongoose Model constructor:\n"
        " * ```\n"
        f' * const {model_name} = mongoose.model<{document_type}, {model_type}>("{model_name}", {model_name}Schema);\n'
        " * ```\n"
        " */\n"
        f"export type {model_type} = mongoose.Model<{document_type}, {model_name}Queries> & {model_name}Statics\n\n"
        "/**\n"
        " * Mongoose Schema type\n"
        " *\n"
        " * Assign this type to new Mongoose Schema instances.\n"
        " */\n"
        f"export type {model_name}Schema = mongoose.Schema<{document_type}, {model_type}, {model_name}Methods, {model_name}Queries>\n\n"
    )


def _type_literal(
    name: str,
    functions: Mapping[str, Callable[..., Any]],
    *,
    this_type: str,
    return_type: str = "any",
) -> str:
    lines = "".join(
        format_key_entry(func_name, f"(this: {this_type}, ...args: any[]) => {return_type}")
        for func_name in functions
        if func_name not in _SKIPPED_FUNCTIONS
    )
    return f"export type {name} = {{\n{lines}}}\n\n"
