"""
Schema compiler — one model's schema to its paired declaration blocks.

Runs the document pass and the lean pass over the same schema and pairs
the resulting blocks by name.  Each call is independent and state-free,
so models can be compiled in any order or in parallel.
"""

from __future__ import annotations

import logging

from schematsgen.core.models.declaration import GeneratedBlock, RenderContext
from schematsgen.core.models.schema import Schema
from schematsgen.core.services.typegen.emitter import (
    BLOCK_FOOTER,
    document_block_header,
    get_document_docs,
    get_lean_docs,
    lean_block_header,
)
from schematsgen.core.services.typegen.errors import UnreachableVariantError
from schematsgen.core.services.typegen.normalizer import render_blocks
from schematsgen.core.services.typegen.resolver import (
    get_should_lean_include_virtuals,
    resolve_type,
)

logger = logging.getLogger(__name__)


def compile_schema(
    schema: Schema,
    model_name: str,
    *,
    suppress_orm_wrapper_types: bool = False,
) -> list[GeneratedBlock]:
    """Compile ``schema`` into declaration blocks.

    Args:
        schema: The model's schema.
        model_name: Model name; root block name and child name prefix.
        suppress_orm_wrapper_types: Render ORM identifier types as plain
            strings and skip the document projection entirely.

    Returns:
        One block per schema in discovery order: hoisted subdocuments
        first, the model's own block last.
    """
    lean_virtuals = get_should_lean_include_virtuals(schema)
    lean_ctx = RenderContext(
        emit_document_variant=False,
        suppress_orm_wrapper_types=suppress_orm_wrapper_types,
        lean_includes_virtuals=lean_virtuals,
    )
    lean = render_blocks(
        schema,
        model_name=model_name,
        ctx=lean_ctx,
        header=lean_block_header(get_lean_docs(model_name), model_name),
        footer=BLOCK_FOOTER,
    )

    document = None
    if not suppress_orm_wrapper_types:
        document_ctx = RenderContext(emit_document_variant=True, lean_includes_virtuals=lean_virtuals)
        document = render_blocks(
            schema,
            model_name=model_name,
            ctx=document_ctx,
            header=document_block_header(
                get_document_docs(model_name),
                model_name,
                _document_base(schema, model_name, document_ctx),
            ),
            footer=BLOCK_FOOTER,
        )

    blocks = []
    for index, lean_block in enumerate(lean):
        document_text = None
        if document is not None:
            if document[index].name != lean_block.name:
                raise UnreachableVariantError(
                    f"Block order differs between passes: {document[index].name} != {lean_block.name}"
                )
            document_text = document[index].text
        blocks.append(GeneratedBlock(
            name=lean_block.name, lean_text=lean_block.text, document_text=document_text,
        ))

    logger.debug("Compiled %s into %d block(s)", model_name, len(blocks))
    return blocks


def _document_base(schema: Schema, model_name: str, ctx: RenderContext) -> str:
    id_type = None
    if "_id" in schema.tree:
        id_type = resolve_type("_id", schema.tree["_id"], ctx)
    return (
        f"mongoose.Document<{id_type or 'never'}, {model_name}Queries> & {model_name}Methods"
    )
