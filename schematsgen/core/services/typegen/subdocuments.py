"""
Subdocument expander — hoist embedded child schemas into their own blocks.

Each child schema declared on a parent gets a deterministic name
(``parent name + TitleCased path``, singularised), its path in the
parent's flat tree is replaced by a ``ChildSchemaRef`` (wrapped in a
one-element list for subdocument arrays), and the child is rendered
recursively as an independent block that precedes the parent's.
"""

from __future__ import annotations

import logging
from typing import Any

from schematsgen.core.models.declaration import RenderContext
from schematsgen.core.models.schema import ChildSchemaBinding, Schema
from schematsgen.core.services.typegen.emitter import (
    BLOCK_FOOTER,
    document_block_header,
    get_document_docs,
    get_lean_docs,
    get_subdocument_docs,
    get_subdocument_name,
    lean_block_header,
)
from schematsgen.core.services.typegen.errors import CircularSchemaError
from schematsgen.core.services.typegen.kinds import ChildSchemaRef
from schematsgen.core.services.typegen.normalizer import (
    RenderedBlock,
    flatten_tree,
    render_blocks,
    unflatten_tree,
)
from schematsgen.core.services.typegen.resolver import (
    get_should_lean_include_virtuals,
    resolve_type,
)

logger = logging.getLogger(__name__)


def expand_subdocuments(
    schema: Schema,
    *,
    model_name: str,
    ctx: RenderContext,
    ancestry: tuple[int, ...] = (),
) -> tuple[list[RenderedBlock], dict[str, Any]]:
    """Hoist every child schema of ``schema``.

    Args:
        schema: Parent schema.  Its tree is read, never modified.
        model_name: Name of the parent's block; prefixes child names.
        ctx: Render context of the current pass.
        ancestry: Identities of the schemas enclosing ``schema``.

    Returns:
        (child blocks in discovery order, parent tree with every child
        path replaced by its ``ChildSchemaRef``).

    Raises:
        CircularSchemaError: A child schema is ``schema`` itself or
            encloses it.
    """
    lineage = ancestry + (id(schema),)
    flat = flatten_tree(schema.tree)
    blocks: list[RenderedBlock] = []

    for binding in schema.child_schemas:
        if id(binding.schema) in lineage:
            raise CircularSchemaError(
                f"Schema at '{model_name}.{binding.path}' embeds one of its own ancestors"
            )

        path = binding.path
        name = get_subdocument_name(path, model_name)
        ref = ChildSchemaRef(
            name=name,
            schema=binding.schema,
            is_array=binding.is_array,
            required=_is_true(flat.get(f"{path}.required")),
            # only arrays get an ORM default ([]) that ``default: None`` can switch off
            default_undefined=binding.is_array
            and f"{path}.default" in flat
            and flat[f"{path}.default"] is None,
        )
        flat = _replace_path(flat, path, [ref] if binding.is_array else ref)

        logger.debug(
            "Hoisting %s %s at %s.%s",
            "subdocument array" if binding.is_array else "embedded document",
            name, model_name, path,
        )
        child_ctx = ctx.model_copy(
            update={"lean_includes_virtuals": get_should_lean_include_virtuals(binding.schema)}
        )
        blocks.extend(render_blocks(
            binding.schema,
            model_name=name,
            ctx=child_ctx,
            header=_child_header(model_name, binding, name, child_ctx),
            footer=BLOCK_FOOTER,
            ancestry=lineage,
        ))

    return blocks, unflatten_tree(flat)


def _child_header(
    parent_name: str, binding: ChildSchemaBinding, name: str, ctx: RenderContext,
) -> str:
    if not ctx.emit_document_variant:
        return lean_block_header(get_lean_docs(parent_name, name), name)

    if binding.is_array:
        return document_block_header(
            get_subdocument_docs(parent_name, binding.path), name, "mongoose.Types.Subdocument",
        )

    id_type = None
    child_id = binding.schema.tree.get("_id")
    if child_id is not None:
        id_type = resolve_type("_id", child_id, ctx)
    return document_block_header(
        get_document_docs(parent_name), name, f"mongoose.Document<{id_type or 'never'}>",
    )


def _replace_path(flat: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Replace ``path`` and everything under it, keeping its position."""
    replaced: dict[str, Any] = {}
    inserted = False
    prefix = f"{path}."
    for key, item in flat.items():
        if key == path or key.startswith(prefix):
            if not inserted:
                replaced[path] = value
                inserted = True
            continue
        replaced[key] = item
    if not inserted:
        replaced[path] = value
    return replaced


def _is_true(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value is True
