"""
Schema tree normalizer — schema in, declaration blocks out.

Flattening the tree into dotted paths lets the subdocument expander
look up sibling metadata (``friends.required``, ``friends.default``)
wherever it lives, and swap a whole subtree for a hoisted reference.
The flat mapping is then folded back into nesting and every top-level
key goes through the field type resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from schematsgen.core.models.declaration import RenderContext
from schematsgen.core.models.schema import Schema
from schematsgen.core.services.typegen.resolver import resolve_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedBlock:
    """Declaration text for one schema in one projection."""

    name: str
    text: str


def flatten_tree(tree: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested plain dicts into ``{"a.b.c": leaf}``.

    Lists, empty dicts and anything that is not a plain dict are leaves.
    """
    flat: dict[str, Any] = {}
    for key, value in tree.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(flatten_tree(value, prefix=f"{path}."))
        else:
            flat[path] = value
    return flat


def unflatten_tree(flat: Mapping[str, Any]) -> dict[str, Any]:
    """Inverse of ``flatten_tree``; keys keep first-appearance order."""
    tree: dict[str, Any] = {}
    for path, value in flat.items():
        *parents, leaf = path.split(".")
        node = tree
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value
    return tree


def render_blocks(
    schema: Schema,
    *,
    model_name: str,
    ctx: RenderContext,
    header: str = "",
    footer: str = "",
    ancestry: tuple[int, ...] = (),
) -> list[RenderedBlock]:
    """Render ``schema`` and every embedded child schema under it.

    Returns:
        Blocks in discovery order: hoisted children (recursively, each
        child's own children first), then ``schema``'s own block last.
    """
    from schematsgen.core.services.typegen.subdocuments import expand_subdocuments

    blocks: list[RenderedBlock] = []
    tree: Mapping[str, Any] = schema.tree
    if schema.child_schemas and model_name:
        children, tree = expand_subdocuments(
            schema, model_name=model_name, ctx=ctx, ancestry=ancestry,
        )
        blocks.extend(children)

    body = "".join(resolve_field(key, value, ctx) for key, value in tree.items())
    blocks.append(RenderedBlock(model_name, header + body + footer))
    return blocks


def parse_schema(
    schema: Schema,
    *,
    model_name: str,
    ctx: RenderContext,
    header: str = "",
    footer: str = "",
) -> str:
    """Concatenated text of ``render_blocks`` (children first, parent last)."""
    blocks = render_blocks(schema, model_name=model_name, ctx=ctx, header=header, footer=footer)
    return "".join(block.text for block in blocks)
