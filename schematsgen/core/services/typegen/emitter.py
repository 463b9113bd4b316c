"""
Declaration emitter — low-level text assembly for generated declarations.

Key quoting, optional markers, map/array wrapping, the doc comments
that precede each block and the block header/footer syntax.  Also the
naming scheme shared by hoisted subdocuments and dotted references.
"""

from __future__ import annotations

import enum
import json
import re
from typing import Any, Iterable

BLOCK_FOOTER = "}\n\n"

_BARE_KEY = re.compile(r"\w*", re.ASCII)


# ── Lines ───────────────────────────────────────────────────────


def format_key_entry(key: str, value: str, *, optional: bool = False, newline: bool = True) -> str:
    """Render ``key?: value;`` quoting keys that are not bare identifiers."""
    line = ""
    if key:
        line += key if _BARE_KEY.fullmatch(key) else json.dumps(key, ensure_ascii=False)
        if optional:
            line += "?"
        line += ": "
    line += value + ";"
    if newline:
        line += "\n"
    return line


def format_enum_union(values: Iterable[Any]) -> str:
    """Literal union of enum values; ``null`` goes last, exactly once."""
    includes_null = False
    literals: list[str] = []
    for value in values:
        if isinstance(value, enum.Enum):
            value = value.value
        if value is None:
            includes_null = True
            continue
        literals.append(json.dumps(value, ensure_ascii=False))
    if includes_null:
        literals.append("null")
    return " | ".join(literals)


def wrap_map(value: str, *, document: bool) -> str:
    return f"mongoose.Types.Map<{value}>" if document else f"Map<string, {value}>"


def wrap_array(value: str, *, document: bool, subdocument: bool = False) -> str:
    if document:
        return f"mongoose.Types.{'Document' if subdocument else ''}Array<{value}>"
    # a space means a union (``number | string``); parenthesize before suffixing
    if " " in value:
        value = f"({value})"
    return f"{value}[]"


# ── Naming ──────────────────────────────────────────────────────


def convert_to_singular(word: str) -> str:
    """Collapse a plural name: ``addresses`` → ``address``, ``friends`` → ``friend``."""
    if word.endswith("sses"):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def get_subdocument_name(path: str, model_name: str = "") -> str:
    """Deterministic name for a hoisted subdocument at ``path`` of ``model_name``."""
    suffix = "".join(part[:1].upper() + part[1:] for part in path.split("."))
    return convert_to_singular(model_name + suffix)


# ── Doc comments ────────────────────────────────────────────────


def get_lean_docs(model_name: str, name: str | None = None) -> str:
    name = name or model_name
    variable = model_name[:1].lower() + model_name[1:]
    return (
        "/**\n"
        f" * Lean version of {name}Document\n"
        " *\n"
        f" * This has all ORM getters & functions removed. This type will be returned from `{model_name}Document.toObject()`.\n"
        " * ```\n"
        f" * const {variable}Object = {variable}.toObject();\n"
        " * ```\n"
        " */"
    )


def get_document_docs(model_name: str) -> str:
    return (
        "/**\n"
        " * Mongoose Document type\n"
        " *\n"
        " * Pass this type to the Mongoose Model constructor:\n"
        " * ```\n"
        f' * const {model_name} = mongoose.model<{model_name}Document, {model_name}Model>("{model_name}", {model_name}Schema);\n'
        " * ```\n"
        " */"
    )


def get_subdocument_docs(model_name: str, path: str) -> str:
    return (
        "/**\n"
        " * Mongoose Subdocument type\n"
        " *\n"
        f' * Type of `{model_name}Document["{path}"]` element.\n'
        " */"
    )


# ── Block headers ───────────────────────────────────────────────


def lean_block_header(docs: str, name: str) -> str:
    return f"{docs}\nexport type {name} = {{\n"


def document_block_header(docs: str, name: str, base: str) -> str:
    """Header of a document block: ``export type <name>Document = <base> & {``."""
    return f"{docs}\nexport type {name}Document = {base} & {{\n"
