"""
Field type resolver — one raw field descriptor in, one declaration line out.

Resolution runs in two steps:

    describe_field()  classifies the raw, duck-typed descriptor once into
                      an immutable ``FieldDescriptor`` (shape, optionality,
                      array/map wrapping).  Context-free.
    render_type()     turns a ``FieldDescriptor`` into type text for the
                      lean or document projection.

The raw descriptor is never mutated; normalisation builds new values.

Array encodings that all reduce to "element + is_array":

    tags: [String]
    tags: {"type": [String]}
    friends: {"type": [{"type": ObjectId, "ref": "User"}]}   # implies required

Arrays default to non-optional (the ORM initialises them to ``[]``)
unless the default is explicitly undefined (``"default": None``) or the
field carries a ``"2dsphere"`` index.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from schematsgen.core.models.declaration import RenderContext
from schematsgen.core.models.schema import Schema
from schematsgen.core.services.typegen.emitter import (
    format_enum_union,
    format_key_entry,
    get_subdocument_name,
    wrap_array,
    wrap_map,
)
from schematsgen.core.services.typegen.errors import SchemaDepthError, UnsupportedSchemaTypeError
from schematsgen.core.services.typegen.kinds import (
    ChildSchemaRef,
    ContainerKind,
    EmbeddedShape,
    FieldDescriptor,
    NestedShape,
    PrimitiveKind,
    ReferenceShape,
    ScalarShape,
    Shape,
    VirtualShape,
    classify_type_marker,
    unreachable,
)

logger = logging.getLogger(__name__)

# ORM bookkeeping attributes and the version key; never emitted.
INTERNAL_KEYS = frozenset({
    "get",
    "set",
    "schemaName",
    "defaultOptions",
    "_checkRequired",
    "_cast",
    "checkRequired",
    "cast",
    "__v",
})

MAX_NESTING_DEPTH = 64

_MIXED = ScalarShape(PrimitiveKind.MIXED)


def get_should_lean_include_virtuals(schema: Schema) -> bool:
    """Whether lean objects of ``schema`` carry virtuals (``to_object`` options)."""
    options = schema.options.to_object
    if (not options.virtuals and not options.getters) or (
        options.virtuals is False and options.getters is True
    ):
        return False
    return True


# ═══════════════════════════════════════════════════════════════════
#  Ingestion
# ═══════════════════════════════════════════════════════════════════


def describe_field(key: str, raw: Any, depth: int = 0) -> FieldDescriptor | None:
    """Classify one raw field descriptor.

    Args:
        key: Field name (last path segment).
        raw: The raw descriptor from the schema tree.
        depth: Nesting depth of plain objects above this field.

    Returns:
        The field's descriptor, or None when the field is never emitted
        (internal bookkeeping keys and the synthetic ``id`` virtual).

    Raises:
        UnsupportedSchemaTypeError: The type is outside the taxonomy.
        SchemaDepthError: Plain objects nest deeper than MAX_NESTING_DEPTH.
    """
    if depth > MAX_NESTING_DEPTH:
        raise SchemaDepthError(
            f"Field '{key}' is nested more than {MAX_NESTING_DEPTH} levels deep "
            "(self-referencing definition?)"
        )
    if key in INTERNAL_KEYS:
        return None
    if _is_virtual(raw):
        if key == "id":
            return None
        return FieldDescriptor(key, VirtualShape(), optional=False)

    optional = not _is_required(raw)
    is_array = False
    element = raw

    # ── Array encodings ─────────────────────────────────────────
    if isinstance(raw, list):
        is_array = True
        if not raw:
            return FieldDescriptor(key, _MIXED, optional=False, is_array=True)
        element = raw[0]
        optional = isinstance(element, ChildSchemaRef) and element.default_undefined
    elif isinstance(raw, dict) and isinstance(raw.get("type"), list):
        is_array = True
        items = raw["type"]
        element = {k: v for k, v in raw.items() if k != "type"}
        if not items:
            return FieldDescriptor(key, _MIXED, optional=_is_default_undefined(raw), is_array=True)
        inner = items[0]
        if isinstance(inner, dict) and "type" in inner:
            # element-level validation form; implies the array is required
            element["type"] = inner["type"]
            if inner.get("ref"):
                element["ref"] = inner["ref"]
            optional = False
        else:
            element["type"] = inner
            optional = raw.get("index") == "2dsphere" or _is_default_undefined(raw)

    if isinstance(element, list) or (isinstance(element, dict) and isinstance(element.get("type"), list)):
        raise UnsupportedSchemaTypeError(key, raw)

    if classify_type_marker(element) is not None:
        element = {"type": element}

    # untyped arrays: ``Array`` / ``{"type": Array}`` / ``[Array]``
    if isinstance(element, dict) and classify_type_marker(element.get("type")) is ContainerKind.ARRAY:
        if not is_array:
            optional = _is_default_undefined(element)
        return FieldDescriptor(key, _MIXED, optional=optional, is_array=True)

    # ── Maps ────────────────────────────────────────────────────
    is_map = isinstance(element, dict) and classify_type_marker(element.get("type")) is ContainerKind.MAP
    map_of_array = False
    if is_map:
        element, map_of_array = _map_value(key, element)
        if map_of_array:
            is_array = True

    # ── Shape ───────────────────────────────────────────────────
    if isinstance(element, ChildSchemaRef):
        shape: Shape = EmbeddedShape(element.name, element.is_array)
    elif isinstance(element, dict) and element.get("ref"):
        shape = ReferenceShape(
            _reference_name(key, element["ref"]),
            _primitive_kind(element.get("type")),
        )
    else:
        shape = _describe_shape(key, element, depth)
        if isinstance(shape, NestedShape) or key == "_id":
            optional = False

    return FieldDescriptor(
        key,
        shape,
        optional=optional,
        is_array=is_array,
        is_map=is_map,
        map_of_array=map_of_array,
        is_subdocument_array=is_array and isinstance(element, ChildSchemaRef) and element.is_array,
    )


def _describe_shape(key: str, value: Any, depth: int) -> Shape:
    if not isinstance(value, dict):
        raise UnsupportedSchemaTypeError(key, value)
    if not value:
        return _MIXED
    if "type" not in value:
        return NestedShape(_describe_nested(value, depth))

    type_ = value["type"]
    if isinstance(type_, dict):
        return NestedShape(_describe_nested(type_, depth)) if type_ else _MIXED

    kind = classify_type_marker(type_)
    if kind is None or kind is ContainerKind.MAP or kind is ContainerKind.ARRAY:
        raise UnsupportedSchemaTypeError(key, type_)
    if kind is ContainerKind.OBJECT:
        return _MIXED
    if kind is PrimitiveKind.STRING or kind is PrimitiveKind.NUMBER:
        return ScalarShape(kind, _enum_values(key, value.get("enum")))
    return ScalarShape(kind)


def _describe_nested(tree: dict[str, Any], depth: int) -> tuple[FieldDescriptor, ...]:
    fields = []
    for key, value in tree.items():
        descriptor = describe_field(key, value, depth + 1)
        if descriptor is not None:
            fields.append(descriptor)
    return tuple(fields)


def _map_value(key: str, element: dict[str, Any]) -> tuple[Any, bool]:
    """Split a map descriptor into its value descriptor and map-of-array flag."""
    of = element.get("of")
    map_of_array = False
    if isinstance(of, list):
        map_of_array = True
        of = of[0] if of else None

    if of is None:
        value: dict[str, Any] = {"type": PrimitiveKind.MIXED}
    elif isinstance(of, dict) and ("type" in of or not of):
        value = dict(of) if of else {"type": PrimitiveKind.MIXED}
    elif isinstance(of, dict) or classify_type_marker(of) is not None:
        value = {"type": of}
    else:
        raise UnsupportedSchemaTypeError(key, of)

    if isinstance(value.get("type"), list):
        if map_of_array:
            raise UnsupportedSchemaTypeError(key, of)
        items = value["type"]
        map_of_array = True
        value["type"] = items[0] if items else PrimitiveKind.MIXED
    if classify_type_marker(value.get("type")) is ContainerKind.ARRAY:
        map_of_array = True
        value["type"] = PrimitiveKind.MIXED

    for option in ("enum", "ref"):
        if option in element and option not in value:
            value[option] = element[option]
    return value, map_of_array


def _reference_name(key: str, ref: Any) -> str:
    name = getattr(ref, "model_name", ref)
    if not isinstance(name, str):
        raise UnsupportedSchemaTypeError(key, ref)
    name = name.replace("'", "", 1)
    if "." in name:
        name = get_subdocument_name(name)
    return name


def _primitive_kind(value: Any) -> PrimitiveKind | None:
    kind = classify_type_marker(value)
    return kind if isinstance(kind, PrimitiveKind) else None


def _enum_values(key: str, declared: Any) -> tuple[Any, ...] | None:
    """Enum values from a list, a ``{"values": [...]}`` object, a mapping or an Enum class."""
    if declared is None:
        return None
    if isinstance(declared, type) and issubclass(declared, enum.Enum):
        return tuple(member.value for member in declared)
    if isinstance(declared, (list, tuple)):
        return tuple(declared)
    if isinstance(declared, dict):
        values = declared.get("values")
        return tuple(values) if isinstance(values, (list, tuple)) else tuple(declared.values())
    values = getattr(declared, "values", None)
    if isinstance(values, (list, tuple)):
        return tuple(values)
    raise UnsupportedSchemaTypeError(key, declared)


def _is_required(raw: Any) -> bool:
    if isinstance(raw, ChildSchemaRef):
        return raw.required
    if not isinstance(raw, dict):
        return False
    value = raw.get("required")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value is True


def _is_default_undefined(raw: Any) -> bool:
    if isinstance(raw, ChildSchemaRef):
        return raw.default_undefined
    return isinstance(raw, dict) and "default" in raw and raw["default"] is None


def _is_virtual(raw: Any) -> bool:
    if isinstance(raw, dict):
        return "type" not in raw and raw.keys() >= {"path", "getters", "setters"}
    return all(hasattr(raw, attr) for attr in ("path", "getters", "setters"))


# ═══════════════════════════════════════════════════════════════════
#  Rendering
# ═══════════════════════════════════════════════════════════════════


def render_type(descriptor: FieldDescriptor, ctx: RenderContext) -> str | None:
    """Type text for ``descriptor`` in the projection ``ctx`` asks for.

    Returns None when the field is left out of this projection
    (virtuals in lean types that do not include virtuals).
    """
    shape = descriptor.shape
    if isinstance(shape, VirtualShape) and not (
        ctx.emit_document_variant or ctx.lean_includes_virtuals
    ):
        return None

    text = _render_shape(shape, ctx)
    document = ctx.emit_document_variant
    if descriptor.is_map and not descriptor.map_of_array:
        text = wrap_map(text, document=document)
    if descriptor.is_array:
        text = wrap_array(text, document=document, subdocument=descriptor.is_subdocument_array)
    if descriptor.is_map and descriptor.map_of_array:
        text = wrap_map(text, document=document)
    return text


def render_field(descriptor: FieldDescriptor, ctx: RenderContext) -> str:
    """One declaration line for ``descriptor``, or "" if it is left out."""
    text = render_type(descriptor, ctx)
    if text is None:
        return ""
    return format_key_entry(descriptor.key, text, optional=descriptor.optional)


def resolve_field(key: str, raw: Any, ctx: RenderContext) -> str:
    """Resolve one raw field into its declaration line ("" when suppressed)."""
    descriptor = describe_field(key, raw)
    if descriptor is None:
        return ""
    return render_field(descriptor, ctx)


def resolve_type(key: str, raw: Any, ctx: RenderContext) -> str | None:
    """Like ``resolve_field`` but returns the bare type text."""
    descriptor = describe_field(key, raw)
    if descriptor is None:
        return None
    return render_type(descriptor, ctx)


def _render_shape(shape: Shape, ctx: RenderContext) -> str:
    if isinstance(shape, ScalarShape):
        return _render_scalar(shape, ctx)
    if isinstance(shape, NestedShape):
        return "{\n" + "".join(render_field(field, ctx) for field in shape.fields) + "}"
    if isinstance(shape, ReferenceShape):
        return _render_reference(shape, ctx)
    if isinstance(shape, EmbeddedShape):
        return shape.name + ("Document" if ctx.emit_document_variant else "")
    if isinstance(shape, VirtualShape):
        return "any"
    unreachable(shape)


def _render_reference(shape: ReferenceShape, ctx: RenderContext) -> str:
    if ctx.emit_document_variant:
        target = f"{shape.model}Document"
        return f'{target}["_id"] | {target}'
    if ctx.suppress_orm_wrapper_types and shape.id_kind is not None:
        return f"{_render_scalar(ScalarShape(shape.id_kind), ctx)} | {shape.model}"
    return f'{shape.model}["_id"] | {shape.model}'


def _render_scalar(shape: ScalarShape, ctx: RenderContext) -> str:
    kind = shape.kind
    document = ctx.emit_document_variant
    if (kind is PrimitiveKind.STRING or kind is PrimitiveKind.NUMBER) and shape.enum:
        return format_enum_union(shape.enum)
    if kind is PrimitiveKind.STRING:
        return "string"
    if kind is PrimitiveKind.NUMBER:
        return "number"
    if kind is PrimitiveKind.BOOLEAN:
        return "boolean"
    if kind is PrimitiveKind.DATE:
        return "Date"
    if kind is PrimitiveKind.BUFFER:
        return "mongoose.Types.Buffer" if document else "Buffer"
    if kind is PrimitiveKind.DECIMAL128:
        return "mongoose.Types.Decimal128" if document else "number"
    if kind is PrimitiveKind.OBJECT_ID:
        return "string" if ctx.suppress_orm_wrapper_types else "mongoose.Types.ObjectId"
    if kind is PrimitiveKind.MIXED:
        return "any"
    unreachable(kind)
