"""
Field kinds — the closed type taxonomy and the shapes a field resolves to.

``classify_type_marker`` is the only place that looks at raw type
markers.  Everything downstream matches on ``PrimitiveKind`` /
``ContainerKind`` and on the frozen shape dataclasses below.
"""

from __future__ import annotations

import datetime
import decimal
from dataclasses import dataclass
from enum import Enum
from typing import Any, NoReturn, Union

from bson import Binary, Decimal128, ObjectId

from schematsgen.core.models.schema import Types, _TypeMarker
from schematsgen.core.services.typegen.errors import UnreachableVariantError


class PrimitiveKind(str, Enum):
    """Stored value kinds."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    BUFFER = "Buffer"
    OBJECT_ID = "ObjectId"
    DECIMAL128 = "Decimal128"
    MIXED = "Mixed"


class ContainerKind(str, Enum):
    """Markers that describe structure rather than a stored value."""

    MAP = "Map"
    ARRAY = "Array"
    OBJECT = "Object"


Kind = Union[PrimitiveKind, ContainerKind]


# ── Marker table ────────────────────────────────────────────────

_KIND_BY_NAME: dict[str, Kind] = {
    **{kind.value.lower(): kind for kind in PrimitiveKind},
    **{kind.value.lower(): kind for kind in ContainerKind},
}

_KIND_BY_TYPE: dict[type, Kind] = {
    str: PrimitiveKind.STRING,
    int: PrimitiveKind.NUMBER,
    float: PrimitiveKind.NUMBER,
    bool: PrimitiveKind.BOOLEAN,
    datetime.datetime: PrimitiveKind.DATE,
    datetime.date: PrimitiveKind.DATE,
    bytes: PrimitiveKind.BUFFER,
    bytearray: PrimitiveKind.BUFFER,
    decimal.Decimal: PrimitiveKind.DECIMAL128,
    dict: ContainerKind.OBJECT,
    list: ContainerKind.ARRAY,
    object: ContainerKind.OBJECT,
    ObjectId: PrimitiveKind.OBJECT_ID,
    Decimal128: PrimitiveKind.DECIMAL128,
    Binary: PrimitiveKind.BUFFER,
}


def classify_type_marker(value: Any) -> Kind | None:
    """Classify a raw type marker, or return None if ``value`` is not one.

    Accepts the ORM type names ("String", "ObjectId", ...; case-insensitive),
    the ``Types`` marker classes, Python built-ins and the bson types.
    """
    if isinstance(value, str):
        return _KIND_BY_NAME.get(value.lower())
    if isinstance(value, type):
        if issubclass(value, _TypeMarker):
            return _KIND_BY_NAME.get(value.schema_name.lower())
        return _KIND_BY_TYPE.get(value)
    return None


# ── Shapes ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChildSchemaRef:
    """An embedded child schema standing in for its path in a parent tree."""

    name: str
    schema: Any
    is_array: bool = False
    required: bool = False
    default_undefined: bool = False


@dataclass(frozen=True)
class ScalarShape:
    kind: PrimitiveKind
    enum: tuple[Any, ...] | None = None


@dataclass(frozen=True)
class NestedShape:
    fields: tuple[FieldDescriptor, ...]


@dataclass(frozen=True)
class ReferenceShape:
    model: str
    id_kind: PrimitiveKind | None = None


@dataclass(frozen=True)
class EmbeddedShape:
    name: str
    is_array: bool = False


@dataclass(frozen=True)
class VirtualShape:
    pass


Shape = Union[ScalarShape, NestedShape, ReferenceShape, EmbeddedShape, VirtualShape]


@dataclass(frozen=True)
class FieldDescriptor:
    """One field after ingestion: its shape plus optionality and wrapping."""

    key: str
    shape: Shape
    optional: bool = True
    is_array: bool = False
    is_map: bool = False
    map_of_array: bool = False  # map wraps the array, not the other way round
    is_subdocument_array: bool = False


def unreachable(value: NoReturn) -> NoReturn:
    """Fail on a variant a type checker should have proven impossible."""
    raise UnreachableVariantError(f"Unexpected variant: {value!r}")
