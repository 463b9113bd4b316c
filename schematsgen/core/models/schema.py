"""
Schema model — the document-ORM schema DSL consumed by type generation.

A ``Schema`` mirrors what the ORM builds from a definition mapping:

    - an ordered field tree, including the automatic ``_id``, ``id``
      and version-key entries the ORM adds on its own
    - the embedded child schemas found in that tree, including the
      implicit ones declared as arrays of plain objects
    - option flags (``_id``, ``id``, ``version_key``, ``to_object``)
    - the method / static / query functions attached to it

Field types may be written with any of the markers in ``Types``, the
ORM's type names as strings ("String", "ObjectId", ...), Python
built-ins (``str``, ``int``, ``bool``, ``datetime``, ...) or the
``bson`` types shipped with pymongo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator

from pydantic import BaseModel, ConfigDict, Field


# ── Type markers ────────────────────────────────────────────────


class _TypeMarker:
    """Base for the ORM's type marker classes."""

    schema_name = ""


class Types:
    """Type markers mirroring the ORM's ``Schema.Types`` namespace."""

    class String(_TypeMarker):
        schema_name = "String"

    class Number(_TypeMarker):
        schema_name = "Number"

    class Boolean(_TypeMarker):
        schema_name = "Boolean"

    class Date(_TypeMarker):
        schema_name = "Date"

    class Buffer(_TypeMarker):
        schema_name = "Buffer"

    class ObjectId(_TypeMarker):
        schema_name = "ObjectId"

    class Decimal128(_TypeMarker):
        schema_name = "Decimal128"

    class Mixed(_TypeMarker):
        schema_name = "Mixed"

    class Map(_TypeMarker):
        schema_name = "Map"

    class Array(_TypeMarker):
        schema_name = "Array"


# ── Options ─────────────────────────────────────────────────────


class ToObjectOptions(BaseModel):
    """Object conversion options (``toObject`` in the ORM)."""

    virtuals: bool | None = None
    getters: bool | None = None


class SchemaOptions(BaseModel):
    """Schema-level option flags that affect the generated types.

    Attributes:
        id_:          Add the automatic ``_id`` path (alias ``_id``).
        id:           Add the synthetic ``id`` virtual.
        version_key:  Name of the version key path, or False to disable.
        to_object:    Conversion options; decide whether lean types
                      carry virtuals.
    """

    model_config = ConfigDict(populate_by_name=True)

    id_: bool = Field(default=True, alias="_id")
    id: bool = True
    version_key: str | bool = "__v"
    to_object: ToObjectOptions = Field(default_factory=ToObjectOptions)


# ── Virtuals ────────────────────────────────────────────────────


class VirtualType:
    """A computed property defined by getters/setters rather than stored data."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.getters: list[Callable[..., Any]] = []
        self.setters: list[Callable[..., Any]] = []

    def get(self, fn: Callable[..., Any]) -> VirtualType:
        self.getters.append(fn)
        return self

    def set(self, fn: Callable[..., Any]) -> VirtualType:
        self.setters.append(fn)
        return self

    def __repr__(self) -> str:
        return f"VirtualType({self.path!r})"


def _id_getter(doc: Any) -> str | None:
    value = getattr(doc, "_id", None)
    return None if value is None else str(value)


# ── Schema ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChildSchemaBinding:
    """An embedded schema declared at ``path`` of its parent."""

    path: str
    schema: Schema
    is_array: bool = False  # subdocument array vs single embedded document


class Schema:
    """An ORM schema: field tree, child schemas, options and functions."""

    def __init__(
        self,
        definition: dict[str, Any] | None = None,
        *,
        options: dict[str, Any] | None = None,
        methods: dict[str, Callable[..., Any]] | None = None,
        statics: dict[str, Callable[..., Any]] | None = None,
        query: dict[str, Callable[..., Any]] | None = None,
    ) -> None:
        self.options = SchemaOptions.model_validate(options or {})
        self.methods: dict[str, Callable[..., Any]] = dict(methods or {})
        self.statics: dict[str, Callable[..., Any]] = dict(statics or {})
        self.query: dict[str, Callable[..., Any]] = dict(query or {})
        self.virtuals: dict[str, VirtualType] = {}
        self.tree: dict[str, Any] = {}
        self.child_schemas: list[ChildSchemaBinding] = []

        self.add(definition or {})
        self._add_automatic_paths()

    def add(self, definition: dict[str, Any]) -> Schema:
        """Merge more paths into the tree and rediscover child schemas."""
        for key, value in definition.items():
            self.tree[key] = _copy_definition(value)
        _implicit_subdocuments(self.tree)
        self.child_schemas = list(_discover_child_schemas(self.tree))
        return self

    def virtual(self, path: str) -> VirtualType:
        """Register a virtual at ``path`` (dotted paths nest)."""
        virtual = self.virtuals.get(path)
        if virtual is None:
            virtual = VirtualType(path)
            self.virtuals[path] = virtual
            _set_path(self.tree, path, virtual)
        return virtual

    def _add_automatic_paths(self) -> None:
        if self.options.id_ and "_id" not in self.tree:
            self.tree["_id"] = {"type": Types.ObjectId, "auto": True}
        if self.options.id and "id" not in self.tree:
            self.virtual("id").get(_id_getter)
        version_key = self.options.version_key
        if version_key and isinstance(version_key, str) and version_key not in self.tree:
            self.tree[version_key] = Types.Number

    def __repr__(self) -> str:
        return f"Schema(paths={list(self.tree)!r})"


@dataclass(frozen=True)
class Model:
    """A named model — what schema modules export for discovery."""

    model_name: str
    schema: Schema


def model(name: str, schema: Schema) -> Model:
    """Bind a schema to a model name."""
    return Model(model_name=name, schema=schema)


# ── Helpers ─────────────────────────────────────────────────────


def _copy_definition(value: Any, _enclosing: tuple[int, ...] = ()) -> Any:
    """Copy plain dicts/lists; schemas and markers are kept by reference.

    Raises:
        CircularSchemaError: A dict or list contains itself.
    """
    if not isinstance(value, (dict, list)):
        return value
    if id(value) in _enclosing:
        from schematsgen.core.services.typegen.errors import CircularSchemaError

        raise CircularSchemaError("Schema definition contains itself")
    enclosing = _enclosing + (id(value),)
    if isinstance(value, dict):
        return {k: _copy_definition(v, enclosing) for k, v in value.items()}
    return [_copy_definition(v, enclosing) for v in value]


def _is_plain_object(value: Any) -> bool:
    return isinstance(value, dict) and bool(value) and "type" not in value


def _implicit_subdocuments(tree: dict[str, Any]) -> None:
    """Turn arrays of plain objects into arrays of their own ``Schema``.

    The ORM does the same: ``[{...}]`` and ``{"type": [{...}]}`` declare a
    subdocument array with its own ``_id``.
    """
    for key, value in tree.items():
        if isinstance(value, list) and len(value) == 1 and _is_plain_object(value[0]):
            tree[key] = [Schema(value[0])]
        elif isinstance(value, dict) and "type" in value:
            items = value["type"]
            if isinstance(items, list) and len(items) == 1 and _is_plain_object(items[0]):
                value["type"] = [Schema(items[0])]
        elif isinstance(value, dict):
            _implicit_subdocuments(value)


def _set_path(tree: dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    node = tree
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[leaf] = value


def _child_binding(path: str, value: Any) -> ChildSchemaBinding | None:
    target = value["type"] if isinstance(value, dict) and "type" in value else value
    if isinstance(target, Schema):
        return ChildSchemaBinding(path=path, schema=target)
    if isinstance(target, list) and len(target) == 1 and isinstance(target[0], Schema):
        return ChildSchemaBinding(path=path, schema=target[0], is_array=True)
    return None


def _discover_child_schemas(tree: dict[str, Any], prefix: str = "") -> Iterator[ChildSchemaBinding]:
    for key, value in tree.items():
        path = f"{prefix}{key}"
        binding = _child_binding(path, value)
        if binding is not None:
            yield binding
        elif isinstance(value, dict) and "type" not in value:
            yield from _discover_child_schemas(value, prefix=f"{path}.")
