"""
Type generation errors.

All failures propagate synchronously; nothing here is retried.
"""

from __future__ import annotations

from typing import Any


class TypegenError(Exception):
    """Base class for schema-to-type compilation failures."""


class UnsupportedSchemaTypeError(TypegenError):
    """Raised when a field's type is outside the supported taxonomy."""

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Unsupported schema type for field '{key}': {value!r}")


class UnreachableVariantError(TypegenError):
    """Raised when a closed variant match sees a value it does not know."""


class CircularSchemaError(TypegenError):
    """Raised when an embedded schema contains one of its own ancestors."""


class SchemaDepthError(TypegenError):
    """Raised when nested plain objects exceed the maximum nesting depth."""
