"""
Declaration models — what the type compiler threads through and returns.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RenderContext(BaseModel):
    """Immutable flags threaded through one generation pass.

    Attributes:
        emit_document_variant:      Render the ORM document projection
                                    (wrapper types, virtuals) instead of
                                    the lean plain-object projection.
        suppress_orm_wrapper_types: Render ORM identifier types as their
                                    raw primitive form (``string``).
        lean_includes_virtuals:     Keep virtuals in the lean projection.
    """

    model_config = ConfigDict(frozen=True)

    emit_document_variant: bool
    suppress_orm_wrapper_types: bool = False
    lean_includes_virtuals: bool = False


class GeneratedBlock(BaseModel):
    """Declaration text for one schema (a model or a hoisted subdocument).

    ``document_text`` is None when the document projection was not
    generated (wrapper types suppressed).
    """

    name: str
    lean_text: str
    document_text: str | None = None
