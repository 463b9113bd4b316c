"""
Domain models for schematsgen.

All models are re-exported here for convenient access:

    from schematsgen.core.models import Schema, Types, RenderContext, GeneratedBlock
"""

from schematsgen.core.models.declaration import GeneratedBlock, RenderContext
from schematsgen.core.models.generator import GeneratorConfig
from schematsgen.core.models.schema import (
    ChildSchemaBinding,
    Model,
    Schema,
    SchemaOptions,
    ToObjectOptions,
    Types,
    VirtualType,
    model,
)
from schematsgen.core.models.template import GeneratedFile

__all__ = [
    # schema.py
    "ChildSchemaBinding",
    # declaration.py
    "GeneratedBlock",
    # template.py
    "GeneratedFile",
    # generator.py
    "GeneratorConfig",
    "Model",
    "RenderContext",
    "Schema",
    "SchemaOptions",
    "ToObjectOptions",
    "Types",
    "VirtualType",
    "model",
]
