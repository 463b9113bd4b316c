"""
Generator configuration — loaded from tsgen.yml, overridden by CLI flags.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GeneratorConfig(BaseModel):
    """Settings for one generation run.

    Relative ``model_paths`` patterns and ``output`` resolve against the
    directory holding the config file (or the working directory).
    """

    model_config = ConfigDict(protected_namespaces=())

    model_paths: list[str] = Field(default_factory=lambda: ["models/*.py"])
    output: str = "types/mongoose.gen.ts"
    no_mongoose: bool = False
    dry_run: bool = False
