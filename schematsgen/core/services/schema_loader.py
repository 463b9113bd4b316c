"""
Schema loader — discover schema modules and collect the models they export.

Modules are imported by file path.  Anything exported that looks like a
model (a string ``model_name`` plus a ``Schema`` ``schema``) is
registered, including the module object itself.

Public API:
    resolve_model_paths(patterns, root)  → list[Path]
    load_schemas(paths)                  → dict[model_name, Schema]
"""

from __future__ import annotations

import glob
import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Iterable

from schematsgen.core.models.schema import Schema

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


class SchemaModuleNotFoundError(Exception):
    """Raised when no module exists at a schema module path."""


def resolve_model_paths(patterns: Iterable[str], root: Path) -> list[Path]:
    """Expand glob patterns (relative to ``root``) into Python files.

    Literal paths are kept even when missing so loading reports them.
    Results are sorted per pattern and de-duplicated across patterns.
    """
    paths: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        candidate = Path(pattern)
        if not candidate.is_absolute():
            candidate = root / candidate

        if _GLOB_CHARS & set(pattern):
            matches = [
                Path(m) for m in sorted(glob.glob(str(candidate), recursive=True))
                if m.endswith(".py")
            ]
            if not matches:
                logger.warning("No schema modules matched %s", pattern)
        else:
            matches = [candidate]

        for path in matches:
            resolved = path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                paths.append(resolved)
    return paths


def load_schemas(paths: Iterable[Path]) -> dict[str, Schema]:
    """Import every module and collect exported models by name.

    Raises:
        SchemaModuleNotFoundError: A path does not point to a file.
        Exception: Any other failure while importing is re-raised as-is.
    """
    schemas: dict[str, Schema] = {}

    for path in paths:
        module = _import_module(Path(path))
        previous_count = len(schemas)

        _register(module, schemas)
        for name, value in vars(module).items():
            if not name.startswith("_"):
                _register(value, schemas)

        if len(schemas) == previous_count:
            logger.warning(
                "A module was found at %s, but no new exported models were found. "
                "If this file contains a schema, ensure its model is exported "
                "and its name does not conflict with others.",
                path,
            )
        else:
            logger.info("Loaded %d model(s) from %s", len(schemas) - previous_count, path)

    return schemas


def _register(value: Any, schemas: dict[str, Schema]) -> bool:
    model_name = getattr(value, "model_name", None)
    schema = getattr(value, "schema", None)
    if not isinstance(model_name, str) or not model_name or not isinstance(schema, Schema):
        return False
    schemas[model_name] = schema
    return True


def _import_module(path: Path) -> ModuleType:
    if not path.is_file():
        raise SchemaModuleNotFoundError(f"Could not find a module at path {path}.")

    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:10]
    module_name = f"_schematsgen_models.{path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SchemaModuleNotFoundError(f"Could not find a module at path {path}.")

    module = importlib.util.module_from_spec(spec)
    logger.debug("Importing schema module %s", path)

    # sibling imports (shared child schemas) resolve from the module's directory
    module_dir = str(path.parent.resolve())
    sys.path.insert(0, module_dir)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    finally:
        sys.path.remove(module_dir)
    return module
