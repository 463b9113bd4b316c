"""Type generation — load schema modules, compile every model, write the file."""

from __future__ import annotations

import logging
from pathlib import Path

from schematsgen.core.models.declaration import GeneratedBlock
from schematsgen.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)


def generate_types(
    project_root: Path,
    model_paths: list[str],
    *,
    output: str,
    no_mongoose: bool = False,
    dry_run: bool = False,
) -> dict:
    """Generate the declaration file for every model found in ``model_paths``.

    Each model compiles independently: a failing model is reported under
    ``errors`` while the others are still assembled and written.

    Returns:
        {"ok": bool, "file": {...}, "models": [...], "errors": [...], "written": bool}
        or {"error": "..."} when nothing could be loaded.
    """
    from schematsgen.core.services.generators.declaration_file import generate_declaration_file
    from schematsgen.core.services.schema_loader import (
        SchemaModuleNotFoundError,
        load_schemas,
        resolve_model_paths,
    )
    from schematsgen.core.services.typegen import TypegenError, compile_schema

    paths = resolve_model_paths(model_paths, project_root)
    if not paths:
        return {"error": f"No schema modules matched: {', '.join(model_paths)}"}

    try:
        schemas = load_schemas(paths)
    except SchemaModuleNotFoundError as e:
        return {"error": str(e)}

    if not schemas:
        return {"error": "No models were found in the schema modules"}

    compiled: dict[str, list[GeneratedBlock]] = {}
    errors: list[dict] = []
    for model_name, schema in schemas.items():
        try:
            compiled[model_name] = compile_schema(
                schema, model_name, suppress_orm_wrapper_types=no_mongoose,
            )
        except TypegenError as e:
            logger.error("Failed to generate types for %s: %s", model_name, e)
            errors.append({"model": model_name, "error": str(e)})

    output_path = Path(output)
    if not output_path.is_absolute():
        output_path = project_root / output_path

    result = generate_declaration_file(
        compiled, schemas, output_path=str(output_path), no_mongoose=no_mongoose,
    )

    written = False
    if not dry_run and compiled:
        _write(result)
        written = True

    return {
        "ok": not errors,
        "file": result.model_dump(),
        "models": [
            {"name": name, "blocks": [block.name for block in blocks]}
            for name, blocks in compiled.items()
        ],
        "errors": errors,
        "written": written,
    }


def _write(file: GeneratedFile) -> None:
    path = Path(file.path)
    if path.exists() and not file.overwrite:
        logger.warning("Not overwriting existing %s", path)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(file.content, encoding="utf-8")
    logger.info("Wrote %s", path)
