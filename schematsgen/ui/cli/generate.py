"""
CLI command for type generation.

Thin wrapper over ``schematsgen.core.services.typegen_ops``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.command()
@click.argument("model_paths", nargs=-1)
@click.option("--output", "-o", default=None, help="Output file (default: from tsgen.yml).")
@click.option(
    "--no-mongoose",
    is_flag=True,
    default=False,
    help="Emit lean types only, with ORM identifiers as plain strings.",
)
@click.option("--dry-run", is_flag=True, default=False, help="Print the file instead of writing it.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    model_paths: tuple[str, ...],
    output: str | None,
    no_mongoose: bool,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Generate type declarations from schema modules.

    MODEL_PATHS are files or glob patterns (default: from tsgen.yml).
    """
    from schematsgen.core.config.loader import ConfigError, load_config
    from schematsgen.core.services.typegen_ops import generate_types

    try:
        config, root = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    patterns = list(config.model_paths)
    if model_paths:
        cwd = Path.cwd()
        patterns = [str(Path(p) if Path(p).is_absolute() else cwd / p) for p in model_paths]
    if output:
        output = str(Path(output).resolve())

    dry_run = dry_run or config.dry_run
    result = generate_types(
        root,
        patterns,
        output=output or config.output,
        no_mongoose=no_mongoose or config.no_mongoose,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result, indent=2))
        if "error" in result or not result.get("ok"):
            sys.exit(1)
        return

    if "error" in result:
        click.secho(f"❌ {result['error']}", fg="red", err=True)
        sys.exit(1)

    if dry_run:
        click.echo(result["file"]["content"])
    quiet = ctx.obj.get("quiet", False)
    if not quiet:
        for model in result["models"]:
            click.secho(f"✅ {model['name']}", fg="green", err=dry_run)
            for name in model["blocks"][:-1]:
                click.echo(f"   └ {name}", err=dry_run)
        if result["written"]:
            click.secho(f"📝 {result['file']['path']}", fg="cyan")

    for error in result["errors"]:
        click.secho(f"❌ {error['model']}: {error['error']}", fg="red", err=True)
    if result["errors"]:
        sys.exit(1)
